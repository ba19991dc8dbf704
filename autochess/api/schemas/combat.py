"""
Combat-related API schemas.
"""

from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional


class UnitPlacement(BaseModel):
    """One unit on the board, in shared board coordinates."""

    template_id: str
    star_level: int = 1  # Checked by the engine, invalid levels map to 400
    x: int
    y: int


class TeamSetup(BaseModel):
    """Team setup schema."""

    units: List[UnitPlacement] = Field(default_factory=list)


class SimulateCombatRequest(BaseModel):
    """Combat simulation request."""

    player: TeamSetup
    enemy: TeamSetup
    seed: Optional[int] = None
    max_ticks: Optional[int] = Field(default=None, ge=1)
    include_log: bool = True


class CombatEventSchema(BaseModel):
    """One tick-stamped log entry."""

    tick: int
    type: str
    data: Dict[str, Any]


class CombatResultSchema(BaseModel):
    """Combat result schema."""

    winner: str  # "player", "enemy" or "draw"
    damage_to_loser: int
    damage_to_player: int
    damage_to_enemy: int
    total_ticks: int
    surviving_player_units: List[Dict[str, Any]]
    surviving_enemy_units: List[Dict[str, Any]]
    combat_log: Optional[List[CombatEventSchema]] = None


class SynergyRequest(BaseModel):
    """Planning-view request: one side's board."""

    units: List[UnitPlacement]


class ActiveTraitSchema(BaseModel):
    """Trait display entry."""

    id: str
    name: str
    description: str
    count: int
    thresholds: List[int]
    current_threshold: int
    next_threshold: int
    is_active: bool
    bonus: Optional[Dict[str, float]] = None
    bonus_text: str = ""
    progress: str
    style: str  # "inactive", "bronze" or "gold"
    color: str
    icon: str


class SynergyResponse(BaseModel):
    """Planning-view response."""

    traits: List[ActiveTraitSchema]
    summary: str
