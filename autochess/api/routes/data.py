"""
Static data API routes.
"""

from fastapi import APIRouter, HTTPException
from typing import Optional, List, Dict, Any

from autochess.data.loaders import (
    get_trait_by_id,
    get_unit_by_id,
    get_units_by_cost,
    get_units_by_trait,
    load_traits,
    load_units,
)

router = APIRouter()


# === Units ===


@router.get("/units")
async def get_all_units(cost: Optional[int] = None) -> List[Dict[str, Any]]:
    """Get all unit templates, optionally filtered by cost."""
    units = get_units_by_cost(cost) if cost is not None else load_units()
    return [u.model_dump() for u in units]


@router.get("/units/by-trait/{trait_id}")
async def get_units_with_trait(trait_id: str) -> List[Dict[str, Any]]:
    """Get unit templates carrying a trait."""
    return [u.model_dump() for u in get_units_by_trait(trait_id)]


@router.get("/units/{unit_id}")
async def get_unit(unit_id: str) -> Dict[str, Any]:
    """Get specific unit template by ID."""
    unit = get_unit_by_id(unit_id)
    if unit is None:
        raise HTTPException(status_code=404, detail="Unit not found")
    return unit.model_dump()


# === Traits ===


@router.get("/traits")
async def get_all_traits() -> List[Dict[str, Any]]:
    """Get all traits."""
    return [t.model_dump(mode="json") for t in load_traits()]


@router.get("/traits/{trait_id}")
async def get_trait(trait_id: str) -> Dict[str, Any]:
    """Get specific trait by ID."""
    trait = get_trait_by_id(trait_id)
    if trait is None:
        raise HTTPException(status_code=404, detail="Trait not found")
    return trait.model_dump(mode="json")
