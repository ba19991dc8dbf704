"""Unit template data loader."""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ..models.unit import UnitTemplate
from ...core.errors import UnknownTemplateError


logger = logging.getLogger(__name__)

# Get the data directory path
DATA_DIR = Path(__file__).parent.parent / "files"
UNITS_FILE = DATA_DIR / "units.json"


@lru_cache(maxsize=1)
def load_units() -> list[UnitTemplate]:
    """Load all unit templates from JSON.

    Returns:
        List of UnitTemplate objects, in file order.
    """
    with open(UNITS_FILE, "r", encoding="utf-8") as f:
        data = json.load(f)

    units = [UnitTemplate.model_validate(u) for u in data["units"]]
    logger.debug("Loaded %d unit templates from %s", len(units), UNITS_FILE)
    return units


@lru_cache(maxsize=1)
def _units_by_id() -> dict[str, UnitTemplate]:
    return {u.id: u for u in load_units()}


def get_unit_by_id(template_id: str) -> Optional[UnitTemplate]:
    """Get a unit template by its ID.

    Args:
        template_id: The unique template identifier.

    Returns:
        UnitTemplate if found, None otherwise.
    """
    return _units_by_id().get(template_id)


def get_unit_template(template_id: str) -> UnitTemplate:
    """Get a unit template by its ID, failing fast when it does not exist.

    Raises:
        UnknownTemplateError: If no template has this ID.
    """
    template = get_unit_by_id(template_id)
    if template is None:
        raise UnknownTemplateError(template_id)
    return template


def get_units_by_cost(cost: int) -> list[UnitTemplate]:
    """Get all unit templates of a specific cost."""
    return [u for u in load_units() if u.cost == cost]


def get_units_by_trait(trait_id: str) -> list[UnitTemplate]:
    """Get all unit templates that carry a specific trait."""
    return [u for u in load_units() if trait_id in u.traits]


def clear_cache() -> None:
    """Clear the unit cache. Useful for testing or hot-reloading data."""
    load_units.cache_clear()
    _units_by_id.cache_clear()
