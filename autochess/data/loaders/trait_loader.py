"""Trait data loader."""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ..models.trait import Trait


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "files"
TRAITS_FILE = DATA_DIR / "traits.json"


@lru_cache(maxsize=1)
def load_traits() -> list[Trait]:
    """Load all traits from JSON.

    Bonus keys are validated against BonusKind; an unknown key raises
    a pydantic ValidationError.

    Returns:
        List of Trait objects, in file order.
    """
    with open(TRAITS_FILE, "r", encoding="utf-8") as f:
        data = json.load(f)

    traits = [Trait.model_validate(t) for t in data["traits"]]
    logger.debug("Loaded %d traits from %s", len(traits), TRAITS_FILE)
    return traits


@lru_cache(maxsize=1)
def load_trait_table() -> dict[str, Trait]:
    """Load all traits keyed by ID."""
    return {t.id: t for t in load_traits()}


def get_trait_by_id(trait_id: str) -> Optional[Trait]:
    """Get a trait by its ID.

    Args:
        trait_id: The unique trait identifier.

    Returns:
        Trait object if found, None otherwise.
    """
    return load_trait_table().get(trait_id)


def clear_cache() -> None:
    """Clear the trait cache. Useful for testing or hot-reloading data."""
    load_traits.cache_clear()
    load_trait_table.cache_clear()
