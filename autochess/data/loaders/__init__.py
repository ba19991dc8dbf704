# Data Loaders
from .unit_loader import (
    load_units,
    get_unit_by_id,
    get_unit_template,
    get_units_by_cost,
    get_units_by_trait,
)
from .trait_loader import (
    load_traits,
    load_trait_table,
    get_trait_by_id,
)

__all__ = [
    # Unit loaders
    "load_units",
    "get_unit_by_id",
    "get_unit_template",
    "get_units_by_cost",
    "get_units_by_trait",
    # Trait loaders
    "load_traits",
    "load_trait_table",
    "get_trait_by_id",
]
