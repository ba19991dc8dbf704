"""Exceptions raised by the autochess core."""


class AutochessError(Exception):
    """Base class for all autochess errors."""


class UnknownTemplateError(AutochessError, KeyError):
    """A unit was requested from a template id that does not exist."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Unknown unit template: {template_id}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidStarLevelError(AutochessError, ValueError):
    """A unit was requested with a star level outside 1-3."""

    def __init__(self, star_level: int):
        self.star_level = star_level
        super().__init__(f"Invalid star level: {star_level}. Must be 1-3.")


class BoardPositionError(AutochessError, ValueError):
    """A unit was placed outside the board or onto an occupied cell."""


class CombatStateError(AutochessError, RuntimeError):
    """A combat operation was requested in the wrong phase."""
