from __future__ import annotations


class GameError(Exception):
    pass


class InvariantViolation(GameError):
    """Raised when the driver is asked for a transition its current mode does not allow."""


class LoadFailure(GameError):
    """No usable series could be obtained."""
