"""Exceptions raised by the shift-plan engine."""


class ShiftPlanError(Exception):
    """Base class for engine errors."""


class InvalidInputError(ShiftPlanError, ValueError):
    """Raised when run inputs are malformed; nothing has been allocated yet."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field
