"""Weekly shift-assignment engine for retail store rosters."""
from shiftplan.errors import InvalidInputError, ShiftPlanError
from shiftplan.models.request import WeekRequest
from shiftplan.models.schedule import WeekPlan
from shiftplan.solver.engine import generate_week, solve_request

__version__ = "0.1.0"

__all__ = [
    "generate_week",
    "solve_request",
    "WeekRequest",
    "WeekPlan",
    "InvalidInputError",
    "ShiftPlanError",
]
