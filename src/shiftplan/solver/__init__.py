# shiftplan/solver - Weekly allocation pipeline
from .allocator import AllocationResult, allocate_slots
from .availability import (
    DayAvailability,
    DayStatus,
    EmployeeAvailability,
    UnavailableReason,
    resolve_availability,
    time_off_by_date,
)
from .calendar import classify_week, partial_holiday_dates
from .engine import EmployeePass, generate_week, plan_employee, solve_request, validate_inputs
from .optimizer import optimize_week
from .ranking import employee_rng, rank_days
from .targets import HourTarget, compute_target_hours, leave_by_date, round_to_slot
from .validation import ValidationResult, validate_permanent_restrictions, validate_plan, validate_time_off

__all__ = [
    "classify_week",
    "partial_holiday_dates",
    "compute_target_hours",
    "leave_by_date",
    "round_to_slot",
    "HourTarget",
    "resolve_availability",
    "time_off_by_date",
    "EmployeeAvailability",
    "DayAvailability",
    "DayStatus",
    "UnavailableReason",
    "rank_days",
    "employee_rng",
    "allocate_slots",
    "AllocationResult",
    "generate_week",
    "plan_employee",
    "solve_request",
    "validate_inputs",
    "EmployeePass",
    "optimize_week",
    "validate_plan",
    "validate_permanent_restrictions",
    "validate_time_off",
    "ValidationResult",
]
