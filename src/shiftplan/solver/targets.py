"""
Hour Targets
============
Weekly hour target for one employee.

Steps:
    1. Base = contracted weekly hours, or an active temporary override.
    2. Exactly one full store holiday on a 40h base gives 32h.
    3. Each approved leave day that is not a store holiday removes base/5
       hours (at most five days), never going below zero.
    4. Round to the nearest multiple of 4, ties up.
"""
import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable

from shiftplan.models.calendar import DayClass, LeaveKind, LeaveRequest, WeekWindow
from shiftplan.models.employee import Employee
from shiftplan.models.shift import SLOT_HOURS
from shiftplan.solver.calendar import count_store_holidays
from shiftplan.utils.logging_setup import get_logger, log_function_call

logger = get_logger("shiftplan.solver.targets")

# Single full holiday on a full-time contract
FULL_TIME_HOURS = 40
SINGLE_HOLIDAY_TARGET = 32

MAX_LEAVE_DAYS = 5


@dataclass
class HourTarget:
    """Breakdown of how a target was reached."""
    base_hours: int
    holiday_days: int
    leave_days: int
    target_hours: int

    @property
    def slots(self) -> int:
        return self.target_hours // SLOT_HOURS


def round_to_slot(hours: float) -> int:
    """Nearest non-negative multiple of 4, ties rounding up."""
    if hours <= 0:
        return 0
    return int(math.floor(hours / SLOT_HOURS + 0.5)) * SLOT_HOURS


def leave_by_date(
    employee_id: str,
    leave_requests: Iterable[LeaveRequest],
    week: WeekWindow,
) -> Dict[date, LeaveKind]:
    """Approved leave of one employee inside the week; first matching request wins."""
    result: Dict[date, LeaveKind] = {}
    for req in leave_requests:
        if req.employee_id != employee_id or not req.is_approved:
            continue
        for d in week.dates:
            if d not in result and req.covers(d):
                result[d] = req.kind
    return result


@log_function_call
def compute_target_hours(
    employee: Employee,
    week: WeekWindow,
    calendar: Dict[date, DayClass],
    leave: Dict[date, LeaveKind],
) -> HourTarget:
    """
    Compute the employee's required hours for the week.

    Args:
        employee: Employee being planned
        week: Week window
        calendar: Output of classify_week
        leave: Approved leave dates for this employee (see leave_by_date)

    Returns:
        HourTarget with target_hours >= 0 and a multiple of 4
    """
    base = employee.base_hours(week.week_start)
    holiday_days = count_store_holidays(calendar)

    target: float = base
    if holiday_days == 1 and base == FULL_TIME_HOURS:
        target = SINGLE_HOLIDAY_TARGET

    # A leave day that is also a store holiday was already taken off above
    leave_days = min(
        MAX_LEAVE_DAYS,
        sum(1 for d in leave if calendar.get(d) != DayClass.STORE_HOLIDAY),
    )
    target = max(0.0, target - leave_days * base / 5)

    result = HourTarget(
        base_hours=base,
        holiday_days=holiday_days,
        leave_days=leave_days,
        target_hours=round_to_slot(target),
    )
    logger.debug(
        f"{employee.name}: base={base}h holidays={holiday_days} leave={leave_days}d -> {result.target_hours}h"
    )
    return result
