"""
Availability Resolution
=======================
Per-day allow/deny map for one employee, combining the store calendar,
approved leave, one-off time off and the employee's permanent rules.

Every rule variant is handled explicitly; an unknown variant raises
TypeError instead of being ignored.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from shiftplan.models.calendar import DayClass, LeaveKind, TimeOffKind, TimeOffRequest, WeekWindow
from shiftplan.models.constraints import EngineConfig
from shiftplan.models.employee import Employee
from shiftplan.models.rules import (
    AfternoonOnly,
    EarlyMorningShift,
    FixedRotatingShift,
    ForceFullDays,
    MaxAfternoonsPerWeek,
    MorningOnly,
    NoSplit,
    RotatingDaysOff,
    SpecificDaysOff,
    effective_rules,
)
from shiftplan.models.shift import WORK_SHIFTS, ShiftType
from shiftplan.utils.logging_setup import get_logger, log_function_call

logger = get_logger("shiftplan.solver.availability")


class DayStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class UnavailableReason(str, Enum):
    """Why a date is closed to the employee, in precedence order."""
    LEAVE = "leave"
    STORE_HOLIDAY = "store_holiday"
    WEEKLY_REST = "weekly_rest"
    DAY_OFF_RULE = "day_off_rule"
    TIME_OFF = "time_off"
    NO_ALLOWED_SHIFT = "no_allowed_shift"


@dataclass(frozen=True)
class DayAvailability:
    date: date
    status: DayStatus
    mask: FrozenSet[ShiftType] = frozenset()
    reason: Optional[UnavailableReason] = None
    leave_kind: Optional[LeaveKind] = None

    @property
    def is_available(self) -> bool:
        return self.status == DayStatus.AVAILABLE


@dataclass
class EmployeeAvailability:
    """Resolved week for one employee plus the rule-derived budgets."""
    employee_id: str
    days: List[DayAvailability] = field(default_factory=list)
    max_afternoons: Optional[int] = None
    max_days: Optional[int] = None       # EarlyMorningShift day cap
    early_morning: bool = False

    @property
    def available_dates(self) -> List[date]:
        return [d.date for d in self.days if d.is_available]

    @property
    def masks(self) -> Dict[date, FrozenSet[ShiftType]]:
        return {d.date: d.mask for d in self.days if d.is_available}

    def day(self, d: date) -> DayAvailability:
        for entry in self.days:
            if entry.date == d:
                return entry
        raise KeyError(d)


def _unavailable(d: date, reason: UnavailableReason, leave_kind: Optional[LeaveKind] = None) -> DayAvailability:
    return DayAvailability(date=d, status=DayStatus.UNAVAILABLE, reason=reason, leave_kind=leave_kind)


def _restrict(masks: Dict[int, Set[ShiftType]], allowed: Set[ShiftType], rule=None) -> None:
    """Intersect each weekday's mask; weekdays outside a scoped rule get nothing."""
    for weekday, mask in masks.items():
        if rule is None or rule.covers_weekday(weekday):
            mask &= allowed
        else:
            mask.clear()


def time_off_by_date(
    employee_id: str,
    requests: Iterable[TimeOffRequest],
    week: WeekWindow,
) -> Dict[date, Set[TimeOffKind]]:
    """Approved one-off time off of one employee, grouped by date within the week."""
    result: Dict[date, Set[TimeOffKind]] = {}
    for req in requests:
        if req.employee_id != employee_id or not req.is_approved:
            continue
        for d in req.dates:
            if week.contains(d):
                result.setdefault(d, set()).add(req.kind)
    return result


@log_function_call
def resolve_availability(
    employee: Employee,
    week: WeekWindow,
    calendar: Dict[date, DayClass],
    leave: Dict[date, LeaveKind],
    config: Optional[EngineConfig] = None,
    partial_dates: Optional[Set[date]] = None,
    time_off: Optional[Dict[date, Set[TimeOffKind]]] = None,
) -> EmployeeAvailability:
    """
    Resolve the seven-day availability of one employee.

    Args:
        employee: Employee being planned
        week: Week window
        calendar: Output of classify_week
        leave: Approved leave dates for this employee
        config: Engine configuration
        partial_dates: Dates with a partial holiday
        time_off: Approved one-off time off for this employee, by date

    Returns:
        EmployeeAvailability with one DayAvailability per date
    """
    config = config or EngineConfig()
    partial_dates = partial_dates or set()
    time_off = time_off or {}
    rules = effective_rules(employee.rules, week.week_start, owner=employee.name)

    result = EmployeeAvailability(employee_id=employee.id)
    weekday_masks: Dict[int, Set[ShiftType]] = {w: set(WORK_SHIFTS) for w in range(7)}
    days_off: Set[int] = set()

    for rule in rules.values():
        if isinstance(rule, MorningOnly):
            _restrict(weekday_masks, {ShiftType.MORNING}, rule)
        elif isinstance(rule, AfternoonOnly):
            _restrict(weekday_masks, {ShiftType.AFTERNOON}, rule)
        elif isinstance(rule, EarlyMorningShift):
            _restrict(weekday_masks, {ShiftType.MORNING})
            result.early_morning = True
            result.max_days = config.early_morning_max_days
        elif isinstance(rule, ForceFullDays):
            _restrict(weekday_masks, {ShiftType.SPLIT})
        elif isinstance(rule, NoSplit):
            _restrict(weekday_masks, {ShiftType.MORNING, ShiftType.AFTERNOON})
        elif isinstance(rule, SpecificDaysOff):
            days_off |= rule.days
        elif isinstance(rule, RotatingDaysOff):
            days_off |= rule.days_off(week.week_start)
        elif isinstance(rule, FixedRotatingShift):
            rotating = rule.day_off(week.week_start)
            if rotating is not None:
                days_off.add(rotating)
        elif isinstance(rule, MaxAfternoonsPerWeek):
            result.max_afternoons = rule.n
        else:
            raise TypeError(f"Unhandled permanent rule: {rule!r}")

    for d in week.dates:
        day_class = calendar[d]
        requested = time_off.get(d, set())
        if d in leave:
            result.days.append(_unavailable(d, UnavailableReason.LEAVE, leave[d]))
        elif day_class == DayClass.STORE_HOLIDAY:
            result.days.append(_unavailable(d, UnavailableReason.STORE_HOLIDAY))
        elif day_class == DayClass.WEEKLY_REST:
            result.days.append(_unavailable(d, UnavailableReason.WEEKLY_REST))
        elif d.weekday() in days_off:
            result.days.append(_unavailable(d, UnavailableReason.DAY_OFF_RULE))
        else:
            mask = set(weekday_masks[d.weekday()])
            if d in partial_dates and config.partial_holiday_closes_afternoon:
                mask -= {ShiftType.AFTERNOON, ShiftType.SPLIT}
            narrowed = set(mask)
            for kind in requested:
                narrowed -= kind.blocked_shifts
            if not mask:
                result.days.append(_unavailable(d, UnavailableReason.NO_ALLOWED_SHIFT))
            elif not narrowed:
                result.days.append(_unavailable(d, UnavailableReason.TIME_OFF))
            else:
                result.days.append(DayAvailability(date=d, status=DayStatus.AVAILABLE, mask=frozenset(narrowed)))

    masks = {d.isoformat(): sorted(s.value for s in m) for d, m in result.masks.items()}
    logger.debug(f"{employee.name}: masks={masks}")
    return result
