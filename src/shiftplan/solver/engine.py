"""
Schedule Assembler
==================
Runs the per-employee pipeline (target -> availability -> ranking ->
allocation) for every active employee and merges the results into one
WeekPlan with a per-employee hour report.

Each employee pass is a pure function of its inputs and a generator
derived from the run seed, so passes can run in any order or in parallel.
"""
import concurrent.futures
import random
import time
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set

from shiftplan.errors import InvalidInputError
from shiftplan.models.calendar import DayClass, Holiday, LeaveKind, LeaveRequest, TimeOffRequest, WeekWindow
from shiftplan.models.constraints import EngineConfig
from shiftplan.models.employee import Employee
from shiftplan.models.request import WeekRequest
from shiftplan.models.rules import FixedRotatingShift, MaxAfternoonsPerWeek, RotatingDaysOff
from shiftplan.models.schedule import EmployeeReport, ShiftAssignment, WeekPlan
from shiftplan.models.shift import ShiftType
from shiftplan.solver.allocator import allocate_slots
from shiftplan.solver.availability import (
    EmployeeAvailability,
    UnavailableReason,
    resolve_availability,
    time_off_by_date,
)
from shiftplan.solver.calendar import classify_week, partial_holiday_dates
from shiftplan.solver.ranking import employee_rng, rank_days
from shiftplan.solver.targets import HourTarget, compute_target_hours, leave_by_date
from shiftplan.utils.logging_setup import SolverLogger, get_logger
from shiftplan.utils.structured_logging import bind_context, clear_context, get_structured_logger

logger = get_logger("shiftplan.solver.engine")
slog = SolverLogger("shiftplan.solver.engine")

_LEAVE_SHIFTS = {
    LeaveKind.VACATION: ShiftType.VACATION,
    LeaveKind.SICK_LEAVE: ShiftType.SICK_LEAVE,
    LeaveKind.MATERNITY_PATERNITY: ShiftType.MATERNITY_PATERNITY,
}


@dataclass
class EmployeePass:
    """Result of one employee's allocation pass."""
    employee: Employee
    target: HourTarget
    availability: EmployeeAvailability
    ranked_dates: List[date]
    assignments: List[ShiftAssignment]
    report: EmployeeReport


def validate_inputs(
    week: WeekWindow,
    employees: Sequence[Employee],
    leave_requests: Sequence[LeaveRequest],
    config: EngineConfig,
    time_off: Sequence[TimeOffRequest] = (),
) -> None:
    """
    Reject malformed inputs before any allocation starts.

    Raises:
        InvalidInputError: on the first problem found
    """
    if not 0 <= config.rest_weekday <= 6:
        raise InvalidInputError(f"rest_weekday must be 0..6, got {config.rest_weekday}", field="rest_weekday")
    if config.early_morning_max_days < 0:
        raise InvalidInputError("early_morning_max_days cannot be negative", field="early_morning_max_days")

    seen: Set[str] = set()
    for emp in employees:
        if not emp.id:
            raise InvalidInputError("Employee without id", field="employees")
        if emp.id in seen:
            raise InvalidInputError(f"Duplicate employee id {emp.id!r}", field="employees")
        seen.add(emp.id)

        if not isinstance(emp.weekly_hours, int) or emp.weekly_hours < 0:
            raise InvalidInputError(f"{emp.name}: weekly hours must be a non-negative integer", field="weekly_hours")
        if emp.weekly_hours % 4 != 0:
            raise InvalidInputError(f"{emp.name}: weekly hours {emp.weekly_hours} not a multiple of 4", field="weekly_hours")

        for adj in emp.temp_hours:
            if adj.hours < 0:
                raise InvalidInputError(f"{emp.name}: temporary hours cannot be negative", field="temp_hours")
            if adj.end < adj.start:
                raise InvalidInputError(f"{emp.name}: temporary hours end before they start", field="temp_hours")

        for rule in emp.rules:
            if isinstance(rule, MaxAfternoonsPerWeek) and rule.n < 0:
                raise InvalidInputError(f"{emp.name}: max afternoons cannot be negative", field="rules")
            if isinstance(rule, RotatingDaysOff):
                if not rule.cycle_weeks:
                    raise InvalidInputError(f"{emp.name}: rotating days off without cycle weeks", field="rules")
                if rule.reference_monday is None or rule.reference_monday.weekday() != 0:
                    raise InvalidInputError(f"{emp.name}: rotating days off must be anchored on a Monday", field="rules")
            if isinstance(rule, FixedRotatingShift):
                if rule.start_day == 6:
                    raise InvalidInputError(f"{emp.name}: fixed rotation cannot start on Sunday", field="rules")
                if rule.reference_monday is None or rule.reference_monday.weekday() != 0:
                    raise InvalidInputError(f"{emp.name}: fixed rotation must be anchored on a Monday", field="rules")

    for req in leave_requests:
        if req.employee_id not in seen:
            raise InvalidInputError(f"Leave request for unknown employee {req.employee_id!r}", field="leave_requests")
        if (req.start_date is None) != (req.end_date is None):
            raise InvalidInputError("Leave range needs both start and end dates", field="leave_requests")
        if req.has_range and req.end_date < req.start_date:
            raise InvalidInputError("Leave range ends before it starts", field="leave_requests")
        if not req.dates and not req.has_range:
            raise InvalidInputError("Leave request has neither dates nor a range", field="leave_requests")

    for req in time_off:
        if req.employee_id not in seen:
            raise InvalidInputError(f"Time-off request for unknown employee {req.employee_id!r}", field="time_off")
        if not req.dates:
            raise InvalidInputError("Time-off request without dates", field="time_off")


def _stamp_times(assignment: ShiftAssignment, config: EngineConfig, early_morning: bool) -> ShiftAssignment:
    hours = config.opening_hours
    morning_start = config.early_morning_start if early_morning else hours.morning_start
    morning_end = config.early_morning_end if early_morning else hours.morning_end

    if assignment.shift == ShiftType.MORNING:
        assignment.start_time, assignment.end_time = morning_start, morning_end
    elif assignment.shift == ShiftType.AFTERNOON:
        assignment.start_time, assignment.end_time = hours.afternoon_start, hours.afternoon_end
    elif assignment.shift == ShiftType.SPLIT:
        assignment.start_time = morning_start
        assignment.morning_end = morning_end
        assignment.afternoon_start = hours.afternoon_start
        assignment.end_time = hours.afternoon_end
    return assignment


def _non_working_entry(employee_id: str, availability: EmployeeAvailability, d: date) -> ShiftAssignment:
    day = availability.day(d)
    if day.reason == UnavailableReason.LEAVE:
        shift = _LEAVE_SHIFTS[day.leave_kind]
    elif day.reason == UnavailableReason.STORE_HOLIDAY:
        shift = ShiftType.HOLIDAY
    else:
        shift = ShiftType.OFF
    return ShiftAssignment(employee_id=employee_id, date=d, shift=shift)


def plan_employee(
    employee: Employee,
    week: WeekWindow,
    calendar: Dict[date, DayClass],
    leave_requests: Iterable[LeaveRequest],
    seed: int,
    config: Optional[EngineConfig] = None,
    partial_dates: Optional[Set[date]] = None,
    time_off: Iterable[TimeOffRequest] = (),
) -> EmployeePass:
    """
    Run one employee's full pass and return all seven entries.

    Pure with respect to its inputs: the only randomness comes from a
    generator derived from ``seed`` and the employee id.
    """
    config = config or EngineConfig()
    leave = leave_by_date(employee.id, leave_requests, week)

    target = compute_target_hours(employee, week, calendar, leave)
    availability = resolve_availability(
        employee, week, calendar, leave, config, partial_dates,
        time_off=time_off_by_date(employee.id, time_off, week),
    )
    ranked = rank_days(
        availability.available_dates,
        employee_rng(seed, employee.id),
        saturday_weight=config.saturday_weight,
        limit=availability.max_days,
    )
    allocation = allocate_slots(
        employee.id,
        ranked,
        availability.masks,
        target.target_hours,
        max_afternoons=availability.max_afternoons,
    )

    working = {a.date: _stamp_times(a, config, availability.early_morning) for a in allocation.assignments}
    entries = [
        working[d] if d in working else _non_working_entry(employee.id, availability, d)
        for d in week.dates
    ]
    report = EmployeeReport(
        employee_id=employee.id,
        target_hours=target.target_hours,
        assigned_hours=allocation.assigned_hours,
    )
    return EmployeePass(
        employee=employee,
        target=target,
        availability=availability,
        ranked_dates=ranked,
        assignments=entries,
        report=report,
    )


def generate_week(
    week_start: date,
    establishment_id: str,
    employees: Sequence[Employee],
    holidays: Sequence[Holiday] = (),
    leave_requests: Sequence[LeaveRequest] = (),
    seed: Optional[int] = None,
    config: Optional[EngineConfig] = None,
    time_off: Sequence[TimeOffRequest] = (),
) -> WeekPlan:
    """
    Generate the shift plan for one store-week.

    Args:
        week_start: Monday of the week
        establishment_id: Store identifier (carried into the plan and logs)
        employees: Roster; inactive employees are skipped
        holidays: Store holidays (any dates, only the week's are used)
        leave_requests: Leave requests; only approved ones are applied
        seed: Random seed, None draws a fresh one (recorded in the plan)
        config: Engine configuration (uses defaults if None)
        time_off: One-off day/morning/afternoon off requests

    Returns:
        WeekPlan with one entry per (active employee, date) and a report
        per active employee

    Raises:
        InvalidInputError: if inputs are malformed
    """
    config = config or EngineConfig()
    start_time = time.time()

    week = WeekWindow(week_start)
    validate_inputs(week, employees, leave_requests, config, time_off)
    if seed is None:
        seed = random.SystemRandom().randrange(2**32)

    active = [e for e in employees if e.active]
    approved = [r for r in leave_requests if r.is_approved and r.overlaps(week)]
    approved_time_off = [r for r in time_off if r.is_approved and r.overlaps(week)]
    events = get_structured_logger("shiftplan.solver.engine")

    slog.phase(f"Week {week.week_start.isoformat()} ({establishment_id or 'store'})")
    slog.step(f"{len(active)} active employees, {len(approved)} approved leave requests, seed={seed}")

    bind_context(establishment_id=establishment_id, week_start=week.week_start.isoformat(), seed=seed)
    try:
        calendar = classify_week(week, holidays, config)
        partial_dates = partial_holiday_dates(week, holidays)

        def run(emp: Employee) -> EmployeePass:
            return plan_employee(emp, week, calendar, approved, seed, config, partial_dates, approved_time_off)

        if config.num_workers > 1 and len(active) > 1:
            with concurrent.futures.ThreadPoolExecutor(max_workers=config.num_workers) as executor:
                passes = list(executor.map(run, active))
        else:
            passes = [run(emp) for emp in active]

        plan = WeekPlan(week_start=week.week_start, establishment_id=establishment_id, seed=seed)
        for p in passes:
            slog.enter(p.employee.name)
            slog.detail("target", f"{p.target.target_hours}h (base {p.target.base_hours}h, leave {p.target.leave_days}d)")
            slog.detail("ranked", ", ".join(d.isoformat() for d in p.ranked_dates) or "-")
            plan.assignments.extend(p.assignments)
            plan.reports[p.employee.id] = p.report
            events.info(
                "employee_allocated",
                employee_id=p.employee.id,
                target_hours=p.report.target_hours,
                assigned_hours=p.report.assigned_hours,
                available_days=len(p.availability.available_dates),
            )
            if p.report.shortfall_hours > 0:
                events.warning(
                    "shortfall_detected",
                    employee_id=p.employee.id,
                    shortfall_hours=p.report.shortfall_hours,
                )
                logger.warning(
                    f"{p.employee.name}: {p.report.shortfall_hours}h short "
                    f"({p.report.assigned_hours}/{p.report.target_hours}h)"
                )
            slog.exit(f"{p.report.assigned_hours}/{p.report.target_hours}h")
    finally:
        clear_context()

    plan.solve_time_seconds = time.time() - start_time
    slog.step(
        f"Assigned {plan.summary()['assigned_hours']}h of {plan.summary()['target_hours']}h, "
        f"shortfall {plan.total_shortfall_hours}h"
    )
    return plan


def solve_request(request: WeekRequest) -> WeekPlan:
    """Run the engine on a bundled WeekRequest."""
    return generate_week(
        week_start=request.week_start,
        establishment_id=request.establishment_id,
        employees=request.employees,
        holidays=request.holidays,
        leave_requests=request.leave_requests,
        seed=request.seed,
        config=request.config,
        time_off=request.time_off,
    )
