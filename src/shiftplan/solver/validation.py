"""
Plan Validation
===============
Invariant checks on a generated WeekPlan, per-employee checks of
permanent work-pattern rules, and checks of one-off time-off requests.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from shiftplan.models.calendar import TimeOffRequest
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
from shiftplan.models.schedule import WeekPlan
from shiftplan.models.shift import DAY_NAMES, SLOT_HOURS, ShiftType
from shiftplan.utils.logging_setup import get_logger

logger = get_logger("shiftplan.solver.validation")


def _day_list(days) -> str:
    return ", ".join(DAY_NAMES[d] for d in sorted(days))


@dataclass
class ValidationResult:
    """Invariant counters for a plan."""
    duplicate_days: int = 0        # Same employee twice on one date
    over_target: int = 0           # Assigned hours above target
    misaligned_targets: int = 0    # Target not a multiple of 4
    hours_mismatch: int = 0        # Report disagrees with assignments

    messages: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not (self.duplicate_days or self.over_target or self.misaligned_targets or self.hours_mismatch)

    def as_dict(self) -> Dict[str, int]:
        return {
            "duplicate_days": self.duplicate_days,
            "over_target": self.over_target,
            "misaligned_targets": self.misaligned_targets,
            "hours_mismatch": self.hours_mismatch,
        }


def validate_plan(plan: WeekPlan) -> ValidationResult:
    """Check the structural invariants of a plan."""
    result = ValidationResult()

    counts = Counter((a.employee_id, a.date) for a in plan.assignments)
    for (emp_id, d), n in counts.items():
        if n > 1:
            result.duplicate_days += 1
            result.messages.append(f"{emp_id} has {n} entries on {d.isoformat()}")

    worked: Counter = Counter()
    for a in plan.assignments:
        worked[a.employee_id] += a.hours

    for emp_id, report in plan.reports.items():
        if report.target_hours % SLOT_HOURS != 0:
            result.misaligned_targets += 1
            result.messages.append(f"{emp_id} target {report.target_hours}h is not a multiple of {SLOT_HOURS}")
        if report.assigned_hours > report.target_hours:
            result.over_target += 1
            result.messages.append(f"{emp_id} assigned {report.assigned_hours}h over target {report.target_hours}h")
        if worked[emp_id] != report.assigned_hours:
            result.hours_mismatch += 1
            result.messages.append(f"{emp_id} report says {report.assigned_hours}h, shifts add to {worked[emp_id]}h")

    if not result.is_valid:
        logger.warning(f"Plan {plan.week_start} failed validation: {result.as_dict()}")
    return result


def validate_permanent_restrictions(
    plan: WeekPlan,
    employees: Sequence[Employee],
    ignore_exceptions: bool = False,
    early_morning_max_days: int = 4,
) -> List[str]:
    """
    List human-readable violations of employees' permanent rules.

    Args:
        plan: Generated (or hand-edited) plan
        employees: Employees carrying the rules
        ignore_exceptions: Check rules even for weeks they are suspended
        early_morning_max_days: Day cap of the early-morning rule
    """
    warnings: List[str] = []

    for emp in employees:
        shifts = [a for a in plan.for_employee(emp.id) if a.shift.is_work]
        if not shifts:
            continue
        rules = effective_rules(emp.rules, plan.week_start, emp.name, ignore_exceptions=ignore_exceptions).values()

        for rule in rules:
            if isinstance(rule, SpecificDaysOff):
                for a in shifts:
                    if a.date.weekday() in rule.days:
                        warnings.append(
                            f"{emp.name} has a fixed day off on {DAY_NAMES[a.date.weekday()]} "
                            f"but is scheduled {a.shift.value} on {a.date.isoformat()}"
                        )
            elif isinstance(rule, RotatingDaysOff):
                days_off = rule.days_off(plan.week_start)
                idx = rule.cycle_index(plan.week_start)
                for a in shifts:
                    if a.date.weekday() in days_off:
                        warnings.append(
                            f"{emp.name} must be off on {DAY_NAMES[a.date.weekday()]} "
                            f"(cycle week {idx + 1}) but is scheduled {a.shift.value}"
                        )
            elif isinstance(rule, FixedRotatingShift):
                day_off = rule.day_off(plan.week_start)
                for a in shifts:
                    if a.date.weekday() == day_off:
                        warnings.append(
                            f"{emp.name} has the rotating day off on {DAY_NAMES[day_off]} "
                            f"but is scheduled {a.shift.value} on {a.date.isoformat()}"
                        )
            elif isinstance(rule, EarlyMorningShift):
                for a in shifts:
                    if a.shift.uses_afternoon:
                        warnings.append(f"{emp.name} works early mornings only but has {a.shift.value} on {a.date.isoformat()}")
                if len(shifts) > early_morning_max_days:
                    warnings.append(f"{emp.name} has {len(shifts)} early mornings, more than {early_morning_max_days}")
            elif isinstance(rule, (MorningOnly, AfternoonOnly)):
                label, allowed = ("mornings", ShiftType.MORNING) if isinstance(rule, MorningOnly) else ("afternoons", ShiftType.AFTERNOON)
                for a in shifts:
                    if not rule.covers_weekday(a.date.weekday()):
                        warnings.append(
                            f"{emp.name} works {label} only on {_day_list(rule.days)} "
                            f"but is scheduled {a.shift.value} on {DAY_NAMES[a.date.weekday()]}"
                        )
                    elif a.shift != allowed:
                        warnings.append(f"{emp.name} works {label} only but has {a.shift.value} on {a.date.isoformat()}")
            elif isinstance(rule, MaxAfternoonsPerWeek):
                afternoons = sum(1 for a in shifts if a.shift.uses_afternoon)
                if afternoons > rule.n:
                    warnings.append(f"{emp.name} exceeds the afternoon limit ({rule.n}) with {afternoons}")
            elif isinstance(rule, ForceFullDays):
                for a in shifts:
                    if a.shift != ShiftType.SPLIT:
                        warnings.append(f"{emp.name} works full days only but has {a.shift.value} on {a.date.isoformat()}")
            elif isinstance(rule, NoSplit):
                for a in shifts:
                    if a.shift == ShiftType.SPLIT:
                        warnings.append(f"{emp.name} has no split shifts but is split on {a.date.isoformat()}")
            else:
                raise TypeError(f"Unhandled permanent rule: {rule!r}")

    return warnings


def validate_time_off(plan: WeekPlan, requests: Sequence[TimeOffRequest]) -> List[str]:
    """List approved day/morning/afternoon off requests the plan does not honour."""
    warnings: List[str] = []
    for req in requests:
        if not req.is_approved:
            continue
        for d in req.dates:
            a = plan.get(req.employee_id, d)
            if a is not None and a.shift in req.kind.blocked_shifts:
                warnings.append(
                    f"{req.employee_id} asked for {req.kind.value.replace('_', ' ')} on {d.isoformat()} "
                    f"but is scheduled {a.shift.value}"
                )
    return warnings
