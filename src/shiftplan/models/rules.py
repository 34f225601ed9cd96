"""
Permanent Work-Pattern Rules
============================
Closed set of rule variants an employee can carry. Each variant is a frozen
dataclass; the Availability Resolver handles every one of them explicitly.

Weekdays are 0..6 with Monday == 0. ``exceptions`` lists week-start dates
for which the rule is suspended.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import ClassVar, Dict, FrozenSet, List, Optional, Tuple, Union

from .shift import normalize_weekday
from shiftplan.utils.logging_setup import get_logger

logger = get_logger("shiftplan.models.rules")

# FixedRotatingShift cycles through Monday..Saturday
ROTATION_DAYS = 6


class RuleKind(str, Enum):
    """Discriminator for the rule variants."""
    MORNING_ONLY = "morning_only"
    AFTERNOON_ONLY = "afternoon_only"
    SPECIFIC_DAYS_OFF = "specific_days_off"
    MAX_AFTERNOONS_PER_WEEK = "max_afternoons_per_week"
    FORCE_FULL_DAYS = "force_full_days"
    EARLY_MORNING_SHIFT = "early_morning_shift"
    ROTATING_DAYS_OFF = "rotating_days_off"
    FIXED_ROTATING_SHIFT = "fixed_rotating_shift"
    NO_SPLIT = "no_split"


def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).split("T")[0].strip())


def _freeze_exceptions(rule) -> None:
    object.__setattr__(rule, "exceptions", frozenset(_as_date(d) for d in rule.exceptions))


@dataclass(frozen=True)
class _BaseRule:
    kind: ClassVar[RuleKind]
    exceptions: FrozenSet[date] = field(default=frozenset(), kw_only=True)

    def __post_init__(self):
        _freeze_exceptions(self)

    def applies_to_week(self, week_start: date) -> bool:
        """False when the week is listed as an exception."""
        return week_start not in self.exceptions

    def to_dict(self) -> dict:
        d = {"type": self.kind.value}
        if self.exceptions:
            d["exceptions"] = sorted(x.isoformat() for x in self.exceptions)
        return d


@dataclass(frozen=True)
class _ScopedShapeRule(_BaseRule):
    """
    Half-day restriction, optionally limited to some weekdays.

    An empty ``days`` applies the restriction every day. A non-empty one
    also means the employee works only on those weekdays.
    """
    days: FrozenSet[int] = frozenset()

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "days", frozenset(normalize_weekday(d) for d in self.days))

    def covers_weekday(self, weekday: int) -> bool:
        return not self.days or weekday in self.days

    def to_dict(self) -> dict:
        d = super().to_dict()
        if self.days:
            d["days"] = sorted(self.days)
        return d


@dataclass(frozen=True)
class MorningOnly(_ScopedShapeRule):
    kind: ClassVar[RuleKind] = RuleKind.MORNING_ONLY


@dataclass(frozen=True)
class AfternoonOnly(_ScopedShapeRule):
    kind: ClassVar[RuleKind] = RuleKind.AFTERNOON_ONLY


@dataclass(frozen=True)
class ForceFullDays(_BaseRule):
    kind: ClassVar[RuleKind] = RuleKind.FORCE_FULL_DAYS


@dataclass(frozen=True)
class EarlyMorningShift(_BaseRule):
    """Fixed 9:00-14:00 mornings, at most four days a week."""
    kind: ClassVar[RuleKind] = RuleKind.EARLY_MORNING_SHIFT


@dataclass(frozen=True)
class NoSplit(_BaseRule):
    kind: ClassVar[RuleKind] = RuleKind.NO_SPLIT


@dataclass(frozen=True)
class SpecificDaysOff(_BaseRule):
    days: FrozenSet[int] = frozenset()
    kind: ClassVar[RuleKind] = RuleKind.SPECIFIC_DAYS_OFF

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "days", frozenset(normalize_weekday(d) for d in self.days))

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["days"] = sorted(self.days)
        return d


@dataclass(frozen=True)
class MaxAfternoonsPerWeek(_BaseRule):
    n: int = 3
    kind: ClassVar[RuleKind] = RuleKind.MAX_AFTERNOONS_PER_WEEK

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["value"] = self.n
        return d


@dataclass(frozen=True)
class RotatingDaysOff(_BaseRule):
    """Multi-week pattern of rest days anchored at a reference Monday."""
    cycle_weeks: Tuple[FrozenSet[int], ...] = ()
    reference_monday: Optional[date] = None
    kind: ClassVar[RuleKind] = RuleKind.ROTATING_DAYS_OFF

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(
            self,
            "cycle_weeks",
            tuple(frozenset(normalize_weekday(d) for d in week) for week in self.cycle_weeks),
        )
        if self.reference_monday is not None:
            object.__setattr__(self, "reference_monday", _as_date(self.reference_monday))

    def cycle_index(self, week_start: date) -> Optional[int]:
        """Index into ``cycle_weeks`` for the given week, None before the anchor."""
        if not self.cycle_weeks or self.reference_monday is None:
            return None
        weeks_between = (week_start - self.reference_monday).days // 7
        if weeks_between < 0:
            return None
        return weeks_between % len(self.cycle_weeks)

    def days_off(self, week_start: date) -> FrozenSet[int]:
        idx = self.cycle_index(week_start)
        if idx is None:
            return frozenset()
        return self.cycle_weeks[idx]

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["cycle_weeks"] = [sorted(w) for w in self.cycle_weeks]
        d["reference_date"] = self.reference_monday.isoformat() if self.reference_monday else None
        return d


@dataclass(frozen=True)
class FixedRotatingShift(_BaseRule):
    """
    One day off a week that moves forward through Monday..Saturday.

    The anchor week has ``start_day`` off, the next week the day after,
    wrapping from Saturday back to Monday.
    """
    start_day: int = 0
    reference_monday: Optional[date] = None
    kind: ClassVar[RuleKind] = RuleKind.FIXED_ROTATING_SHIFT

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "start_day", normalize_weekday(self.start_day))
        if self.reference_monday is not None:
            object.__setattr__(self, "reference_monday", _as_date(self.reference_monday))

    def day_off(self, week_start: date) -> Optional[int]:
        """Weekday off in the given week, None before the anchor."""
        if self.reference_monday is None:
            return None
        weeks_between = (week_start - self.reference_monday).days // 7
        if weeks_between < 0:
            return None
        return (self.start_day + weeks_between) % ROTATION_DAYS

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["start_day"] = self.start_day
        d["reference_date"] = self.reference_monday.isoformat() if self.reference_monday else None
        return d


PermanentRule = Union[
    MorningOnly,
    AfternoonOnly,
    SpecificDaysOff,
    MaxAfternoonsPerWeek,
    ForceFullDays,
    EarlyMorningShift,
    RotatingDaysOff,
    FixedRotatingShift,
    NoSplit,
]

RULE_TYPES: Dict[RuleKind, type] = {
    RuleKind.MORNING_ONLY: MorningOnly,
    RuleKind.AFTERNOON_ONLY: AfternoonOnly,
    RuleKind.SPECIFIC_DAYS_OFF: SpecificDaysOff,
    RuleKind.MAX_AFTERNOONS_PER_WEEK: MaxAfternoonsPerWeek,
    RuleKind.FORCE_FULL_DAYS: ForceFullDays,
    RuleKind.EARLY_MORNING_SHIFT: EarlyMorningShift,
    RuleKind.ROTATING_DAYS_OFF: RotatingDaysOff,
    RuleKind.FIXED_ROTATING_SHIFT: FixedRotatingShift,
    RuleKind.NO_SPLIT: NoSplit,
}


def _from_sunday_based(day):
    """Map a Sunday == 0 day number onto Monday == 0; names pass through."""
    if isinstance(day, int) and not isinstance(day, bool) and 0 <= day <= 6:
        return (day - 1) % 7
    return day


def _cycle_days(week) -> List:
    # [[5], [6]] uses Monday == 0; [{"days": [6]}, {"days": [0]}] is the
    # stored-record format, numbered from Sunday
    if isinstance(week, dict):
        return [_from_sunday_based(d) for d in week.get("days") or []]
    return list(week or [])


def rule_from_dict(d: dict) -> PermanentRule:
    """Build a rule from its serialized form (``{"type": ..., ...}``)."""
    try:
        kind = RuleKind(str(d.get("type", "")).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown permanent rule type: {d.get('type')!r}") from None

    exceptions = frozenset(_as_date(x) for x in d.get("exceptions") or [])
    ref = d.get("reference_date", d.get("reference_monday"))
    if kind == RuleKind.SPECIFIC_DAYS_OFF:
        return SpecificDaysOff(days=frozenset(d.get("days") or []), exceptions=exceptions)
    if kind in (RuleKind.MORNING_ONLY, RuleKind.AFTERNOON_ONLY):
        return RULE_TYPES[kind](days=frozenset(d.get("days") or []), exceptions=exceptions)
    if kind == RuleKind.MAX_AFTERNOONS_PER_WEEK:
        value = d.get("value", d.get("n"))
        return MaxAfternoonsPerWeek(n=3 if value is None else int(value), exceptions=exceptions)
    if kind == RuleKind.ROTATING_DAYS_OFF:
        return RotatingDaysOff(
            cycle_weeks=tuple(frozenset(_cycle_days(w)) for w in d.get("cycle_weeks") or []),
            reference_monday=_as_date(ref) if ref else None,
            exceptions=exceptions,
        )
    if kind == RuleKind.FIXED_ROTATING_SHIFT:
        start = d.get("start_day")
        if start is None and d.get("value") is not None:
            # Stored records give the first day off as "value", Sunday == 0
            start = _from_sunday_based(int(d["value"]))
        return FixedRotatingShift(
            start_day=0 if start is None else start,
            reference_monday=_as_date(ref) if ref else None,
            exceptions=exceptions,
        )
    return RULE_TYPES[kind](exceptions=exceptions)


def effective_rules(
    rules: List[PermanentRule],
    week_start: date,
    owner: str = "",
    ignore_exceptions: bool = False,
) -> Dict[RuleKind, PermanentRule]:
    """
    Rules in force for a week, keyed by kind.

    Rules suspended by an exception for this week are dropped unless
    ``ignore_exceptions`` is set. When several rules share a kind, the last
    one in the list wins and a warning is logged.
    """
    result: Dict[RuleKind, PermanentRule] = {}
    for rule in rules:
        if not ignore_exceptions and not rule.applies_to_week(week_start):
            continue
        if rule.kind in result:
            logger.warning(
                f"Ambiguous rule: {owner or 'employee'} has several '{rule.kind.value}' rules, using the last one"
            )
        result[rule.kind] = rule
    return result
