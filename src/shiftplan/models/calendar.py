"""Week window, holidays and leave requests."""
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from shiftplan.errors import InvalidInputError
from shiftplan.models.shift import WORK_SHIFTS, ShiftType


def parse_date(value) -> date:
    """Parse ``YYYY-MM-DD`` (or an ISO timestamp) into a date."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).split("T")[0].strip())
    except ValueError:
        raise InvalidInputError(f"Invalid date: {value!r}") from None


class HolidayKind(str, Enum):
    """Holiday kinds. Only FULL closes the store."""
    FULL = "full"
    PARTIAL = "partial"

    @classmethod
    def from_string(cls, s: str) -> "HolidayKind":
        key = str(s).strip().lower()
        if key == "full":
            return cls.FULL
        if key in ("partial", "afternoon", "closed_afternoon"):
            return cls.PARTIAL
        raise ValueError(f"Unknown holiday kind: {s!r}")


class LeaveKind(str, Enum):
    VACATION = "vacation"
    SICK_LEAVE = "sick_leave"
    MATERNITY_PATERNITY = "maternity_paternity"


class TimeOffKind(str, Enum):
    """One-off requests that free a single date or half of it."""
    DAY_OFF = "day_off"
    MORNING_OFF = "morning_off"
    AFTERNOON_OFF = "afternoon_off"

    @property
    def blocked_shifts(self) -> FrozenSet[ShiftType]:
        """Working shifts the request rules out on its dates."""
        if self == TimeOffKind.MORNING_OFF:
            return frozenset({ShiftType.MORNING, ShiftType.SPLIT})
        if self == TimeOffKind.AFTERNOON_OFF:
            return frozenset({ShiftType.AFTERNOON, ShiftType.SPLIT})
        return WORK_SHIFTS


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DayClass(str, Enum):
    """Store-level classification of a calendar date."""
    STORE_HOLIDAY = "store_holiday"
    WEEKLY_REST = "weekly_rest"
    WORKABLE = "workable"


@dataclass(frozen=True)
class WeekWindow:
    """A Monday and the seven dates it spans."""
    week_start: date

    def __post_init__(self):
        start = parse_date(self.week_start)
        if start.weekday() != 0:
            raise InvalidInputError(
                f"Week must start on a Monday, got {start.isoformat()} ({start.strftime('%A')})",
                field="week_start",
            )
        object.__setattr__(self, "week_start", start)

    @property
    def dates(self) -> Tuple[date, ...]:
        return tuple(self.week_start + timedelta(days=i) for i in range(7))

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)

    def contains(self, d: date) -> bool:
        return self.week_start <= d <= self.week_end


@dataclass
class Holiday:
    date: date
    kind: HolidayKind = HolidayKind.FULL
    name: str = ""

    def __post_init__(self):
        self.date = parse_date(self.date)
        if isinstance(self.kind, str) and not isinstance(self.kind, HolidayKind):
            self.kind = HolidayKind.from_string(self.kind)

    @property
    def is_full(self) -> bool:
        return self.kind == HolidayKind.FULL

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "type": self.kind.value, "name": self.name}

    @classmethod
    def from_dict(cls, d: dict) -> "Holiday":
        return cls(
            date=parse_date(d["date"]),
            kind=HolidayKind.from_string(d.get("type", d.get("kind", "full"))),
            name=str(d.get("name", "")),
        )


@dataclass
class LeaveRequest:
    """Time off given either as explicit dates or an inclusive range."""
    employee_id: str
    kind: LeaveKind = LeaveKind.VACATION
    dates: List[date] = field(default_factory=list)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: LeaveStatus = LeaveStatus.APPROVED

    def __post_init__(self):
        self.employee_id = str(self.employee_id).strip()
        self.kind = LeaveKind(self.kind)
        self.status = LeaveStatus(self.status)
        self.dates = [parse_date(d) for d in self.dates]
        if self.start_date is not None:
            self.start_date = parse_date(self.start_date)
        if self.end_date is not None:
            self.end_date = parse_date(self.end_date)

    @property
    def is_approved(self) -> bool:
        return self.status == LeaveStatus.APPROVED

    @property
    def has_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def covers(self, d: date) -> bool:
        if d in self.dates:
            return True
        return self.has_range and self.start_date <= d <= self.end_date

    def overlaps(self, week: WeekWindow) -> bool:
        return any(self.covers(d) for d in week.dates)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "type": self.kind.value,
            "dates": [d.isoformat() for d in self.dates],
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "LeaveRequest":
        return cls(
            employee_id=str(d.get("employee_id", d.get("employeeId", ""))),
            kind=LeaveKind(d.get("type", d.get("kind", "vacation"))),
            dates=[parse_date(x) for x in d.get("dates") or []],
            start_date=parse_date(d["start_date"]) if d.get("start_date") else None,
            end_date=parse_date(d["end_date"]) if d.get("end_date") else None,
            status=LeaveStatus(d.get("status", "approved")),
        )


@dataclass
class TimeOffRequest:
    """Day, morning or afternoon off on explicit dates; no hours are removed."""
    employee_id: str
    kind: TimeOffKind = TimeOffKind.DAY_OFF
    dates: List[date] = field(default_factory=list)
    status: LeaveStatus = LeaveStatus.APPROVED

    def __post_init__(self):
        self.employee_id = str(self.employee_id).strip()
        self.kind = TimeOffKind(self.kind)
        self.status = LeaveStatus(self.status)
        self.dates = [parse_date(d) for d in self.dates]

    @property
    def is_approved(self) -> bool:
        return self.status == LeaveStatus.APPROVED

    def overlaps(self, week: WeekWindow) -> bool:
        return any(week.contains(d) for d in self.dates)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "type": self.kind.value,
            "dates": [d.isoformat() for d in self.dates],
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "TimeOffRequest":
        return cls(
            employee_id=str(d.get("employee_id", d.get("employeeId", ""))),
            kind=TimeOffKind(d.get("type", d.get("kind", "day_off"))),
            dates=[parse_date(x) for x in d.get("dates") or []],
            status=LeaveStatus(d.get("status", "approved")),
        )
