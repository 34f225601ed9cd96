"""Employee model with contracted hours, rules and temporary adjustments."""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .calendar import parse_date
from .rules import PermanentRule, rule_from_dict


@dataclass
class TempHoursAdjustment:
    """Override of weekly hours while ``start <= week_start <= end``."""
    start: date
    end: date
    hours: int

    def __post_init__(self):
        self.start = parse_date(self.start)
        self.end = parse_date(self.end)
        self.hours = int(self.hours)

    def is_active(self, week_start: date) -> bool:
        return self.start <= week_start <= self.end

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat(), "hours": self.hours}

    @classmethod
    def from_dict(cls, d: dict) -> "TempHoursAdjustment":
        return cls(start=d["start"], end=d["end"], hours=int(d["hours"]))


@dataclass
class Employee:
    """A store employee as seen by the engine (read-only input)."""

    id: str
    name: str = ""
    weekly_hours: int = 40  # Contracted, multiple of 4
    active: bool = True

    rules: List[PermanentRule] = field(default_factory=list)
    temp_hours: List[TempHoursAdjustment] = field(default_factory=list)

    def __post_init__(self):
        self.id = str(self.id).strip()
        self.name = str(self.name).strip() or self.id

    def active_adjustment(self, week_start: date) -> Optional[TempHoursAdjustment]:
        """Temporary adjustment covering the week; the last match wins."""
        found = None
        for adj in self.temp_hours:
            if adj.is_active(week_start):
                found = adj
        return found

    def base_hours(self, week_start: date) -> int:
        adj = self.active_adjustment(week_start)
        return adj.hours if adj else self.weekly_hours

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "weekly_hours": self.weekly_hours,
            "active": self.active,
            "rules": [r.to_dict() for r in self.rules],
            "temp_hours": [t.to_dict() for t in self.temp_hours],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Employee":
        """Create from dictionary."""
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            weekly_hours=int(d.get("weekly_hours", d.get("weeklyHours", 40))),
            active=bool(d.get("active", True)),
            rules=[rule_from_dict(r) for r in d.get("rules") or []],
            temp_hours=[TempHoursAdjustment.from_dict(t) for t in d.get("temp_hours") or []],
        )
