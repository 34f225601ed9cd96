"""Engine configuration."""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List

from .calendar import parse_date
from .shift import SUNDAY


@dataclass
class OpeningHours:
    """Start/end times stamped on assignments (HH:MM)."""
    morning_start: str = "10:00"
    morning_end: str = "14:00"
    afternoon_start: str = "16:30"
    afternoon_end: str = "20:30"

    def to_dict(self) -> Dict[str, str]:
        return {
            "morning_start": self.morning_start,
            "morning_end": self.morning_end,
            "afternoon_start": self.afternoon_start,
            "afternoon_end": self.afternoon_end,
        }


@dataclass
class EngineConfig:
    """Configuration for the weekly allocation engine."""

    # Calendar
    rest_weekday: int = SUNDAY
    open_sundays: List[date] = field(default_factory=list)  # Rest-day dates the store opens
    partial_holiday_closes_afternoon: bool = False

    # Ranking
    saturday_weight: int = 1

    # Rules
    early_morning_max_days: int = 4

    # Shift times
    opening_hours: OpeningHours = field(default_factory=OpeningHours)
    early_morning_start: str = "09:00"
    early_morning_end: str = "14:00"

    # Execution
    num_workers: int = 1  # > 1 runs employee passes on a thread pool

    def __post_init__(self):
        self.open_sundays = [parse_date(d) for d in self.open_sundays]
        if isinstance(self.opening_hours, dict):
            self.opening_hours = OpeningHours(**self.opening_hours)

    def to_dict(self) -> Dict:
        """Serialize to dictionary."""
        return {
            "rest_weekday": self.rest_weekday,
            "open_sundays": [d.isoformat() for d in self.open_sundays],
            "partial_holiday_closes_afternoon": self.partial_holiday_closes_afternoon,
            "saturday_weight": self.saturday_weight,
            "early_morning_max_days": self.early_morning_max_days,
            "opening_hours": self.opening_hours.to_dict(),
            "early_morning_start": self.early_morning_start,
            "early_morning_end": self.early_morning_end,
            "num_workers": self.num_workers,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "EngineConfig":
        """Create from dictionary, ignoring unknown keys."""
        cfg = cls()
        for key, value in d.items():
            if hasattr(cfg, key):
                if key == "open_sundays":
                    value = [parse_date(x) for x in value or []]
                elif key == "opening_hours" and isinstance(value, dict):
                    value = OpeningHours(**value)
                setattr(cfg, key, value)
        return cfg
