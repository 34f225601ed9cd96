"""Weekly plan and assignment models."""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from .calendar import parse_date
from .shift import DAY_NAMES, ShiftType


@dataclass
class ShiftAssignment:
    """One employee's entry for one date."""
    employee_id: str
    date: date
    shift: ShiftType
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    morning_end: Optional[str] = None      # Split only
    afternoon_start: Optional[str] = None  # Split only

    def __post_init__(self):
        self.date = parse_date(self.date)
        if isinstance(self.shift, str) and not isinstance(self.shift, ShiftType):
            self.shift = ShiftType.from_string(self.shift)

    @property
    def hours(self) -> int:
        return self.shift.hours

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "date": self.date.isoformat(),
            "shift": self.shift.value,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "morning_end": self.morning_end,
            "afternoon_start": self.afternoon_start,
        }


@dataclass
class EmployeeReport:
    """Hour accounting for one employee's week."""
    employee_id: str
    target_hours: int
    assigned_hours: int

    @property
    def shortfall_hours(self) -> int:
        return max(0, self.target_hours - self.assigned_hours)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "target_hours": self.target_hours,
            "assigned_hours": self.assigned_hours,
            "shortfall_hours": self.shortfall_hours,
        }


@dataclass
class WeekPlan:
    """Complete week result from the engine."""

    week_start: date
    establishment_id: str = ""
    assignments: List[ShiftAssignment] = field(default_factory=list)
    reports: Dict[str, EmployeeReport] = field(default_factory=dict)
    seed: Optional[int] = None
    solve_time_seconds: float = 0.0

    @property
    def total_shortfall_hours(self) -> int:
        return sum(r.shortfall_hours for r in self.reports.values())

    def for_employee(self, employee_id: str) -> List[ShiftAssignment]:
        return [a for a in self.assignments if a.employee_id == employee_id]

    def get(self, employee_id: str, day: date) -> Optional[ShiftAssignment]:
        for a in self.assignments:
            if a.employee_id == employee_id and a.date == day:
                return a
        return None

    def to_dataframe(self) -> pd.DataFrame:
        """Convert assignments to a DataFrame."""
        if not self.assignments:
            return pd.DataFrame(columns=["employee_id", "date", "day", "shift", "hours"])

        rows = [
            {
                "employee_id": a.employee_id,
                "date": a.date,
                "day": DAY_NAMES[a.date.weekday()],
                "shift": a.shift.value,
                "hours": a.hours,
            }
            for a in self.assignments
        ]
        return pd.DataFrame(rows)

    def to_matrix(self) -> pd.DataFrame:
        """Employee x date grid of shift codes."""
        df = self.to_dataframe()
        if df.empty:
            return pd.DataFrame()
        return df.pivot(index="employee_id", columns="date", values="shift")

    def reports_dataframe(self) -> pd.DataFrame:
        if not self.reports:
            return pd.DataFrame(columns=["employee_id", "target_hours", "assigned_hours", "shortfall_hours"])
        return pd.DataFrame([r.to_dict() for r in self.reports.values()])

    def summary(self) -> Dict[str, Any]:
        """Get summary dictionary for display."""
        return {
            "week_start": self.week_start.isoformat(),
            "establishment_id": self.establishment_id,
            "employees": len(self.reports),
            "seed": self.seed,
            "target_hours": sum(r.target_hours for r in self.reports.values()),
            "assigned_hours": sum(r.assigned_hours for r in self.reports.values()),
            "shortfall_hours": self.total_shortfall_hours,
            "employees_short": sorted(e for e, r in self.reports.items() if r.shortfall_hours > 0),
            "solve_time": round(self.solve_time_seconds, 4),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week_start": self.week_start.isoformat(),
            "establishment_id": self.establishment_id,
            "seed": self.seed,
            "assignments": [a.to_dict() for a in self.assignments],
            "reports": [r.to_dict() for r in self.reports.values()],
        }
