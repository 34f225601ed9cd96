"""Bundle of inputs for one engine run."""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .calendar import Holiday, LeaveRequest, TimeOffRequest, parse_date
from .constraints import EngineConfig
from .employee import Employee


@dataclass
class WeekRequest:
    """Everything needed to generate one store's week."""
    week_start: date
    establishment_id: str = ""
    employees: List[Employee] = field(default_factory=list)
    holidays: List[Holiday] = field(default_factory=list)
    leave_requests: List[LeaveRequest] = field(default_factory=list)
    seed: Optional[int] = None
    config: EngineConfig = field(default_factory=EngineConfig)
    time_off: List[TimeOffRequest] = field(default_factory=list)

    def __post_init__(self):
        self.week_start = parse_date(self.week_start)

    def with_seed(self, seed: Optional[int]) -> "WeekRequest":
        return WeekRequest(
            week_start=self.week_start,
            establishment_id=self.establishment_id,
            employees=self.employees,
            holidays=self.holidays,
            leave_requests=self.leave_requests,
            seed=seed,
            config=self.config,
            time_off=self.time_off,
        )
