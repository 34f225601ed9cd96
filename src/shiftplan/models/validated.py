"""
Pydantic Validated Models
=========================
Validation layer for raw (dict / JSON) run requests at the API boundary.

Usage:
    from shiftplan.models.validated import RunRequestModel

    request = RunRequestModel.parse_request(payload).to_domain()

Any ``pydantic.ValidationError`` is surfaced as ``InvalidInputError``.
Domain dataclasses remain the engine's working types.
"""
import datetime as dt
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from shiftplan.errors import InvalidInputError
from shiftplan.models.calendar import (
    Holiday,
    HolidayKind,
    LeaveKind,
    LeaveRequest,
    LeaveStatus,
    TimeOffKind,
    TimeOffRequest,
)
from shiftplan.models.constraints import EngineConfig, OpeningHours
from shiftplan.models.employee import Employee, TempHoursAdjustment
from shiftplan.models.request import WeekRequest
from shiftplan.models.rules import PermanentRule, RuleKind, rule_from_dict
from shiftplan.models.shift import normalize_weekday

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class OpeningHoursModel(BaseModel):
    morning_start: str = Field(default="10:00", pattern=_TIME_PATTERN)
    morning_end: str = Field(default="14:00", pattern=_TIME_PATTERN)
    afternoon_start: str = Field(default="16:30", pattern=_TIME_PATTERN)
    afternoon_end: str = Field(default="20:30", pattern=_TIME_PATTERN)


class ValidatedEngineConfig(BaseModel):
    """
    Pydantic-validated engine configuration.

    Can be converted to/from the dataclass EngineConfig.
    """
    model_config = ConfigDict(validate_assignment=True)

    rest_weekday: int = Field(default=6, ge=0, le=6)
    open_sundays: List[dt.date] = Field(default_factory=list)
    partial_holiday_closes_afternoon: bool = Field(default=False)
    saturday_weight: int = Field(default=1, ge=0, le=100)
    early_morning_max_days: int = Field(default=4, ge=0, le=7)
    opening_hours: OpeningHoursModel = Field(default_factory=OpeningHoursModel)
    early_morning_start: str = Field(default="09:00", pattern=_TIME_PATTERN)
    early_morning_end: str = Field(default="14:00", pattern=_TIME_PATTERN)
    num_workers: int = Field(default=1, ge=1, le=64)

    def to_dataclass(self) -> EngineConfig:
        """Convert to dataclass EngineConfig for the engine."""
        return EngineConfig(
            rest_weekday=self.rest_weekday,
            open_sundays=list(self.open_sundays),
            partial_holiday_closes_afternoon=self.partial_holiday_closes_afternoon,
            saturday_weight=self.saturday_weight,
            early_morning_max_days=self.early_morning_max_days,
            opening_hours=OpeningHours(**self.opening_hours.model_dump()),
            early_morning_start=self.early_morning_start,
            early_morning_end=self.early_morning_end,
            num_workers=self.num_workers,
        )

    @classmethod
    def from_dataclass(cls, config: EngineConfig) -> "ValidatedEngineConfig":
        """Create from dataclass EngineConfig."""
        return cls(**config.to_dict())


class HolidayModel(BaseModel):
    date: dt.date
    type: str = "full"
    name: str = ""

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        return HolidayKind.from_string(v).value

    def to_domain(self) -> Holiday:
        return Holiday(date=self.date, kind=HolidayKind(self.type), name=self.name)


class LeaveRequestModel(BaseModel):
    employee_id: str = Field(min_length=1)
    type: LeaveKind = LeaveKind.VACATION
    dates: List[dt.date] = Field(default_factory=list)
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    status: LeaveStatus = LeaveStatus.APPROVED

    @model_validator(mode="after")
    def validate_span(self):
        """Either explicit dates or a complete, ordered range."""
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date and end_date must be given together")
        if self.start_date and self.end_date < self.start_date:
            raise ValueError("end_date is before start_date")
        if not self.dates and self.start_date is None:
            raise ValueError("leave request needs dates or a start_date/end_date range")
        return self

    def to_domain(self) -> LeaveRequest:
        return LeaveRequest(
            employee_id=self.employee_id,
            kind=self.type,
            dates=list(self.dates),
            start_date=self.start_date,
            end_date=self.end_date,
            status=self.status,
        )


class TimeOffRequestModel(BaseModel):
    employee_id: str = Field(min_length=1)
    type: TimeOffKind = TimeOffKind.DAY_OFF
    dates: List[dt.date] = Field(min_length=1)
    status: LeaveStatus = LeaveStatus.APPROVED

    def to_domain(self) -> TimeOffRequest:
        return TimeOffRequest(
            employee_id=self.employee_id,
            kind=self.type,
            dates=list(self.dates),
            status=self.status,
        )


class TempHoursModel(BaseModel):
    start: dt.date
    end: dt.date
    hours: int = Field(ge=0)

    @model_validator(mode="after")
    def validate_range(self):
        if self.end < self.start:
            raise ValueError("temporary hours end before they start")
        return self

    def to_domain(self) -> TempHoursAdjustment:
        return TempHoursAdjustment(start=self.start, end=self.end, hours=self.hours)


class PermanentRuleModel(BaseModel):
    type: RuleKind
    employee_id: Optional[str] = None  # Only for rules given at request level
    days: List[Union[int, str]] = Field(default_factory=list)
    value: Optional[int] = Field(default=None, ge=0)
    cycle_weeks: List[Any] = Field(default_factory=list)
    start_day: Optional[Union[int, str]] = None
    reference_date: Optional[dt.date] = None
    exceptions: List[dt.date] = Field(default_factory=list)

    @field_validator("days")
    @classmethod
    def validate_days(cls, v: List[Union[int, str]]) -> List[int]:
        return [normalize_weekday(d) for d in v]

    @field_validator("start_day")
    @classmethod
    def validate_start_day(cls, v: Optional[Union[int, str]]) -> Optional[int]:
        return None if v is None else normalize_weekday(v)

    @model_validator(mode="after")
    def validate_rotation(self):
        if self.type == RuleKind.ROTATING_DAYS_OFF:
            if not self.cycle_weeks:
                raise ValueError("rotating_days_off needs at least one cycle week")
            if self.reference_date is None:
                raise ValueError("rotating_days_off needs a reference_date")
            if self.reference_date.weekday() != 0:
                raise ValueError("rotating_days_off reference_date must be a Monday")
        if self.type == RuleKind.FIXED_ROTATING_SHIFT:
            if self.reference_date is None or self.reference_date.weekday() != 0:
                raise ValueError("fixed_rotating_shift needs a Monday reference_date")
            if self.start_day == 6:
                raise ValueError("fixed_rotating_shift cannot start on Sunday")
            if self.start_day is None and self.value is not None and not 1 <= self.value <= 6:
                raise ValueError("fixed_rotating_shift value must be 1 (Monday) .. 6 (Saturday)")
        return self

    def to_domain(self) -> PermanentRule:
        return rule_from_dict(self.model_dump(mode="json", exclude={"employee_id"}))


class EmployeeModel(BaseModel):
    id: str = Field(min_length=1)
    name: str = ""
    weekly_hours: int = Field(default=40, ge=0)
    active: bool = True
    rules: List[PermanentRuleModel] = Field(default_factory=list)
    temp_hours: List[TempHoursModel] = Field(default_factory=list)

    @field_validator("weekly_hours")
    @classmethod
    def validate_hours(cls, v: int) -> int:
        if v % 4 != 0:
            raise ValueError("weekly_hours must be a multiple of 4")
        return v

    def to_domain(self) -> Employee:
        return Employee(
            id=self.id,
            name=self.name,
            weekly_hours=self.weekly_hours,
            active=self.active,
            rules=[r.to_domain() for r in self.rules],
            temp_hours=[t.to_domain() for t in self.temp_hours],
        )


class RunRequestModel(BaseModel):
    """Raw request for one store-week."""
    week_start: dt.date
    establishment_id: str = ""
    employees: List[EmployeeModel] = Field(default_factory=list)
    holidays: List[HolidayModel] = Field(default_factory=list)
    leave_requests: List[LeaveRequestModel] = Field(default_factory=list)
    time_off_requests: List[TimeOffRequestModel] = Field(default_factory=list)
    permanent_rules: List[PermanentRuleModel] = Field(default_factory=list)
    seed: Optional[int] = None
    config: ValidatedEngineConfig = Field(default_factory=ValidatedEngineConfig)

    @field_validator("week_start")
    @classmethod
    def validate_week_start(cls, v: dt.date) -> dt.date:
        if v.weekday() != 0:
            raise ValueError("week_start must be a Monday")
        return v

    @model_validator(mode="after")
    def validate_references(self):
        """Cross-field validation of employee references."""
        ids = [e.id for e in self.employees]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate employee ids")
        known = set(ids)
        for req in self.leave_requests:
            if req.employee_id not in known:
                raise ValueError(f"leave request references unknown employee {req.employee_id!r}")
        for req in self.time_off_requests:
            if req.employee_id not in known:
                raise ValueError(f"time-off request references unknown employee {req.employee_id!r}")
        for rule in self.permanent_rules:
            if rule.employee_id is None:
                raise ValueError("request-level permanent rules need an employee_id")
            if rule.employee_id not in known:
                raise ValueError(f"permanent rule references unknown employee {rule.employee_id!r}")
        return self

    def to_domain(self) -> WeekRequest:
        employees = [e.to_domain() for e in self.employees]
        by_id = {e.id: e for e in employees}
        # Request-level rules come after the employee's own, so they win ties
        for rule in self.permanent_rules:
            by_id[rule.employee_id].rules.append(rule.to_domain())
        return WeekRequest(
            week_start=self.week_start,
            establishment_id=self.establishment_id,
            employees=employees,
            holidays=[h.to_domain() for h in self.holidays],
            leave_requests=[r.to_domain() for r in self.leave_requests],
            seed=self.seed,
            config=self.config.to_dataclass(),
            time_off=[r.to_domain() for r in self.time_off_requests],
        )

    @classmethod
    def parse_request(cls, payload: Dict[str, Any]) -> "RunRequestModel":
        """Validate a payload, raising InvalidInputError on failure."""
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid run request: {e}") from e
