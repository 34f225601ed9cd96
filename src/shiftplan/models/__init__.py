# shiftplan/models - Data models for the allocation engine
from .calendar import (
    DayClass,
    Holiday,
    HolidayKind,
    LeaveKind,
    LeaveRequest,
    LeaveStatus,
    TimeOffKind,
    TimeOffRequest,
    WeekWindow,
)
from .constraints import EngineConfig, OpeningHours
from .employee import Employee, TempHoursAdjustment
from .request import WeekRequest
from .rules import (
    AfternoonOnly,
    EarlyMorningShift,
    FixedRotatingShift,
    ForceFullDays,
    MaxAfternoonsPerWeek,
    MorningOnly,
    NoSplit,
    PermanentRule,
    RotatingDaysOff,
    RuleKind,
    SpecificDaysOff,
)
from .schedule import EmployeeReport, ShiftAssignment, WeekPlan
from .shift import DAY_NAMES, SLOT_HOURS, WORK_SHIFTS, ShiftType

__all__ = [
    "Employee", "TempHoursAdjustment",
    "PermanentRule", "RuleKind",
    "MorningOnly", "AfternoonOnly", "SpecificDaysOff", "MaxAfternoonsPerWeek",
    "ForceFullDays", "EarlyMorningShift", "RotatingDaysOff", "FixedRotatingShift", "NoSplit",
    "Holiday", "HolidayKind", "LeaveRequest", "LeaveKind", "LeaveStatus",
    "TimeOffRequest", "TimeOffKind",
    "WeekWindow", "DayClass",
    "ShiftType", "SLOT_HOURS", "WORK_SHIFTS", "DAY_NAMES",
    "ShiftAssignment", "EmployeeReport", "WeekPlan",
    "EngineConfig", "OpeningHours", "WeekRequest",
]
