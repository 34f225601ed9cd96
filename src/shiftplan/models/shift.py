"""Shift type definitions and weekday constants."""
from enum import Enum

from shiftplan.errors import InvalidInputError

# Slot size in hours (one half-day)
SLOT_HOURS = 4


class ShiftType(str, Enum):
    """Types of day entries in a weekly plan."""
    MORNING = "morning"          # One 4h slot
    AFTERNOON = "afternoon"      # One 4h slot
    SPLIT = "split"              # Morning + afternoon, same day
    OFF = "off"                  # Rest / unassigned
    HOLIDAY = "holiday"          # Store closed
    VACATION = "vacation"
    SICK_LEAVE = "sick_leave"
    MATERNITY_PATERNITY = "maternity_paternity"

    @property
    def slots(self) -> int:
        """Number of half-day slots this entry consumes."""
        return {
            ShiftType.MORNING: 1,
            ShiftType.AFTERNOON: 1,
            ShiftType.SPLIT: 2,
        }.get(self, 0)

    @property
    def hours(self) -> int:
        """Hours worked for this shift type."""
        return self.slots * SLOT_HOURS

    @property
    def is_work(self) -> bool:
        """True if this is a working shift."""
        return self.slots > 0

    @property
    def uses_afternoon(self) -> bool:
        return self in (ShiftType.AFTERNOON, ShiftType.SPLIT)

    @classmethod
    def from_string(cls, s: str) -> "ShiftType":
        """Parse shift from various string formats."""
        mapping = {
            "m": cls.MORNING, "morning": cls.MORNING, "manana": cls.MORNING, "mañana": cls.MORNING,
            "a": cls.AFTERNOON, "t": cls.AFTERNOON, "afternoon": cls.AFTERNOON, "tarde": cls.AFTERNOON,
            "s": cls.SPLIT, "split": cls.SPLIT, "partido": cls.SPLIT,
            "off": cls.OFF, "libre": cls.OFF, "o": cls.OFF,
            "holiday": cls.HOLIDAY, "festivo": cls.HOLIDAY, "h": cls.HOLIDAY,
            "vacation": cls.VACATION, "vacaciones": cls.VACATION, "v": cls.VACATION,
            "sick_leave": cls.SICK_LEAVE, "sick": cls.SICK_LEAVE, "baja": cls.SICK_LEAVE,
            "maternity_paternity": cls.MATERNITY_PATERNITY,
        }
        key = str(s).strip().lower()
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown shift type: {s!r}")


WORK_SHIFTS = frozenset({ShiftType.MORNING, ShiftType.AFTERNOON, ShiftType.SPLIT})

# Weekday numbers follow date.weekday(): Monday == 0
MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# Day normalization map
DAY_ALIASES = {
    "mon": 0, "monday": 0, "lun": 0, "lunes": 0,
    "tue": 1, "tuesday": 1, "mar": 1, "martes": 1,
    "wed": 2, "wednesday": 2, "mie": 2, "miercoles": 2, "miércoles": 2,
    "thu": 3, "thursday": 3, "jue": 3, "jueves": 3,
    "fri": 4, "friday": 4, "vie": 4, "viernes": 4,
    "sat": 5, "saturday": 5, "sab": 5, "sabado": 5, "sábado": 5,
    "sun": 6, "sunday": 6, "dom": 6, "domingo": 6,
}


def normalize_weekday(value) -> int:
    """Normalize a weekday given as int or name to 0..6 (Monday == 0)."""
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid weekday: {value!r}")
    if isinstance(value, int):
        if 0 <= value <= 6:
            return value
        raise InvalidInputError(f"Weekday out of range 0..6: {value}")
    key = str(value).strip().lower()
    if key.isdigit():
        return normalize_weekday(int(key))
    if key in DAY_ALIASES:
        return DAY_ALIASES[key]
    raise InvalidInputError(f"Unknown weekday: {value!r}")
