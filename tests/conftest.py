"""Pytest configuration and fixtures."""
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from shiftplan.models.calendar import Holiday, HolidayKind, WeekWindow
from shiftplan.models.constraints import EngineConfig
from shiftplan.models.employee import Employee
from shiftplan.models.rules import MaxAfternoonsPerWeek, MorningOnly, SpecificDaysOff

# Monday; the Tuesday after it is used as a store holiday
WEEK_START = date(2026, 1, 19)


@pytest.fixture
def week_start():
    return WEEK_START


@pytest.fixture
def week():
    return WeekWindow(WEEK_START)


@pytest.fixture
def tuesday_holiday():
    """Full store holiday on the week's Tuesday."""
    return [Holiday(date=date(2026, 1, 20), kind=HolidayKind.FULL, name="Local feast")]


@pytest.fixture
def sample_employees():
    """Create a sample store roster for testing."""
    return [
        Employee(id="e1", name="Alice", weekly_hours=40),
        Employee(id="e2", name="Bob", weekly_hours=24, rules=[MorningOnly()]),
        Employee(id="e3", name="Carmen", weekly_hours=32, rules=[SpecificDaysOff(days=frozenset({2}))]),
        Employee(id="e4", name="Diego", weekly_hours=40, rules=[MaxAfternoonsPerWeek(n=2)]),
        Employee(id="e5", name="Eva", weekly_hours=20, active=False),
    ]


@pytest.fixture
def default_config():
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def request_payload():
    """Raw JSON-style run request."""
    return {
        "week_start": "2026-01-19",
        "establishment_id": "store-1",
        "seed": 42,
        "employees": [
            {"id": "e1", "name": "Alice", "weekly_hours": 40},
            {"id": "e2", "name": "Bob", "weekly_hours": 24, "rules": [{"type": "morning_only"}]},
            {"id": "e3", "name": "Carmen", "weekly_hours": 32},
        ],
        "holidays": [{"date": "2026-01-20", "type": "full", "name": "Local feast"}],
        "leave_requests": [
            {"employee_id": "e3", "type": "vacation", "dates": ["2026-01-22"]},
        ],
        "permanent_rules": [
            {"employee_id": "e3", "type": "specific_days_off", "days": ["Wed"]},
        ],
    }
