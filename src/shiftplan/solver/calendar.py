"""Store calendar classification for a week."""
from datetime import date
from typing import Dict, Iterable, Optional, Set

from shiftplan.models.calendar import DayClass, Holiday, WeekWindow
from shiftplan.models.constraints import EngineConfig
from shiftplan.utils.logging_setup import get_logger, log_function_call

logger = get_logger("shiftplan.solver.calendar")


@log_function_call
def classify_week(
    week: WeekWindow,
    holidays: Iterable[Holiday],
    config: Optional[EngineConfig] = None,
) -> Dict[date, DayClass]:
    """
    Classify each of the week's seven dates.

    A full holiday makes the date a STORE_HOLIDAY. Otherwise the store's rest
    weekday is WEEKLY_REST unless the date is listed in ``open_sundays``.
    Everything else is WORKABLE. Partial holidays do not change the class.
    """
    config = config or EngineConfig()
    full_dates = {h.date for h in holidays if h.is_full}
    open_dates = set(config.open_sundays)

    result: Dict[date, DayClass] = {}
    for d in week.dates:
        if d in full_dates:
            result[d] = DayClass.STORE_HOLIDAY
        elif d.weekday() == config.rest_weekday and d not in open_dates:
            result[d] = DayClass.WEEKLY_REST
        else:
            result[d] = DayClass.WORKABLE

    logger.debug(
        f"Week {week.week_start}: "
        + ", ".join(f"{d.isoformat()}={c.value}" for d, c in result.items() if c != DayClass.WORKABLE)
    )
    return result


def partial_holiday_dates(week: WeekWindow, holidays: Iterable[Holiday]) -> Set[date]:
    """Dates in the week carrying a partial (afternoon) holiday."""
    return {h.date for h in holidays if not h.is_full and week.contains(h.date)}


def count_store_holidays(calendar: Dict[date, DayClass]) -> int:
    return sum(1 for c in calendar.values() if c == DayClass.STORE_HOLIDAY)
