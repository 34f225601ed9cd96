"""Day preference ranking: seeded shuffle, then Saturdays last."""
import random
from datetime import date
from typing import Iterable, List, Optional

from shiftplan.models.shift import SATURDAY
from shiftplan.utils.logging_setup import get_logger, log_function_call

logger = get_logger("shiftplan.solver.ranking")


def employee_rng(seed: int, employee_id: str) -> random.Random:
    """Independent generator per employee, reproducible for a given run seed."""
    return random.Random(f"{seed}:{employee_id}")


def day_weight(d: date, saturday_weight: int = 1) -> int:
    return saturday_weight if d.weekday() == SATURDAY else 0


@log_function_call
def rank_days(
    dates: Iterable[date],
    rng: random.Random,
    saturday_weight: int = 1,
    limit: Optional[int] = None,
) -> List[date]:
    """
    Order candidate dates for allocation.

    The dates are shuffled with ``rng`` and then stably sorted by weight, so
    non-Saturdays keep the shuffled order and Saturdays come last.

    Args:
        dates: Available dates of one employee
        rng: Per-employee generator
        saturday_weight: Weight of a Saturday (0 disables the penalty)
        limit: Keep only the first ``limit`` dates
    """
    ordered = list(dates)
    rng.shuffle(ordered)
    ordered.sort(key=lambda d: day_weight(d, saturday_weight))
    if limit is not None:
        ordered = ordered[:limit]
    return ordered
