"""
Multi-Seed Optimizer
====================
Runs the engine with several consecutive seeds and keeps the plan with the
lowest total shortfall.
"""
import time
from typing import Optional, Tuple

from shiftplan.models.request import WeekRequest
from shiftplan.models.schedule import WeekPlan
from shiftplan.solver.engine import solve_request
from shiftplan.utils.logging_setup import SolverLogger, get_logger

logger = get_logger("shiftplan.solver.optimizer")
slog = SolverLogger("shiftplan.solver.optimizer")


def optimize_week(
    request: WeekRequest,
    tries: int = 1,
    seed: Optional[int] = None,
) -> Tuple[WeekPlan, int, int]:
    """
    Run several attempts and keep the best.

    Args:
        request: Run inputs (its own seed is ignored)
        tries: Number of attempts with sequential seeds
        seed: Base seed (defaults to request.seed, then current time)

    Returns:
        (best_plan, best_seed, best_shortfall_hours); ties keep the lower seed
    """
    tries = max(1, int(tries))
    if seed is None:
        seed = request.seed if request.seed is not None else int(time.time())
    slog.phase(f"Multi-Seed Optimization ({tries} tries from seed {seed})")

    best_plan: Optional[WeekPlan] = None
    best_seed = seed
    best_shortfall = 0

    for t in range(tries):
        cur_seed = seed + t
        plan = solve_request(request.with_seed(cur_seed))
        shortfall = plan.total_shortfall_hours
        slog.detail(f"seed {cur_seed}", f"shortfall={shortfall}h")

        if best_plan is None or shortfall < best_shortfall:
            best_plan, best_seed, best_shortfall = plan, cur_seed, shortfall
        if best_shortfall == 0:
            logger.info(f"Seed {cur_seed} meets every target, stopping after {t + 1} tries")
            break

    slog.step(f"Best seed {best_seed}: shortfall {best_shortfall}h")
    return best_plan, best_seed, best_shortfall
