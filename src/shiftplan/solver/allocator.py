"""
Slot Allocation
===============
Greedy conversion of ranked dates and an hour target into shifts.

For each ranked date, in order:
    1. Split, if the mask allows it, two slots remain and the afternoon
       budget has room.
    2. Otherwise a single slot: Morning first, Afternoon if the budget
       has room.
    3. Otherwise the date stays Off.
Stops once the target is met or the dates run out.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, Iterable, List, Optional

from shiftplan.models.schedule import ShiftAssignment
from shiftplan.models.shift import SLOT_HOURS, ShiftType
from shiftplan.utils.logging_setup import get_logger, log_function_call

logger = get_logger("shiftplan.solver.allocator")


@dataclass
class AllocationResult:
    employee_id: str
    target_hours: int
    assignments: List[ShiftAssignment] = field(default_factory=list)
    slots_used: int = 0
    afternoons_used: int = 0

    @property
    def assigned_hours(self) -> int:
        return self.slots_used * SLOT_HOURS

    @property
    def shortfall_hours(self) -> int:
        return self.target_hours - self.assigned_hours


@log_function_call
def allocate_slots(
    employee_id: str,
    ranked_dates: Iterable[date],
    masks: Dict[date, FrozenSet[ShiftType]],
    target_hours: int,
    max_afternoons: Optional[int] = None,
) -> AllocationResult:
    """
    Assign shifts to ranked dates until the target is met.

    Args:
        employee_id: Employee being planned
        ranked_dates: Dates in preference order
        masks: Allowed shift types per date
        target_hours: Weekly target (multiple of 4)
        max_afternoons: Cap on Afternoon + Split days, None for no cap

    Returns:
        AllocationResult with working assignments only
    """
    result = AllocationResult(employee_id=employee_id, target_hours=target_hours)
    slots_needed = target_hours // SLOT_HOURS

    for d in ranked_dates:
        if result.slots_used >= slots_needed:
            break
        mask = masks.get(d, frozenset())
        afternoon_ok = max_afternoons is None or result.afternoons_used + 1 <= max_afternoons
        remaining = slots_needed - result.slots_used

        if ShiftType.SPLIT in mask and remaining >= 2 and afternoon_ok:
            shift = ShiftType.SPLIT
        elif ShiftType.MORNING in mask:
            shift = ShiftType.MORNING
        elif ShiftType.AFTERNOON in mask and afternoon_ok:
            shift = ShiftType.AFTERNOON
        else:
            logger.debug(f"{employee_id}: {d.isoformat()} left off (mask={sorted(s.value for s in mask)})")
            continue

        result.assignments.append(ShiftAssignment(employee_id=employee_id, date=d, shift=shift))
        result.slots_used += shift.slots
        if shift.uses_afternoon:
            result.afternoons_used += 1

    if result.shortfall_hours > 0:
        logger.debug(f"{employee_id}: {result.shortfall_hours}h short of {target_hours}h")
    return result
