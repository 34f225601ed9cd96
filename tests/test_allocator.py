"""Tests for day ranking and slot allocation."""
import random
from datetime import date

from shiftplan.models.shift import WORK_SHIFTS, ShiftType
from shiftplan.solver.allocator import allocate_slots
from shiftplan.solver.ranking import day_weight, employee_rng, rank_days

MON_TO_SAT = [date(2026, 1, 19 + i) for i in range(6)]
SATURDAY = date(2026, 1, 24)


class TestRanking:
    """Tests for the day preference ranker."""

    def test_saturday_last(self):
        for seed in range(20):
            ranked = rank_days(MON_TO_SAT, random.Random(seed))
            assert ranked[-1] == SATURDAY
            assert sorted(ranked) == MON_TO_SAT

    def test_no_saturday_penalty(self):
        positions = {rank_days(MON_TO_SAT, random.Random(s), saturday_weight=0).index(SATURDAY) for s in range(50)}
        assert len(positions) > 1

    def test_deterministic_per_seed(self):
        a = rank_days(MON_TO_SAT, employee_rng(42, "e1"))
        b = rank_days(MON_TO_SAT, employee_rng(42, "e1"))
        assert a == b

    def test_employees_get_independent_orders(self):
        orders = {tuple(rank_days(MON_TO_SAT, employee_rng(42, f"e{i}"))) for i in range(10)}
        assert len(orders) > 1

    def test_limit(self):
        ranked = rank_days(MON_TO_SAT, random.Random(1), limit=4)
        assert len(ranked) == 4
        assert SATURDAY not in ranked

    def test_empty(self):
        assert rank_days([], random.Random(1)) == []

    def test_day_weight(self):
        assert day_weight(SATURDAY) == 1
        assert day_weight(SATURDAY, saturday_weight=3) == 3
        assert day_weight(date(2026, 1, 19)) == 0


class TestAllocation:
    """Tests for the greedy slot allocator."""

    def _masks(self, dates, mask=WORK_SHIFTS):
        return {d: frozenset(mask) for d in dates}

    def test_splits_fill_target(self):
        result = allocate_slots("e1", MON_TO_SAT, self._masks(MON_TO_SAT), 32)
        assert result.assigned_hours == 32
        assert result.shortfall_hours == 0
        assert [a.shift for a in result.assignments] == [ShiftType.SPLIT] * 4
        assert [a.date for a in result.assignments] == MON_TO_SAT[:4]

    def test_odd_slot_becomes_morning(self):
        result = allocate_slots("e1", MON_TO_SAT, self._masks(MON_TO_SAT), 20)
        shifts = [a.shift for a in result.assignments]
        assert shifts == [ShiftType.SPLIT, ShiftType.SPLIT, ShiftType.MORNING]
        assert result.assigned_hours == 20

    def test_zero_target(self):
        result = allocate_slots("e1", MON_TO_SAT, self._masks(MON_TO_SAT), 0)
        assert result.assignments == []
        assert result.shortfall_hours == 0

    def test_no_days_is_full_shortfall(self):
        result = allocate_slots("e1", [], {}, 24)
        assert result.assigned_hours == 0
        assert result.shortfall_hours == 24

    def test_morning_only_shortfall(self):
        dates = MON_TO_SAT[:3]
        result = allocate_slots("e1", dates, self._masks(dates, {ShiftType.MORNING}), 24)
        assert all(a.shift == ShiftType.MORNING for a in result.assignments)
        assert result.assigned_hours == 12
        assert result.shortfall_hours == 12

    def test_afternoon_only(self):
        result = allocate_slots("e1", MON_TO_SAT, self._masks(MON_TO_SAT, {ShiftType.AFTERNOON}), 12)
        assert [a.shift for a in result.assignments] == [ShiftType.AFTERNOON] * 3

    def test_max_afternoons_caps_splits(self):
        result = allocate_slots("e1", MON_TO_SAT, self._masks(MON_TO_SAT), 32, max_afternoons=2)
        shifts = [a.shift for a in result.assignments]
        assert sum(1 for s in shifts if s.uses_afternoon) == 2
        assert shifts == [ShiftType.SPLIT, ShiftType.SPLIT] + [ShiftType.MORNING] * 4
        assert result.assigned_hours == 32
        assert result.afternoons_used == 2

    def test_max_afternoons_zero_with_afternoon_only(self):
        masks = self._masks(MON_TO_SAT, {ShiftType.AFTERNOON})
        result = allocate_slots("e1", MON_TO_SAT, masks, 16, max_afternoons=0)
        assert result.assignments == []
        assert result.shortfall_hours == 16

    def test_force_full_days_needs_two_slots(self):
        masks = self._masks(MON_TO_SAT, {ShiftType.SPLIT})
        result = allocate_slots("e1", MON_TO_SAT, masks, 12)
        assert [a.shift for a in result.assignments] == [ShiftType.SPLIT]
        assert result.shortfall_hours == 4

    def test_never_exceeds_target(self):
        for target in range(0, 52, 4):
            result = allocate_slots("e1", MON_TO_SAT, self._masks(MON_TO_SAT), target)
            assert result.assigned_hours <= target

    def test_one_entry_per_date(self):
        result = allocate_slots("e1", MON_TO_SAT, self._masks(MON_TO_SAT), 48)
        dates = [a.date for a in result.assignments]
        assert len(dates) == len(set(dates))
        assert result.assigned_hours == 48
