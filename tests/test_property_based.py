"""
Property-Based Tests with Hypothesis
====================================
Invariants that must hold for any valid roster, calendar and seed.
"""
from datetime import date, timedelta

from hypothesis import given, settings, strategies as st

from shiftplan.models.calendar import Holiday, LeaveKind, LeaveRequest, WeekWindow
from shiftplan.models.constraints import EngineConfig
from shiftplan.models.employee import Employee
from shiftplan.models.rules import (
    AfternoonOnly,
    EarlyMorningShift,
    FixedRotatingShift,
    ForceFullDays,
    MaxAfternoonsPerWeek,
    MorningOnly,
    NoSplit,
    SpecificDaysOff,
)
from shiftplan.models.shift import SLOT_HOURS, WORK_SHIFTS
from shiftplan.solver.allocator import allocate_slots
from shiftplan.solver.engine import generate_week
from shiftplan.solver.targets import round_to_slot
from shiftplan.solver.validation import validate_permanent_restrictions, validate_plan

WEEK_START = date(2026, 1, 19)
WEEK_DATES = [WEEK_START + timedelta(days=i) for i in range(7)]

weekday_sets = st.frozensets(st.integers(min_value=0, max_value=6), max_size=3)

rules_strategy = st.lists(
    st.one_of(
        weekday_sets.map(lambda d: MorningOnly(days=d)),
        weekday_sets.map(lambda d: AfternoonOnly(days=d)),
        st.just(ForceFullDays()),
        st.just(EarlyMorningShift()),
        st.just(NoSplit()),
        st.integers(min_value=0, max_value=6).map(lambda n: MaxAfternoonsPerWeek(n=n)),
        weekday_sets.map(lambda d: SpecificDaysOff(days=d)),
        st.integers(min_value=0, max_value=5).map(
            lambda n: FixedRotatingShift(start_day=n, reference_monday=date(2026, 1, 5))),
    ),
    max_size=2,
    unique_by=lambda r: r.kind,
)


@st.composite
def rosters(draw):
    size = draw(st.integers(min_value=0, max_value=5))
    return [
        Employee(
            id=f"e{i}",
            weekly_hours=draw(st.integers(min_value=0, max_value=12)) * SLOT_HOURS,
            active=draw(st.booleans()),
            rules=draw(rules_strategy),
        )
        for i in range(size)
    ]


@st.composite
def leave_for(draw, employees):
    requests = []
    for emp in employees:
        days = draw(st.lists(st.sampled_from(WEEK_DATES), max_size=3, unique=True))
        if days:
            kind = draw(st.sampled_from(list(LeaveKind)))
            requests.append(LeaveRequest(employee_id=emp.id, kind=kind, dates=days))
    return requests


class TestRoundingProperties:
    """Properties of slot rounding."""

    @given(hours=st.floats(min_value=-10, max_value=200, allow_nan=False))
    def test_multiple_of_slot_and_close(self, hours):
        result = round_to_slot(hours)
        assert result % SLOT_HOURS == 0
        assert result >= 0
        if hours >= 0:
            assert abs(result - hours) <= SLOT_HOURS / 2


class TestAllocatorProperties:
    """Properties of the greedy allocator."""

    @given(
        n_days=st.integers(min_value=0, max_value=7),
        target_slots=st.integers(min_value=0, max_value=14),
        max_afternoons=st.one_of(st.none(), st.integers(min_value=0, max_value=7)),
    )
    def test_never_over_target_and_budget(self, n_days, target_slots, max_afternoons):
        dates = WEEK_DATES[:n_days]
        masks = {d: frozenset(WORK_SHIFTS) for d in dates}
        result = allocate_slots("e1", dates, masks, target_slots * SLOT_HOURS, max_afternoons)

        assert result.assigned_hours <= target_slots * SLOT_HOURS
        assert len({a.date for a in result.assignments}) == len(result.assignments)
        if max_afternoons is not None:
            assert result.afternoons_used <= max_afternoons
        # Unrestricted masks fill the target whenever two slots a day suffice
        if max_afternoons is None and target_slots <= 2 * n_days:
            assert result.shortfall_hours == 0


class TestEngineProperties:
    """Invariants of full engine runs."""

    @settings(max_examples=40, deadline=None)
    @given(data=st.data(), seed=st.integers(min_value=0, max_value=2**32 - 1))
    def test_plan_invariants(self, data, seed):
        employees = data.draw(rosters())
        leave = data.draw(leave_for(employees))
        holidays = [Holiday(date=d) for d in data.draw(st.lists(st.sampled_from(WEEK_DATES), max_size=2, unique=True))]

        plan = generate_week(WEEK_START, "store", employees, holidays, leave, seed=seed)

        active = {e.id for e in employees if e.active}
        assert set(plan.reports) == active
        assert len(plan.assignments) == 7 * len(active)
        assert validate_plan(plan).is_valid
        assert validate_permanent_restrictions(plan, employees) == []

        closed = {h.date for h in holidays}
        for a in plan.assignments:
            if a.date in closed or a.date.weekday() == 6:
                assert not a.shift.is_work

    @settings(max_examples=25, deadline=None)
    @given(employees=rosters(), seed=st.integers(min_value=0, max_value=10_000))
    def test_reproducible(self, employees, seed):
        a = generate_week(WEEK_START, "store", employees, seed=seed)
        b = generate_week(WEEK_START, "store", employees, seed=seed, config=EngineConfig(num_workers=3))
        assert a.to_dict() == b.to_dict()

    @given(weekly_slots=st.integers(min_value=0, max_value=10))
    def test_target_never_exceeds_base(self, weekly_slots):
        emp = Employee(id="e1", weekly_hours=weekly_slots * SLOT_HOURS)
        plan = generate_week(WEEK_START, "store", [emp], [Holiday(date=WEEK_DATES[1])], seed=1)
        report = plan.reports["e1"]
        assert report.target_hours <= emp.weekly_hours
        assert report.target_hours % SLOT_HOURS == 0


class TestWeekWindowProperties:
    """Properties of the week window."""

    @given(offset=st.integers(min_value=-520, max_value=520))
    def test_any_monday_gives_seven_days(self, offset):
        week = WeekWindow(WEEK_START + timedelta(weeks=offset))
        assert len(week.dates) == 7
        assert [d.weekday() for d in week.dates] == list(range(7))
