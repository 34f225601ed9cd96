"""Tests for permanent work-pattern rules."""
import logging
from datetime import date

import pytest

from shiftplan.models.rules import (
    AfternoonOnly,
    EarlyMorningShift,
    FixedRotatingShift,
    ForceFullDays,
    MaxAfternoonsPerWeek,
    MorningOnly,
    NoSplit,
    RotatingDaysOff,
    RuleKind,
    SpecificDaysOff,
    effective_rules,
    rule_from_dict,
)


class TestRuleParsing:
    """Tests for rule_from_dict."""

    def test_simple_kinds(self):
        assert isinstance(rule_from_dict({"type": "morning_only"}), MorningOnly)
        assert isinstance(rule_from_dict({"type": "FORCE_FULL_DAYS"}), ForceFullDays)
        assert isinstance(rule_from_dict({"type": "early_morning_shift"}), EarlyMorningShift)
        assert isinstance(rule_from_dict({"type": "no_split"}), NoSplit)

    def test_specific_days_off_names(self):
        rule = rule_from_dict({"type": "specific_days_off", "days": ["Mon", "jueves", 5]})
        assert rule.days == frozenset({0, 3, 5})

    def test_max_afternoons_value_or_n(self):
        assert rule_from_dict({"type": "max_afternoons_per_week", "value": 2}).n == 2
        assert rule_from_dict({"type": "max_afternoons_per_week", "n": 1}).n == 1
        assert rule_from_dict({"type": "max_afternoons_per_week"}).n == 3

    def test_rotating_both_cycle_formats(self):
        plain = rule_from_dict({
            "type": "rotating_days_off",
            "cycle_weeks": [[5], [6]],
            "reference_date": "2026-01-05",
        })
        nested = rule_from_dict({
            "type": "rotating_days_off",
            # Stored records number days from Sunday == 0
            "cycle_weeks": [{"days": [6]}, {"days": [0]}],
            "reference_monday": "2026-01-05",
        })
        assert plain == nested
        assert plain.cycle_weeks == (frozenset({5}), frozenset({6}))
        assert plain.reference_monday == date(2026, 1, 5)

    def test_stored_cycle_days_names_unchanged(self):
        rule = rule_from_dict({
            "type": "rotating_days_off",
            "cycle_weeks": [{"days": ["Sat", "domingo"]}],
            "reference_date": "2026-01-05",
        })
        assert rule.cycle_weeks == (frozenset({5, 6}),)

    def test_scoped_shape_rules(self):
        rule = rule_from_dict({"type": "afternoon_only", "days": ["Mon", 4]})
        assert rule == AfternoonOnly(days=frozenset({0, 4}))
        assert rule.covers_weekday(4)
        assert not rule.covers_weekday(2)
        assert MorningOnly().covers_weekday(2)
        assert "days" not in MorningOnly().to_dict()

    def test_fixed_rotation_start_day(self):
        rule = rule_from_dict({"type": "fixed_rotating_shift", "start_day": "Wed", "reference_date": "2026-01-05"})
        assert rule == FixedRotatingShift(start_day=2, reference_monday=date(2026, 1, 5))

    def test_fixed_rotation_stored_value_is_sunday_based(self):
        rule = rule_from_dict({"type": "fixed_rotating_shift", "value": 1, "reference_date": "2026-01-05"})
        assert rule.start_day == 0
        assert rule_from_dict({"type": "fixed_rotating_shift", "value": 6}).start_day == 5
        assert rule_from_dict({"type": "fixed_rotating_shift"}).start_day == 0

    def test_exceptions_parsed(self):
        rule = rule_from_dict({"type": "morning_only", "exceptions": ["2026-01-19"]})
        assert rule.exceptions == frozenset({date(2026, 1, 19)})

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="Unknown permanent rule"):
            rule_from_dict({"type": "night_only"})

    def test_to_dict_roundtrip(self):
        rules = [
            SpecificDaysOff(days=frozenset({1, 4}), exceptions=frozenset({date(2026, 1, 19)})),
            MaxAfternoonsPerWeek(n=2),
            RotatingDaysOff(cycle_weeks=(frozenset({6}), frozenset({0})), reference_monday=date(2026, 1, 5)),
            NoSplit(),
            MorningOnly(days=frozenset({0, 2})),
            AfternoonOnly(),
            FixedRotatingShift(start_day=4, reference_monday=date(2026, 1, 5)),
        ]
        for rule in rules:
            assert rule_from_dict(rule.to_dict()) == rule


class TestRotatingDaysOff:
    """Tests for the rotating cycle index."""

    @pytest.fixture
    def rule(self):
        return RotatingDaysOff(
            cycle_weeks=(frozenset({5}), frozenset({6}), frozenset({0, 1})),
            reference_monday=date(2026, 1, 5),
        )

    def test_anchor_week_is_first(self, rule):
        assert rule.cycle_index(date(2026, 1, 5)) == 0
        assert rule.days_off(date(2026, 1, 5)) == frozenset({5})

    def test_cycle_wraps(self, rule):
        assert rule.cycle_index(date(2026, 1, 12)) == 1
        assert rule.cycle_index(date(2026, 1, 19)) == 2
        assert rule.cycle_index(date(2026, 1, 26)) == 0

    def test_inactive_before_anchor(self, rule):
        assert rule.cycle_index(date(2025, 12, 29)) is None
        assert rule.days_off(date(2025, 12, 29)) == frozenset()


class TestEffectiveRules:
    """Tests for exception handling and duplicate kinds."""

    def test_exception_suspends_rule(self, week_start):
        rules = [MorningOnly(exceptions=frozenset({week_start}))]
        assert effective_rules(rules, week_start) == {}
        assert RuleKind.MORNING_ONLY in effective_rules(rules, date(2026, 1, 26))

    def test_last_duplicate_wins(self, week_start, caplog):
        rules = [MaxAfternoonsPerWeek(n=1), MaxAfternoonsPerWeek(n=3)]
        with caplog.at_level(logging.WARNING, logger="shiftplan"):
            result = effective_rules(rules, week_start, owner="Alice")
        assert result[RuleKind.MAX_AFTERNOONS_PER_WEEK].n == 3
        assert "Ambiguous rule" in caplog.text
        assert "Alice" in caplog.text

    def test_ignore_exceptions_still_dedupes(self, week_start):
        rules = [
            MaxAfternoonsPerWeek(n=1),
            MaxAfternoonsPerWeek(n=3, exceptions=frozenset({week_start})),
        ]
        assert effective_rules(rules, week_start)[RuleKind.MAX_AFTERNOONS_PER_WEEK].n == 1
        result = effective_rules(rules, week_start, ignore_exceptions=True)
        assert list(result) == [RuleKind.MAX_AFTERNOONS_PER_WEEK]
        assert result[RuleKind.MAX_AFTERNOONS_PER_WEEK].n == 3


class TestFixedRotatingShift:
    """Tests for the Monday..Saturday rotating day off."""

    @pytest.fixture
    def rule(self):
        return FixedRotatingShift(start_day=0, reference_monday=date(2026, 1, 5))

    def test_moves_one_day_per_week(self, rule):
        assert rule.day_off(date(2026, 1, 5)) == 0
        assert rule.day_off(date(2026, 1, 12)) == 1
        assert rule.day_off(date(2026, 1, 19)) == 2

    def test_wraps_after_saturday(self, rule):
        assert rule.day_off(date(2026, 2, 9)) == 5
        assert rule.day_off(date(2026, 2, 16)) == 0

    def test_start_day_offsets_cycle(self):
        rule = FixedRotatingShift(start_day=5, reference_monday=date(2026, 1, 5))
        assert rule.day_off(date(2026, 1, 5)) == 5
        assert rule.day_off(date(2026, 1, 12)) == 0

    def test_inactive_before_anchor_or_unset(self, rule):
        assert rule.day_off(date(2025, 12, 29)) is None
        assert FixedRotatingShift().day_off(date(2026, 1, 19)) is None
