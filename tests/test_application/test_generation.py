"""Tests for eager generation and bulk seeding"""
from datetime import date
from unittest.mock import patch

import pytest

from cashflow.application.commitments import (
    GetCommitmentsUseCase, PayCommitmentUseCase, UpdateCommitmentUseCase,
)
from cashflow.application.generation import GenerateFromRulesUseCase
from cashflow.application.recurrence_rules import AddRecurrenceRuleUseCase
from cashflow.application.seed import (
    DEFAULT_CATALOGUE, SeedRecurringExpensesUseCase, SeedRule, seed_start_date,
)
from cashflow.domain.commitment import GENERATED_DESCRIPTION
from cashflow.domain.errors import NotFoundError, ValidationError


def _add_rule(store, rule_id, frequency="monthly", start="2025-01-15", **kwargs):
    return AddRecurrenceRuleUseCase(store).execute(
        title=rule_id, amount=1000, frequency=frequency, start_date=start, rule_id=rule_id, **kwargs,
    )


class TestGenerateFromRules:
    def test_first_run_includes_start_slot(self, store, settings):
        _add_rule(store, "m1")

        count = GenerateFromRulesUseCase(store, settings).execute("2025-03-31")

        assert count == 3
        commitments = store.list_commitments()
        assert [c.due_date for c in commitments] == [date(2025, 1, 15), date(2025, 2, 15), date(2025, 3, 15)]
        assert all(c.status == "pending" and c.description == GENERATED_DESCRIPTION for c in commitments)
        assert store.get_rule("m1").last_generated_date == date(2025, 3, 15)

    def test_second_run_continues_after_last_generated(self, store, settings):
        _add_rule(store, "m1")
        GenerateFromRulesUseCase(store, settings).execute("2025-03-31")

        assert GenerateFromRulesUseCase(store, settings).execute("2025-03-31") == 0
        assert GenerateFromRulesUseCase(store, settings).execute("2025-05-31") == 2
        assert store.get_rule("m1").last_generated_date == date(2025, 5, 15)

    def test_honors_interval(self, store, settings):
        _add_rule(store, "w1", frequency="weekly", start="2025-01-06", interval=2)

        GenerateFromRulesUseCase(store, settings).execute("2025-02-28")

        assert [c.due_date for c in store.list_commitments()] == [
            date(2025, 1, 6), date(2025, 1, 20), date(2025, 2, 3), date(2025, 2, 17),
        ]

    def test_single_rule(self, store, settings):
        _add_rule(store, "a1")
        _add_rule(store, "b1")

        GenerateFromRulesUseCase(store, settings).execute("2025-01-31", rule_id="b1")

        assert {c.recurrence_rule_id for c in store.list_commitments()} == {"b1"}
        assert store.get_rule("a1").last_generated_date is None

    def test_unknown_rule(self, store, settings):
        with pytest.raises(NotFoundError, match="not found"):
            GenerateFromRulesUseCase(store, settings).execute("2025-01-31", rule_id="nope")

    def test_inactive_rules_are_skipped(self, store, settings):
        _add_rule(store, "m1", active=False)

        assert GenerateFromRulesUseCase(store, settings).execute("2025-12-31") == 0
        assert store.list_commitments() == []

    def test_default_limit_is_horizon(self, store, settings):
        _add_rule(store, "m1")

        with patch("cashflow.application.generation.today", return_value=date(2025, 1, 1)):
            count = GenerateFromRulesUseCase(store, settings).execute()

        # 2025-01-01 + 6 months = 2025-07-01
        assert count == 6

    def test_paid_projection_is_not_generated_again(self, store, settings):
        _add_rule(store, "m1")
        PayCommitmentUseCase(store).execute("projected-m1-2025-02-15", paid_date="2025-02-14")

        count = GenerateFromRulesUseCase(store, settings).execute("2025-03-31")

        assert count == 2
        merged = GetCommitmentsUseCase(store, settings).execute("2025-01-01", "2025-03-31")
        signatures = [c.signature for c in merged]
        assert len(signatures) == len(set(signatures))
        assert not any(c.is_projected for c in merged)
        feb = [c for c in merged if c.due_date.month == 2]
        assert [c.status for c in feb] == ["paid"]
        assert store.get_rule("m1").last_generated_date == date(2025, 3, 15)

    def test_moved_real_counts_for_its_own_slot(self, store, settings):
        _add_rule(store, "m1")
        GenerateFromRulesUseCase(store, settings).execute("2025-01-31")
        [jan] = store.list_commitments()
        # postponed to the 5th of February, still January's payment
        UpdateCommitmentUseCase(store).execute(jan.id, due_date="2025-02-05")

        assert GenerateFromRulesUseCase(store, settings).execute("2025-02-28") == 1
        assert [c.due_date for c in store.list_commitments()] == [date(2025, 2, 5), date(2025, 2, 15)]


class TestSeedStartDate:
    def test_weekly_next_matching_weekday(self):
        friday = date(2025, 1, 10)
        assert seed_start_date(SeedRule("Karaoke", 1, "x", "weekly", 1), friday) == date(2025, 1, 13)

    def test_weekly_same_weekday_moves_a_week(self):
        friday = date(2025, 1, 10)
        assert seed_start_date(SeedRule("Vie", 1, "x", "weekly", 5), friday) == date(2025, 1, 17)

    def test_monthly_anchor_in_current_month(self):
        assert seed_start_date(SeedRule("Nómina", 1, "x", "monthly", 30), date(2025, 2, 10)) == date(2025, 2, 28)
        assert seed_start_date(SeedRule("Agua", 1, "x", "monthly", 20), date(2025, 2, 10)) == date(2025, 2, 20)


class TestSeedRecurringExpenses:
    @pytest.fixture(autouse=True)
    def frozen_today(self):
        with patch("cashflow.application.seed.today", return_value=date(2025, 1, 10)):
            yield

    def test_seeds_catalogue_and_generates(self, store, settings):
        result = SeedRecurringExpensesUseCase(store, settings).execute()

        rules = store.list_rules()
        assert result.rules_created == len(DEFAULT_CATALOGUE) == len(rules)
        assert result.commitments_generated == len(store.list_commitments())
        assert all(r.last_generated_date is not None for r in rules)

        rent = next(r for r in rules if r.title == "Arrendamiento")
        assert rent.day_to_send == 12
        assert rent.start_date == date(2025, 1, 12)
        assert rent.description == "Arrendamiento"

    def test_small_catalogue(self, store, settings):
        catalogue = (SeedRule("Agua", 450000, "Servicios Públicos", "monthly", 20),)

        result = SeedRecurringExpensesUseCase(store, settings, catalogue=catalogue).execute()

        # Jan 20 .. Jun 20, horizon 2025-07-10
        assert result.rules_created == 1
        assert result.commitments_generated == 6

    def test_refuses_when_rules_exist(self, store, settings):
        _add_rule(store, "m1")

        with pytest.raises(ValidationError, match="already exist"):
            SeedRecurringExpensesUseCase(store, settings).execute()

    def test_force_seeds_anyway(self, store, settings):
        _add_rule(store, "m1")
        catalogue = (SeedRule("Gas", 350000, "Servicios Públicos", "monthly", 20),)

        result = SeedRecurringExpensesUseCase(store, settings, catalogue=catalogue).execute(force=True)

        assert result.rules_created == 1
        assert len(store.list_rules()) == 2
        # the pre-existing rule is left alone
        assert store.get_rule("m1").last_generated_date is None
