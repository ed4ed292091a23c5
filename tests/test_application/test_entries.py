"""Tests for entry creation with recurrence (both store backends)"""
from datetime import date
from unittest.mock import patch

import pytest

from cashflow.application.commitments import GetCommitmentsUseCase
from cashflow.application.entries import CreateEntryWithRecurrenceUseCase
from cashflow.domain.commitment import GENERATED_DESCRIPTION
from cashflow.domain.errors import ValidationError


@pytest.fixture
def frozen_today():
    with patch("cashflow.application.entries.today", return_value=date(2025, 1, 10)):
        yield


class TestSingleEntry:
    def test_non_recurring_writes_one_commitment(self, store, settings):
        created = CreateEntryWithRecurrenceUseCase(store, settings).execute(
            title="Compra hielo", amount="85000", date="2025-01-12", category="Insumos",
        )

        assert created.rule_id is None
        assert created.generated_count == 0
        assert [c.id for c in store.list_commitments()] == [created.commitment_id]
        assert store.list_rules() == []

    def test_recurring_flag_without_frequency_is_single(self, store, settings):
        created = CreateEntryWithRecurrenceUseCase(store, settings).execute(
            title="Compra", amount=1, date="2025-01-12", is_recurring=True,
        )

        assert created.rule_id is None
        assert store.list_rules() == []


class TestRecurringEntry:
    def test_monthly_entry_materializes_up_to_horizon(self, store, settings, frozen_today):
        created = CreateEntryWithRecurrenceUseCase(store, settings).execute(
            title="Banco Pichincha", amount=1027000, date="2025-01-15",
            category="Obligaciones Financieras", status="paid",
            is_recurring=True, frequency="monthly",
        )

        # horizon: 2025-01-10 + 6 months = 2025-07-10
        assert created.generated_count == 5
        commitments = store.list_commitments()
        assert [c.due_date for c in commitments] == [
            date(2025, 1, 15), date(2025, 2, 15), date(2025, 3, 15),
            date(2025, 4, 15), date(2025, 5, 15), date(2025, 6, 15),
        ]
        assert all(c.recurrence_rule_id == created.rule_id for c in commitments)

        origin, future = commitments[0], commitments[1:]
        assert origin.id == created.commitment_id
        assert origin.status == "paid"
        assert all(c.status == "pending" for c in future)
        assert all(c.description == GENERATED_DESCRIPTION for c in future)

        rule = store.get_rule(created.rule_id)
        assert rule.day_to_send == 15
        assert rule.start_date == date(2025, 1, 15)
        assert rule.last_generated_date == date(2025, 6, 15)

    def test_weekly_entry_uses_entry_weekday(self, store, settings, frozen_today):
        created = CreateEntryWithRecurrenceUseCase(store, settings).execute(
            title="Vie Musica", amount=350000, date="2025-01-10",
            is_recurring=True, frequency="weekly", interval=2,
        )

        rule = store.get_rule(created.rule_id)
        assert rule.day_to_send == 5  # Friday
        dates = [c.due_date for c in store.list_commitments()]
        assert dates[:3] == [date(2025, 1, 10), date(2025, 1, 24), date(2025, 2, 7)]
        assert dates[-1] == rule.last_generated_date

    def test_materialized_slots_are_not_projected_again(self, store, settings, frozen_today):
        CreateEntryWithRecurrenceUseCase(store, settings).execute(
            title="Agua", amount=450000, date="2025-01-20", is_recurring=True, frequency="monthly",
        )

        merged = GetCommitmentsUseCase(store, settings).execute("2025-01-01", "2025-06-30")

        assert len(merged) == 6
        assert not any(c.is_projected for c in merged)

    def test_entry_beyond_horizon_has_no_future(self, store, settings, frozen_today):
        created = CreateEntryWithRecurrenceUseCase(store, settings).execute(
            title="Seguros", amount=1, date="2025-12-15", is_recurring=True, frequency="yearly",
        )

        assert created.generated_count == 0
        assert store.get_rule(created.rule_id).last_generated_date == date(2025, 12, 15)

    def test_invalid_frequency_writes_nothing(self, store, settings, frozen_today):
        with pytest.raises(ValidationError):
            CreateEntryWithRecurrenceUseCase(store, settings).execute(
                title="Agua", amount=1, date="2025-01-20", is_recurring=True, frequency="daily",
            )

        assert store.list_rules() == []
        assert store.list_commitments() == []


class TestAtomicity:
    def test_failure_midway_leaves_no_rows(self, store, settings, frozen_today):
        with patch.object(store, "update_rule", side_effect=RuntimeError("backend down")):
            with pytest.raises(RuntimeError, match="backend down"):
                CreateEntryWithRecurrenceUseCase(store, settings).execute(
                    title="Agua", amount=1, date="2025-01-20", is_recurring=True, frequency="monthly",
                )

        assert store.list_rules() == []
        assert store.list_commitments() == []

    def test_failure_on_a_future_insert_leaves_no_rows(self, store, settings, frozen_today):
        real_insert = store.insert_commitment
        calls = []

        def flaky_insert(commitment):
            calls.append(commitment.id)
            if len(calls) == 3:
                raise RuntimeError("write rejected")
            return real_insert(commitment)

        with patch.object(store, "insert_commitment", side_effect=flaky_insert):
            with pytest.raises(RuntimeError):
                CreateEntryWithRecurrenceUseCase(store, settings).execute(
                    title="Agua", amount=1, date="2025-01-20", is_recurring=True, frequency="monthly",
                )

        assert store.list_rules() == []
        assert store.list_commitments() == []
