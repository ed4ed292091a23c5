"""Tests for recurrence rule use cases"""
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest

from cashflow.application.commitments import AddCommitmentUseCase, GetCommitmentsUseCase
from cashflow.application.recurrence_rules import (
    AddRecurrenceRuleUseCase,
    DeleteRecurrenceRuleUseCase,
    ListRecurrenceRulesUseCase,
    UpdateRecurrenceRuleUseCase,
)
from cashflow.domain.errors import NotFoundError, StorageError, ValidationError


def _add(store, **overrides):
    fields = dict(
        title="Energía", amount="1000000", frequency="monthly",
        start_date="2025-01-20", category="Servicios Públicos", rule_id="e1",
    )
    fields.update(overrides)
    return AddRecurrenceRuleUseCase(store).execute(**fields)


class TestAddRule:
    def test_round_trip(self, store):
        _add(store, interval=2, end_date="2025-12-31", description="Enel")

        [rule] = ListRecurrenceRulesUseCase(store).execute()
        assert rule.id == "e1"
        assert rule.amount == Decimal("1000000")
        assert rule.interval == 2
        assert rule.day_to_send == 20
        assert rule.end_date == date(2025, 12, 31)
        assert rule.description == "Enel"
        assert rule.active is True

    def test_invalid_rule_writes_nothing(self, store):
        with pytest.raises(ValidationError):
            _add(store, frequency="weekly", day_to_send=9)
        assert ListRecurrenceRulesUseCase(store).execute() == []

    def test_listed_by_id(self, store):
        _add(store, rule_id="b")
        _add(store, rule_id="a")
        assert [r.id for r in ListRecurrenceRulesUseCase(store).execute()] == ["a", "b"]

    def test_duplicate_id_is_rejected(self, store):
        _add(store)
        with pytest.raises(StorageError):
            _add(store, title="Gas")
        assert [r.title for r in ListRecurrenceRulesUseCase(store).execute()] == ["Energía"]


class TestUpdateRule:
    def test_partial_update(self, store):
        _add(store)

        with patch("cashflow.application.recurrence_rules.now_ms", return_value=5000):
            UpdateRecurrenceRuleUseCase(store).execute("e1", amount="1200000", active=False)

        rule = store.get_rule("e1")
        assert rule.amount == Decimal("1200000")
        assert rule.active is False
        assert rule.title == "Energía"
        assert rule.updated_at == 5000

    def test_combined_state_is_validated(self, store):
        _add(store)

        # day 20 is not a weekday
        with pytest.raises(ValidationError, match="0..6"):
            UpdateRecurrenceRuleUseCase(store).execute("e1", frequency="weekly")
        assert store.get_rule("e1").frequency == "monthly"

    def test_unknown_rule_is_rejected(self, store):
        with pytest.raises(NotFoundError, match="missing"):
            UpdateRecurrenceRuleUseCase(store).execute("missing", title="x")
        assert store.get_rule("missing") is None

    def test_null_for_required_field_is_rejected(self, store):
        _add(store)

        for field in ("title", "category", "active", "start_date", "frequency"):
            with pytest.raises(ValidationError, match="cannot be null"):
                UpdateRecurrenceRuleUseCase(store).execute("e1", **{field: None})

        rule = store.get_rule("e1")
        assert rule.title == "Energía"
        assert rule.active is True

    def test_end_date_can_be_cleared(self, store):
        _add(store, end_date="2025-12-31")

        UpdateRecurrenceRuleUseCase(store).execute("e1", end_date=None)

        assert store.get_rule("e1").end_date is None

    def test_only_future_expansion_changes(self, store, settings):
        _add(store)
        AddCommitmentUseCase(store).execute(
            title="Energía", amount="1000000", due_date="2025-01-20",
            recurrence_rule_id="e1", commitment_id="jan",
        )

        UpdateRecurrenceRuleUseCase(store).execute("e1", amount="1100000")

        merged = GetCommitmentsUseCase(store, settings).execute("2025-01-01", "2025-02-28")
        assert [(c.id, c.amount) for c in merged] == [
            ("jan", Decimal("1000000")),
            ("projected-e1-2025-02-20", Decimal("1100000")),
        ]


class TestDeleteRule:
    def test_commitments_survive(self, store, settings):
        _add(store)
        AddCommitmentUseCase(store).execute(
            title="Energía", amount=1, due_date="2025-01-20", recurrence_rule_id="e1", commitment_id="jan",
        )

        DeleteRecurrenceRuleUseCase(store).execute("e1")

        assert ListRecurrenceRulesUseCase(store).execute() == []
        merged = GetCommitmentsUseCase(store, settings).execute("2025-01-01", "2025-03-31")
        assert [c.id for c in merged] == ["jan"]
