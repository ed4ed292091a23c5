"""Tests for the monthly budget summary"""
from datetime import date
from decimal import Decimal

import pytest

from cashflow.application.budget_summary import MonthlySummaryUseCase, parse_month, summarize
from cashflow.application.commitments import AddCommitmentUseCase
from cashflow.application.recurrence_rules import AddRecurrenceRuleUseCase
from cashflow.domain.commitment import Commitment
from cashflow.domain.errors import ValidationError


def _c(commitment_id, due, amount, status, category):
    return Commitment.create(
        title=commitment_id, amount=amount, due_date=due, status=status,
        category=category, commitment_id=commitment_id, now=0,
    )


class TestSummarize:
    def test_totals_categories_and_weeks(self):
        items = [
            _c("a", date(2025, 1, 6), 100, "paid", "Arrendamiento"),
            _c("b", date(2025, 1, 7), 50, "pending", "Servicios Públicos"),
            _c("c", date(2025, 1, 20), 30, "overdue", ""),
        ]

        s = summarize(items, 2025, 1)

        assert s.month == "2025-01"
        assert s.total == Decimal("180")
        assert s.paid == Decimal("100")
        assert s.pending == Decimal("80")
        assert s.overdue == Decimal("30")
        assert s.by_category == [
            ("Arrendamiento", Decimal("100")),
            ("Servicios Públicos", Decimal("50")),
            ("Sin Categoría", Decimal("30")),
        ]
        # January 2025 starts on a Wednesday: first bucket opens Monday 2024-12-30
        assert [w.week_start for w in s.weeks] == [
            date(2024, 12, 30), date(2025, 1, 6), date(2025, 1, 13), date(2025, 1, 20), date(2025, 1, 27),
        ]
        assert [w.amount for w in s.weeks] == [0, 150, 0, 30, 0]
        assert s.weeks[0].label == "Sem 1"

    def test_empty_month(self):
        s = summarize([], 2025, 2)
        assert s.total == 0
        assert s.by_category == []
        # Feb 2025 starts on a Saturday: buckets open Mondays Jan 27 .. Feb 24
        assert len(s.weeks) == 5


class TestParseMonth:
    def test_valid(self):
        assert parse_month("2025-03") == (2025, 3)

    @pytest.mark.parametrize("bad", ["2025-13", "march", "2025-1-1"])
    def test_invalid(self, bad):
        with pytest.raises(ValidationError):
            parse_month(bad)


class TestMonthlySummaryUseCase:
    def test_includes_projections(self, store, settings):
        AddRecurrenceRuleUseCase(store).execute(
            title="Arriendo", amount=2482000, frequency="monthly", start_date="2025-01-12",
            category="Arrendamiento", rule_id="r1",
        )
        AddCommitmentUseCase(store).execute(
            title="Gas", amount=350000, due_date="2025-02-20", status="paid", category="Servicios Públicos",
        )

        s = MonthlySummaryUseCase(store, settings).execute("2025-02")

        assert s.paid == Decimal("350000")
        assert s.pending == Decimal("2482000")
        assert s.total == Decimal("2832000")
        assert s.by_category[0] == ("Arrendamiento", Decimal("2482000"))
