"""Tests for the budget store backends"""
from datetime import date
from decimal import Decimal

import pytest

from cashflow.domain.commitment import Commitment
from cashflow.domain.errors import StorageError
from cashflow.domain.execution import AccountBalances, ExecutionLog, WeeklyAvailability
from cashflow.domain.recurrence_rule import RecurrenceRule
from cashflow.infrastructure.db.models import CommitmentModel, RecurrenceRuleModel


def _rule(rule_id="r1", **kwargs):
    fields = dict(title="Internet", amount="170000", frequency="monthly", start_date="2025-01-20", rule_id=rule_id)
    fields.update(kwargs)
    return RecurrenceRule.create(**fields)


def _commitment(commitment_id, due, **kwargs):
    fields = dict(title="Internet", amount="170000", due_date=due, commitment_id=commitment_id, now=1)
    fields.update(kwargs)
    return Commitment.create(**fields)


class TestCommitmentStorage:
    def test_range_filter_is_inclusive_and_ordered(self, store):
        store.insert_commitment(_commitment("b", "2025-01-31"))
        store.insert_commitment(_commitment("a", "2025-01-31"))
        store.insert_commitment(_commitment("c", "2025-01-01"))
        store.insert_commitment(_commitment("d", "2025-02-01"))

        items = store.list_commitments(due_date_from=date(2025, 1, 1), due_date_to=date(2025, 1, 31))

        assert [c.id for c in items] == ["c", "a", "b"]

    def test_partial_patch(self, store):
        store.insert_commitment(_commitment("c1", "2025-01-20", provider_name="ETB", contact_info="601 000"))

        store.update_commitment("c1", {"status": "paid", "paid_date": date(2025, 1, 19)})

        [c] = store.list_commitments()
        assert c.status == "paid"
        assert c.paid_date == date(2025, 1, 19)
        assert c.provider_name == "ETB"
        assert c.contact_info == "601 000"
        assert c.amount == Decimal("170000")

    def test_missing_ids_are_ignored(self, store):
        store.update_commitment("nope", {"status": "paid"})
        store.delete_commitment("nope")
        assert store.list_commitments() == []

    def test_stored_rows_are_never_projected(self, store):
        store.insert_commitment(_commitment("c1", "2025-01-20"))
        assert store.list_commitments()[0].is_projected is False

    def test_get_by_id(self, store):
        store.insert_commitment(_commitment("c1", "2025-01-20"))

        assert store.get_commitment("c1").due_date == date(2025, 1, 20)
        assert store.get_commitment("nope") is None

    def test_duplicate_id_is_a_storage_error(self, store):
        store.insert_commitment(_commitment("c1", "2025-01-20"))

        with pytest.raises(StorageError):
            store.insert_commitment(_commitment("c1", "2025-03-01", title="Gas"))

        [c] = store.list_commitments()
        assert c.title == "Internet"
        assert c.due_date == date(2025, 1, 20)


class TestRuleStorage:
    def test_round_trip(self, store):
        rule = _rule(interval=3, end_date="2025-12-31", last_generated_date="2025-02-20")
        store.insert_rule(rule)

        assert store.get_rule("r1") == rule

    def test_patch_renamed_column(self, store):
        store.insert_rule(_rule())

        store.update_rule("r1", {"interval": 2, "last_generated_date": date(2025, 3, 20)})

        rule = store.get_rule("r1")
        assert rule.interval == 2
        assert rule.last_generated_date == date(2025, 3, 20)

    def test_delete(self, store):
        store.insert_rule(_rule())
        store.delete_rule("r1")
        assert store.get_rule("r1") is None
        assert store.list_rules() == []

    def test_duplicate_id_is_a_storage_error(self, store):
        store.insert_rule(_rule())

        with pytest.raises(StorageError):
            store.insert_rule(_rule(title="Gas"))

        assert [r.title for r in store.list_rules()] == ["Internet"]


class TestExecutionStorage:
    def test_availability_by_week(self, store):
        balances = AccountBalances.create(cta_corriente="1500000", efectivo="200000,50")
        availability = WeeklyAvailability.create("2025-01-06", balances, now=1)
        store.insert_availability(availability)

        assert store.get_availability(date(2025, 1, 6)) == availability
        assert store.get_availability(date(2025, 1, 13)) is None
        assert availability.balances.total_available == Decimal("1700000.50")

    def test_availability_update(self, store):
        availability = WeeklyAvailability.create("2025-01-06", AccountBalances.create(efectivo=100), now=1)
        store.insert_availability(availability)

        store.update_availability(availability.id, {"efectivo": Decimal("50"), "total_available": Decimal("50"), "updated_at": 2})

        saved = store.get_availability(date(2025, 1, 6))
        assert saved.balances.efectivo == Decimal("50")
        assert saved.balances.total_available == Decimal("50")
        assert saved.created_at == 1
        assert saved.updated_at == 2

    def test_one_availability_per_week(self, store):
        store.insert_availability(WeeklyAvailability.create("2025-01-06", AccountBalances.create(efectivo=1), now=1))

        with pytest.raises(StorageError):
            store.insert_availability(WeeklyAvailability.create("2025-01-08", AccountBalances.create(efectivo=2), now=2))

        assert store.get_availability(date(2025, 1, 6)).balances.efectivo == Decimal("1")

    def test_logs_newest_first(self, store):
        state = AccountBalances.create(cta_corriente="1000", cta_ahorros_j="500")
        older = ExecutionLog.create("2025-01-07", "2025-01-06", state, "300", "1200", 2, now=10)
        newer = ExecutionLog.create("2025-01-09", "2025-01-06", state, "100", "1100", 1, now=5)
        store.insert_execution_log(older)
        store.insert_execution_log(newer)

        logs = store.list_execution_logs()

        assert [log.id for log in logs] == [newer.id, older.id]
        assert logs[1] == older
        assert logs[1].initial_state.cta_ahorros_j == Decimal("500")
        assert logs[1].initial_state.total_available == Decimal("1500")


class TestAtomic:
    def test_rolls_back_whole_block(self, store):
        with pytest.raises(RuntimeError):
            with store.atomic():
                store.insert_rule(_rule())
                store.insert_commitment(_commitment("c1", "2025-01-20", recurrence_rule_id="r1"))
                raise RuntimeError("abort")

        assert store.list_rules() == []
        assert store.list_commitments() == []

    def test_nested_blocks_commit_with_outermost(self, store):
        with store.atomic():
            store.insert_rule(_rule())
            with store.atomic():
                store.insert_commitment(_commitment("c1", "2025-01-20"))

        assert len(store.list_rules()) == 1
        assert len(store.list_commitments()) == 1

    def test_earlier_units_survive_a_failed_one(self, store):
        store.insert_commitment(_commitment("kept", "2025-01-10"))

        with pytest.raises(RuntimeError):
            with store.atomic():
                store.insert_commitment(_commitment("lost", "2025-01-11"))
                raise RuntimeError("abort")

        assert [c.id for c in store.list_commitments()] == ["kept"]


class TestSqlAlchemyStore:
    def test_columns(self, sql_store, db_session):
        sql_store.insert_rule(_rule(interval=2))

        row = db_session.get(RecurrenceRuleModel, "r1")
        assert row.interval_count == 2
        assert row.day_to_send == 20

    def test_driver_errors_become_storage_errors(self, sql_store):
        sql_store.insert_commitment(_commitment("c1", "2025-01-20"))

        with pytest.raises(StorageError):
            sql_store.insert_commitment(_commitment("c1", "2025-01-21"))

        # the session is usable again and the first row is intact
        [c] = sql_store.list_commitments()
        assert c.due_date == date(2025, 1, 20)

    def test_commits_outside_explicit_block(self, sql_store, db_session):
        sql_store.insert_commitment(_commitment("c1", "2025-01-20"))
        db_session.rollback()

        assert db_session.query(CommitmentModel).count() == 1
