"""
Document-style backend for the budget store.

Rows are kept as plain dicts keyed by id, the way a document database holds
them. There is no native multi-document transaction, so `atomic()` takes a
snapshot and restores it when the block fails (compensating cleanup).
"""
import copy
import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterator, Optional

from cashflow.domain.commitment import Commitment
from cashflow.domain.errors import StorageError
from cashflow.domain.execution import ExecutionLog, WeeklyAvailability
from cashflow.domain.recurrence_rule import RecurrenceRule
from cashflow.infrastructure.repositories.base import BudgetStore
from cashflow.infrastructure.repositories.mappers import (
    availability_from_row, availability_to_row,
    commitment_from_row, commitment_patch_to_columns, commitment_to_row,
    execution_log_from_row, execution_log_to_row,
    rule_from_row, rule_patch_to_columns, rule_to_row,
)

logger = logging.getLogger(__name__)

_COLLECTIONS = ("_rules", "_commitments", "_availability", "_execution_logs")


class InMemoryBudgetStore(BudgetStore):
    def __init__(self):
        self._rules: Dict[str, Dict[str, Any]] = {}
        self._commitments: Dict[str, Dict[str, Any]] = {}
        self._availability: Dict[str, Dict[str, Any]] = {}
        self._execution_logs: Dict[str, Dict[str, Any]] = {}
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator["InMemoryBudgetStore"]:
        outermost = self._depth == 0
        snapshot = None
        if outermost:
            snapshot = {name: copy.deepcopy(getattr(self, name)) for name in _COLLECTIONS}
        self._depth += 1
        try:
            yield self
        except Exception:
            if outermost:
                logger.warning("Atomic block failed, restoring %d rule(s) and %d commitment(s)",
                               len(snapshot["_rules"]), len(snapshot["_commitments"]))
                for name, rows in snapshot.items():
                    setattr(self, name, rows)
            raise
        finally:
            self._depth -= 1

    @staticmethod
    def _add(collection: Dict[str, Dict[str, Any]], row: Dict[str, Any], kind: str) -> str:
        if row["id"] in collection:
            raise StorageError(f"Duplicate {kind} id: {row['id']}")
        collection[row["id"]] = row
        return row["id"]

    # --- Commitments ---

    def list_commitments(
        self,
        due_date_from: Optional[date] = None,
        due_date_to: Optional[date] = None,
    ) -> list[Commitment]:
        rows = [
            row for row in self._commitments.values()
            if (due_date_from is None or row["due_date"] >= due_date_from)
            and (due_date_to is None or row["due_date"] <= due_date_to)
        ]
        rows.sort(key=lambda r: (r["due_date"], r["id"]))
        return [commitment_from_row(r) for r in rows]

    def get_commitment(self, commitment_id: str) -> Optional[Commitment]:
        row = self._commitments.get(commitment_id)
        return commitment_from_row(row) if row else None

    def insert_commitment(self, commitment: Commitment) -> str:
        return self._add(self._commitments, commitment_to_row(commitment), "commitment")

    def update_commitment(self, commitment_id: str, patch: Dict[str, Any]) -> None:
        row = self._commitments.get(commitment_id)
        if row is not None:
            row.update(commitment_patch_to_columns(patch))

    def delete_commitment(self, commitment_id: str) -> None:
        self._commitments.pop(commitment_id, None)

    # --- Recurrence rules ---

    def list_rules(self) -> list[RecurrenceRule]:
        return [rule_from_row(self._rules[k]) for k in sorted(self._rules)]

    def get_rule(self, rule_id: str) -> Optional[RecurrenceRule]:
        row = self._rules.get(rule_id)
        return rule_from_row(row) if row else None

    def insert_rule(self, rule: RecurrenceRule) -> str:
        return self._add(self._rules, rule_to_row(rule), "rule")

    def update_rule(self, rule_id: str, patch: Dict[str, Any]) -> None:
        row = self._rules.get(rule_id)
        if row is not None:
            row.update(rule_patch_to_columns(patch))

    def delete_rule(self, rule_id: str) -> None:
        self._rules.pop(rule_id, None)

    # --- Execution ---

    def get_availability(self, week_start_date: date) -> Optional[WeeklyAvailability]:
        for row in self._availability.values():
            if row["week_start_date"] == week_start_date:
                return availability_from_row(row)
        return None

    def insert_availability(self, availability: WeeklyAvailability) -> str:
        if self.get_availability(availability.week_start_date) is not None:
            raise StorageError(f"Availability already stored for week {availability.week_start_date}")
        return self._add(self._availability, availability_to_row(availability), "availability")

    def update_availability(self, availability_id: str, patch: Dict[str, Any]) -> None:
        row = self._availability.get(availability_id)
        if row is not None:
            row.update(patch)

    def list_execution_logs(self) -> list[ExecutionLog]:
        rows = sorted(
            self._execution_logs.values(),
            key=lambda r: (r["execution_date"], r["created_at"]),
            reverse=True,
        )
        return [execution_log_from_row(r) for r in rows]

    def insert_execution_log(self, log: ExecutionLog) -> str:
        return self._add(self._execution_logs, execution_log_to_row(log), "execution log")
