"""
Abstract storage interface for rules, commitments and execution records.

The reconciliation engine talks only to these interfaces, so the same
algorithm runs unchanged against a relational database or a document store.
Backends are injected into the use cases.
"""
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date
from typing import Any, Dict, Optional

from cashflow.domain.commitment import Commitment
from cashflow.domain.execution import ExecutionLog, WeeklyAvailability
from cashflow.domain.recurrence_rule import RecurrenceRule


class CommitmentRepository(ABC):
    """Persistence of real commitments. Projections are never stored."""

    @abstractmethod
    def list_commitments(
        self,
        due_date_from: Optional[date] = None,
        due_date_to: Optional[date] = None,
    ) -> list[Commitment]:
        """
        List commitments, optionally bounded by due date (inclusive).

        Returns:
            Commitments ordered by due date

        Raises:
            StorageError: if the backend read fails
        """

    @abstractmethod
    def get_commitment(self, commitment_id: str) -> Optional[Commitment]:
        pass

    @abstractmethod
    def insert_commitment(self, commitment: Commitment) -> str:
        """Store a new commitment and return its id."""

    @abstractmethod
    def update_commitment(self, commitment_id: str, patch: Dict[str, Any]) -> None:
        """
        Apply a partial update (domain field names). Fields not in `patch`
        are left untouched. Unknown ids are ignored.
        """

    @abstractmethod
    def delete_commitment(self, commitment_id: str) -> None:
        """Hard delete."""


class RuleRepository(ABC):
    """Persistence of recurrence rules."""

    @abstractmethod
    def list_rules(self) -> list[RecurrenceRule]:
        pass

    @abstractmethod
    def get_rule(self, rule_id: str) -> Optional[RecurrenceRule]:
        pass

    @abstractmethod
    def insert_rule(self, rule: RecurrenceRule) -> str:
        pass

    @abstractmethod
    def update_rule(self, rule_id: str, patch: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def delete_rule(self, rule_id: str) -> None:
        """Hard delete. Commitments that reference the rule are kept."""


class ExecutionRepository(ABC):
    """Weekly account availability and daily execution logs."""

    @abstractmethod
    def get_availability(self, week_start_date: date) -> Optional[WeeklyAvailability]:
        """Snapshot stored for the week starting on `week_start_date` (a Monday)."""

    @abstractmethod
    def insert_availability(self, availability: WeeklyAvailability) -> str:
        pass

    @abstractmethod
    def update_availability(self, availability_id: str, patch: Dict[str, Any]) -> None:
        """`patch` holds balance column names and `updated_at`."""

    @abstractmethod
    def list_execution_logs(self) -> list[ExecutionLog]:
        """Newest execution date first."""

    @abstractmethod
    def insert_execution_log(self, log: ExecutionLog) -> str:
        pass


class BudgetStore(CommitmentRepository, RuleRepository, ExecutionRepository):
    """
    All repositories over one backend, plus a unit of work.

    Writes issued inside `atomic()` succeed or fail together; nested blocks
    join the outermost one. Inserting an id that already exists raises
    StorageError on every backend.
    """

    @abstractmethod
    def atomic(self) -> AbstractContextManager["BudgetStore"]:
        pass
