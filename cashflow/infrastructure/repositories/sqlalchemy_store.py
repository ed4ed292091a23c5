"""
Relational backend for the budget store (SQLAlchemy session).
"""
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cashflow.domain.commitment import Commitment
from cashflow.domain.errors import StorageError
from cashflow.domain.execution import ExecutionLog, WeeklyAvailability
from cashflow.domain.recurrence_rule import RecurrenceRule
from cashflow.infrastructure.db.models import (
    CommitmentModel, ExecutionLogModel, RecurrenceRuleModel, WeeklyAvailabilityModel,
)
from cashflow.infrastructure.repositories.base import BudgetStore
from cashflow.infrastructure.repositories.mappers import (
    availability_from_row, availability_to_row,
    commitment_from_row, commitment_patch_to_columns, commitment_to_row,
    execution_log_from_row, execution_log_to_row,
    rule_from_row, rule_patch_to_columns, rule_to_row,
)


class SqlAlchemyBudgetStore(BudgetStore):
    """
    Budget store over one SQLAlchemy session.

    Writes flush inside the current unit of work; the outermost `atomic()`
    commits or rolls back. A write issued outside `atomic()` is its own unit.
    Driver errors surface as StorageError.
    """

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator["SqlAlchemyBudgetStore"]:
        outermost = self._depth == 0
        self._depth += 1
        try:
            yield self
            if outermost:
                self.db.commit()
        except SQLAlchemyError as e:
            if outermost:
                self.db.rollback()
            raise StorageError(str(e)) from e
        except Exception:
            if outermost:
                self.db.rollback()
            raise
        finally:
            self._depth -= 1

    @contextmanager
    def _reading(self) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    # --- Commitments ---

    def list_commitments(
        self,
        due_date_from: Optional[date] = None,
        due_date_to: Optional[date] = None,
    ) -> list[Commitment]:
        with self._reading():
            query = self.db.query(CommitmentModel)
            if due_date_from is not None:
                query = query.filter(CommitmentModel.due_date >= due_date_from)
            if due_date_to is not None:
                query = query.filter(CommitmentModel.due_date <= due_date_to)
            rows = query.order_by(CommitmentModel.due_date.asc(), CommitmentModel.id.asc()).all()
        return [commitment_from_row(r) for r in rows]

    def get_commitment(self, commitment_id: str) -> Optional[Commitment]:
        with self._reading():
            row = self.db.get(CommitmentModel, commitment_id)
        return commitment_from_row(row) if row else None

    def insert_commitment(self, commitment: Commitment) -> str:
        with self.atomic():
            self.db.add(CommitmentModel(**commitment_to_row(commitment)))
            self.db.flush()
        return commitment.id

    def update_commitment(self, commitment_id: str, patch: Dict[str, Any]) -> None:
        with self.atomic():
            row = self.db.get(CommitmentModel, commitment_id)
            if row is None:
                return
            for column, value in commitment_patch_to_columns(patch).items():
                setattr(row, column, value)
            self.db.flush()

    def delete_commitment(self, commitment_id: str) -> None:
        with self.atomic():
            self.db.query(CommitmentModel).filter(
                CommitmentModel.id == commitment_id
            ).delete(synchronize_session=False)

    # --- Recurrence rules ---

    def list_rules(self) -> list[RecurrenceRule]:
        with self._reading():
            rows = self.db.query(RecurrenceRuleModel).order_by(RecurrenceRuleModel.id.asc()).all()
        return [rule_from_row(r) for r in rows]

    def get_rule(self, rule_id: str) -> Optional[RecurrenceRule]:
        with self._reading():
            row = self.db.get(RecurrenceRuleModel, rule_id)
        return rule_from_row(row) if row else None

    def insert_rule(self, rule: RecurrenceRule) -> str:
        with self.atomic():
            self.db.add(RecurrenceRuleModel(**rule_to_row(rule)))
            self.db.flush()
        return rule.id

    def update_rule(self, rule_id: str, patch: Dict[str, Any]) -> None:
        with self.atomic():
            row = self.db.get(RecurrenceRuleModel, rule_id)
            if row is None:
                return
            for column, value in rule_patch_to_columns(patch).items():
                setattr(row, column, value)
            self.db.flush()

    def delete_rule(self, rule_id: str) -> None:
        with self.atomic():
            self.db.query(RecurrenceRuleModel).filter(
                RecurrenceRuleModel.id == rule_id
            ).delete(synchronize_session=False)

    # --- Execution ---

    def get_availability(self, week_start_date: date) -> Optional[WeeklyAvailability]:
        with self._reading():
            row = self.db.query(WeeklyAvailabilityModel).filter(
                WeeklyAvailabilityModel.week_start_date == week_start_date
            ).one_or_none()
        return availability_from_row(row) if row else None

    def insert_availability(self, availability: WeeklyAvailability) -> str:
        with self.atomic():
            self.db.add(WeeklyAvailabilityModel(**availability_to_row(availability)))
            self.db.flush()
        return availability.id

    def update_availability(self, availability_id: str, patch: Dict[str, Any]) -> None:
        with self.atomic():
            row = self.db.get(WeeklyAvailabilityModel, availability_id)
            if row is None:
                return
            for column, value in patch.items():
                setattr(row, column, value)
            self.db.flush()

    def list_execution_logs(self) -> list[ExecutionLog]:
        with self._reading():
            rows = self.db.query(ExecutionLogModel).order_by(
                ExecutionLogModel.execution_date.desc(), ExecutionLogModel.created_at.desc()
            ).all()
        return [execution_log_from_row(r) for r in rows]

    def insert_execution_log(self, log: ExecutionLog) -> str:
        with self.atomic():
            self.db.add(ExecutionLogModel(**execution_log_to_row(log)))
            self.db.flush()
        return log.id
