"""Commitment use cases - merged read path, CRUD, payment and promotion of projections"""
import logging
from datetime import date, timedelta

from cashflow.config import Settings, get_settings
from cashflow.domain.commitment import (
    Commitment, STATUS_OVERDUE, STATUS_PAID, STATUS_PENDING,
    is_projection_id, parse_projection_id, strip_projected_suffix,
)
from cashflow.domain.errors import NotFoundError, ValidationError
from cashflow.domain.reconciliation import MatchTolerance, project_commitments
from cashflow.domain.recurrence import add_months
from cashflow.infrastructure.repositories.base import BudgetStore
from cashflow.utils.clock import now_ms, today
from cashflow.utils.validation import parse_iso_date, parse_optional_date

logger = logging.getLogger(__name__)


class GetCommitmentsUseCase:
    """
    Without a range: real commitments only. With a range: every scheduled
    obligation exactly once, real if recorded, projected otherwise.
    """

    def __init__(self, store: BudgetStore, settings: Settings | None = None):
        self.store = store
        self.tolerance = MatchTolerance.from_settings(settings or get_settings())

    def execute(self, start_date=None, end_date=None) -> list[Commitment]:
        start = parse_optional_date(start_date, "start_date")
        end = parse_optional_date(end_date, "end_date")
        if (start is None) != (end is None):
            raise ValidationError("start_date and end_date must be given together")
        if start is None:
            return self.store.list_commitments()
        if start > end:
            raise ValidationError("start_date must be on or before end_date")

        reals = self.store.list_commitments(due_date_from=start, due_date_to=end)
        rules = self.store.list_rules()
        return project_commitments(rules, reals, start, end, self.tolerance, now_ms())


class AddCommitmentUseCase:
    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(
        self,
        title: str,
        amount,
        due_date,
        status: str = STATUS_PENDING,
        category: str = "",
        paid_date=None,
        description: str | None = None,
        recurrence_rule_id: str | None = None,
        provider_name: str | None = None,
        contact_info: str | None = None,
        commitment_id: str | None = None,
    ) -> str:
        commitment = Commitment.create(
            title=title,
            amount=amount,
            due_date=due_date,
            status=status,
            category=category,
            paid_date=paid_date,
            description=description,
            recurrence_rule_id=recurrence_rule_id,
            provider_name=provider_name,
            contact_info=contact_info,
            commitment_id=commitment_id,
        )
        with self.store.atomic():
            return self.store.insert_commitment(commitment)


def _promote(store: BudgetStore, projected_id: str, changes: dict) -> str:
    """
    Materialize a projection: insert a real commitment for the same slot,
    carrying the rule id, with `changes` applied on top of the rule defaults.
    The projection is gone on the next read because the slot is now consumed.
    """
    rule_id, slot = parse_projection_id(projected_id)
    rule = store.get_rule(rule_id)
    if rule is None:
        raise NotFoundError(f"Recurrence rule {rule_id} not found for {projected_id}")

    fields = {
        "title": rule.title,
        "amount": rule.amount,
        "due_date": slot,
        "status": STATUS_PENDING,
        "category": rule.category,
        "description": rule.description,
        "recurrence_rule_id": rule.id,
    }
    fields.update(Commitment.patch(**changes))
    fields["title"] = strip_projected_suffix(fields["title"] or "")

    commitment = Commitment.create(**fields)
    with store.atomic():
        store.insert_commitment(commitment)
    logger.info("Promoted %s to commitment %s", projected_id, commitment.id)
    return commitment.id


class UpdateCommitmentUseCase:
    """
    Partial update. Editing a projected row promotes it to a real commitment;
    the returned id is then the id of the new record. An unknown real id
    raises NotFoundError.
    """

    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(self, commitment_id: str, **changes) -> str:
        if is_projection_id(commitment_id):
            return _promote(self.store, commitment_id, changes)

        patch = Commitment.patch(**changes)
        patch["updated_at"] = now_ms()
        with self.store.atomic():
            if self.store.get_commitment(commitment_id) is None:
                raise NotFoundError(f"Commitment {commitment_id} not found")
            self.store.update_commitment(commitment_id, patch)
        return commitment_id


class DeleteCommitmentUseCase:
    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(self, commitment_id: str) -> None:
        if is_projection_id(commitment_id):
            raise ValidationError("Projected commitments are not stored; deactivate or end the rule instead")
        with self.store.atomic():
            self.store.delete_commitment(commitment_id)


class PayCommitmentUseCase:
    """Mark a commitment paid. A projection is promoted to a paid real record."""

    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(self, commitment_id: str, paid_date=None, amount=None) -> str:
        changes = {
            "status": STATUS_PAID,
            "paid_date": parse_iso_date(paid_date, "paid_date") if paid_date else today(),
        }
        if amount is not None:
            changes["amount"] = amount
        return UpdateCommitmentUseCase(self.store).execute(commitment_id, **changes)


class GetOverdueCommitmentsUseCase:
    """
    Outstanding obligations before a date: projections (never paid) and real
    commitments still pending or overdue, over the configured look-back.
    """

    def __init__(self, store: BudgetStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings or get_settings()

    def execute(self, before=None) -> list[Commitment]:
        ref: date = parse_optional_date(before, "before") or today()
        window_start = add_months(ref, -self.settings.OVERDUE_LOOKBACK_MONTHS)
        window_end = ref - timedelta(days=1)

        merged = GetCommitmentsUseCase(self.store, self.settings).execute(window_start, window_end)
        return [
            c for c in merged
            if c.is_projected or c.status in (STATUS_PENDING, STATUS_OVERDUE)
        ]
