"""
Entry with recurrence - the eager write path.

A new recurring obligation becomes, in one unit of work:
  rule  ->  originating commitment  ->  one pending commitment per future
  occurrence up to the materialization horizon  ->  rule.last_generated_date

Unlike the read path, these are real rows, not projections.
"""
import logging
from dataclasses import dataclass

from cashflow.config import Settings, get_settings
from cashflow.domain.commitment import Commitment, GENERATED_DESCRIPTION, STATUS_PENDING
from cashflow.domain.recurrence import add_months, materialization_dates
from cashflow.domain.recurrence_rule import RecurrenceRule, default_day_to_send
from cashflow.infrastructure.repositories.base import BudgetStore
from cashflow.utils.clock import now_ms, today
from cashflow.utils.validation import parse_iso_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreatedEntry:
    commitment_id: str
    rule_id: str | None = None
    generated_count: int = 0


class CreateEntryWithRecurrenceUseCase:
    def __init__(self, store: BudgetStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings or get_settings()

    def execute(
        self,
        title: str,
        amount,
        date,
        category: str = "",
        status: str = STATUS_PENDING,
        is_recurring: bool = False,
        frequency: str | None = None,
        interval: int = 1,
        description: str | None = None,
        provider_name: str | None = None,
        contact_info: str | None = None,
    ) -> CreatedEntry:
        entry_date = parse_iso_date(date, "date")

        if not is_recurring or not frequency:
            commitment = Commitment.create(
                title=title, amount=amount, due_date=entry_date, status=status,
                category=category, description=description,
                provider_name=provider_name, contact_info=contact_info,
            )
            with self.store.atomic():
                self.store.insert_commitment(commitment)
            return CreatedEntry(commitment_id=commitment.id)

        # Everything is built and validated before the first write
        rule = RecurrenceRule.create(
            title=title,
            amount=amount,
            frequency=frequency,
            start_date=entry_date,
            category=category,
            day_to_send=default_day_to_send(frequency, entry_date),
            interval=interval,
            description=description,
            last_generated_date=entry_date,
        )
        now = now_ms()
        origin = Commitment.create(
            title=rule.title, amount=rule.amount, due_date=entry_date, status=status,
            category=rule.category, description=description,
            recurrence_rule_id=rule.id, provider_name=provider_name,
            contact_info=contact_info, now=now,
        )
        horizon = add_months(today(), self.settings.MATERIALIZATION_HORIZON_MONTHS)
        future = [
            Commitment.create(
                title=rule.title, amount=rule.amount, due_date=d, status=STATUS_PENDING,
                category=rule.category, description=GENERATED_DESCRIPTION,
                recurrence_rule_id=rule.id, provider_name=provider_name,
                contact_info=contact_info, now=now,
            )
            for d in materialization_dates(rule, entry_date, horizon)
        ]
        last_generated = future[-1].due_date if future else entry_date

        with self.store.atomic():
            self.store.insert_rule(rule)
            self.store.insert_commitment(origin)
            for commitment in future:
                self.store.insert_commitment(commitment)
            self.store.update_rule(rule.id, {"last_generated_date": last_generated, "updated_at": now})

        logger.info(
            "Recurring entry %r: rule %s, %d future commitment(s) up to %s",
            rule.title, rule.id, len(future), last_generated.isoformat(),
        )
        return CreatedEntry(commitment_id=origin.id, rule_id=rule.id, generated_count=len(future))
