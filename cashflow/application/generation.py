"""
Eager generation of real commitments from active rules.

For each rule, occurrences after `last_generated_date` (or from `start_date`
when the rule was never generated) up to the limit become pending commitments,
and the rule's `last_generated_date` advances to the last occurrence. An
occurrence that a real commitment of the rule already covers (a promoted or
paid projection, a manual entry) is skipped, using the same matching as the
merged read path.
"""
import logging
from datetime import date, timedelta

from cashflow.config import Settings, get_settings
from cashflow.domain.commitment import Commitment, GENERATED_DESCRIPTION, STATUS_PENDING
from cashflow.domain.errors import NotFoundError
from cashflow.domain.reconciliation import MatchTolerance, drop_covered, reconcile_rule
from cashflow.domain.recurrence import add_months, expand_schedule, materialization_dates
from cashflow.domain.recurrence_rule import RecurrenceRule
from cashflow.infrastructure.repositories.base import BudgetStore
from cashflow.utils.clock import now_ms, today
from cashflow.utils.validation import parse_optional_date

logger = logging.getLogger(__name__)


def pending_dates(rule: RecurrenceRule, limit: date) -> list[date]:
    """Occurrences of `rule` not generated yet, up to `limit` (inclusive)."""
    if not rule.active:
        return []
    if rule.last_generated_date is None:
        return expand_schedule(rule, rule.start_date, limit)
    return materialization_dates(rule, rule.last_generated_date, limit)


class GenerateFromRulesUseCase:
    def __init__(self, store: BudgetStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings or get_settings()
        self.tolerance = MatchTolerance.from_settings(self.settings)

    def execute(self, future_limit=None, rule_id: str | None = None) -> int:
        """Returns the number of commitments written."""
        limit = parse_optional_date(future_limit, "future_limit") or add_months(
            today(), self.settings.MATERIALIZATION_HORIZON_MONTHS
        )

        if rule_id is not None:
            rule = self.store.get_rule(rule_id)
            if rule is None:
                raise NotFoundError(f"Recurrence rule {rule_id} not found")
            rules = [rule]
        else:
            rules = self.store.list_rules()

        now = now_ms()
        total = 0
        with self.store.atomic():
            for rule in rules:
                dates = pending_dates(rule, limit)
                if not dates:
                    continue
                uncovered = self._uncovered(rule, dates, now)
                for d in dates:
                    if d not in uncovered:
                        continue
                    self.store.insert_commitment(Commitment.create(
                        title=rule.title,
                        amount=rule.amount,
                        due_date=d,
                        status=STATUS_PENDING,
                        category=rule.category,
                        description=GENERATED_DESCRIPTION,
                        recurrence_rule_id=rule.id,
                        now=now,
                    ))
                    total += 1
                skipped = len(dates) - len(uncovered)
                if skipped:
                    logger.info("Rule %s: %d occurrence(s) already covered by real commitments", rule.id, skipped)
                self.store.update_rule(rule.id, {"last_generated_date": dates[-1], "updated_at": now})

        logger.info("Generated %d commitment(s) from %d rule(s) up to %s", total, len(rules), limit.isoformat())
        return total

    def _uncovered(self, rule: RecurrenceRule, dates: list[date], now: int) -> set[date]:
        """
        Subset of `dates` with no real commitment of the rule.

        The walk covers the rule's whole schedule, so a real that belongs to
        an already generated occurrence (e.g. postponed into the next period)
        is consumed by its own slot and does not hide a new one.
        """
        window = timedelta(days=self.tolerance.window_for(rule.frequency))
        reals = [
            c for c in self.store.list_commitments(
                due_date_from=rule.start_date - window, due_date_to=dates[-1] + window
            )
            if c.recurrence_rule_id == rule.id
        ]
        if not reals:
            return set(dates)

        slots = sorted(set(expand_schedule(rule, rule.start_date, dates[-1])) | set(dates))
        projections = reconcile_rule(rule, slots, reals, set(), self.tolerance, now)
        projections = drop_covered(projections, reals, self.tolerance.dedup_days)
        wanted = set(dates)
        return {p.due_date for p in projections if p.due_date in wanted}
