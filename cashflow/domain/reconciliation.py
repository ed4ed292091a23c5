"""
Reconciliation of scheduled slots against recorded commitments.

Three stages, all pure and in-memory:
1. reconcile_rule   - per slot, consume the closest unconsumed real commitment
                      of the same rule within the tolerance window, or emit a
                      projection for the gap
2. drop_covered     - safety net: discard projections with a real commitment of
                      the same rule within a tighter window
3. merge            - reals first (source of truth), projections only when
                      their (rule, due date) signature is still free
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from cashflow.config import Settings
from cashflow.domain.commitment import Commitment
from cashflow.domain.recurrence import expand_schedule
from cashflow.domain.recurrence_rule import FREQ_WEEKLY, RecurrenceRule


@dataclass(frozen=True)
class MatchTolerance:
    weekly_days: int = 6
    periodic_days: int = 25
    dedup_days: int = 3

    @classmethod
    def from_settings(cls, settings: Settings) -> "MatchTolerance":
        return cls(
            weekly_days=settings.WEEKLY_MATCH_TOLERANCE_DAYS,
            periodic_days=settings.PERIODIC_MATCH_TOLERANCE_DAYS,
            dedup_days=settings.DEDUP_TOLERANCE_DAYS,
        )

    def window_for(self, frequency: str) -> int:
        return self.weekly_days if frequency == FREQ_WEEKLY else self.periodic_days


def _distance(a: date, b: date) -> int:
    return abs((a - b).days)


def reconcile_rule(
    rule: RecurrenceRule,
    slots: Iterable[date],
    reals: list[Commitment],
    consumed: set[str],
    tolerance: MatchTolerance,
    now: int,
) -> list[Commitment]:
    """
    Walk the rule's slots in order and return projections for the unmatched ones.

    `consumed` is shared across calls and updated in place: a real commitment
    can satisfy a single slot only. Ties on distance go to the earlier due date,
    then the smaller id, so the result never depends on read order.
    """
    window = tolerance.window_for(rule.frequency)
    linked = [c for c in reals if c.recurrence_rule_id == rule.id]
    projections: list[Commitment] = []

    for slot in slots:
        best: Commitment | None = None
        best_key = None
        for candidate in linked:
            if candidate.id in consumed:
                continue
            distance = _distance(candidate.due_date, slot)
            if distance > window:
                continue
            key = (distance, candidate.due_date, candidate.id)
            if best_key is None or key < best_key:
                best, best_key = candidate, key

        if best is not None:
            consumed.add(best.id)
        else:
            projections.append(Commitment.projection(rule, slot, now))

    return projections


def drop_covered(
    projections: list[Commitment],
    reals: list[Commitment],
    dedup_days: int,
) -> list[Commitment]:
    """Discard projections whose rule already has a real commitment within `dedup_days`."""
    real_dates: dict[str, list[date]] = {}
    for rc in reals:
        if rc.recurrence_rule_id:
            real_dates.setdefault(rc.recurrence_rule_id, []).append(rc.due_date)

    survivors = []
    for vc in projections:
        dates = real_dates.get(vc.recurrence_rule_id, ())
        if any(_distance(d, vc.due_date) <= dedup_days for d in dates):
            continue
        survivors.append(vc)
    return survivors


def merge(reals: list[Commitment], projections: list[Commitment]) -> list[Commitment]:
    """
    Merge by id, reals first. A projection is kept only if no entry with the
    same (rule, due date) signature exists yet. Sorted by due date, then id.
    """
    by_id: dict[str, Commitment] = {}
    taken: set[tuple[str | None, date]] = set()

    for rc in reals:
        by_id[rc.id] = rc
        if rc.recurrence_rule_id:
            taken.add(rc.signature)

    for vc in projections:
        if vc.signature in taken:
            continue
        by_id[vc.id] = vc
        taken.add(vc.signature)

    return sorted(by_id.values(), key=lambda c: (c.due_date, c.id))


def project_commitments(
    rules: list[RecurrenceRule],
    reals: list[Commitment],
    window_start: date,
    window_end: date,
    tolerance: MatchTolerance,
    now: int,
) -> list[Commitment]:
    """Merged real + virtual view of [window_start, window_end]."""
    consumed: set[str] = set()
    projections: list[Commitment] = []

    for rule in sorted(rules, key=lambda r: r.id):
        if not rule.active:
            continue
        slots = expand_schedule(rule, window_start, window_end)
        projections.extend(reconcile_rule(rule, slots, reals, consumed, tolerance, now))

    projections = drop_covered(projections, reals, tolerance.dedup_days)
    return merge(reals, projections)
