"""
Deterministic schedule expander for recurrence rules.

Uses date only (no timezone).

Frequencies:
- weekly: every N weeks, on weekday `day_to_send` (0=Sunday .. 6=Saturday)
- monthly: every N months, on day `day_to_send` clamped to the month length
- yearly: every 12*N months, same clamping as monthly

The expansion is a pure function of (rule, window): no state is kept between
calls, so it can be recomputed on every read.
"""
import calendar
from datetime import date, timedelta

from cashflow.domain.recurrence_rule import (
    FREQ_WEEKLY, FREQ_YEARLY, RecurrenceRule, js_weekday,
)


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(d: date, n: int) -> date:
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    last = last_day_of_month(year, month)
    day = min(d.day, last)
    return date(year, month, day)


def next_date(current: date, frequency: str, interval: int = 1) -> date:
    """Advance `current` by one period of the given frequency."""
    if frequency == FREQ_WEEKLY:
        return current + timedelta(weeks=interval)
    if frequency == FREQ_YEARLY:
        return add_months(current, 12 * interval)
    return add_months(current, interval)


def align_to_rule(rule: RecurrenceRule, d: date) -> date:
    """
    Move `d` onto the rule's anchor day within the same period.

    Weekly: shift by the signed weekday delta (-6..+6).
    Monthly/yearly: day-of-month = min(day_to_send, days in that month).
    """
    target = rule.day_to_send
    if target is None:
        return d
    if rule.frequency == FREQ_WEEKLY:
        return d + timedelta(days=target - js_weekday(d))
    return d.replace(day=min(target, last_day_of_month(d.year, d.month)))


def _months_per_period(rule: RecurrenceRule) -> int:
    return 12 * rule.interval if rule.frequency == FREQ_YEARLY else rule.interval


def _raw_candidate(rule: RecurrenceRule, k: int) -> date:
    """k-th unaligned candidate counted from the rule's start date."""
    if rule.frequency == FREQ_WEEKLY:
        return rule.start_date + timedelta(weeks=k * rule.interval)
    return add_months(rule.start_date, k * _months_per_period(rule))


def _first_index(rule: RecurrenceRule, window_start: date) -> int:
    """A candidate index no later than the first one that can land in the window."""
    if window_start <= rule.start_date:
        return 0
    if rule.frequency == FREQ_WEEKLY:
        # alignment moves a candidate by at most 6 days
        days = (window_start - rule.start_date).days - 7
        return max(0, days // (7 * rule.interval))
    months = (window_start.year - rule.start_date.year) * 12 + (window_start.month - rule.start_date.month)
    return max(0, months // _months_per_period(rule) - 1)


def expand_schedule(rule: RecurrenceRule, window_start: date, window_end: date) -> list[date]:
    """
    Ideal due dates of `rule` in [window_start, window_end] (inclusive).

    Deterministic, sorted ascending. Inactive rules yield nothing; expansion
    stops at the window end or at the rule's end date, whichever comes first.
    Aligned dates before the rule's start date are not scheduled.
    """
    if not rule.active or window_start > window_end:
        return []

    out: list[date] = []
    k = _first_index(rule, window_start)
    while True:
        d = align_to_rule(rule, _raw_candidate(rule, k))
        k += 1
        if d > window_end:
            break
        if rule.end_date is not None and d > rule.end_date:
            break
        if d < window_start or d < rule.start_date:
            continue
        out.append(d)
    return out


def materialization_dates(rule: RecurrenceRule, after: date, until: date) -> list[date]:
    """
    Occurrences strictly after `after` up to `until` (inclusive), walking period
    by period from `after`. Used by the eager paths that write real rows.
    """
    out: list[date] = []
    d = align_to_rule(rule, next_date(after, rule.frequency, rule.interval))
    while d <= until:
        if rule.end_date is not None and d > rule.end_date:
            break
        out.append(d)
        d = align_to_rule(rule, next_date(d, rule.frequency, rule.interval))
    return out
