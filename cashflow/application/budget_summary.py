"""
Monthly budget summary over the merged (real + projected) view of one month.

Totals by status, per-category breakdown (largest first) and Monday-based
weekly buckets covering the month.
"""
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from cashflow.config import Settings
from cashflow.domain.commitment import Commitment, STATUS_OVERDUE, STATUS_PAID, STATUS_PENDING
from cashflow.domain.errors import ValidationError
from cashflow.domain.recurrence import last_day_of_month
from cashflow.application.commitments import GetCommitmentsUseCase
from cashflow.infrastructure.repositories.base import BudgetStore
from cashflow.utils.clock import today

_ZERO = Decimal("0")
UNCATEGORIZED = "Sin Categoría"


@dataclass(frozen=True)
class WeekBucket:
    label: str
    week_start: date
    week_end: date
    amount: Decimal


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    total: Decimal
    paid: Decimal
    pending: Decimal
    overdue: Decimal
    by_category: list[tuple[str, Decimal]] = field(default_factory=list)
    weeks: list[WeekBucket] = field(default_factory=list)


def parse_month(value) -> tuple[int, int]:
    """'YYYY-MM' -> (year, month). None means the current month."""
    if value is None or value == "":
        ref = today()
        return ref.year, ref.month
    try:
        year_s, month_s = str(value).split("-")
        year, month = int(year_s), int(month_s)
    except ValueError as e:
        raise ValidationError(f"Invalid month: {value!r} (expected YYYY-MM)") from e
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {value!r} (expected YYYY-MM)")
    return year, month


def _sum(items: list[Commitment]) -> Decimal:
    return sum((c.amount for c in items), _ZERO)


def week_buckets(items: list[Commitment], start: date, end: date) -> list[WeekBucket]:
    weeks = []
    week_start = start - timedelta(days=start.weekday())
    while week_start <= end:
        week_end = week_start + timedelta(days=6)
        amount = _sum([c for c in items if week_start <= c.due_date <= week_end])
        weeks.append(WeekBucket(
            label=f"Sem {week_start.isocalendar()[1]}",
            week_start=week_start,
            week_end=week_end,
            amount=amount,
        ))
        week_start += timedelta(days=7)
    return weeks


def summarize(items: list[Commitment], year: int, month: int) -> MonthlySummary:
    start = date(year, month, 1)
    end = date(year, month, last_day_of_month(year, month))

    paid = _sum([c for c in items if c.status == STATUS_PAID])
    pending = _sum([c for c in items if c.status in (STATUS_PENDING, STATUS_OVERDUE)])
    overdue = _sum([c for c in items if c.status == STATUS_OVERDUE])

    categories: dict[str, Decimal] = {}
    for c in items:
        name = c.category or UNCATEGORIZED
        categories[name] = categories.get(name, _ZERO) + c.amount
    by_category = sorted(categories.items(), key=lambda kv: (-kv[1], kv[0]))

    return MonthlySummary(
        month=f"{year:04d}-{month:02d}",
        total=paid + pending,
        paid=paid,
        pending=pending,
        overdue=overdue,
        by_category=by_category,
        weeks=week_buckets(items, start, end),
    )


class MonthlySummaryUseCase:
    def __init__(self, store: BudgetStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings

    def execute(self, month=None) -> MonthlySummary:
        year, m = parse_month(month)
        start = date(year, m, 1)
        end = date(year, m, last_day_of_month(year, m))
        items = GetCommitmentsUseCase(self.store, self.settings).execute(start, end)
        return summarize(items, year, m)
