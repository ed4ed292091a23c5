"""
Budget execution: weekly account availability and daily execution logs.

Availability is one snapshot of the account balances per week (weeks start on
Monday). An execution log records what was paid on a day against that
snapshot: the balance before the payments, the total paid and what is left.
"""
import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict

from cashflow.utils.clock import now_ms
from cashflow.utils.validation import parse_amount, parse_iso_date

_ZERO = Decimal("0")

BALANCE_FIELDS = ("cta_corriente", "cta_ahorros_j", "cta_ahorros_n", "efectivo")


def week_start(d: date) -> date:
    """Monday of the week containing `d`."""
    return d - timedelta(days=d.weekday())


@dataclass(frozen=True)
class AccountBalances:
    cta_corriente: Decimal = _ZERO
    cta_ahorros_j: Decimal = _ZERO
    cta_ahorros_n: Decimal = _ZERO
    efectivo: Decimal = _ZERO
    total_available: Decimal = _ZERO

    @staticmethod
    def create(
        cta_corriente=0,
        cta_ahorros_j=0,
        cta_ahorros_n=0,
        efectivo=0,
        total_available=None,
    ) -> "AccountBalances":
        """Total defaults to the sum of the four accounts."""
        values = [parse_amount(v) for v in (cta_corriente, cta_ahorros_j, cta_ahorros_n, efectivo)]
        total = sum(values, _ZERO) if total_available is None else parse_amount(total_available)
        return AccountBalances(*values, total_available=total)

    @property
    def accounts_total(self) -> Decimal:
        return self.cta_corriente + self.cta_ahorros_j + self.cta_ahorros_n + self.efectivo

    def to_dict(self) -> Dict[str, str]:
        """JSON-safe form (decimals as strings)."""
        data = {name: str(getattr(self, name)) for name in BALANCE_FIELDS}
        data["total_available"] = str(self.total_available)
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any] | None) -> "AccountBalances":
        data = data or {}
        return AccountBalances(
            **{name: Decimal(str(data.get(name, 0))) for name in BALANCE_FIELDS},
            total_available=Decimal(str(data.get("total_available", 0))),
        )


@dataclass(frozen=True)
class WeeklyAvailability:
    id: str
    week_start_date: date
    balances: AccountBalances
    created_at: int
    updated_at: int

    @staticmethod
    def create(week_start_date, balances: AccountBalances, now: int | None = None) -> "WeeklyAvailability":
        ts = now if now is not None else now_ms()
        return WeeklyAvailability(
            id=str(uuid.uuid4()),
            week_start_date=week_start(parse_iso_date(week_start_date, "week_start_date")),
            balances=balances,
            created_at=ts,
            updated_at=ts,
        )


@dataclass(frozen=True)
class ExecutionLog:
    id: str
    execution_date: date
    week_start_date: date
    initial_state: AccountBalances
    total_paid: Decimal
    final_balance: Decimal
    items_count: int
    created_at: int

    @staticmethod
    def create(
        execution_date,
        week_start_date,
        initial_state: AccountBalances,
        total_paid,
        final_balance,
        items_count: int,
        now: int | None = None,
    ) -> "ExecutionLog":
        return ExecutionLog(
            id=str(uuid.uuid4()),
            execution_date=parse_iso_date(execution_date, "execution_date"),
            week_start_date=week_start(parse_iso_date(week_start_date, "week_start_date")),
            initial_state=initial_state,
            total_paid=parse_amount(total_paid),
            final_balance=parse_amount(final_balance),
            items_count=int(items_count),
            created_at=now if now is not None else now_ms(),
        )
