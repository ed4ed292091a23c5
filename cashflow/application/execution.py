"""
Budget execution use cases - weekly availability and daily execution logs
"""
import logging
from dataclasses import dataclass
from decimal import Decimal

from cashflow.domain.commitment import STATUS_PAID
from cashflow.domain.execution import AccountBalances, ExecutionLog, WeeklyAvailability, week_start
from cashflow.infrastructure.repositories.base import BudgetStore
from cashflow.infrastructure.repositories.mappers import balances_to_columns
from cashflow.utils.clock import now_ms, today
from cashflow.utils.validation import parse_iso_date

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")

RECONCILE_CREATED = "created"
RECONCILE_EXISTS = "exists"
RECONCILE_NO_PAYMENTS = "no_payments"


class GetWeeklyAvailabilityUseCase:
    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(self, week_start_date) -> WeeklyAvailability | None:
        """Any day of the week may be passed; the week starts on Monday."""
        monday = week_start(parse_iso_date(week_start_date, "week_start_date"))
        return self.store.get_availability(monday)


class SaveWeeklyAvailabilityUseCase:
    """
    Upsert of the week's balances. `total_available` defaults to the sum of
    the four accounts. Returns the id of the stored record.
    """

    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(
        self,
        week_start_date,
        cta_corriente=0,
        cta_ahorros_j=0,
        cta_ahorros_n=0,
        efectivo=0,
        total_available=None,
    ) -> str:
        balances = AccountBalances.create(
            cta_corriente=cta_corriente,
            cta_ahorros_j=cta_ahorros_j,
            cta_ahorros_n=cta_ahorros_n,
            efectivo=efectivo,
            total_available=total_available,
        )
        monday = week_start(parse_iso_date(week_start_date, "week_start_date"))

        with self.store.atomic():
            existing = self.store.get_availability(monday)
            if existing is None:
                return self.store.insert_availability(WeeklyAvailability.create(monday, balances))
            patch = balances_to_columns(balances)
            patch["updated_at"] = now_ms()
            self.store.update_availability(existing.id, patch)
            return existing.id


class AddExecutionLogUseCase:
    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(
        self,
        execution_date,
        week_start_date,
        initial_state: AccountBalances,
        total_paid,
        final_balance,
        items_count: int,
    ) -> str:
        log = ExecutionLog.create(
            execution_date=execution_date,
            week_start_date=week_start_date,
            initial_state=initial_state,
            total_paid=total_paid,
            final_balance=final_balance,
            items_count=items_count,
        )
        with self.store.atomic():
            return self.store.insert_execution_log(log)


class GetExecutionLogsUseCase:
    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(self) -> list[ExecutionLog]:
        return self.store.list_execution_logs()


@dataclass(frozen=True)
class ReconcileResult:
    status: str
    log_id: str | None = None


class ReconcileTodayLogUseCase:
    """
    Write today's execution log from the payments recorded today, unless a
    log for today exists already.

    The week's availability is taken as the balance after the payments, so
    the log's initial total is that balance plus what was paid. Without an
    availability record every balance is zero.
    """

    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(self) -> ReconcileResult:
        day = today()
        monday = week_start(day)

        if any(log.execution_date == day for log in self.store.list_execution_logs()):
            logger.info("Execution log for %s already exists", day.isoformat())
            return ReconcileResult(RECONCILE_EXISTS)

        paid = [
            c for c in self.store.list_commitments()
            if c.status == STATUS_PAID and c.paid_date == day
        ]
        if not paid:
            logger.info("No payments recorded on %s", day.isoformat())
            return ReconcileResult(RECONCILE_NO_PAYMENTS)

        total_paid = sum((c.amount for c in paid), _ZERO)
        availability = self.store.get_availability(monday)
        current = availability.balances if availability else AccountBalances()
        # a zero total means it was never filled in
        current_total = current.total_available or current.accounts_total

        initial_state = AccountBalances(
            cta_corriente=current.cta_corriente,
            cta_ahorros_j=current.cta_ahorros_j,
            cta_ahorros_n=current.cta_ahorros_n,
            efectivo=current.efectivo,
            total_available=current_total + total_paid,
        )
        log_id = AddExecutionLogUseCase(self.store).execute(
            execution_date=day,
            week_start_date=monday,
            initial_state=initial_state,
            total_paid=total_paid,
            final_balance=current_total,
            items_count=len(paid),
        )
        logger.info("Execution log %s: %d payment(s), %s paid", log_id, len(paid), total_paid)
        return ReconcileResult(RECONCILE_CREATED, log_id)
