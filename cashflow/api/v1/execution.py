"""
Budget execution API endpoints (weekly availability, execution logs)
"""
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from cashflow.api.deps import get_store
from cashflow.api.v1.schemas import IdResponse
from cashflow.application.execution import (
    AddExecutionLogUseCase,
    GetExecutionLogsUseCase,
    GetWeeklyAvailabilityUseCase,
    ReconcileTodayLogUseCase,
    SaveWeeklyAvailabilityUseCase,
)
from cashflow.domain.execution import AccountBalances, ExecutionLog, WeeklyAvailability
from cashflow.infrastructure.repositories.base import BudgetStore


router = APIRouter(prefix="/api/v1/execution", tags=["execution"])


# === Request / response models ===

Amount = str | int | float


class BalancesBody(BaseModel):
    cta_corriente: Amount = 0
    cta_ahorros_j: Amount = 0
    cta_ahorros_n: Amount = 0
    efectivo: Amount = 0
    total_available: Amount | None = None  # default: sum of the accounts


class SaveAvailabilityRequest(BalancesBody):
    week_start_date: date


class BalancesResponse(BaseModel):
    cta_corriente: str
    cta_ahorros_j: str
    cta_ahorros_n: str
    efectivo: str
    total_available: str

    @classmethod
    def from_domain(cls, b: AccountBalances) -> "BalancesResponse":
        return cls(**b.to_dict())


class AvailabilityResponse(BalancesResponse):
    id: str
    week_start_date: date
    created_at: int
    updated_at: int

    @classmethod
    def from_availability(cls, a: WeeklyAvailability) -> "AvailabilityResponse":
        return cls(
            id=a.id,
            week_start_date=a.week_start_date,
            created_at=a.created_at,
            updated_at=a.updated_at,
            **a.balances.to_dict(),
        )


class CreateExecutionLogRequest(BaseModel):
    execution_date: date
    week_start_date: date
    initial_state: BalancesBody
    total_paid: Amount
    final_balance: Amount
    items_count: int = 0


class ExecutionLogResponse(BaseModel):
    id: str
    execution_date: date
    week_start_date: date
    initial_state: BalancesResponse
    total_paid: str
    final_balance: str
    items_count: int
    created_at: int

    @classmethod
    def from_domain(cls, log: ExecutionLog) -> "ExecutionLogResponse":
        return cls(
            id=log.id,
            execution_date=log.execution_date,
            week_start_date=log.week_start_date,
            initial_state=BalancesResponse.from_domain(log.initial_state),
            total_paid=str(log.total_paid),
            final_balance=str(log.final_balance),
            items_count=log.items_count,
            created_at=log.created_at,
        )


class ReconcileResponse(BaseModel):
    status: str  # created | exists | no_payments
    log_id: str | None = None


# === Endpoints ===

@router.get("/availability", response_model=AvailabilityResponse | None)
def get_availability(week_start_date: date, store: BudgetStore = Depends(get_store)):
    """Balances of the week containing `week_start_date`, or null"""
    availability = GetWeeklyAvailabilityUseCase(store).execute(week_start_date)
    return AvailabilityResponse.from_availability(availability) if availability else None


@router.put("/availability", response_model=IdResponse)
def save_availability(req: SaveAvailabilityRequest, store: BudgetStore = Depends(get_store)):
    availability_id = SaveWeeklyAvailabilityUseCase(store).execute(**req.model_dump())
    return IdResponse(id=availability_id)


@router.get("/logs", response_model=list[ExecutionLogResponse])
def list_logs(store: BudgetStore = Depends(get_store)):
    return [ExecutionLogResponse.from_domain(log) for log in GetExecutionLogsUseCase(store).execute()]


@router.post("/logs", response_model=IdResponse, status_code=201)
def create_log(req: CreateExecutionLogRequest, store: BudgetStore = Depends(get_store)):
    log_id = AddExecutionLogUseCase(store).execute(
        execution_date=req.execution_date,
        week_start_date=req.week_start_date,
        initial_state=AccountBalances.create(**req.initial_state.model_dump()),
        total_paid=req.total_paid,
        final_balance=req.final_balance,
        items_count=req.items_count,
    )
    return IdResponse(id=log_id)


@router.post("/logs/reconcile-today", response_model=ReconcileResponse)
def reconcile_today(store: BudgetStore = Depends(get_store)):
    """Log today's payments against this week's availability, once per day"""
    result = ReconcileTodayLogUseCase(store).execute()
    return ReconcileResponse(status=result.status, log_id=result.log_id)
