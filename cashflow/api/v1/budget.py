"""
Budget summary API endpoint
"""
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from cashflow.api.deps import get_store
from cashflow.application.budget_summary import MonthlySummaryUseCase
from cashflow.infrastructure.repositories.base import BudgetStore


router = APIRouter(prefix="/api/v1/budget", tags=["budget"])


class CategoryTotal(BaseModel):
    name: str
    amount: str


class WeekTotal(BaseModel):
    label: str
    week_start: date
    week_end: date
    amount: str


class MonthlySummaryResponse(BaseModel):
    month: str
    total: str
    paid: str
    pending: str
    overdue: str
    by_category: list[CategoryTotal]
    weeks: list[WeekTotal]


@router.get("/summary", response_model=MonthlySummaryResponse)
def monthly_summary(month: str | None = None, store: BudgetStore = Depends(get_store)):
    """Totals of one month (YYYY-MM, default: current) over real and projected commitments"""
    s = MonthlySummaryUseCase(store).execute(month)
    return MonthlySummaryResponse(
        month=s.month,
        total=str(s.total),
        paid=str(s.paid),
        pending=str(s.pending),
        overdue=str(s.overdue),
        by_category=[CategoryTotal(name=name, amount=str(amount)) for name, amount in s.by_category],
        weeks=[
            WeekTotal(label=w.label, week_start=w.week_start, week_end=w.week_end, amount=str(w.amount))
            for w in s.weeks
        ],
    )
