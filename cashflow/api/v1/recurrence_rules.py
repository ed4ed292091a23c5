"""
Recurrence rule API endpoints
"""
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from cashflow.api.deps import get_store
from cashflow.api.v1.schemas import IdResponse, RecurrenceRuleResponse
from cashflow.application.recurrence_rules import (
    AddRecurrenceRuleUseCase,
    DeleteRecurrenceRuleUseCase,
    ListRecurrenceRulesUseCase,
    UpdateRecurrenceRuleUseCase,
)
from cashflow.infrastructure.repositories.base import BudgetStore


router = APIRouter(prefix="/api/v1/recurrence-rules", tags=["recurrence-rules"])


class CreateRuleRequest(BaseModel):
    title: str
    amount: str | int | float
    frequency: str  # weekly | monthly | yearly
    start_date: date
    category: str = ""
    day_to_send: int | None = None  # weekly: 0=Sunday..6; monthly/yearly: 1..31
    interval: int = 1
    end_date: date | None = None
    description: str | None = None
    active: bool = True
    id: str | None = None


class UpdateRuleRequest(BaseModel):
    title: str | None = None
    amount: str | int | float | None = None
    frequency: str | None = None
    interval: int | None = None
    day_to_send: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    category: str | None = None
    description: str | None = None
    active: bool | None = None


@router.get("", response_model=list[RecurrenceRuleResponse])
def list_rules(store: BudgetStore = Depends(get_store)):
    return [RecurrenceRuleResponse.from_domain(r) for r in ListRecurrenceRulesUseCase(store).execute()]


@router.post("", response_model=IdResponse, status_code=201)
def create_rule(req: CreateRuleRequest, store: BudgetStore = Depends(get_store)):
    rule_id = AddRecurrenceRuleUseCase(store).execute(
        title=req.title,
        amount=req.amount,
        frequency=req.frequency,
        start_date=req.start_date,
        category=req.category,
        day_to_send=req.day_to_send,
        interval=req.interval,
        end_date=req.end_date,
        description=req.description,
        active=req.active,
        rule_id=req.id,
    )
    return IdResponse(id=rule_id)


@router.patch("/{rule_id}")
def update_rule(rule_id: str, req: UpdateRuleRequest, store: BudgetStore = Depends(get_store)):
    """Affects future expansion only"""
    UpdateRecurrenceRuleUseCase(store).execute(rule_id, **req.model_dump(exclude_unset=True))
    return {"status": "updated"}


@router.delete("/{rule_id}")
def delete_rule(rule_id: str, store: BudgetStore = Depends(get_store)):
    DeleteRecurrenceRuleUseCase(store).execute(rule_id)
    return {"status": "deleted"}
