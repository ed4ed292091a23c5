"""
Entry API endpoints - creation with recurrence, eager generation, seeding
"""
from datetime import date as date_type

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from cashflow.api.deps import get_store
from cashflow.application.entries import CreateEntryWithRecurrenceUseCase
from cashflow.application.generation import GenerateFromRulesUseCase
from cashflow.application.seed import SeedRecurringExpensesUseCase
from cashflow.infrastructure.repositories.base import BudgetStore


router = APIRouter(prefix="/api/v1/entries", tags=["entries"])


class CreateEntryRequest(BaseModel):
    title: str
    amount: str | int | float
    date: date_type
    category: str = ""
    status: str = "pending"
    is_recurring: bool = False
    frequency: str | None = None
    interval: int = 1
    description: str | None = None
    provider_name: str | None = None
    contact_info: str | None = None


class CreateEntryResponse(BaseModel):
    commitment_id: str
    rule_id: str | None = None
    generated_count: int = 0


class GenerateRequest(BaseModel):
    future_limit: date_type | None = None
    rule_id: str | None = None


class GenerateResponse(BaseModel):
    generated_count: int


class SeedRequest(BaseModel):
    force: bool = False


class SeedResponse(BaseModel):
    rules_created: int
    commitments_generated: int


@router.post("", response_model=CreateEntryResponse, status_code=201)
def create_entry(req: CreateEntryRequest, store: BudgetStore = Depends(get_store)):
    """Create a commitment; when recurring, also its rule and future occurrences"""
    created = CreateEntryWithRecurrenceUseCase(store).execute(
        title=req.title,
        amount=req.amount,
        date=req.date,
        category=req.category,
        status=req.status,
        is_recurring=req.is_recurring,
        frequency=req.frequency,
        interval=req.interval,
        description=req.description,
        provider_name=req.provider_name,
        contact_info=req.contact_info,
    )
    return CreateEntryResponse(
        commitment_id=created.commitment_id,
        rule_id=created.rule_id,
        generated_count=created.generated_count,
    )


@router.post("/generate", response_model=GenerateResponse)
def generate(req: GenerateRequest | None = None, store: BudgetStore = Depends(get_store)):
    req = req or GenerateRequest()
    count = GenerateFromRulesUseCase(store).execute(req.future_limit, req.rule_id)
    return GenerateResponse(generated_count=count)


@router.post("/seed", response_model=SeedResponse, status_code=201)
def seed(req: SeedRequest | None = None, store: BudgetStore = Depends(get_store)):
    req = req or SeedRequest()
    result = SeedRecurringExpensesUseCase(store).execute(force=req.force)
    return SeedResponse(rules_created=result.rules_created, commitments_generated=result.commitments_generated)
