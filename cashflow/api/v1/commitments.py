"""
Commitment API endpoints
"""
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from cashflow.api.deps import get_store
from cashflow.api.v1.schemas import CommitmentResponse, IdResponse
from cashflow.application.commitments import (
    AddCommitmentUseCase,
    DeleteCommitmentUseCase,
    GetCommitmentsUseCase,
    GetOverdueCommitmentsUseCase,
    PayCommitmentUseCase,
    UpdateCommitmentUseCase,
)
from cashflow.infrastructure.repositories.base import BudgetStore


router = APIRouter(prefix="/api/v1/commitments", tags=["commitments"])


# === Request models ===

class CreateCommitmentRequest(BaseModel):
    title: str
    amount: str | int | float  # "1500,50" is accepted
    due_date: date
    status: str = "pending"
    category: str = ""
    paid_date: date | None = None
    description: str | None = None
    recurrence_rule_id: str | None = None
    provider_name: str | None = None
    contact_info: str | None = None
    id: str | None = None


class UpdateCommitmentRequest(BaseModel):
    title: str | None = None
    amount: str | int | float | None = None
    due_date: date | None = None
    status: str | None = None
    paid_date: date | None = None
    category: str | None = None
    description: str | None = None
    recurrence_rule_id: str | None = None
    provider_name: str | None = None
    contact_info: str | None = None


class PayCommitmentRequest(BaseModel):
    paid_date: date | None = None
    amount: str | int | float | None = None


# === Endpoints ===

@router.get("", response_model=list[CommitmentResponse])
def list_commitments(
    start_date: date | None = None,
    end_date: date | None = None,
    store: BudgetStore = Depends(get_store),
):
    """
    Commitments in a range, real and projected; without a range, real ones only.
    start_date and end_date go together: one alone is a 422.
    """
    items = GetCommitmentsUseCase(store).execute(start_date, end_date)
    return [CommitmentResponse.from_domain(c) for c in items]


@router.get("/overdue", response_model=list[CommitmentResponse])
def list_overdue(
    before: date | None = None,
    store: BudgetStore = Depends(get_store),
):
    """Outstanding commitments due before a date (default: today)"""
    items = GetOverdueCommitmentsUseCase(store).execute(before)
    return [CommitmentResponse.from_domain(c) for c in items]


@router.post("", response_model=IdResponse, status_code=201)
def create_commitment(req: CreateCommitmentRequest, store: BudgetStore = Depends(get_store)):
    commitment_id = AddCommitmentUseCase(store).execute(
        title=req.title,
        amount=req.amount,
        due_date=req.due_date,
        status=req.status,
        category=req.category,
        paid_date=req.paid_date,
        description=req.description,
        recurrence_rule_id=req.recurrence_rule_id,
        provider_name=req.provider_name,
        contact_info=req.contact_info,
        commitment_id=req.id,
    )
    return IdResponse(id=commitment_id)


@router.patch("/{commitment_id}", response_model=IdResponse)
def update_commitment(
    commitment_id: str,
    req: UpdateCommitmentRequest,
    store: BudgetStore = Depends(get_store),
):
    """Partial update; a projected id is promoted and the new id is returned"""
    changes = req.model_dump(exclude_unset=True)
    new_id = UpdateCommitmentUseCase(store).execute(commitment_id, **changes)
    return IdResponse(id=new_id)


@router.post("/{commitment_id}/pay", response_model=IdResponse)
def pay_commitment(
    commitment_id: str,
    req: PayCommitmentRequest | None = None,
    store: BudgetStore = Depends(get_store),
):
    req = req or PayCommitmentRequest()
    new_id = PayCommitmentUseCase(store).execute(commitment_id, paid_date=req.paid_date, amount=req.amount)
    return IdResponse(id=new_id)


@router.delete("/{commitment_id}")
def delete_commitment(commitment_id: str, store: BudgetStore = Depends(get_store)):
    DeleteCommitmentUseCase(store).execute(commitment_id)
    return {"status": "deleted"}
