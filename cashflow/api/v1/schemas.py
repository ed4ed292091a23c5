"""
Response models shared by the budget routers
"""
from datetime import date

from pydantic import BaseModel

from cashflow.domain.commitment import Commitment
from cashflow.domain.recurrence_rule import RecurrenceRule


class CommitmentResponse(BaseModel):
    id: str
    title: str
    amount: str  # Decimal as string
    due_date: date
    status: str
    category: str
    paid_date: date | None = None
    description: str | None = None
    recurrence_rule_id: str | None = None
    provider_name: str | None = None
    contact_info: str | None = None
    is_projected: bool = False
    created_at: int
    updated_at: int

    @classmethod
    def from_domain(cls, c: Commitment) -> "CommitmentResponse":
        return cls(
            id=c.id,
            title=c.title,
            amount=str(c.amount),
            due_date=c.due_date,
            status=c.status,
            category=c.category,
            paid_date=c.paid_date,
            description=c.description,
            recurrence_rule_id=c.recurrence_rule_id,
            provider_name=c.provider_name,
            contact_info=c.contact_info,
            is_projected=c.is_projected,
            created_at=c.created_at,
            updated_at=c.updated_at,
        )


class RecurrenceRuleResponse(BaseModel):
    id: str
    title: str
    amount: str  # Decimal as string
    frequency: str
    interval: int
    day_to_send: int | None = None
    start_date: date
    end_date: date | None = None
    category: str
    description: str | None = None
    active: bool
    last_generated_date: date | None = None
    created_at: int
    updated_at: int

    @classmethod
    def from_domain(cls, r: RecurrenceRule) -> "RecurrenceRuleResponse":
        return cls(
            id=r.id,
            title=r.title,
            amount=str(r.amount),
            frequency=r.frequency,
            interval=r.interval,
            day_to_send=r.day_to_send,
            start_date=r.start_date,
            end_date=r.end_date,
            category=r.category,
            description=r.description,
            active=r.active,
            last_generated_date=r.last_generated_date,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


class IdResponse(BaseModel):
    id: str
