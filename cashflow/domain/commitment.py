"""Commitment domain entity - a concrete (or projected) obligation with a due date"""
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict

from cashflow.domain.errors import ValidationError
from cashflow.domain.recurrence_rule import RecurrenceRule
from cashflow.utils.clock import now_ms
from cashflow.utils.validation import parse_amount, parse_iso_date, parse_optional_date


STATUS_PENDING = "pending"
STATUS_PAID = "paid"
STATUS_OVERDUE = "overdue"
VALID_STATUSES = frozenset({STATUS_PENDING, STATUS_PAID, STATUS_OVERDUE})

PROJECTED_ID_PREFIX = "projected-"
PROJECTED_TITLE_SUFFIX = " (Proyectado)"
PROJECTED_DESCRIPTION = "Proyección Recurrente"
GENERATED_DESCRIPTION = "Generado automáticamente por regla de recurrencia"

COMMITMENT_PATCH_FIELDS = (
    "title", "amount", "due_date", "status", "paid_date", "category",
    "description", "recurrence_rule_id", "provider_name", "contact_info",
)
# NOT NULL columns
COMMITMENT_REQUIRED_FIELDS = frozenset({"title", "amount", "due_date", "status", "category"})


@dataclass(frozen=True)
class Commitment:
    id: str
    title: str
    amount: Decimal
    due_date: date
    status: str
    category: str
    paid_date: date | None = None
    description: str | None = None
    recurrence_rule_id: str | None = None
    provider_name: str | None = None
    contact_info: str | None = None
    is_projected: bool = False
    created_at: int = 0
    updated_at: int = 0

    @property
    def signature(self) -> tuple[str | None, date]:
        """Uniqueness key of the logical obligation."""
        return (self.recurrence_rule_id, self.due_date)

    @staticmethod
    def create(
        title: str,
        amount,
        due_date,
        status: str = STATUS_PENDING,
        category: str = "",
        paid_date=None,
        description: str | None = None,
        recurrence_rule_id: str | None = None,
        provider_name: str | None = None,
        contact_info: str | None = None,
        commitment_id: str | None = None,
        now: int | None = None,
    ) -> "Commitment":
        if status not in VALID_STATUSES:
            raise ValidationError(f"Invalid status: {status}")
        if commitment_id is not None and is_projection_id(commitment_id):
            raise ValidationError("Projected ids are reserved for virtual commitments")

        ts = now if now is not None else now_ms()
        return Commitment(
            id=commitment_id or str(uuid.uuid4()),
            title=(title or "").strip(),
            amount=parse_amount(amount),
            due_date=parse_iso_date(due_date, "due_date"),
            status=status,
            category=category or "",
            paid_date=parse_optional_date(paid_date, "paid_date"),
            description=description,
            recurrence_rule_id=recurrence_rule_id,
            provider_name=provider_name,
            contact_info=contact_info,
            is_projected=False,
            created_at=ts,
            updated_at=ts,
        )

    @staticmethod
    def projection(rule: RecurrenceRule, due: date, now: int) -> "Commitment":
        """Virtual commitment for one unsatisfied slot of `rule`. Never stored."""
        return Commitment(
            id=projection_id(rule.id, due),
            title=f"{rule.title}{PROJECTED_TITLE_SUFFIX}",
            amount=rule.amount,
            due_date=due,
            status=STATUS_PENDING,
            category=rule.category,
            description=rule.description or PROJECTED_DESCRIPTION,
            recurrence_rule_id=rule.id,
            is_projected=True,
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def patch(**changes) -> Dict[str, Any]:
        """Normalize a partial update. Unknown fields are rejected."""
        unknown = set(changes) - set(COMMITMENT_PATCH_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown commitment fields: {', '.join(sorted(unknown))}")

        payload: Dict[str, Any] = {}
        for key in COMMITMENT_PATCH_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if value is None and key in COMMITMENT_REQUIRED_FIELDS:
                raise ValidationError(f"Commitment {key} cannot be null")
            if key == "title":
                value = str(value).strip()
            elif key == "amount":
                value = parse_amount(value)
            elif key == "due_date":
                value = parse_iso_date(value, "due_date")
            elif key == "paid_date":
                value = parse_optional_date(value, "paid_date")
            elif key == "status" and value not in VALID_STATUSES:
                raise ValidationError(f"Invalid status: {value}")
            payload[key] = value
        return payload


def projection_id(rule_id: str, due: date) -> str:
    return f"{PROJECTED_ID_PREFIX}{rule_id}-{due.isoformat()}"


def is_projection_id(commitment_id: str) -> bool:
    return commitment_id.startswith(PROJECTED_ID_PREFIX)


def parse_projection_id(commitment_id: str) -> tuple[str, date]:
    """
    Split 'projected-{ruleId}-{YYYY-MM-DD}' into (rule_id, date).

    The rule id may itself contain dashes (UUIDs), so the date is taken from
    the fixed-width tail.
    """
    if not is_projection_id(commitment_id):
        raise ValidationError(f"Not a projected commitment id: {commitment_id}")
    body = commitment_id[len(PROJECTED_ID_PREFIX):]
    rule_id, sep, iso = body[:-11], body[-11:-10], body[-10:]
    if not rule_id or sep != "-":
        raise ValidationError(f"Malformed projected id: {commitment_id}")
    return rule_id, parse_iso_date(iso, "projected date")


def strip_projected_suffix(title: str) -> str:
    if title.endswith(PROJECTED_TITLE_SUFFIX):
        return title[: -len(PROJECTED_TITLE_SUFFIX)]
    return title
