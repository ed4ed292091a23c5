"""RecurrenceRule domain entity - template of a repeating financial obligation"""
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict

from cashflow.domain.errors import ValidationError
from cashflow.utils.clock import now_ms
from cashflow.utils.validation import parse_amount, parse_iso_date, parse_optional_date


FREQ_WEEKLY = "weekly"
FREQ_MONTHLY = "monthly"
FREQ_YEARLY = "yearly"
VALID_FREQ = frozenset({FREQ_WEEKLY, FREQ_MONTHLY, FREQ_YEARLY})

# Fields a caller may patch; id and created_at are immutable
RULE_PATCH_FIELDS = (
    "title", "amount", "frequency", "interval", "day_to_send",
    "start_date", "end_date", "category", "description", "active",
    "last_generated_date",
)
# NOT NULL columns
RULE_REQUIRED_FIELDS = frozenset({
    "title", "amount", "frequency", "interval", "start_date", "category", "active",
})


@dataclass(frozen=True)
class RecurrenceRule:
    id: str
    title: str
    amount: Decimal
    frequency: str
    interval: int
    day_to_send: int | None  # weekday 0..6 (0=Sunday) or day of month 1..31
    start_date: date
    end_date: date | None
    category: str
    description: str | None
    active: bool
    last_generated_date: date | None
    created_at: int
    updated_at: int

    @staticmethod
    def create(
        title: str,
        amount,
        frequency: str,
        start_date,
        category: str = "",
        day_to_send: int | None = None,
        interval: int | None = 1,
        end_date=None,
        description: str | None = None,
        active: bool = True,
        last_generated_date=None,
        rule_id: str | None = None,
    ) -> "RecurrenceRule":
        """Build a new rule; raises ValidationError before anything is written."""
        if title is None or not str(title).strip():
            raise ValidationError("Cannot create rule: title is required")
        if amount is None:
            raise ValidationError("Cannot create rule: amount is required")

        start = parse_iso_date(start_date, "start_date")
        if day_to_send is None:
            day_to_send = default_day_to_send(frequency, start)

        now = now_ms()
        rule = RecurrenceRule(
            id=rule_id or str(uuid.uuid4()),
            title=str(title).strip(),
            amount=parse_amount(amount),
            frequency=frequency,
            interval=interval or 1,
            day_to_send=day_to_send,
            start_date=start,
            end_date=parse_optional_date(end_date, "end_date"),
            category=category or "",
            description=description,
            active=bool(active),
            last_generated_date=parse_optional_date(last_generated_date, "last_generated_date"),
            created_at=now,
            updated_at=now,
        )
        validate_rule(rule)
        return rule

    @staticmethod
    def patch(**changes) -> Dict[str, Any]:
        """Normalize a partial update. Unknown fields are rejected."""
        unknown = set(changes) - set(RULE_PATCH_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown rule fields: {', '.join(sorted(unknown))}")

        payload: Dict[str, Any] = {}
        for key in RULE_PATCH_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if value is None and key in RULE_REQUIRED_FIELDS:
                raise ValidationError(f"Rule {key} cannot be null")
            if key == "title":
                if not str(value).strip():
                    raise ValidationError("Rule title cannot be empty")
                value = str(value).strip()
            elif key == "amount":
                value = parse_amount(value)
            elif key == "frequency":
                if value not in VALID_FREQ:
                    raise ValidationError(f"Invalid frequency: {value}")
            elif key == "interval":
                if value is None or int(value) < 1:
                    raise ValidationError("interval must be >= 1")
                value = int(value)
            elif key == "day_to_send":
                if value is not None:
                    value = int(value)
                    if not 0 <= value <= 31:
                        raise ValidationError("day_to_send must be in 0..31")
            elif key == "start_date":
                value = parse_iso_date(value, "start_date")
            elif key in ("end_date", "last_generated_date"):
                value = parse_optional_date(value, key)
            elif key == "active":
                value = bool(value)
            payload[key] = value
        return payload


def js_weekday(d: date) -> int:
    """Weekday with Sunday = 0 .. Saturday = 6."""
    return (d.weekday() + 1) % 7


def default_day_to_send(frequency: str, d: date) -> int:
    """Anchor day a rule starting on `d` repeats on."""
    return js_weekday(d) if frequency == FREQ_WEEKLY else d.day


def validate_rule(rule: RecurrenceRule) -> None:
    if rule.frequency not in VALID_FREQ:
        raise ValidationError(f"Invalid frequency: {rule.frequency}")
    if rule.interval < 1:
        raise ValidationError("interval must be >= 1")
    if rule.day_to_send is not None:
        if rule.frequency == FREQ_WEEKLY and not 0 <= rule.day_to_send <= 6:
            raise ValidationError("Weekly rules need day_to_send in 0..6 (0=Sunday)")
        if rule.frequency != FREQ_WEEKLY and not 1 <= rule.day_to_send <= 31:
            raise ValidationError("Monthly/yearly rules need day_to_send in 1..31")
    if rule.end_date is not None and rule.end_date < rule.start_date:
        raise ValidationError("end_date must be on or after start_date")
