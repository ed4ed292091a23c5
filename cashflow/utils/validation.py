"""
Validation utilities
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation

from cashflow.domain.errors import ValidationError


_AMOUNT_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")


def normalize_decimal_input(value: str) -> str:
    """
    Normalize an amount typed by a user: comma becomes a dot.

    Example:
        >>> normalize_decimal_input("100,50")
        "100.50"
    """
    return value.strip().replace(",", ".")


def parse_amount(value) -> Decimal:
    """
    Coerce an amount (Decimal, int, float or string) into a Decimal.

    Amounts are plain decimal numbers: no cent scaling is applied.

    Raises:
        ValidationError: if the value is missing or not a number
    """
    if value is None:
        raise ValidationError("Amount is required")
    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 stays 0.1
        return Decimal(str(value))

    normalized = normalize_decimal_input(str(value))
    if not _AMOUNT_PATTERN.match(normalized):
        raise ValidationError(f"Invalid amount: {value!r}")
    try:
        return Decimal(normalized)
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid amount: {value!r}") from e


def parse_iso_date(value, field: str = "date") -> date:
    """Accept a date or an ISO 'YYYY-MM-DD' string."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required (YYYY-MM-DD)")
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError as e:
        raise ValidationError(f"Invalid {field}: {value!r}") from e


def parse_optional_date(value, field: str = "date") -> date | None:
    if value is None or value == "":
        return None
    return parse_iso_date(value, field)
