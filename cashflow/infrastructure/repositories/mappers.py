"""
Mapping between storage rows (flat snake_case columns) and domain entities.

Rows may be ORM objects or plain dicts; both backends share these helpers.
"""
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Dict

from cashflow.domain.commitment import Commitment
from cashflow.domain.execution import BALANCE_FIELDS, AccountBalances, ExecutionLog, WeeklyAvailability
from cashflow.domain.recurrence_rule import RecurrenceRule


# domain field -> column, where they differ
_RULE_COLUMNS = {"interval": "interval_count"}


def _value(row, name: str, default=None):
    if isinstance(row, Mapping):
        return row.get(name, default)
    return getattr(row, name, default)


def _amount(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def rule_from_row(row) -> RecurrenceRule:
    return RecurrenceRule(
        id=_value(row, "id"),
        title=_value(row, "title") or "",
        amount=_amount(_value(row, "amount")),
        frequency=_value(row, "frequency"),
        interval=_value(row, "interval_count") or 1,
        day_to_send=_value(row, "day_to_send"),
        start_date=_value(row, "start_date"),
        end_date=_value(row, "end_date"),
        category=_value(row, "category") or "",
        description=_value(row, "description"),
        active=bool(_value(row, "active", True)),
        last_generated_date=_value(row, "last_generated_date"),
        created_at=_value(row, "created_at") or 0,
        updated_at=_value(row, "updated_at") or 0,
    )


def rule_to_row(rule: RecurrenceRule) -> Dict[str, Any]:
    return {
        "id": rule.id,
        "title": rule.title,
        "amount": rule.amount,
        "frequency": rule.frequency,
        "interval_count": rule.interval,
        "day_to_send": rule.day_to_send,
        "start_date": rule.start_date,
        "end_date": rule.end_date,
        "category": rule.category,
        "description": rule.description,
        "active": rule.active,
        "last_generated_date": rule.last_generated_date,
        "created_at": rule.created_at,
        "updated_at": rule.updated_at,
    }


def commitment_from_row(row) -> Commitment:
    return Commitment(
        id=_value(row, "id"),
        title=_value(row, "title") or "",
        amount=_amount(_value(row, "amount")),
        due_date=_value(row, "due_date"),
        status=_value(row, "status"),
        category=_value(row, "category") or "",
        paid_date=_value(row, "paid_date"),
        description=_value(row, "description"),
        recurrence_rule_id=_value(row, "recurrence_rule_id"),
        provider_name=_value(row, "provider_name"),
        contact_info=_value(row, "contact_info"),
        # rows in storage are real by definition
        is_projected=False,
        created_at=_value(row, "created_at") or 0,
        updated_at=_value(row, "updated_at") or 0,
    )


def commitment_to_row(commitment: Commitment) -> Dict[str, Any]:
    return {
        "id": commitment.id,
        "title": commitment.title,
        "amount": commitment.amount,
        "due_date": commitment.due_date,
        "status": commitment.status,
        "paid_date": commitment.paid_date,
        "category": commitment.category,
        "description": commitment.description,
        "recurrence_rule_id": commitment.recurrence_rule_id,
        "provider_name": commitment.provider_name,
        "contact_info": commitment.contact_info,
        "is_projected": False,
        "created_at": commitment.created_at,
        "updated_at": commitment.updated_at,
    }


def rule_patch_to_columns(patch: Dict[str, Any]) -> Dict[str, Any]:
    return {_RULE_COLUMNS.get(k, k): v for k, v in patch.items()}


def commitment_patch_to_columns(patch: Dict[str, Any]) -> Dict[str, Any]:
    # commitment columns carry the field names as-is
    return dict(patch)


def availability_from_row(row) -> WeeklyAvailability:
    return WeeklyAvailability(
        id=_value(row, "id"),
        week_start_date=_value(row, "week_start_date"),
        balances=AccountBalances(
            **{name: _amount(_value(row, name)) for name in BALANCE_FIELDS},
            total_available=_amount(_value(row, "total_available")),
        ),
        created_at=_value(row, "created_at") or 0,
        updated_at=_value(row, "updated_at") or 0,
    )


def availability_to_row(availability: WeeklyAvailability) -> Dict[str, Any]:
    return {
        "id": availability.id,
        "week_start_date": availability.week_start_date,
        **balances_to_columns(availability.balances),
        "created_at": availability.created_at,
        "updated_at": availability.updated_at,
    }


def balances_to_columns(balances: AccountBalances) -> Dict[str, Any]:
    columns = {name: getattr(balances, name) for name in BALANCE_FIELDS}
    columns["total_available"] = balances.total_available
    return columns


def execution_log_from_row(row) -> ExecutionLog:
    return ExecutionLog(
        id=_value(row, "id"),
        execution_date=_value(row, "execution_date"),
        week_start_date=_value(row, "week_start_date"),
        initial_state=AccountBalances.from_dict(_value(row, "initial_state")),
        total_paid=_amount(_value(row, "total_paid")),
        final_balance=_amount(_value(row, "final_balance")),
        items_count=_value(row, "items_count") or 0,
        created_at=_value(row, "created_at") or 0,
    )


def execution_log_to_row(log: ExecutionLog) -> Dict[str, Any]:
    return {
        "id": log.id,
        "execution_date": log.execution_date,
        "week_start_date": log.week_start_date,
        # JSON column
        "initial_state": log.initial_state.to_dict(),
        "total_paid": log.total_paid,
        "final_balance": log.final_balance,
        "items_count": log.items_count,
        "created_at": log.created_at,
    }
