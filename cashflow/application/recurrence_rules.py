"""Recurrence Rule use cases"""
import dataclasses

from cashflow.domain.errors import NotFoundError
from cashflow.domain.recurrence_rule import RecurrenceRule, validate_rule
from cashflow.infrastructure.repositories.base import BudgetStore
from cashflow.utils.clock import now_ms


class ListRecurrenceRulesUseCase:
    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(self) -> list[RecurrenceRule]:
        return self.store.list_rules()


class AddRecurrenceRuleUseCase:
    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(
        self,
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
    ) -> str:
        # validation happens in create(), before anything is written
        rule = RecurrenceRule.create(
            title=title,
            amount=amount,
            frequency=frequency,
            start_date=start_date,
            category=category,
            day_to_send=day_to_send,
            interval=interval,
            end_date=end_date,
            description=description,
            active=active,
            last_generated_date=last_generated_date,
            rule_id=rule_id,
        )
        with self.store.atomic():
            return self.store.insert_rule(rule)


class UpdateRecurrenceRuleUseCase:
    """
    Partial update of a rule. Only future expansion changes: commitments that
    were already written keep their own values.
    """

    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(self, rule_id: str, **changes) -> None:
        patch = RecurrenceRule.patch(**changes)

        current = self.store.get_rule(rule_id)
        if current is None:
            raise NotFoundError(f"Recurrence rule {rule_id} not found")
        validate_rule(dataclasses.replace(current, **patch))

        patch["updated_at"] = now_ms()
        with self.store.atomic():
            self.store.update_rule(rule_id, patch)


class DeleteRecurrenceRuleUseCase:
    """Hard delete of the rule only; its commitments stay as independent records."""

    def __init__(self, store: BudgetStore):
        self.store = store

    def execute(self, rule_id: str) -> None:
        with self.store.atomic():
            self.store.delete_rule(rule_id)
