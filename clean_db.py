"""
Reset the budget module: delete commitments, recurrence rules, weekly
availability and execution logs
"""
from cashflow.infrastructure.db.session import session_scope
from cashflow.infrastructure.db.models import (
    CommitmentModel, ExecutionLogModel, RecurrenceRuleModel, WeeklyAvailabilityModel,
)

print("=== BUDGET RESET ===")

with session_scope() as db:
    deleted_commitments = db.query(CommitmentModel).delete()
    print(f"✓ Commitments deleted: {deleted_commitments}")

    deleted_rules = db.query(RecurrenceRuleModel).delete()
    print(f"✓ Recurrence rules deleted: {deleted_rules}")

    deleted_logs = db.query(ExecutionLogModel).delete()
    print(f"✓ Execution logs deleted: {deleted_logs}")

    deleted_weeks = db.query(WeeklyAvailabilityModel).delete()
    print(f"✓ Weekly availability deleted: {deleted_weeks}")

    db.commit()
    print("\n✓ Budget module is empty")
