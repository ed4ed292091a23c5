"""
Seed the default recurring expense catalogue and generate its commitments

Usage:
    python seed_rules.py          # refuses when rules already exist
    python seed_rules.py --force
"""
import logging
import sys

from cashflow.application.seed import SeedRecurringExpensesUseCase
from cashflow.infrastructure.db.session import session_scope
from cashflow.infrastructure.repositories.sqlalchemy_store import SqlAlchemyBudgetStore

logging.basicConfig(level=logging.INFO)

with session_scope() as db:
    result = SeedRecurringExpensesUseCase(SqlAlchemyBudgetStore(db)).execute(force="--force" in sys.argv)
    print(f"✓ Rules created: {result.rules_created}")
    print(f"✓ Commitments generated: {result.commitments_generated}")
