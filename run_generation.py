"""
Materialize pending commitments from active rules up to a date

Usage:
    python run_generation.py               # up to the configured horizon
    python run_generation.py 2026-12-31
"""
import logging
import sys

from cashflow.application.generation import GenerateFromRulesUseCase
from cashflow.infrastructure.db.session import session_scope
from cashflow.infrastructure.repositories.sqlalchemy_store import SqlAlchemyBudgetStore

logging.basicConfig(level=logging.INFO)

limit = sys.argv[1] if len(sys.argv) > 1 else None

with session_scope() as db:
    count = GenerateFromRulesUseCase(SqlAlchemyBudgetStore(db)).execute(future_limit=limit)
    print(f"✓ Commitments generated: {count}")
