"""
FastAPI dependencies (DB session, budget store)
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from cashflow.infrastructure.db.session import get_db as _get_db
from cashflow.infrastructure.repositories.base import BudgetStore
from cashflow.infrastructure.repositories.sqlalchemy_store import SqlAlchemyBudgetStore


# Re-export get_db for convenience
get_db = _get_db


def get_store(db: Session = Depends(get_db)) -> BudgetStore:
    """
    Budget store bound to the request's session

    Tests override this dependency with an in-memory store:
        app.dependency_overrides[get_store] = lambda: InMemoryBudgetStore()
    """
    return SqlAlchemyBudgetStore(db)
