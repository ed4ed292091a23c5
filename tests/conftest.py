"""
Pytest fixtures for testing
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from cashflow.config import Settings
from cashflow.infrastructure.db import models  # noqa: F401  registers tables on Base.metadata
from cashflow.infrastructure.db.session import Base
from cashflow.infrastructure.repositories.memory_store import InMemoryBudgetStore
from cashflow.infrastructure.repositories.sqlalchemy_store import SqlAlchemyBudgetStore


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine for tests"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def memory_store():
    return InMemoryBudgetStore()


@pytest.fixture
def sql_store(db_session):
    return SqlAlchemyBudgetStore(db_session)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Both backends; use cases must behave the same on each"""
    if request.param == "memory":
        return InMemoryBudgetStore()
    return SqlAlchemyBudgetStore(request.getfixturevalue("db_session"))


@pytest.fixture
def settings():
    """Default tolerances and horizons, without reading the environment"""
    return Settings(_env_file=None, DATABASE_URL="sqlite:///:memory:")
