"""
Engine, sessions and the declarative base of the budget tables
"""
from contextlib import contextmanager
from typing import Iterator

import psycopg
from sqlalchemy import create_engine, text
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from cashflow.config import get_settings


class Base(DeclarativeBase):
    """Declarative base of the budget_* tables"""
    pass


_engine = None
_SessionLocal = None


def get_engine():
    """Engine for Settings.DATABASE_URL, created on first use"""
    global _engine
    if _engine is None:
        url = get_settings().get_sqlalchemy_url()
        _engine = create_engine(url, pool_pre_ping=True)
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    return _SessionLocal


def get_db() -> Iterator[Session]:
    """
    Request-scoped session; the budget store commits through `atomic()`,
    so this only guarantees the session is closed.

    Usage:
        def get_store(db: Session = Depends(get_db)) -> BudgetStore:
            return SqlAlchemyBudgetStore(db)
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Session for operator scripts. Rolls back whatever is still pending when
    the block raises.

        with session_scope() as db:
            GenerateFromRulesUseCase(SqlAlchemyBudgetStore(db)).execute()
    """
    db = get_session_factory()()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_db_connection() -> None:
    """
    Readiness check: runs SELECT 1 against the budget database.

    PostgreSQL is checked with a raw psycopg connection (short connect
    timeout, no pool); other URLs (sqlite in tests) go through the engine.

    Raises:
        psycopg.OperationalError: if PostgreSQL is unreachable
        sqlalchemy.exc.OperationalError: for other backends
    """
    url = get_settings().DATABASE_URL
    if url.startswith("postgresql"):
        with psycopg.connect(url.replace("postgresql+psycopg://", "postgresql://", 1), connect_timeout=3) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))
