"""
SQLAlchemy ORM models (budget tables)
"""
from decimal import Decimal
from datetime import date as date_type
from sqlalchemy import String, Text, Date, Boolean, Numeric, SmallInteger, Integer, BigInteger, Index, JSON
from sqlalchemy.orm import Mapped, mapped_column

from cashflow.infrastructure.db.session import Base


class RecurrenceRuleModel(Base):
    """
    Recurrence rule - template of a repeating obligation

    Editing a rule only affects future expansion; commitments already
    written keep their own values.
    """
    __tablename__ = "budget_recurring_rules"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    frequency: Mapped[str] = mapped_column(String(16), nullable=False)  # weekly | monthly | yearly
    interval_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # weekly: 0=Sunday..6=Saturday; monthly/yearly: day of month 1..31
    day_to_send: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    start_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    end_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    category: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_generated_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)

    # epoch milliseconds
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)


class CommitmentModel(Base):
    """
    Real commitment. recurrence_rule_id is a weak reference: no FK, no cascade.
    """
    __tablename__ = "budget_commitments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    due_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)  # pending | paid | overdue
    paid_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    category: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    recurrence_rule_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    provider_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_info: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_projected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        Index("ix_budget_commitments_due_date", "due_date"),
        Index("ix_budget_commitments_rule_due", "recurrence_rule_id", "due_date"),
    )


class WeeklyAvailabilityModel(Base):
    """
    Account balances available for one week (week starts on Monday)
    """
    __tablename__ = "budget_weekly_availability"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    week_start_date: Mapped[date_type] = mapped_column(Date, nullable=False, unique=True)
    cta_corriente: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    cta_ahorros_j: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    cta_ahorros_n: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    efectivo: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    total_available: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=0)

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)


class ExecutionLogModel(Base):
    """
    Daily execution log: payments of a day against the week's availability
    """
    __tablename__ = "budget_execution_logs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    execution_date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
    week_start_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    # balances before the day's payments, decimals as strings
    initial_state: Mapped[dict] = mapped_column(JSON, nullable=False)
    total_paid: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    final_balance: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    items_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
