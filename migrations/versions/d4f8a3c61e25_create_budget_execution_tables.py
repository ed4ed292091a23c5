"""create weekly availability and execution log tables

Revision ID: d4f8a3c61e25
Revises: c1a7e2b94d10
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'd4f8a3c61e25'
down_revision: Union[str, None] = 'c1a7e2b94d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'budget_weekly_availability',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('week_start_date', sa.Date(), nullable=False),
        sa.Column('cta_corriente', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('cta_ahorros_j', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('cta_ahorros_n', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('efectivo', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('total_available', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('updated_at', sa.BigInteger(), nullable=False),
        sa.UniqueConstraint('week_start_date'),
    )

    op.create_table(
        'budget_execution_logs',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('execution_date', sa.Date(), nullable=False),
        sa.Column('week_start_date', sa.Date(), nullable=False),
        sa.Column('initial_state', sa.JSON(), nullable=False),
        sa.Column('total_paid', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('final_balance', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('items_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
    )

    op.create_index('ix_budget_execution_logs_execution_date', 'budget_execution_logs', ['execution_date'])


def downgrade() -> None:
    op.drop_index('ix_budget_execution_logs_execution_date', table_name='budget_execution_logs')
    op.drop_table('budget_execution_logs')
    op.drop_table('budget_weekly_availability')
