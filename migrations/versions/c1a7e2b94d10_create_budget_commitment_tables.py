"""create budget recurring rules and commitments

Revision ID: c1a7e2b94d10
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c1a7e2b94d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'budget_recurring_rules',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('frequency', sa.String(16), nullable=False),
        sa.Column('interval_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('day_to_send', sa.SmallInteger(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('category', sa.String(128), nullable=False, server_default=''),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('last_generated_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('updated_at', sa.BigInteger(), nullable=False),
    )

    op.create_table(
        'budget_commitments',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False, server_default=''),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('category', sa.String(128), nullable=False, server_default=''),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('recurrence_rule_id', sa.String(64), nullable=True),
        sa.Column('provider_name', sa.String(255), nullable=True),
        sa.Column('contact_info', sa.String(255), nullable=True),
        sa.Column('is_projected', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('updated_at', sa.BigInteger(), nullable=False),
    )

    op.create_index('ix_budget_commitments_due_date', 'budget_commitments', ['due_date'])
    op.create_index('ix_budget_commitments_rule_due', 'budget_commitments', ['recurrence_rule_id', 'due_date'])


def downgrade() -> None:
    op.drop_index('ix_budget_commitments_rule_due', table_name='budget_commitments')
    op.drop_index('ix_budget_commitments_due_date', table_name='budget_commitments')
    op.drop_table('budget_commitments')
    op.drop_table('budget_recurring_rules')
