"""create_core_tables

Revision ID: c4f1a9e2b7d3
Revises:
Create Date: 2026-10-19 00:01:00.000000

Creates the six dashboard tables:
- users: profiles mirrored from the identity provider
- financial_data: latest saved dashboard snapshot
- simulations: named simulation runs
- transactions: income/expense/investment/withdrawal entries
- monthly_reports: per-month totals
- ai_chat_history: archived advisor conversations
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'c4f1a9e2b7d3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('company_name', sa.String(), nullable=True),
        sa.Column('industry', sa.String(), nullable=True),
        sa.Column('organization_type', sa.String(), nullable=True),
        sa.Column('team_size', sa.Integer(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    op.create_table(
        'financial_data',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('current_funds', sa.Float(), nullable=False),
        sa.Column('monthly_revenue', sa.Float(), nullable=False),
        sa.Column('monthly_expenses', sa.Float(), nullable=False),
        sa.Column('employees', sa.Integer(), nullable=False),
        sa.Column('marketing_spend', sa.Float(), nullable=False),
        sa.Column('product_price', sa.Float(), nullable=False),
        sa.Column('misc_expenses', sa.Float(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_financial_data_user_id', 'financial_data', ['user_id'])

    op.create_table(
        'simulations',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('inputs', postgresql.JSONB(), nullable=False),
        sa.Column('results', postgresql.JSONB(), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_simulations_user_id', 'simulations', ['user_id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint(
            "type IN ('income', 'expense', 'investment', 'withdrawal')",
            name='ck_transactions_type',
        ),
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_date', 'transactions', ['date'])

    op.create_table(
        'monthly_reports',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('total_revenue', sa.Float(), nullable=False),
        sa.Column('total_expenses', sa.Float(), nullable=False),
        sa.Column('net_profit', sa.Float(), nullable=False),
        sa.Column('cash_flow', postgresql.JSONB(), nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_monthly_reports_user_id', 'monthly_reports', ['user_id'])

    op.create_table(
        'ai_chat_history',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('session_id', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_user', sa.Boolean(), nullable=False),
        sa.Column('financial_context', postgresql.JSONB(), nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_ai_chat_history_user_id', 'ai_chat_history', ['user_id'])
    op.create_index('ix_ai_chat_history_session_id', 'ai_chat_history', ['session_id'])


def downgrade() -> None:
    op.drop_table('ai_chat_history')
    op.drop_table('monthly_reports')
    op.drop_table('transactions')
    op.drop_table('simulations')
    op.drop_table('financial_data')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
