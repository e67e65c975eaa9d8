"""initial_schema

Revision ID: 20261017_initial
Revises:
Create Date: 2026-10-17 09:00:00.000000

Creates the expense tracking schema:
- users
- projects and project_members
- costs and cost_splits (the ledger)
- budget_allocations (financial planner)
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261017_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # =========================================================================
    # 1. Users
    # =========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'], unique=False)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # =========================================================================
    # 2. Projects and memberships
    # =========================================================================
    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('budget_cents', sa.BigInteger(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_projects_id', 'projects', ['id'], unique=False)
    op.create_index('ix_projects_owner_id', 'projects', ['owner_id'], unique=False)

    op.create_table(
        'project_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role', sa.String(length=10), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('project_id', 'user_id', name='uq_project_member')
    )
    op.create_index('ix_project_members_id', 'project_members', ['id'], unique=False)
    op.create_index('ix_project_members_project_id', 'project_members', ['project_id'], unique=False)
    op.create_index('ix_project_members_user_id', 'project_members', ['user_id'], unique=False)

    # =========================================================================
    # 3. Cost ledger
    # =========================================================================
    op.create_table(
        'costs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('payer_id', sa.Integer(), nullable=False),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('cost_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False, server_default='final'),
        sa.Column('receipt_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount_cents > 0', name='ck_cost_amount_positive'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['payer_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_costs_id', 'costs', ['id'], unique=False)
    op.create_index('ix_costs_project_id', 'costs', ['project_id'], unique=False)
    op.create_index('ix_costs_payer_id', 'costs', ['payer_id'], unique=False)
    op.create_index('ix_costs_category', 'costs', ['category'], unique=False)
    op.create_index('ix_costs_cost_date', 'costs', ['cost_date'], unique=False)
    op.create_index('ix_costs_status', 'costs', ['status'], unique=False)

    op.create_table(
        'cost_splits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('cost_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('split_mode', sa.String(length=12), nullable=False),
        sa.CheckConstraint('amount_cents >= 0', name='ck_split_amount_non_negative'),
        sa.ForeignKeyConstraint(['cost_id'], ['costs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('cost_id', 'user_id', name='uq_cost_split_user')
    )
    op.create_index('ix_cost_splits_id', 'cost_splits', ['id'], unique=False)
    op.create_index('ix_cost_splits_cost_id', 'cost_splits', ['cost_id'], unique=False)
    op.create_index('ix_cost_splits_user_id', 'cost_splits', ['user_id'], unique=False)

    # =========================================================================
    # 4. Financial planner
    # =========================================================================
    op.create_table(
        'budget_allocations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('ticket_ref', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount_cents > 0', name='ck_allocation_amount_positive'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_budget_allocations_id', 'budget_allocations', ['id'], unique=False)
    op.create_index('ix_budget_allocations_project_id', 'budget_allocations', ['project_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('budget_allocations')
    op.drop_table('cost_splits')
    op.drop_table('costs')
    op.drop_table('project_members')
    op.drop_table('projects')
    op.drop_table('users')
