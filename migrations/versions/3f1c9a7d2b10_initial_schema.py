"""initial schema: schedules, employees, shifts, sales, holidays

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2025-06-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'monthly_schedules',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('month', sa.SmallInteger(), nullable=False),
        sa.Column('roster_grid', sa.JSON(), nullable=False),
        sa.Column('summary', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('month BETWEEN 1 AND 12', name='ck_schedule_month'),
    )
    op.create_index('ux_schedule_year_month', 'monthly_schedules', ['year', 'month'], unique=True)

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('position', sa.String(length=120), nullable=False),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'shift_definitions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=60), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
    )
    op.create_index('ix_shift_definitions_sort_order', 'shift_definitions', ['sort_order'], unique=False)

    op.create_table(
        'sales_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('occurred_repr', sa.String(length=10), nullable=False),
        sa.Column('occurred_at', sa.DateTime(), nullable=True),
        sa.Column('occurred_epoch_seconds', sa.BigInteger(), nullable=True),
        sa.Column('occurred_nanos', sa.Integer(), nullable=True),
        sa.Column('staff_oil', sa.Float(), nullable=True),
        sa.Column('customers', sa.Float(), nullable=True),
        sa.Column('income', sa.Float(), nullable=True),
        sa.Column('commission', sa.Float(), nullable=True),
        sa.Column('extra_commission', sa.Float(), nullable=True),
        sa.Column('expense', sa.Float(), nullable=True),
        sa.Column('credit_card', sa.Float(), nullable=True),
        sa.Column('cash', sa.Float(), nullable=True),
        sa.Column('time_work', sa.String(length=120), nullable=True),
        sa.CheckConstraint("occurred_repr IN ('native', 'epoch')", name='ck_sales_occurred_repr'),
    )
    op.create_index('ix_sales_records_occurred_at', 'sales_records', ['occurred_at'], unique=False)
    op.create_index('ix_sales_records_occurred_epoch_seconds', 'sales_records', ['occurred_epoch_seconds'], unique=False)

    op.create_table(
        'holidays',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.String(length=10), nullable=False),
        sa.Column('th', sa.String(length=255), nullable=True),
        sa.Column('en', sa.String(length=255), nullable=True),
        sa.UniqueConstraint('date'),
    )


def downgrade() -> None:
    op.drop_table('holidays')
    op.drop_index('ix_sales_records_occurred_epoch_seconds', table_name='sales_records')
    op.drop_index('ix_sales_records_occurred_at', table_name='sales_records')
    op.drop_table('sales_records')
    op.drop_index('ix_shift_definitions_sort_order', table_name='shift_definitions')
    op.drop_table('shift_definitions')
    op.drop_table('employees')
    op.drop_index('ux_schedule_year_month', table_name='monthly_schedules')
    op.drop_table('monthly_schedules')
