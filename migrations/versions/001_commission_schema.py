"""Create commission engine schema

Revision ID: 001_commission_schema
Revises:
Create Date: 2026-01-05 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_commission_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """
    Creates the tables read by the commission engine:
    users, plans with dated versions and ramp steps, assignments,
    monthly period data, orders and adjustments.
    """
    op.create_table('user',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('role', sa.String(length=10), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('user', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_user_email'), ['email'], unique=True)

    op.create_table('comp_plan',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('frequency', sa.String(length=16), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('comp_plan_version',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('plan_id', sa.String(length=36), nullable=False),
        sa.Column('version_number', sa.Integer(), nullable=False),
        sa.Column('effective_from', sa.Date(), nullable=False),
        sa.Column('base_rate_multiplier', sa.Float(), nullable=False),
        sa.Column('accelerators_enabled', sa.Boolean(), nullable=False),
        sa.Column('kickers_enabled', sa.Boolean(), nullable=False),
        sa.Column('accelerators', sa.JSON(), nullable=True),
        sa.Column('kickers', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(['plan_id'], ['comp_plan.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('comp_plan_version', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_comp_plan_version_plan_id'), ['plan_id'], unique=False)

    op.create_table('ramp_step',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('plan_version_id', sa.String(length=36), nullable=False),
        sa.Column('month_index', sa.Integer(), nullable=False),
        sa.Column('quota_percentage', sa.Float(), nullable=False),
        sa.Column('guaranteed_draw_percent', sa.Float(), nullable=True),
        sa.Column('draw_type', sa.String(length=16), nullable=False),
        sa.Column('disable_accelerators', sa.Boolean(), nullable=True),
        sa.Column('disable_kickers', sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(['plan_version_id'], ['comp_plan_version.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('plan_version_id', 'month_index', name='uq_ramp_step_version_month')
    )
    with op.batch_alter_table('ramp_step', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_ramp_step_plan_version_id'), ['plan_version_id'], unique=False)

    op.create_table('plan_assignment',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('plan_id', sa.String(length=36), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(['plan_id'], ['comp_plan.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('plan_assignment', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_plan_assignment_user_id'), ['user_id'], unique=False)

    op.create_table('user_period_data',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('month', sa.Date(), nullable=False),
        sa.Column('quota', sa.Float(), nullable=False),
        sa.Column('base_salary', sa.Float(), nullable=False),
        sa.Column('ote', sa.Float(), nullable=False),
        sa.Column('effective_rate', sa.Float(), nullable=False),
        sa.Column('plan_version_id', sa.String(length=36), nullable=True),
        sa.ForeignKeyConstraint(['plan_version_id'], ['comp_plan_version.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'month', name='uq_user_period_data_user_month')
    )
    with op.batch_alter_table('user_period_data', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_user_period_data_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_user_period_data_month'), ['month'], unique=False)

    op.create_table('order',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('order_number', sa.String(length=64), nullable=False),
        sa.Column('booking_date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('converted_usd', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('order', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_order_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_order_booking_date'), ['booking_date'], unique=False)

    op.create_table('adjustment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('month', sa.Date(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('reason', sa.String(length=255), nullable=True),
        sa.Column('adjustment_type', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('adjustment', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_adjustment_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_adjustment_month'), ['month'], unique=False)


def downgrade():
    op.drop_table('adjustment')
    op.drop_table('order')
    op.drop_table('user_period_data')
    op.drop_table('plan_assignment')
    op.drop_table('ramp_step')
    op.drop_table('comp_plan_version')
    op.drop_table('comp_plan')
    op.drop_table('user')
