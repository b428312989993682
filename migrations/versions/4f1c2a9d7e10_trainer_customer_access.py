"""Trainer customer access tables

Revision ID: 4f1c2a9d7e10
Revises:
Create Date: 2026-10-17 11:20:04.118392

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4f1c2a9d7e10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("role IN ('admin','trainer','customer')"),
        sa.CheckConstraint("status IN ('pending','active','suspended')"),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_status'), 'users', ['status'], unique=False)

    op.create_table(
        'trainer_customers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('trainer_id', sa.String(length=36), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=False),
        sa.Column('assigned_date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('unassigned_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('fitness_goal', sa.String(length=30), nullable=True),
        sa.CheckConstraint("status IN ('active','inactive')"),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id']),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_trainer_customers_trainer_id'), 'trainer_customers', ['trainer_id'], unique=False)
    op.create_index(op.f('ix_trainer_customers_customer_id'), 'trainer_customers', ['customer_id'], unique=False)
    op.create_index(op.f('ix_trainer_customers_status'), 'trainer_customers', ['status'], unique=False)
    op.create_index('idx_trainer_customers_trainer_status', 'trainer_customers', ['trainer_id', 'status'], unique=False)
    op.create_index('idx_trainer_customers_customer_status', 'trainer_customers', ['customer_id', 'status'], unique=False)

    op.create_table(
        'meal_plans',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('trainer_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('days', sa.Integer(), nullable=True),
        sa.Column('plan_data', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_meal_plans_trainer_id'), 'meal_plans', ['trainer_id'], unique=False)

    op.create_table(
        'meal_plan_assignments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('meal_plan_id', sa.String(length=36), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=False),
        sa.Column('trainer_id', sa.String(length=36), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('assigned_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("status IN ('active','cancelled')"),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id']),
        sa.ForeignKeyConstraint(['meal_plan_id'], ['meal_plans.id']),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_meal_plan_assignments_meal_plan_id'), 'meal_plan_assignments', ['meal_plan_id'], unique=False)
    op.create_index(op.f('ix_meal_plan_assignments_customer_id'), 'meal_plan_assignments', ['customer_id'], unique=False)
    op.create_index(op.f('ix_meal_plan_assignments_trainer_id'), 'meal_plan_assignments', ['trainer_id'], unique=False)

    op.create_table(
        'customer_progress',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=False),
        sa.Column('trainer_id', sa.String(length=36), nullable=False),
        sa.Column('recorded_date', sa.Date(), nullable=False),
        sa.Column('weight_kg', sa.Float(), nullable=False),
        sa.Column('measurements', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id']),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_customer_progress_customer_id'), 'customer_progress', ['customer_id'], unique=False)
    op.create_index(op.f('ix_customer_progress_trainer_id'), 'customer_progress', ['trainer_id'], unique=False)


def downgrade():
    op.drop_table('customer_progress')
    op.drop_table('meal_plan_assignments')
    op.drop_table('meal_plans')
    op.drop_table('trainer_customers')
    op.drop_table('users')
