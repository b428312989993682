"""Customer invitations; one active trainer per customer; one active plan assignment

Revision ID: 9b3e7c51d2a4
Revises: 4f1c2a9d7e10
Create Date: 2026-10-17 15:42:37.510284

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '9b3e7c51d2a4'
down_revision = '4f1c2a9d7e10'
branch_labels = None
depends_on = None

ACTIVE_ONLY = sa.text("status = 'active'")


def upgrade():
    op.create_table(
        'customer_invitations',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('trainer_id', sa.String(length=36), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('token', sa.String(length=128), nullable=False),
        sa.Column('message', sa.String(length=500), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('used_at', sa.DateTime(), nullable=True),
        sa.Column('customer_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token'),
    )
    op.create_index(op.f('ix_customer_invitations_trainer_id'), 'customer_invitations', ['trainer_id'], unique=False)
    op.create_index(op.f('ix_customer_invitations_customer_email'), 'customer_invitations', ['customer_email'], unique=False)

    op.create_index(
        'uq_trainer_customers_active_customer',
        'trainer_customers',
        ['customer_id'],
        unique=True,
        sqlite_where=ACTIVE_ONLY,
        postgresql_where=ACTIVE_ONLY,
    )
    op.create_index(
        'uq_meal_plan_assignments_active',
        'meal_plan_assignments',
        ['meal_plan_id', 'customer_id'],
        unique=True,
        sqlite_where=ACTIVE_ONLY,
        postgresql_where=ACTIVE_ONLY,
    )


def downgrade():
    op.drop_index('uq_meal_plan_assignments_active', table_name='meal_plan_assignments')
    op.drop_index('uq_trainer_customers_active_customer', table_name='trainer_customers')
    op.drop_index(op.f('ix_customer_invitations_customer_email'), table_name='customer_invitations')
    op.drop_index(op.f('ix_customer_invitations_trainer_id'), table_name='customer_invitations')
    op.drop_table('customer_invitations')
