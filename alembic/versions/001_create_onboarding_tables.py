"""Create onboarding records and history tables

Revision ID: 001_create_onboarding_tables
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001_create_onboarding_tables'
down_revision = None
branch_labels = None
depends_on = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade():
    op.create_table('onboarding_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('onboarding_version', sa.String(length=16), nullable=False),
        sa.Column('m2_data', JSONType, nullable=False),
        sa.Column('m3_data', JSONType, nullable=False),
        sa.Column('m4_data', JSONType, nullable=False),
        sa.Column('m5_data', JSONType, nullable=False),
        sa.Column('m6_data', JSONType, nullable=False),
        sa.Column('m7_data', JSONType, nullable=False),
        sa.Column('derived_metrics', JSONType, nullable=False),
        sa.Column('scores', JSONType, nullable=False),
        sa.Column('cuore_score', sa.Float(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', name='uq_onboarding_records_user_id'),
    )
    op.create_index(op.f('ix_onboarding_records_id'), 'onboarding_records', ['id'], unique=False)
    op.create_index(op.f('ix_onboarding_records_cuore_score'), 'onboarding_records', ['cuore_score'], unique=False)

    op.create_table('onboarding_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.Column('cuore_score', sa.Float(), nullable=False),
        sa.Column('weight_kg', sa.Float(), nullable=True),
        sa.Column('bmi', sa.Float(), nullable=True),
        sa.Column('m5_score', sa.Float(), nullable=True),
        sa.Column('m6_score', sa.Float(), nullable=True),
        sa.Column('m7_snapshot', JSONType, nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_onboarding_history_id'), 'onboarding_history', ['id'], unique=False)
    op.create_index(op.f('ix_onboarding_history_user_id'), 'onboarding_history', ['user_id'], unique=False)
    op.create_index('idx_onboarding_history_user_recorded', 'onboarding_history', ['user_id', 'recorded_at'], unique=False)


def downgrade():
    op.drop_index('idx_onboarding_history_user_recorded', table_name='onboarding_history')
    op.drop_index(op.f('ix_onboarding_history_user_id'), table_name='onboarding_history')
    op.drop_index(op.f('ix_onboarding_history_id'), table_name='onboarding_history')
    op.drop_table('onboarding_history')
    op.drop_index(op.f('ix_onboarding_records_cuore_score'), table_name='onboarding_records')
    op.drop_index(op.f('ix_onboarding_records_id'), table_name='onboarding_records')
    op.drop_table('onboarding_records')
