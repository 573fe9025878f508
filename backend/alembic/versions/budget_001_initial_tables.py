"""Budget engine tables: pricing, packages, breakdown, tracking, adjustments, feedback

Revision ID: budget_001
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = 'budget_001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- Pricing catalog ---
    op.create_table(
        'service_pricing',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('event_type', sa.String(30), nullable=False),
        sa.Column('service_category', sa.String(30), nullable=False),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('price_min', sa.Numeric(10, 2), nullable=False),
        sa.Column('price_max', sa.Numeric(10, 2), nullable=False),
        sa.Column('price_average', sa.Numeric(10, 2), nullable=False),
        sa.Column('data_source', sa.String(30), nullable=False),
        sa.Column('observed_at', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('event_type', 'service_category', 'city', name='uq_service_pricing_key'),
    )
    op.create_index('ix_service_pricing_event_type', 'service_pricing', ['event_type'])

    # --- Package deals ---
    op.create_table(
        'package_deals',
        sa.Column('id', sa.String(60), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('service_categories', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('event_types', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('cities', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('base_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('discount_percentage', sa.Numeric(5, 2), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    # --- Per-event breakdown ---
    op.create_table(
        'service_budget_breakdown',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('event_id', sa.String(100), nullable=False),
        sa.Column('event_type', sa.String(30), nullable=True),
        sa.Column('service_category', sa.String(30), nullable=False),
        sa.Column('estimated_cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('confidence_score', sa.Numeric(4, 3), server_default='0', nullable=False),
        sa.Column('pricing_source', sa.String(30), server_default='manual', nullable=False),
        sa.Column('adjustment_reason', sa.Text(), nullable=True),
        sa.Column('applied_package', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('event_id', 'service_category', name='uq_breakdown_event_category'),
    )
    op.create_index('ix_service_budget_breakdown_event_id', 'service_budget_breakdown', ['event_id'])

    # --- Tracking ---
    op.create_table(
        'budget_tracking',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('event_id', sa.String(100), nullable=False),
        sa.Column('service_category', sa.String(30), nullable=False),
        sa.Column('estimated_cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('actual_cost', sa.Numeric(10, 2), nullable=False),
        sa.Column('variance', sa.Numeric(10, 2), nullable=False),
        sa.Column('tracking_date', sa.Date(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('event_id', 'service_category', name='uq_tracking_event_category'),
    )
    op.create_index('ix_budget_tracking_event_id', 'budget_tracking', ['event_id'])

    # --- Adjustments audit ---
    op.create_table(
        'budget_adjustments',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('event_id', sa.String(100), nullable=False),
        sa.Column('service_category', sa.String(30), nullable=False),
        sa.Column('adjustment_type', sa.String(20), nullable=False),
        sa.Column('adjustment_value', sa.Numeric(10, 2), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_budget_adjustments_event_id', 'budget_adjustments', ['event_id'])

    # --- Recommendation feedback ---
    op.create_table(
        'recommendation_feedback',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('event_id', sa.String(100), nullable=True),
        sa.Column('event_type', sa.String(30), nullable=False),
        sa.Column('service_category', sa.String(30), nullable=False),
        sa.Column('rating', sa.String(10), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    op.drop_table('recommendation_feedback')
    op.drop_index('ix_budget_adjustments_event_id', table_name='budget_adjustments')
    op.drop_table('budget_adjustments')
    op.drop_index('ix_budget_tracking_event_id', table_name='budget_tracking')
    op.drop_table('budget_tracking')
    op.drop_index('ix_service_budget_breakdown_event_id', table_name='service_budget_breakdown')
    op.drop_table('service_budget_breakdown')
    op.drop_table('package_deals')
    op.drop_index('ix_service_pricing_event_type', table_name='service_pricing')
    op.drop_table('service_pricing')
