"""Budget engine models — pricing catalog, package deals, per-event breakdown and tracking."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class ServicePricing(Base):
    __tablename__ = "service_pricing"
    __table_args__ = (
        UniqueConstraint("event_type", "service_category", "city", name="uq_service_pricing_key"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    service_category: Mapped[str] = mapped_column(String(30), nullable=False)
    city: Mapped[str | None] = mapped_column(String(100))  # NULL = applies everywhere
    price_min: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    price_max: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    price_average: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    data_source: Mapped[str] = mapped_column(String(30), nullable=False)
    observed_at: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class PackageDealRow(Base):
    __tablename__ = "package_deals"

    id: Mapped[str] = mapped_column(String(60), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    service_categories: Mapped[list] = mapped_column(JSONB, nullable=False)
    event_types: Mapped[list] = mapped_column(JSONB, nullable=False)
    cities: Mapped[list | None] = mapped_column(JSONB)
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    discount_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class ServiceBudgetBreakdown(Base):
    __tablename__ = "service_budget_breakdown"
    __table_args__ = (
        UniqueConstraint("event_id", "service_category", name="uq_breakdown_event_category"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    event_type: Mapped[str | None] = mapped_column(String(30))
    service_category: Mapped[str] = mapped_column(String(30), nullable=False)
    estimated_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    confidence_score: Mapped[Decimal] = mapped_column(Numeric(4, 3), default=0)
    pricing_source: Mapped[str] = mapped_column(String(30), default="manual")
    adjustment_reason: Mapped[str | None] = mapped_column(Text)
    # {"id", "replaced_amount", "savings"} of the package covering this category
    applied_package: Mapped[dict | None] = mapped_column(JSONB)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class BudgetTrackingRow(Base):
    __tablename__ = "budget_tracking"
    __table_args__ = (
        UniqueConstraint("event_id", "service_category", name="uq_tracking_event_category"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    service_category: Mapped[str] = mapped_column(String(30), nullable=False)
    estimated_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    actual_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    variance: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    tracking_date: Mapped[date] = mapped_column(Date, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class BudgetAdjustmentRow(Base):
    __tablename__ = "budget_adjustments"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    service_category: Mapped[str] = mapped_column(String(30), nullable=False)
    adjustment_type: Mapped[str] = mapped_column(String(20), nullable=False)  # percentage | fixed
    adjustment_value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    reason: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class RecommendationFeedback(Base):
    __tablename__ = "recommendation_feedback"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id: Mapped[str | None] = mapped_column(String(100))
    event_type: Mapped[str] = mapped_column(String(30), nullable=False)
    service_category: Mapped[str] = mapped_column(String(30), nullable=False)
    rating: Mapped[str] = mapped_column(String(10), nullable=False)  # up | down
    comment: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
