from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.services.budget.feedback import FeedbackEvent, FeedbackRating
from app.services.budget.types import (
    AdjustmentType,
    AppliedPackage,
    BudgetAdjustment,
    BudgetPlan,
    BudgetRecommendation,
    EventType,
    PackageDeal,
    PricingSource,
    ServiceCategory,
    TrackingEntry,
    parse_enum,
    to_money,
)


class BudgetModel(BaseModel):
    """Request base: Infinity and NaN are rejected in every float field."""
    model_config = ConfigDict(allow_inf_nan=False)


class RecommendationIn(BudgetModel):
    service_category: str
    recommended_amount: float = Field(ge=0)
    confidence_score: float = Field(default=0.0, ge=0, le=1)
    pricing_source: str = "manual"

    def to_domain(self) -> BudgetRecommendation:
        return BudgetRecommendation(
            service_category=parse_enum(ServiceCategory, self.service_category, "service category"),
            recommended_amount=to_money(self.recommended_amount),
            confidence_score=self.confidence_score,
            pricing_source=parse_enum(PricingSource, self.pricing_source, "pricing source"),
        )


class TrackingIn(BudgetModel):
    service_category: str
    estimated_cost: float = Field(ge=0)
    actual_cost: float = Field(ge=0)
    tracking_date: date

    def to_domain(self) -> TrackingEntry:
        return TrackingEntry(
            service_category=parse_enum(ServiceCategory, self.service_category, "service category"),
            estimated_cost=to_money(self.estimated_cost),
            actual_cost=to_money(self.actual_cost),
            tracking_date=self.tracking_date,
        )


class PackageDealIn(BudgetModel):
    id: str
    name: str
    description: str = ""
    service_categories: list[str]
    base_price: float = Field(ge=0)
    discount_percentage: float = Field(ge=0, le=100)
    event_types: list[str]
    cities: list[str] | None = None
    is_active: bool = True

    def to_domain(self) -> PackageDeal:
        return PackageDeal(
            id=self.id,
            name=self.name,
            description=self.description,
            service_categories=frozenset(
                parse_enum(ServiceCategory, c, "service category") for c in self.service_categories
            ),
            base_price=to_money(self.base_price),
            discount_percentage=Decimal(str(self.discount_percentage)),
            event_types=frozenset(parse_enum(EventType, e, "event type") for e in self.event_types),
            cities=frozenset(c.strip().lower() for c in self.cities) if self.cities else None,
            is_active=self.is_active,
        )


class AppliedPackageIn(BudgetModel):
    package: PackageDealIn
    replaced_amount: float
    savings: float

    def to_domain(self) -> AppliedPackage:
        return AppliedPackage(
            package=self.package.to_domain(),
            replaced_amount=to_money(self.replaced_amount),
            savings=to_money(self.savings),
        )


class AdjustmentIn(BudgetModel):
    service_category: str
    adjustment_type: str
    adjustment_value: float
    reason: str = ""

    def to_domain(self) -> BudgetAdjustment:
        return BudgetAdjustment(
            service_category=parse_enum(ServiceCategory, self.service_category, "service category"),
            adjustment_type=parse_enum(AdjustmentType, self.adjustment_type, "adjustment type"),
            adjustment_value=Decimal(str(self.adjustment_value)),
            reason=self.reason,
        )


class BudgetPlanIn(BudgetModel):
    event_id: str | None = None
    event_type: str | None = None
    total_budget: float = Field(ge=0)
    recommendations: list[RecommendationIn] = []
    tracking: list[TrackingIn] = []
    packages: list[AppliedPackageIn] = []
    adjustments: list[AdjustmentIn] = []
    applied_package_ids: list[str] = []

    def to_domain(self) -> BudgetPlan:
        packages = [p.to_domain() for p in self.packages]
        applied_ids = list(self.applied_package_ids)
        for p in packages:
            if p.package.id not in applied_ids:
                applied_ids.append(p.package.id)
        return BudgetPlan(
            event_id=self.event_id,
            event_type=parse_enum(EventType, self.event_type, "event type") if self.event_type else None,
            total_budget=to_money(self.total_budget),
            recommendations=[r.to_domain() for r in self.recommendations],
            tracking=[t.to_domain() for t in self.tracking],
            packages=packages,
            adjustments=[a.to_domain() for a in self.adjustments],
            applied_package_ids=applied_ids,
        )


class ApplyPackageRequest(BudgetModel):
    plan: BudgetPlanIn
    package_id: str


class SuggestionsRequest(BudgetModel):
    plan: BudgetPlanIn
    rank_by: str | None = None  # potential_savings | difficulty


class BreakdownUpdateRequest(BudgetModel):
    """Replace the stored breakdown with plan (when given), then apply adjustments."""
    plan: BudgetPlanIn | None = None
    adjustments: list[AdjustmentIn] = []


class TrackingRequest(BudgetModel):
    service_category: str | None = None
    actual_cost: float | None = None
    actual_costs: dict[str, float] = {}
    tracking_date: date | None = None

    @model_validator(mode="after")
    def _require_costs(self):
        if (self.service_category is None) != (self.actual_cost is None):
            raise ValueError("service_category and actual_cost must be given together")
        if self.service_category is None and not self.actual_costs:
            raise ValueError("Provide service_category/actual_cost or actual_costs")
        return self

    def items(self) -> list[tuple[str, float]]:
        items = list(self.actual_costs.items())
        if self.service_category is not None:
            items.append((self.service_category, self.actual_cost))
        return items


class FeedbackRequest(BudgetModel):
    event_type: str
    service_category: str
    rating: str  # up | down
    comment: str | None = None
    event_id: str | None = None

    def to_domain(self) -> FeedbackEvent:
        return FeedbackEvent(
            event_type=parse_enum(EventType, self.event_type, "event type"),
            service_category=parse_enum(ServiceCategory, self.service_category, "service category"),
            rating=parse_enum(FeedbackRating, self.rating, "feedback rating"),
            comment=self.comment,
            event_id=self.event_id,
        )
