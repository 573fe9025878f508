"""Recommendation engine — per-category recommended budget for an event.

For every service category planned for the event type:
    amount = base average × seasonal multiplier × location multiplier × scale(attendees, hours)

scale() is monotonic non-decreasing in both attendees and hours:
    attendee factor = max(min_factor, (attendees / reference) ** exponent), 1.0 for fixed-size services
    duration factor = hours / reference_hours for hourly services, 1.0 otherwise

confidence = (w_r × source reliability + w_f × 0.5 ** (age_days / half_life)) × location confidence
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal

from app.services.budget.config import BudgetConfig, budget_config
from app.services.budget.errors import InvalidInputError
from app.services.budget.location_adjuster import LocationAdjuster
from app.services.budget.pricing_catalog import PricingCatalog
from app.services.budget.seasonal_adjuster import SeasonalAdjuster
from app.services.budget.types import (
    ZERO,
    BudgetPlan,
    BudgetRecommendation,
    EventType,
    Location,
    LocationAdjustment,
    PriceRange,
    SeasonalAdjustment,
    ServiceCategory,
    money_float,
    multiply,
    parse_enum,
    to_money,
)

logger = logging.getLogger(__name__)


@dataclass
class RecommendationResult:
    event_type: EventType
    total_budget: Decimal
    recommendations: list[BudgetRecommendation]
    seasonal: SeasonalAdjustment
    location_adjustments: dict[ServiceCategory, LocationAdjustment]
    attendee_count: int
    duration_hours: float
    event_date: date
    location: Location
    calculated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "total_budget": money_float(self.total_budget),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "adjustments": {
                "seasonal": self.seasonal.to_dict(),
                "location": {
                    c.value: adj.to_dict() for c, adj in self.location_adjustments.items()
                },
            },
            "metadata": {
                "event_type": self.event_type.value,
                "attendee_count": self.attendee_count,
                "duration_hours": self.duration_hours,
                "event_date": self.event_date.isoformat(),
                "location": self.location.to_dict(),
                "calculation_timestamp": self.calculated_at.isoformat(),
            },
        }


class RecommendationEngine:
    def __init__(
        self,
        catalog: PricingCatalog | None = None,
        seasonal_adjuster: SeasonalAdjuster | None = None,
        location_adjuster: LocationAdjuster | None = None,
        config: BudgetConfig = budget_config,
    ):
        self.config = config
        self.catalog = catalog or PricingCatalog()
        self.seasonal_adjuster = seasonal_adjuster or SeasonalAdjuster(config)
        self.location_adjuster = location_adjuster or LocationAdjuster(config)

    def recommend(
        self,
        event_type: EventType | str,
        attendee_count: int,
        duration_hours: float,
        event_date: date,
        location: Location | None = None,
        as_of: date | None = None,
    ) -> RecommendationResult:
        event_type = parse_enum(EventType, event_type, "event type")
        if attendee_count is None or attendee_count < 0:
            raise InvalidInputError("attendee_count must be non-negative")
        if duration_hours is None or not math.isfinite(duration_hours) or duration_hours < 0:
            raise InvalidInputError("duration_hours must be a finite non-negative number")
        if not isinstance(event_date, date):
            raise InvalidInputError(f"Malformed event date: {event_date!r}")

        location = location or Location()
        as_of = as_of or date.today()

        seasonal = self.seasonal_adjuster.adjust(event_date, location)
        recommendations: list[BudgetRecommendation] = []
        location_adjustments: dict[ServiceCategory, LocationAdjustment] = {}

        for category in self.config.event_categories[event_type]:
            price = self.catalog.get_base_price(category, event_type, location)
            loc = self.location_adjuster.adjust(category, location)
            location_adjustments[category] = loc

            amount = multiply(
                price.average,
                seasonal.final_multiplier,
                loc.combined_multiplier,
                self.scale(category, attendee_count, duration_hours),
            )
            recommendations.append(BudgetRecommendation(
                service_category=category,
                recommended_amount=amount,
                confidence_score=self.confidence(price, loc, as_of),
                pricing_source=price.source,
            ))

        total = to_money(sum((r.recommended_amount for r in recommendations), ZERO))
        logger.info(
            f"Budget recommendation {event_type.value}: {len(recommendations)} categories, "
            f"total={total}, season={seasonal.season_type.value}, "
            f"city={location.city!r}"
        )
        return RecommendationResult(
            event_type=event_type,
            total_budget=total,
            recommendations=recommendations,
            seasonal=seasonal,
            location_adjustments=location_adjustments,
            attendee_count=attendee_count,
            duration_hours=duration_hours,
            event_date=event_date,
            location=location,
        )

    def scale(self, category: ServiceCategory, attendee_count: int, duration_hours: float) -> float:
        s = self.config.scaling
        if category in s.fixed_size_services:
            attendee_factor = 1.0
        else:
            attendee_factor = max(
                s.min_attendee_factor,
                (attendee_count / s.reference_attendees) ** s.attendee_exponent,
            )
        duration_factor = duration_hours / s.reference_hours if category in s.hourly_services else 1.0
        return attendee_factor * duration_factor

    def confidence(self, price: PriceRange, loc: LocationAdjustment, as_of: date) -> float:
        c = self.config.confidence
        reliability = c.source_reliability[price.source]
        age_days = max(0, (as_of - price.observed_at).days)
        freshness = 0.5 ** (age_days / c.freshness_half_life_days)
        score = (c.reliability_weight * reliability + c.freshness_weight * freshness) * loc.confidence
        return round(min(1.0, max(0.0, score)), 3)

    @staticmethod
    def build_plan(result: RecommendationResult, event_id: str | None = None) -> BudgetPlan:
        return BudgetPlan(
            event_id=event_id,
            event_type=result.event_type,
            total_budget=result.total_budget,
            recommendations=list(result.recommendations),
        )


recommendation_engine = RecommendationEngine()
