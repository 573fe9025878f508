"""Location adjuster — cost multiplier from where the event takes place."""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal

from app.services.budget.config import BudgetConfig, budget_config
from app.services.budget.types import (
    CostCategory,
    Location,
    LocationAdjustment,
    PriceRange,
    ServiceCategory,
    money_float,
    multiply,
    parse_enum,
)

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


@dataclass
class LocationPricing:
    base_pricing: PriceRange
    adjustment: LocationAdjustment
    adjusted_pricing: PriceRange
    potential_savings: Decimal
    recommendation: str
    location: Location

    def to_dict(self) -> dict:
        category = self.adjustment.cost_category
        return {
            "service_type": self.adjustment.service_type.value,
            "base_pricing": self.base_pricing.to_dict(),
            "location_adjustment": {
                **self.adjustment.to_dict(),
                "factors": {
                    "location_type": self.adjustment.matched_by,
                    "service_type": self.adjustment.service_type.value,
                    "city": self.location.city,
                    "region": self.location.region,
                    "coordinates": {"lat": self.location.latitude, "lng": self.location.longitude},
                },
            },
            "adjusted_prices": self.adjusted_pricing.to_dict(),
            "cost_analysis": {
                "is_high_cost_area": category in (CostCategory.HIGH_COST, CostCategory.MODERATE_HIGH_COST),
                "is_low_cost_area": category == CostCategory.LOW_COST,
                "cost_category": category.value,
                "potential_savings": money_float(self.potential_savings),
                "recommendation": self.recommendation,
            },
        }


class LocationAdjuster:
    def __init__(self, config: BudgetConfig = budget_config):
        self.tables = config.locations
        self.multipliers = config.cost_multipliers
        self.confidence = config.location_confidence

    def adjust(
        self, service_type: ServiceCategory | str, location: Location | None
    ) -> LocationAdjustment:
        service = parse_enum(ServiceCategory, service_type, "service category")
        category, matched_by = self.classify(location or Location())

        service_factors = self.tables.service_adjustments.get(service)
        service_adjustment = service_factors[category] if service_factors else 1.0

        return LocationAdjustment(
            service_type=service,
            cost_category=category,
            base_multiplier=self.multipliers.get(category),
            service_adjustment=service_adjustment,
            confidence=self.confidence.get(matched_by),
            matched_by=matched_by,
        )

    def classify(self, location: Location) -> tuple[CostCategory, str]:
        """Return (cost category, how it was matched). Never fails; falls back to the default."""
        if location.city:
            hit = self.tables.cities.get(location.city.strip().lower())
            if hit is not None:
                return hit, "city"

        if location.region:
            hit = self.tables.regions.get(location.region.strip().lower())
            if hit is not None:
                return hit, "region"

        if location.has_coordinates:
            metro = self._nearest_metro(location.latitude, location.longitude)
            if metro is not None:
                return self.tables.cities[metro], "proximity"

        logger.warning(
            f"No cost classification for city={location.city!r} region={location.region!r}, "
            f"using {self.tables.default_category.value}"
        )
        return self.tables.default_category, "default"

    def location_pricing(
        self, price: PriceRange, service_type: ServiceCategory | str, location: Location | None
    ) -> LocationPricing:
        location = location or Location()
        adjustment = self.adjust(service_type, location)
        adjusted = price.scaled(adjustment.combined_multiplier)

        # Savings vs holding the same service in a moderate-cost area
        moderate = self.multipliers.get(CostCategory.MODERATE_COST)
        moderate_avg = multiply(price.average, moderate)
        potential_savings = max(Decimal("0.00"), adjusted.average - moderate_avg)

        if adjustment.cost_category == CostCategory.LOW_COST:
            recommendation = "Low-cost area — services here are priced below the national average."
        elif potential_savings > 0:
            recommendation = (
                f"High-cost area. A venue or vendors from outside the metro could save "
                f"about ${round(potential_savings):,}."
            )
        else:
            recommendation = "Pricing is in line with the national average for this area."

        return LocationPricing(
            base_pricing=price,
            adjustment=adjustment,
            adjusted_pricing=adjusted,
            potential_savings=potential_savings,
            recommendation=recommendation,
            location=location,
        )

    def _nearest_metro(self, lat: float, lng: float) -> str | None:
        best: tuple[float, str] | None = None
        for name, (mlat, mlng) in self.tables.metro_coordinates.items():
            if name not in self.tables.cities:
                continue
            dist = haversine_km(lat, lng, mlat, mlng)
            if dist <= self.tables.proximity_radius_km and (best is None or dist < best[0]):
                best = (dist, name)
        return best[1] if best else None


location_adjuster = LocationAdjuster()
