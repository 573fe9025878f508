"""
Tests: LocationAdjuster.

Run with:
    pytest backend/tests/test_location_adjuster.py -v
"""

from datetime import date
from decimal import Decimal

import pytest

from app.services.budget.errors import NotFoundError
from app.services.budget.location_adjuster import LocationAdjuster, haversine_km
from app.services.budget.types import CostCategory, Location, PriceRange, PricingSource


@pytest.fixture
def adjuster():
    return LocationAdjuster()


class TestClassification:
    def test_city_match(self, adjuster):
        adj = adjuster.adjust("catering", Location(city="New York"))
        assert adj.cost_category == CostCategory.HIGH_COST
        assert adj.base_multiplier == 1.3
        assert adj.service_adjustment == 1.0
        assert adj.matched_by == "city"
        assert adj.confidence == 1.0
        assert adj.is_default is False

    def test_city_is_normalized(self, adjuster):
        adj = adjuster.adjust("catering", Location(city="  CHICAGO "))
        assert adj.cost_category == CostCategory.MODERATE_HIGH_COST

    def test_region_match(self, adjuster):
        adj = adjuster.adjust("catering", Location(city="Ames", region="Iowa"))
        assert adj.cost_category == CostCategory.LOW_COST
        assert adj.base_multiplier == 0.8
        assert adj.matched_by == "region"
        assert adj.confidence == 0.9

    def test_proximity_match(self, adjuster):
        # Cambridge, MA: a few km from Boston
        adj = adjuster.adjust("catering", Location(latitude=42.3736, longitude=-71.1097))
        assert adj.cost_category == CostCategory.HIGH_COST
        assert adj.matched_by == "proximity"
        assert adj.confidence == 0.8

    def test_default_fallback(self, adjuster):
        adj = adjuster.adjust("catering", Location(city="Smallville"))
        assert adj.cost_category == CostCategory.MODERATE_COST
        assert adj.combined_multiplier == 1.0
        assert adj.is_default is True
        assert adj.confidence == 0.6

    def test_no_location_at_all(self, adjuster):
        assert adjuster.adjust("venue", None).is_default is True

    def test_far_coordinates_fall_back(self, adjuster):
        # Middle of the Atlantic
        adj = adjuster.adjust("catering", Location(latitude=30.0, longitude=-40.0))
        assert adj.is_default is True

    def test_unknown_service(self, adjuster):
        with pytest.raises(NotFoundError):
            adjuster.adjust("fireworks", Location(city="Boston"))


class TestServiceAdjustment:
    def test_venue_in_high_cost_city(self, adjuster):
        adj = adjuster.adjust("venue", Location(city="San Francisco"))
        assert adj.service_adjustment == 1.10
        assert adj.combined_multiplier == pytest.approx(1.43)

    def test_decorations_cheaper_relative_in_high_cost(self, adjuster):
        adj = adjuster.adjust("decorations", Location(city="London"))
        assert adj.combined_multiplier == pytest.approx(1.17)

    def test_multipliers_positive_everywhere(self, adjuster):
        for city in ("New York", "Dallas", "Nowhere"):
            for service in ("venue", "catering", "transportation", "invitations"):
                assert adjuster.adjust(service, Location(city=city)).combined_multiplier > 0


class TestLocationPricing:
    def test_high_cost_savings(self, adjuster):
        price = PriceRange(
            min=Decimal("3000"),
            max=Decimal("8000"),
            average=Decimal("5000"),
            source=PricingSource.MARKET_SURVEY,
            observed_at=date(2026, 3, 1),
        )
        pricing = adjuster.location_pricing(price, "catering", Location(city="New York"))
        assert pricing.adjusted_pricing.average == Decimal("6500.00")
        assert pricing.potential_savings == Decimal("1500.00")

        analysis = pricing.to_dict()["cost_analysis"]
        assert analysis["is_high_cost_area"] is True
        assert analysis["cost_category"] == "high_cost"


class TestHaversine:
    def test_new_york_to_boston(self):
        d = haversine_km(40.7128, -74.0060, 42.3601, -71.0589)
        assert 290 < d < 320

    def test_same_point(self):
        assert haversine_km(10.0, 10.0, 10.0, 10.0) == pytest.approx(0.0)
