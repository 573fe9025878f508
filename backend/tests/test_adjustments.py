"""
Tests: BudgetAdjuster.

Run with:
    pytest backend/tests/test_adjustments.py -v
"""

from decimal import Decimal

from app.services.budget.adjustments import BudgetAdjuster
from app.services.budget.types import AdjustmentType, BudgetAdjustment, PricingSource, ServiceCategory
from tests.factories import make_plan


def adj(category: str, kind: str, value, reason: str = "") -> BudgetAdjustment:
    return BudgetAdjustment(
        service_category=ServiceCategory(category),
        adjustment_type=AdjustmentType(kind),
        adjustment_value=Decimal(str(value)),
        reason=reason,
    )


adjuster = BudgetAdjuster()


class TestApplyAdjustments:
    def test_percentage_increase(self, wedding_plan):
        result = adjuster.apply_adjustments(wedding_plan, [adj("catering", "percentage", 10)])
        assert result.recommendation_for(ServiceCategory.CATERING).recommended_amount == Decimal("5500.00")
        assert result.total_budget == Decimal("15800.00")

    def test_fixed_decrease_floors_at_zero(self, wedding_plan):
        result = adjuster.apply_adjustments(wedding_plan, [adj("music", "fixed", -2000)])
        assert result.recommendation_for(ServiceCategory.MUSIC).recommended_amount == Decimal("0.00")
        assert result.total_budget == Decimal("13800.00")

    def test_new_category(self, wedding_plan):
        result = adjuster.apply_adjustments(wedding_plan, [adj("security", "fixed", 800, "venue requires it")])
        security = result.recommendations[-1]
        assert security.service_category == ServiceCategory.SECURITY
        assert security.recommended_amount == Decimal("800.00")
        assert security.pricing_source == PricingSource.MANUAL
        assert security.confidence_score == 0.0

    def test_rounds_to_cents(self):
        plan = make_plan({"flowers": 1234.56})
        result = adjuster.apply_adjustments(plan, [adj("flowers", "percentage", 7.5)])
        assert result.recommendation_for(ServiceCategory.FLOWERS).recommended_amount == Decimal("1327.15")

    def test_applied_in_order(self, wedding_plan):
        result = adjuster.apply_adjustments(wedding_plan, [
            adj("catering", "percentage", 10),
            adj("catering", "fixed", 100),
        ])
        assert result.recommendation_for(ServiceCategory.CATERING).recommended_amount == Decimal("5600.00")

    def test_history_and_immutability(self, wedding_plan):
        changes = [adj("venue", "percentage", -5, "off-peak venue rate")]
        result = adjuster.apply_adjustments(wedding_plan, changes)

        assert result.adjustments == changes
        assert wedding_plan.adjustments == []
        assert wedding_plan.recommendation_for(ServiceCategory.VENUE).recommended_amount == Decimal("6000.00")
        assert result.recommendation_for(ServiceCategory.VENUE).recommended_amount == Decimal("5700.00")

    def test_no_adjustments(self, wedding_plan):
        result = adjuster.apply_adjustments(wedding_plan, [])
        assert result == wedding_plan
