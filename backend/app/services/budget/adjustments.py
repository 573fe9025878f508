"""Manual budget adjustments — percentage or fixed changes to category amounts."""

import logging
from decimal import Decimal
from typing import Iterable

from app.services.budget.types import (
    ZERO,
    AdjustmentType,
    BudgetAdjustment,
    BudgetPlan,
    BudgetRecommendation,
    PricingSource,
    to_money,
)

logger = logging.getLogger(__name__)


class BudgetAdjuster:
    def apply_adjustments(
        self, plan: BudgetPlan, adjustments: Iterable[BudgetAdjustment]
    ) -> BudgetPlan:
        """Apply adjustments in order and return a new plan with a recomputed total.

        A category not yet in the plan starts from 0 with a manual source.
        Amounts never go below 0.
        """
        adjustments = list(adjustments)
        by_category = {r.service_category: r for r in plan.recommendations}
        order = [r.service_category for r in plan.recommendations]

        for adj in adjustments:
            current = by_category.get(adj.service_category)
            amount = current.recommended_amount if current else ZERO
            new_amount = max(ZERO, to_money(self._adjusted(amount, adj)))

            if current is None:
                order.append(adj.service_category)
                by_category[adj.service_category] = BudgetRecommendation(
                    service_category=adj.service_category,
                    recommended_amount=new_amount,
                    confidence_score=0.0,
                    pricing_source=PricingSource.MANUAL,
                )
            else:
                by_category[adj.service_category] = BudgetRecommendation(
                    service_category=current.service_category,
                    recommended_amount=new_amount,
                    confidence_score=current.confidence_score,
                    pricing_source=current.pricing_source,
                )
            logger.info(
                f"Adjusted {adj.service_category.value} for event {plan.event_id}: "
                f"{amount} -> {new_amount} ({adj.adjustment_type.value} {adj.adjustment_value})"
            )

        new_plan = plan.with_recommendations([by_category[c] for c in order])
        new_plan.adjustments.extend(adjustments)
        return new_plan

    @staticmethod
    def _adjusted(amount: Decimal, adj: BudgetAdjustment) -> Decimal:
        value = Decimal(adj.adjustment_value)
        if adj.adjustment_type == AdjustmentType.PERCENTAGE:
            return amount * (1 + value / 100)
        if adj.adjustment_type == AdjustmentType.FIXED:
            return amount + value
        raise ValueError(f"Unhandled adjustment type: {adj.adjustment_type}")


budget_adjuster = BudgetAdjuster()
