"""Cost-saving suggestions — independent threshold rules over a budget plan.

Rules run in a fixed order and each one either fires or not; savings are a
share of the plan's total budget rounded to whole currency units.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from app.services.budget.config import BudgetConfig, SuggestionThresholds, budget_config
from app.services.budget.errors import InvalidInputError
from app.services.budget.types import (
    BudgetPlan,
    Difficulty,
    Impact,
    ServiceCategory,
    money_float,
)

logger = logging.getLogger(__name__)

DIFFICULTY_ORDER = {Difficulty.EASY: 0, Difficulty.MEDIUM: 1, Difficulty.HARD: 2}


@dataclass(frozen=True)
class CostSavingSuggestion:
    id: str
    category: str
    title: str
    description: str
    potential_savings: Decimal
    difficulty: Difficulty
    impact: Impact
    time_to_implement: str
    requirements: list[str] = field(default_factory=list)
    risks: list[str] = field(default_factory=list)
    alternatives: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "potential_savings": money_float(self.potential_savings),
            "difficulty": self.difficulty.value,
            "impact": self.impact.value,
            "time_to_implement": self.time_to_implement,
            "requirements": list(self.requirements),
            "risks": list(self.risks),
            "alternatives": list(self.alternatives),
        }


@dataclass(frozen=True)
class _Rule:
    id: str
    category: str
    title: str
    description: str
    difficulty: Difficulty
    impact: Impact
    time_to_implement: str
    requirements: tuple[str, ...]
    risks: tuple[str, ...]
    alternatives: tuple[str, ...]
    fires: Callable[[BudgetPlan, SuggestionThresholds], bool]
    savings_pct: Callable[[SuggestionThresholds], float]


RULES: tuple[_Rule, ...] = (
    _Rule(
        id="package-deals",
        category="packages",
        title="Consider Package Deals",
        description=(
            "Bundle multiple services together for significant savings. Many vendors "
            "offer package deals for weddings and corporate events."
        ),
        difficulty=Difficulty.EASY,
        impact=Impact.HIGH,
        time_to_implement="1-2 weeks",
        requirements=("Multiple service categories", "Flexible vendor selection"),
        risks=("Limited vendor choice", "Potential quality compromise"),
        alternatives=("Individual vendor negotiations", "Seasonal discounts"),
        fires=lambda plan, t: plan.total_budget > Decimal(str(t.package_deals_min_budget)),
        savings_pct=lambda t: t.package_deals_savings_pct,
    ),
    _Rule(
        id="vendor-negotiation",
        category="negotiation",
        title="Negotiate with Vendors",
        description=(
            "Contact vendors directly to negotiate better rates, especially for "
            "high-cost services like catering or photography."
        ),
        difficulty=Difficulty.MEDIUM,
        impact=Impact.MEDIUM,
        time_to_implement="2-3 weeks",
        requirements=("Direct vendor contact", "Flexible timeline"),
        risks=("Vendor availability", "Quality concerns"),
        alternatives=("Multiple vendor quotes", "Off-season booking"),
        fires=lambda plan, t: any(
            r.recommended_amount > Decimal(str(t.vendor_negotiation_min_item))
            for r in plan.recommendations
        ),
        savings_pct=lambda t: t.vendor_negotiation_savings_pct,
    ),
    _Rule(
        id="off-season",
        category="timing",
        title="Consider Off-Season Booking",
        description=(
            "Book during off-peak seasons (winter, weekdays) for significant savings "
            "on venues and services."
        ),
        difficulty=Difficulty.EASY,
        impact=Impact.HIGH,
        time_to_implement="Immediate",
        requirements=("Flexible event date", "Weather considerations"),
        risks=("Weather dependency", "Guest availability"),
        alternatives=("Weekday events", "Indoor venues"),
        fires=lambda plan, t: plan.total_budget > Decimal(str(t.off_season_min_budget)),
        savings_pct=lambda t: t.off_season_savings_pct,
    ),
    _Rule(
        id="service-consolidation",
        category="optimization",
        title="Consolidate Services",
        description=(
            "Combine similar services or use multi-service vendors to reduce costs "
            "and simplify coordination."
        ),
        difficulty=Difficulty.MEDIUM,
        impact=Impact.MEDIUM,
        time_to_implement="1-2 weeks",
        requirements=("Service analysis", "Vendor research"),
        risks=("Quality variation", "Coordination complexity"),
        alternatives=("Service prioritization", "DIY options"),
        fires=lambda plan, t: len(plan.recommendations) > t.consolidation_min_services,
        savings_pct=lambda t: t.consolidation_savings_pct,
    ),
    _Rule(
        id="guest-reduction",
        category="scale",
        title="Optimize Guest List",
        description=(
            "Review guest list to focus on essential attendees. Each guest adds to "
            "catering, venue, and other costs."
        ),
        difficulty=Difficulty.HARD,
        impact=Impact.HIGH,
        time_to_implement="1 week",
        requirements=("Guest list review", "Family discussions"),
        risks=("Relationship impact", "Event atmosphere"),
        alternatives=("Tiered guest lists", "Virtual components"),
        fires=lambda plan, t: plan.total_budget > Decimal(str(t.guest_reduction_min_budget)),
        savings_pct=lambda t: t.guest_reduction_savings_pct,
    ),
    _Rule(
        id="diy-decorations",
        category="diy",
        title="DIY Decorations",
        description=(
            "Create your own decorations or enlist help from crafty friends and "
            "family to save on decoration costs."
        ),
        difficulty=Difficulty.MEDIUM,
        impact=Impact.LOW,
        time_to_implement="2-4 weeks",
        requirements=("Craft skills", "Time investment"),
        risks=("Quality control", "Time constraints"),
        alternatives=("Rental decorations", "Simple arrangements"),
        fires=lambda plan, t: plan.recommendation_for(ServiceCategory.DECORATIONS) is not None,
        savings_pct=lambda t: t.diy_decorations_savings_pct,
    ),
)


class SuggestionGenerator:
    def __init__(self, config: BudgetConfig = budget_config):
        self.thresholds = config.suggestions

    def generate(self, plan: BudgetPlan) -> list[CostSavingSuggestion]:
        suggestions = []
        for rule in RULES:
            if not rule.fires(plan, self.thresholds):
                continue
            savings = (plan.total_budget * Decimal(str(rule.savings_pct(self.thresholds)))).quantize(
                Decimal("1"), rounding=ROUND_HALF_UP
            )
            suggestions.append(CostSavingSuggestion(
                id=rule.id,
                category=rule.category,
                title=rule.title,
                description=rule.description,
                potential_savings=savings,
                difficulty=rule.difficulty,
                impact=rule.impact,
                time_to_implement=rule.time_to_implement,
                requirements=list(rule.requirements),
                risks=list(rule.risks),
                alternatives=list(rule.alternatives),
            ))

        logger.debug(
            f"Suggestions for total={plan.total_budget}: {[s.id for s in suggestions]}"
        )
        return suggestions

    @staticmethod
    def rank(
        suggestions: list[CostSavingSuggestion], by: str = "potential_savings"
    ) -> list[CostSavingSuggestion]:
        """Stable re-sort: savings descending, or difficulty easy to hard."""
        if by == "potential_savings":
            return sorted(suggestions, key=lambda s: -s.potential_savings)
        if by == "difficulty":
            return sorted(suggestions, key=lambda s: DIFFICULTY_ORDER[s.difficulty])
        raise InvalidInputError(f"Cannot rank suggestions by {by!r}")


suggestion_generator = SuggestionGenerator()
