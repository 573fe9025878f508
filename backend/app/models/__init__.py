from app.models.budget import (
    BudgetAdjustmentRow,
    BudgetTrackingRow,
    PackageDealRow,
    RecommendationFeedback,
    ServiceBudgetBreakdown,
    ServicePricing,
)

__all__ = [
    "BudgetAdjustmentRow",
    "BudgetTrackingRow",
    "PackageDealRow",
    "RecommendationFeedback",
    "ServiceBudgetBreakdown",
    "ServicePricing",
]
