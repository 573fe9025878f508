"""Budget engine — event budget recommendation and adjustment.

Modules:
    types                 Enums, value objects and the BudgetPlan aggregate
    errors                BudgetError hierarchy with HTTP status codes
    config                Frozen rule tables and thresholds
    pricing_catalog       Base price ranges per category and event type
    seasonal_adjuster     Season tier and special-date multipliers
    location_adjuster     Cost-of-living multiplier by city / region / proximity
    recommendation_engine Per-category recommended amounts and confidence
    package_catalog       Bundle deals and their application to a plan
    adjustments           Manual percentage / fixed adjustments
    tracking_ledger       Actual vs estimated costs, accuracy and insights
    suggestion_generator  Cost-saving suggestions
    validation_scorer     Warnings, health score and compliance
    feedback              Recommendation feedback side channel
    store                 Async SQLAlchemy persistence

Pipeline:
    PricingCatalog + SeasonalAdjuster + LocationAdjuster → RecommendationEngine
    → PackageCatalog.apply_package / BudgetAdjuster → TrackingLedger
    → SuggestionGenerator + ValidationScorer
"""
