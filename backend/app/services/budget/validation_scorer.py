"""Validation scorer — warnings, planning recommendations and a health score for a plan.

Health score:
    100
    - per warning: error 20, warning 10, info 5
    - 30 with no breakdown, 20 with no tracking, 10 with no packages above 5000
    clamped to [0, 100]

Bands: >= 90 excellent, >= 70 good, >= 50 fair, else poor.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from app.services.budget.config import BudgetConfig, budget_config
from app.services.budget.types import (
    ZERO,
    BudgetPlan,
    HealthStatus,
    Impact,
    WarningType,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationWarning:
    type: WarningType
    message: str
    impact: Impact
    suggestion: str

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "message": self.message,
            "impact": self.impact.value,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class PlanningRecommendation:
    category: str
    title: str
    description: str
    potential_impact: int
    priority: Impact

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "potential_impact": self.potential_impact,
            "priority": self.priority.value,
        }


@dataclass(frozen=True)
class HealthFactor:
    factor: str
    score: int
    weight: float

    def to_dict(self) -> dict:
        return {"factor": self.factor, "score": self.score, "weight": self.weight}


@dataclass
class ValidationResult:
    is_valid: bool
    warnings: list[ValidationWarning]
    recommendations: list[PlanningRecommendation]
    score: int
    status: HealthStatus
    factors: list[HealthFactor]
    industry_standards: bool
    best_practices: bool
    risk_factors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "warnings": [w.to_dict() for w in self.warnings],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "budget_health": {
                "score": self.score,
                "status": self.status.value,
                "factors": [f.to_dict() for f in self.factors],
            },
            "compliance": {
                "industry_standards": self.industry_standards,
                "best_practices": self.best_practices,
                "risk_factors": list(self.risk_factors),
            },
        }


class ValidationScorer:
    def __init__(self, config: BudgetConfig = budget_config):
        self.t = config.validation
        self.penalties = {
            WarningType.ERROR: self.t.error_penalty,
            WarningType.WARNING: self.t.warning_penalty,
            WarningType.INFO: self.t.info_penalty,
        }

    def validate(self, plan: BudgetPlan) -> ValidationResult:
        warnings = self._warnings(plan)
        score = self.health_score(plan, warnings)
        status = self.status_for(score)

        result = ValidationResult(
            is_valid=not any(w.type == WarningType.ERROR for w in warnings),
            warnings=warnings,
            recommendations=self._recommendations(plan),
            score=score,
            status=status,
            factors=self._factors(plan, warnings),
            industry_standards=score >= self.t.industry_standards_min,
            best_practices=score >= self.t.best_practices_min,
            risk_factors=[w.message for w in warnings if w.impact == Impact.HIGH],
        )
        logger.debug(
            f"Validated plan event={plan.event_id}: score={score} ({status.value}), "
            f"{len(warnings)} warnings"
        )
        return result

    def _warnings(self, plan: BudgetPlan) -> list[ValidationWarning]:
        t = self.t
        total = plan.total_budget
        warnings: list[ValidationWarning] = []

        if total < Decimal(str(t.low_budget)):
            warnings.append(ValidationWarning(
                type=WarningType.WARNING,
                message="Budget may be too low for a quality event",
                impact=Impact.HIGH,
                suggestion="Consider increasing budget or reducing scope",
            ))
        elif total > Decimal(str(t.high_budget)):
            warnings.append(ValidationWarning(
                type=WarningType.INFO,
                message="High budget detected - ensure proper planning",
                impact=Impact.MEDIUM,
                suggestion="Consider professional event planning services",
            ))

        if not plan.recommendations:
            warnings.append(ValidationWarning(
                type=WarningType.ERROR,
                message="No service breakdown provided",
                impact=Impact.HIGH,
                suggestion="Add service categories and estimated costs",
            ))
        else:
            gap = abs(plan.breakdown_total() - total)
            if gap > total * Decimal(str(t.breakdown_tolerance_pct)):
                warnings.append(ValidationWarning(
                    type=WarningType.WARNING,
                    message="Service breakdown doesn't match total budget",
                    impact=Impact.MEDIUM,
                    suggestion="Review and adjust service costs to match total budget",
                ))

        if plan.packages:
            package_savings = sum((p.savings for p in plan.packages), ZERO)
            if package_savings > total * Decimal(str(t.package_savings_pct)):
                warnings.append(ValidationWarning(
                    type=WarningType.INFO,
                    message="High package savings detected",
                    impact=Impact.LOW,
                    suggestion="Verify package quality and vendor reliability",
                ))

        if plan.tracking:
            over = sum(1 for e in plan.tracking if e.variance > 0)
            if over > len(plan.tracking) * t.over_budget_share:
                warnings.append(ValidationWarning(
                    type=WarningType.WARNING,
                    message="Multiple categories are over budget",
                    impact=Impact.HIGH,
                    suggestion="Review estimates and adjust budget or scope",
                ))

        return warnings

    def _recommendations(self, plan: BudgetPlan) -> list[PlanningRecommendation]:
        t = self.t
        recs = []
        if plan.total_budget > Decimal(str(t.packages_expected_above)) and not plan.packages:
            impact = (plan.total_budget * Decimal("0.15")).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            recs.append(PlanningRecommendation(
                category="packages",
                title="Consider Package Deals",
                description="Look for bundled service packages to save money",
                potential_impact=int(impact),
                priority=Impact.MEDIUM,
            ))
        if len(plan.recommendations) < t.min_categories:
            recs.append(PlanningRecommendation(
                category="planning",
                title="Expand Service Categories",
                description="Add more service categories for better budget planning",
                potential_impact=0,
                priority=Impact.HIGH,
            ))
        if not plan.tracking:
            recs.append(PlanningRecommendation(
                category="tracking",
                title="Start Budget Tracking",
                description="Begin tracking actual costs to improve future estimates",
                potential_impact=0,
                priority=Impact.HIGH,
            ))
        return recs

    def health_score(self, plan: BudgetPlan, warnings: list[ValidationWarning]) -> int:
        t = self.t
        score = 100 - sum(self.penalties[w.type] for w in warnings)
        if not plan.recommendations:
            score -= t.missing_breakdown_penalty
        if not plan.tracking:
            score -= t.missing_tracking_penalty
        if not plan.packages and plan.total_budget > Decimal(str(t.packages_expected_above)):
            score -= t.missing_packages_penalty
        return max(0, min(100, score))

    def status_for(self, score: int) -> HealthStatus:
        if score >= self.t.excellent_min:
            return HealthStatus.EXCELLENT
        if score >= self.t.good_min:
            return HealthStatus.GOOD
        if score >= self.t.fair_min:
            return HealthStatus.FAIR
        return HealthStatus.POOR

    @staticmethod
    def _factors(plan: BudgetPlan, warnings: list[ValidationWarning]) -> list[HealthFactor]:
        return [
            HealthFactor("Budget Completeness", 100 if plan.recommendations else 0, 0.3),
            HealthFactor("Cost Tracking", 100 if plan.tracking else 0, 0.2),
            HealthFactor("Package Optimization", 100 if plan.packages else 0, 0.2),
            HealthFactor("Budget Accuracy", max(0, 100 - 10 * len(warnings)), 0.3),
        ]


validation_scorer = ValidationScorer()
