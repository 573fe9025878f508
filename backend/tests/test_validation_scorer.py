"""
Tests: ValidationScorer warnings, recommendations and health score.

Run with:
    pytest backend/tests/test_validation_scorer.py -v
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from app.services.budget.config import ValidationThresholds, budget_config
from app.services.budget.package_catalog import package_catalog
from app.services.budget.types import AppliedPackage, HealthStatus, WarningType
from app.services.budget.validation_scorer import ValidationScorer
from tests.factories import make_plan, tracked


@pytest.fixture
def scorer():
    return ValidationScorer()


def messages(result) -> list[str]:
    return [w.message for w in result.warnings]


class TestHealthScore:
    def test_low_budget(self, scorer):
        result = scorer.validate(make_plan({"venue": 300, "catering": 300, "music": 200}))

        assert result.is_valid is True
        assert messages(result) == ["Budget may be too low for a quality event"]
        # 100 - 10 (warning) - 20 (no tracking)
        assert result.score == 70
        assert result.status == HealthStatus.GOOD
        assert result.industry_standards is True
        assert result.best_practices is False
        assert result.risk_factors == ["Budget may be too low for a quality event"]

    def test_empty_plan(self, scorer):
        result = scorer.validate(make_plan({}, total=0))

        assert result.is_valid is False
        assert WarningType.ERROR in [w.type for w in result.warnings]
        # 100 - 10 - 20 (error) - 30 (no breakdown) - 20 (no tracking)
        assert result.score == 20
        assert result.status == HealthStatus.POOR

    def test_healthy_plan(self, scorer, wedding_plan):
        plan = package_catalog.apply_package(wedding_plan, "wedding-essentials")
        plan.tracking.append(tracked("photography", 2800, 2700))

        result = scorer.validate(plan)
        assert result.warnings == []
        assert result.score == 100
        assert result.status == HealthStatus.EXCELLENT
        assert result.recommendations == []

    def test_missing_packages_penalty(self, scorer, wedding_plan):
        wedding_plan.tracking.append(tracked("venue", 6000, 6000))
        result = scorer.validate(wedding_plan)
        assert result.score == 90
        assert [r.category for r in result.recommendations] == ["packages"]
        assert result.recommendations[0].potential_impact == 2295

    def test_clamped_at_zero(self):
        config = replace(budget_config, validation=ValidationThresholds(warning_penalty=200))
        result = ValidationScorer(config).validate(make_plan({"venue": 300, "catering": 300, "music": 200}))
        assert result.score == 0
        assert result.status == HealthStatus.POOR

    @pytest.mark.parametrize("score,status", [
        (100, HealthStatus.EXCELLENT),
        (90, HealthStatus.EXCELLENT),
        (89, HealthStatus.GOOD),
        (70, HealthStatus.GOOD),
        (50, HealthStatus.FAIR),
        (49, HealthStatus.POOR),
    ])
    def test_status_bands(self, scorer, score, status):
        assert scorer.status_for(score) == status


class TestWarnings:
    def test_high_budget(self, scorer):
        result = scorer.validate(make_plan({"venue": 30000, "catering": 25000, "music": 5000}))
        assert "High budget detected - ensure proper planning" in messages(result)

    def test_breakdown_mismatch(self, scorer):
        result = scorer.validate(make_plan({"venue": 5000}, total=8000))
        assert "Service breakdown doesn't match total budget" in messages(result)

    def test_breakdown_within_tolerance(self, scorer):
        result = scorer.validate(make_plan({"venue": 5000, "catering": 2500, "music": 500}, total=8500))
        assert "Service breakdown doesn't match total budget" not in messages(result)

    def test_high_package_savings(self, scorer):
        plan = make_plan({"venue": 5000, "catering": 4000, "music": 1000})
        plan.packages.append(AppliedPackage(
            package=package_catalog.get("wedding-essentials"),
            replaced_amount=Decimal("15000"),
            savings=Decimal("4000"),
        ))
        assert "High package savings detected" in messages(scorer.validate(plan))

    def test_majority_over_budget(self, scorer, wedding_plan):
        wedding_plan.tracking.extend([
            tracked("venue", 6000, 6500),
            tracked("catering", 5000, 5200),
            tracked("music", 1500, 1400),
        ])
        assert "Multiple categories are over budget" in messages(scorer.validate(wedding_plan))

    def test_half_over_budget_is_fine(self, scorer, wedding_plan):
        wedding_plan.tracking.extend([
            tracked("venue", 6000, 6500),
            tracked("music", 1500, 1400),
        ])
        assert "Multiple categories are over budget" not in messages(scorer.validate(wedding_plan))


class TestResultShape:
    def test_factors(self, scorer):
        result = scorer.validate(make_plan({}, total=0))
        factors = {f.factor: f.score for f in result.factors}
        assert factors == {
            "Budget Completeness": 0,
            "Cost Tracking": 0,
            "Package Optimization": 0,
            "Budget Accuracy": 80,
        }
        assert sum(f.weight for f in result.factors) == pytest.approx(1.0)

    def test_to_dict(self, scorer, wedding_plan):
        data = scorer.validate(wedding_plan).to_dict()
        assert set(data) == {"is_valid", "warnings", "recommendations", "budget_health", "compliance"}
        assert set(data["budget_health"]) == {"score", "status", "factors"}
        assert set(data["compliance"]) == {"industry_standards", "best_practices", "risk_factors"}
