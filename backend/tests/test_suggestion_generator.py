"""
Tests: SuggestionGenerator rules and ranking.

Run with:
    pytest backend/tests/test_suggestion_generator.py -v
"""

from decimal import Decimal

import pytest

from app.services.budget.errors import InvalidInputError
from app.services.budget.suggestion_generator import SuggestionGenerator
from tests.factories import make_plan


@pytest.fixture
def generator():
    return SuggestionGenerator()


@pytest.fixture
def plan_12k():
    return make_plan({"venue": 5000, "catering": 4000, "decorations": 1000, "music": 2000})


class TestGenerate:
    def test_all_rules_fire_in_order(self, generator, plan_12k):
        ids = [s.id for s in generator.generate(plan_12k)]
        assert ids == [
            "package-deals",
            "vendor-negotiation",
            "off-season",
            "service-consolidation",
            "guest-reduction",
            "diy-decorations",
        ]

    def test_savings_are_share_of_total(self, generator, plan_12k):
        savings = {s.id: s.potential_savings for s in generator.generate(plan_12k)}
        assert savings == {
            "package-deals": Decimal("1800"),
            "vendor-negotiation": Decimal("960"),
            "off-season": Decimal("2400"),
            "service-consolidation": Decimal("1200"),
            "guest-reduction": Decimal("1440"),
            "diy-decorations": Decimal("600"),
        }

    def test_package_deal_details(self, generator, plan_12k):
        package = generator.generate(plan_12k)[0].to_dict()
        assert package["difficulty"] == "easy"
        assert package["impact"] == "high"
        assert package["time_to_implement"] == "1-2 weeks"
        assert package["potential_savings"] == 1800.0

    def test_small_plan_gets_nothing(self, generator):
        assert generator.generate(make_plan({"venue": 500, "catering": 1500})) == []

    def test_threshold_is_exclusive(self, generator):
        plan = make_plan({"venue": 5000, "catering": 5000})
        ids = [s.id for s in generator.generate(plan)]
        assert "package-deals" not in ids
        assert "off-season" in ids

    def test_whole_unit_rounding(self, generator):
        plan = make_plan({"venue": 12345.67})
        package = next(s for s in generator.generate(plan) if s.id == "package-deals")
        assert package.potential_savings == Decimal("1852")

    def test_no_side_effects(self, generator, plan_12k):
        before = plan_12k.to_dict()
        generator.generate(plan_12k)
        assert plan_12k.to_dict() == before


class TestRank:
    def test_by_savings(self, generator, plan_12k):
        ranked = SuggestionGenerator.rank(generator.generate(plan_12k), "potential_savings")
        assert [s.id for s in ranked] == [
            "off-season",
            "package-deals",
            "guest-reduction",
            "service-consolidation",
            "vendor-negotiation",
            "diy-decorations",
        ]

    def test_by_difficulty_is_stable(self, generator, plan_12k):
        ranked = SuggestionGenerator.rank(generator.generate(plan_12k), "difficulty")
        assert [s.id for s in ranked] == [
            "package-deals",
            "off-season",
            "vendor-negotiation",
            "service-consolidation",
            "diy-decorations",
            "guest-reduction",
        ]

    def test_unknown_key(self, generator, plan_12k):
        with pytest.raises(InvalidInputError):
            SuggestionGenerator.rank(generator.generate(plan_12k), "impact")
