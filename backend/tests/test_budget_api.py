"""
Tests: budget HTTP endpoints against the in-memory store.

Run with:
    pytest backend/tests/test_budget_api.py -v
"""

from decimal import Decimal

import pytest

from app.services.budget.feedback import FeedbackRating
from app.services.budget.types import ServiceCategory

WEDDING_PLAN = {
    "event_type": "wedding",
    "total_budget": 15300,
    "recommendations": [
        {"service_category": "venue", "recommended_amount": 6000, "confidence_score": 0.9},
        {"service_category": "catering", "recommended_amount": 5000, "confidence_score": 0.9},
        {"service_category": "music", "recommended_amount": 1500, "confidence_score": 0.8},
        {"service_category": "photography", "recommended_amount": 2800, "confidence_score": 0.85},
    ],
}


def amounts(plan: dict) -> dict[str, float]:
    return {r["service_category"]: r["recommended_amount"] for r in plan["recommendations"]}


class TestHealth:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "service": "event-budget"}


class TestRecommendations:
    def test_wedding_in_new_york(self, client):
        resp = client.get("/api/budget/recommendations", params={
            "event_type": "wedding",
            "attendee_count": 100,
            "duration_hours": 6,
            "event_date": "2026-12-10",
            "city": "New York",
            "country": "US",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert amounts(data)["catering"] == 8450.0
        assert data["adjustments"]["seasonal"]["season_type"] == "peak"
        assert data["metadata"]["attendee_count"] == 100
        assert data["total_budget"] == pytest.approx(sum(r["recommended_amount"] for r in data["recommendations"]))

    def test_unknown_event_type(self, client):
        resp = client.get("/api/budget/recommendations", params={
            "event_type": "bar mitzvah", "event_date": "2026-12-10",
        })
        assert resp.status_code == 404
        assert "bar mitzvah" in resp.json()["detail"]

    def test_negative_attendees(self, client):
        resp = client.get("/api/budget/recommendations", params={
            "event_type": "wedding", "attendee_count": -5, "event_date": "2026-12-10",
        })
        assert resp.status_code == 422

    def test_malformed_date(self, client):
        resp = client.get("/api/budget/recommendations", params={
            "event_type": "wedding", "event_date": "2026-13-45",
        })
        assert resp.status_code == 422

    def test_store_unavailable(self, client, store):
        store.fail = True
        resp = client.get("/api/budget/recommendations", params={
            "event_type": "wedding", "event_date": "2026-12-10",
        })
        assert resp.status_code == 503


class TestLookups:
    def test_pricing(self, client):
        resp = client.get("/api/budget/pricing", params={"service_type": "catering"})
        assert resp.status_code == 200
        pricing = resp.json()["pricing"]
        assert pricing["event_type"] == "wedding"
        assert pricing["base_pricing"]["price_average"] == 5000.0

    def test_pricing_unknown_service(self, client):
        resp = client.get("/api/budget/pricing", params={"service_type": "fireworks"})
        assert resp.status_code == 404

    def test_pricing_falls_back_to_builtin_table(self, client, store):
        from app.services.budget.pricing_catalog import PricingTable

        store.pricing = PricingTable({})
        resp = client.get("/api/budget/pricing", params={"service_type": "venue"})
        assert resp.status_code == 200
        assert resp.json()["pricing"]["base_pricing"]["price_average"] == 6000.0

    def test_seasonal(self, client):
        resp = client.get("/api/budget/seasonal", params={
            "service_type": "catering", "event_date": "2026-12-10",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["adjusted_prices"]["price_average"] == 6500.0
        assert data["savings_opportunity"]["is_peak_season"] is True

    def test_location(self, client):
        resp = client.get("/api/budget/location", params={
            "service_type": "catering", "city": "New York",
        })
        assert resp.status_code == 200
        assert resp.json()["cost_analysis"]["is_high_cost_area"] is True

    def test_packages(self, client):
        resp = client.get("/api/budget/packages", params={"event_type": "wedding", "city": "New York"})
        assert resp.status_code == 200
        ids = [p["id"] for p in resp.json()["packages"]]
        assert ids == ["nyc-signature", "wedding-essentials", "wedding-memories", "wedding-floral-decor"]

    def test_packages_none_for_event(self, client):
        resp = client.get("/api/budget/packages", params={"event_type": "birthday"})
        assert resp.status_code == 200
        assert resp.json() == {"packages": []}


class TestPlanOperations:
    def test_apply_package(self, client):
        resp = client.post("/api/budget/packages/apply", json={
            "plan": WEDDING_PLAN, "package_id": "wedding-essentials",
        })
        assert resp.status_code == 200
        plan = resp.json()
        assert amounts(plan)["venue"] == 5280.0
        assert plan["total_budget"] == 13800.0
        assert plan["applied_package_ids"] == ["wedding-essentials"]
        assert plan["packages"][0]["savings"] == 1500.0

    def test_apply_package_round_trip_is_idempotent(self, client):
        first = client.post("/api/budget/packages/apply", json={
            "plan": WEDDING_PLAN, "package_id": "wedding-essentials",
        }).json()
        second = client.post("/api/budget/packages/apply", json={
            "plan": first, "package_id": "wedding-essentials",
        })
        assert second.status_code == 200
        assert second.json()["total_budget"] == first["total_budget"]
        assert len(second.json()["packages"]) == 1

    def test_apply_package_missing_category(self, client):
        resp = client.post("/api/budget/packages/apply", json={
            "plan": WEDDING_PLAN, "package_id": "wedding-memories",
        })
        assert resp.status_code == 422

    def test_apply_unknown_package(self, client):
        resp = client.post("/api/budget/packages/apply", json={
            "plan": WEDDING_PLAN, "package_id": "nope",
        })
        assert resp.status_code == 404

    def test_validate(self, client):
        resp = client.post("/api/budget/validate", json=WEDDING_PLAN)
        assert resp.status_code == 200
        data = resp.json()
        assert data["is_valid"] is True
        # no tracking (-20), no packages above 5000 (-10)
        assert data["budget_health"]["score"] == 70
        assert data["budget_health"]["status"] == "good"

    def test_validate_rejects_negative_total(self, client):
        resp = client.post("/api/budget/validate", json={"total_budget": -1})
        assert resp.status_code == 422

    def test_suggestions_ranked(self, client):
        resp = client.post("/api/budget/suggestions", json={
            "plan": WEDDING_PLAN, "rank_by": "potential_savings",
        })
        assert resp.status_code == 200
        suggestions = resp.json()["suggestions"]
        assert suggestions[0]["id"] == "off-season"
        assert suggestions[0]["potential_savings"] == 3060.0

    def test_suggestions_bad_rank(self, client):
        resp = client.post("/api/budget/suggestions", json={"plan": WEDDING_PLAN, "rank_by": "impact"})
        assert resp.status_code == 422


class TestEventBreakdown:
    def test_missing_breakdown(self, client):
        assert client.get("/api/budget/events/evt-404/breakdown").status_code == 404

    def test_store_then_adjust(self, client, store):
        resp = client.put("/api/budget/events/evt-1/breakdown", json={"plan": WEDDING_PLAN})
        assert resp.status_code == 200
        assert resp.json()["event_id"] == "evt-1"

        resp = client.put("/api/budget/events/evt-1/breakdown", json={
            "adjustments": [
                {"service_category": "catering", "adjustment_type": "percentage", "adjustment_value": 10},
                {"service_category": "security", "adjustment_type": "fixed", "adjustment_value": 400},
            ],
        })
        assert resp.status_code == 200
        assert amounts(resp.json())["catering"] == 5500.0
        assert amounts(resp.json())["security"] == 400.0
        assert resp.json()["total_budget"] == 16200.0
        assert len(store.adjustments["evt-1"]) == 2

        stored = client.get("/api/budget/events/evt-1/breakdown").json()
        assert stored["total_budget"] == 16200.0
        assert len(stored["adjustments"]) == 2

    def test_bad_adjustment_type(self, client):
        resp = client.put("/api/budget/events/evt-1/breakdown", json={
            "plan": WEDDING_PLAN,
            "adjustments": [
                {"service_category": "catering", "adjustment_type": "multiplier", "adjustment_value": 2},
            ],
        })
        assert resp.status_code == 404


class TestTracking:
    def test_record_and_read(self, client, store):
        client.put("/api/budget/events/evt-1/breakdown", json={"plan": WEDDING_PLAN})

        resp = client.post("/api/budget/events/evt-1/tracking", json={
            "service_category": "catering", "actual_cost": 5400, "tracking_date": "2026-10-01",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["tracking"][0]["estimated_cost"] == 5000.0
        assert data["tracking"][0]["variance"] == 400.0
        assert store.tracking["evt-1"][ServiceCategory.CATERING].actual_cost == Decimal("5400.00")

        resp = client.get("/api/budget/events/evt-1/tracking")
        assert resp.status_code == 200
        insights = resp.json()["insights"]
        assert insights["categories_tracked"] == 1
        assert insights["over_budget_categories"] == ["catering"]

    def test_record_many(self, client):
        client.put("/api/budget/events/evt-2/breakdown", json={"plan": WEDDING_PLAN})
        resp = client.post("/api/budget/events/evt-2/tracking", json={
            "actual_costs": {"venue": 5800, "music": 1600},
        })
        assert resp.status_code == 200
        assert len(resp.json()["tracking"]) == 2
        assert resp.json()["insights"]["categories_tracked"] == 2

    def test_batch_with_unknown_category_writes_nothing(self, client, store):
        client.put("/api/budget/events/evt-2/breakdown", json={"plan": WEDDING_PLAN})
        resp = client.post("/api/budget/events/evt-2/tracking", json={
            "actual_costs": {"venue": 5800, "fireworks": 900},
        })
        assert resp.status_code == 404
        assert store.tracking["evt-2"] == {}

    def test_batch_with_negative_cost_writes_nothing(self, client, store):
        client.put("/api/budget/events/evt-2/breakdown", json={"plan": WEDDING_PLAN})
        resp = client.post("/api/budget/events/evt-2/tracking", json={
            "actual_costs": {"venue": 5800, "music": -5},
        })
        assert resp.status_code == 422
        assert store.tracking["evt-2"] == {}

    def test_batch_is_persisted_in_one_write(self, client, store):
        calls = []
        persist = store.persist_tracking_entries

        async def recording(event_id, entries):
            calls.append([e.service_category.value for e in entries])
            await persist(event_id, entries)

        store.persist_tracking_entries = recording
        resp = client.post("/api/budget/events/evt-2/tracking", json={
            "actual_costs": {"venue": 5800, "music": 1600, "catering": 5100},
        })
        assert resp.status_code == 200
        assert calls == [["venue", "music", "catering"]]

    def test_without_breakdown(self, client):
        resp = client.post("/api/budget/events/evt-3/tracking", json={
            "service_category": "venue", "actual_cost": 2000,
        })
        assert resp.status_code == 200
        assert resp.json()["tracking"][0]["estimated_cost"] == 0.0

    def test_negative_actual(self, client):
        resp = client.post("/api/budget/events/evt-1/tracking", json={
            "service_category": "catering", "actual_cost": -10,
        })
        assert resp.status_code == 422

    def test_requires_costs(self, client):
        resp = client.post("/api/budget/events/evt-1/tracking", json={"service_category": "catering"})
        assert resp.status_code == 422


class TestFeedback:
    def test_feedback_delivered_after_response(self, client, feedback_sink):
        resp = client.post("/api/budget/recommendations/feedback", json={
            "event_type": "wedding",
            "service_category": "catering",
            "rating": "down",
            "comment": "too high for our area",
        })
        assert resp.status_code == 202
        assert len(feedback_sink.events) == 1
        assert feedback_sink.events[0].rating == FeedbackRating.DOWN

    def test_bad_rating(self, client, feedback_sink):
        resp = client.post("/api/budget/recommendations/feedback", json={
            "event_type": "wedding", "service_category": "catering", "rating": "meh",
        })
        assert resp.status_code == 404
        assert feedback_sink.events == []

    def test_sink_failure_does_not_fail_request(self, client, feedback_sink):
        async def broken(event):
            raise RuntimeError("analytics down")

        feedback_sink.deliver = broken
        resp = client.post("/api/budget/recommendations/feedback", json={
            "event_type": "party", "service_category": "music", "rating": "up",
        })
        assert resp.status_code == 202


class TestNonFiniteInput:
    JSON = {"content-type": "application/json"}

    def test_infinite_total_budget(self, client):
        resp = client.post("/api/budget/validate", content='{"total_budget": Infinity}', headers=self.JSON)
        assert resp.status_code == 422

    def test_nan_recommended_amount(self, client):
        body = '{"recommendations": [{"service_category": "venue", "recommended_amount": NaN}]}'
        resp = client.post("/api/budget/suggestions", content='{"plan": ' + body + '}', headers=self.JSON)
        assert resp.status_code == 422

    def test_infinite_actual_cost(self, client, store):
        resp = client.post(
            "/api/budget/events/evt-1/tracking",
            content='{"actual_costs": {"venue": Infinity}}',
            headers=self.JSON,
        )
        assert resp.status_code == 422
        assert store.tracking["evt-1"] == {}

    @pytest.mark.parametrize("param,value", [("duration_hours", "inf"), ("duration_hours", "nan"), ("lat", "inf")])
    def test_non_finite_query(self, client, param, value):
        resp = client.get("/api/budget/recommendations", params={
            "event_type": "wedding", "event_date": "2026-12-10", param: value,
        })
        assert resp.status_code == 422
