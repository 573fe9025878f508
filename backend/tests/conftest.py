"""
Shared pytest fixtures for the budget engine and its HTTP surface.
"""

import pytest
from fastapi.testclient import TestClient

from tests.factories import InMemoryBudgetStore, RecordingFeedbackSink, make_plan


@pytest.fixture
def wedding_plan():
    """Wedding plan with four categories totalling 15300."""
    return make_plan({"venue": 6000, "catering": 5000, "music": 1500, "photography": 2800})

@pytest.fixture
def store():
    return InMemoryBudgetStore()

@pytest.fixture
def feedback_sink():
    return RecordingFeedbackSink()

@pytest.fixture
def client(store, feedback_sink, monkeypatch):
    """TestClient with the in-memory store, a recording feedback sink and no Redis."""
    from app.main import app
    from app.routers.budget import get_feedback_sink, get_store
    from app.services.cache_service import cache_service

    async def _no_redis():
        return None

    monkeypatch.setattr(cache_service, "_get_redis", _no_redis)
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_feedback_sink] = lambda: feedback_sink
    yield TestClient(app)
    app.dependency_overrides.clear()
