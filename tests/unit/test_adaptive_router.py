"""
Unit tests for the adaptive API router.
"""

import pytest
from fastapi.testclient import TestClient

from kidlearn.adaptive.models import RecommendationSource
from kidlearn.adaptive.service import AdaptiveService
from kidlearn.api.main import app
from kidlearn.api.routers.adaptive_router import get_adaptive_service
from kidlearn.integrations.recommendation_client import RecommendationServiceError


class FailingConnector:
    async def fetch_recommendation(self, context):
        raise RecommendationServiceError("ML connector down")


class BrokenService(AdaptiveService):
    async def get_recommendations(self, context):
        raise RuntimeError("boom")


@pytest.fixture
def use_service():
    """Install an AdaptiveService for the duration of a test."""

    def _use(service):
        app.dependency_overrides[get_adaptive_service] = lambda: service
        return TestClient(app, raise_server_exceptions=False)

    yield _use
    app.dependency_overrides.clear()


@pytest.fixture
def request_body():
    return {
        "childId": "11111111-1111-1111-1111-111111111111",
        "targetCategory": "SOCIAL_SKILLS",
        "currentDifficulty": "ADVANCED",
        "currentActivityId": "activity-1",
        "recentPerformance": [
            {"successRate": 0.95, "attemptsCount": 1, "emotionalState": "frustrated"},
        ],
    }


class TestRecommendationsEndpoint:
    def test_heuristic_response(self, use_service, request_body):
        client = use_service(AdaptiveService())
        response = client.post("/api/adaptive/recommendations", json=request_body)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["data"]["source"] == "heuristic"

        recommendation = body["data"]["recommendation"]
        assert recommendation["childId"] == request_body["childId"]
        assert recommendation["nextDifficulty"] == "INTERMEDIATE"
        assert [r["weight"] for r in recommendation["recommendations"]] == [0.6, 0.2, 0.2]
        assert recommendation["recommendations"][0]["suggestedActivityId"] == "activity-1"
        assert "suggestedActivityId" not in recommendation["recommendations"][1]
        assert len(recommendation["escalationWarnings"]) == 1

    def test_warnings_absent_without_frustration(self, use_service, request_body):
        request_body["recentPerformance"][0]["emotionalState"] = "calm"
        client = use_service(AdaptiveService())
        recommendation = client.post("/api/adaptive/recommendations", json=request_body).json()["data"][
            "recommendation"
        ]

        assert recommendation["nextDifficulty"] == "ADVANCED"
        assert "escalationWarnings" not in recommendation

    def test_ml_failure_reports_heuristic(self, use_service, request_body):
        client = use_service(AdaptiveService(FailingConnector()))
        response = client.post("/api/adaptive/recommendations", json=request_body)

        assert response.status_code == 200
        assert response.json()["data"]["source"] == RecommendationSource.HEURISTIC.value

    def test_requires_performance_signal(self, use_service, request_body):
        request_body["recentPerformance"] = []
        client = use_service(AdaptiveService())
        response = client.post("/api/adaptive/recommendations", json=request_body)

        assert response.status_code == 422

    def test_rejects_invalid_signal(self, use_service, request_body):
        request_body["recentPerformance"][0]["successRate"] = 1.5
        client = use_service(AdaptiveService())
        response = client.post("/api/adaptive/recommendations", json=request_body)

        assert response.status_code == 422

    def test_unexpected_failure_is_500(self, use_service, request_body):
        client = use_service(BrokenService())
        response = client.post("/api/adaptive/recommendations", json=request_body)

        assert response.status_code == 500
        assert "adaptive recommendation" in response.json()["detail"]


class TestHealthEndpoints:
    def test_root(self):
        response = TestClient(app).get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "kidlearn-adaptive"

    def test_health(self):
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json()["components"]["heuristic"] == "ok"
