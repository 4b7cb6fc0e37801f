"""End-to-end tests for the FastAPI routes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from travel_agent.ai.client import AIClientError, AIErrorKind, AIResponse
from travel_agent.ai.handler import MessageHandler
from travel_agent.ai.tools.base import ToolCall
from travel_agent.core.types import Platform
from travel_agent.web.app import __version__, create_app

from conftest import FakeAIClient


@pytest.fixture
def client(state, ai_client) -> TestClient:
    return TestClient(create_app(state, MessageHandler(ai_client, state)))


def client_for(state, *responses) -> TestClient:
    return TestClient(create_app(state, MessageHandler(FakeAIClient(list(responses)), state)))


class TestChat:

    def test_hello_returns_response(self, client):
        res = client.post("/api/chat", json={"message": "hello"})
        assert res.status_code == 200
        body = res.json()
        assert body["response"]
        assert body["usage"] == {"input_tokens": 12, "output_tokens": 9}

    def test_weather_without_key_returns_fallback(self, state):
        client = client_for(state, AIResponse(
            text="", tool_calls=[ToolCall(id="t1", name="get_current_weather", arguments={"location": "Paris"})]
        ))
        res = client.post("/api/chat", json={"message": "What's the weather in Paris?"})
        assert res.status_code == 200
        assert "Weather Service Temporarily Unavailable" in res.json()["response"]

    def test_empty_message_is_400(self, client):
        res = client.post("/api/chat", json={"message": "   "})
        assert res.status_code == 400
        assert "error" in res.json()

    def test_missing_field_is_400(self, client):
        res = client.post("/api/chat", json={"text": "hi"})
        assert res.status_code == 400

    def test_too_long_is_400(self, client):
        res = client.post("/api/chat", json={"message": "a" * 4001})
        assert res.status_code == 400

    @pytest.mark.parametrize("kind,status", [
        (AIErrorKind.INVALID_CREDENTIALS, 500),
        (AIErrorKind.RATE_LIMITED, 429),
        (AIErrorKind.UPSTREAM_UNAVAILABLE, 503),
        (AIErrorKind.FAILED, 500),
    ])
    def test_ai_errors_map_to_status(self, state, kind, status):
        client = client_for(state, AIClientError(kind))
        res = client.post("/api/chat", json={"message": "hello"})
        assert res.status_code == status
        assert res.json()["error"]


class TestConversationRoutes:

    def test_clear(self, client, state):
        client.post("/api/chat", json={"message": "hello"})
        assert state.store.get_history(Platform.WEB, "testclient")

        res = client.post("/api/clear")
        assert res.json() == {"success": True, "message": "Conversation cleared"}
        assert state.store.get_history(Platform.WEB, "testclient") == []

    def test_stats(self, client):
        client.post("/api/chat", json={"message": "hello"})
        body = client.get("/api/stats").json()

        assert set(body) == {"conversations", "tools", "services", "metrics"}
        assert body["conversations"]["total_conversations"] == 1
        assert body["tools"]["search_flights"] is True
        assert body["tools"]["get_current_weather"] is False
        assert body["metrics"]["requests"]["by_endpoint"]["/api/chat"]["total"] == 1

    def test_metrics_reset(self, client):
        client.post("/api/chat", json={"message": "hello"})
        assert client.post("/api/metrics/reset").json()["success"] is True
        # only the stats request itself is counted after the reset
        metrics = client.get("/api/stats").json()["metrics"]
        assert "/api/chat" not in metrics["requests"]["by_endpoint"]

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["timestamp"]
        assert body["uptime"] >= 0
        assert body["version"] == __version__
        assert body["memory"]["rss_mb"] > 0

    def test_stats_reports_conversation_metrics(self, client):
        client.post("/api/chat", json={"message": "hello"})
        client.post("/api/clear")
        client.post("/api/chat", json={"message": "hello again"})

        conversations = client.get("/api/stats").json()["metrics"]["conversations"]
        assert conversations == {"total": 1, "active": 1, "avg_messages_per_conversation": 2.0}


# ============================================================================
# Rate limiting
# ============================================================================

class TestRateLimits:

    def test_chat_limited_per_client(self, client, state):
        for _ in range(state.config.web.chat_rate_limit_max_requests):
            assert client.post("/api/chat", json={"message": "hello"}).status_code == 200

        res = client.post("/api/chat", json={"message": "hello"})
        assert res.status_code == 429
        assert res.json() == {"error": "Too many chat requests, please slow down"}
        # other routes keep working
        assert client.get("/api/stats").status_code == 200

    def test_api_limit_covers_all_api_routes(self, state, ai_client):
        state.config.web.rate_limit_max_requests = 3
        client = TestClient(create_app(state, MessageHandler(ai_client, state)))
        for _ in range(3):
            assert client.get("/api/stats").status_code == 200

        res = client.post("/api/clear")
        assert res.status_code == 429
        assert res.json() == {"error": "Too many requests, please try again later"}
        assert client.get("/health").status_code == 200

    def test_rejections_are_counted_as_failed_requests(self, state, ai_client):
        state.config.web.rate_limit_max_requests = 1
        client = TestClient(create_app(state, MessageHandler(ai_client, state)))
        client.get("/api/stats")
        client.get("/api/stats")

        stats = state.metrics.snapshot()["requests"]["by_endpoint"]["/api/stats"]
        assert stats == {"total": 2, "successful": 1, "failed": 1}
