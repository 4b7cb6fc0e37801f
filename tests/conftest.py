"""Shared fixtures: a scripted AI client, fake clock/sleep and a test AppState."""

from __future__ import annotations

import random
from typing import Any

import httpx
import pytest

from travel_agent.ai.client import AIClient, AIResponse
from travel_agent.config import AppConfig
from travel_agent.core.state import AppState


class FakeAIClient(AIClient):
    """Returns queued responses in order, then a default greeting."""

    def __init__(self, responses: list[AIResponse | Exception] | None = None):
        self.responses = list(responses or [])
        self.calls: list[dict[str, Any]] = []

    async def chat(
        self,
        system: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int | None = None,
    ) -> AIResponse:
        self.calls.append({"system": system, "messages": messages, "tools": tools, "max_tokens": max_tokens})
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return AIResponse(text="Hello! Where would you like to travel?", input_tokens=12, output_tokens=9)


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSleep:
    """Records requested delays instead of sleeping."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def _offline_transport(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, json={"error": "offline"})


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(environment="test", anthropic={"api_key": "test-key"})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def ai_client() -> FakeAIClient:
    return FakeAIClient()


@pytest.fixture
def state(config: AppConfig, clock: FakeClock, fake_sleep: FakeSleep) -> AppState:
    """AppState with no network access and instant retries."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_offline_transport))
    return AppState.build(config, http_client=http_client, rng=random.Random(42), clock=clock, sleep=fake_sleep)
