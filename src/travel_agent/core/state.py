"""Application state owned for one app lifetime and injected into adapters."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Awaitable, Callable

import httpx

from travel_agent.ai.tools.registry import ToolRegistry
from travel_agent.config import AppConfig
from travel_agent.core.conversation import ConversationStore
from travel_agent.core.metrics import MetricsCollector
from travel_agent.log import get_logger
from travel_agent.services.recovery import RecoveryService

logger = get_logger(__name__)


@dataclass
class AppState:
    config: AppConfig
    store: ConversationStore
    tools: ToolRegistry
    metrics: MetricsCollector
    recovery: RecoveryService
    http_client: httpx.AsyncClient
    started_at: float = field(default_factory=time.monotonic)

    @classmethod
    def build(
        cls,
        config: AppConfig,
        http_client: httpx.AsyncClient | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> AppState:
        """Wire up the store, tools, metrics and recovery wrapper from config.

        Tests pass a MockTransport-backed ``http_client``, a seeded ``rng``
        and a fake ``clock``/``sleep`` for the recovery wrapper.
        """
        http_client = http_client or httpx.AsyncClient(timeout=config.tools.http_timeout)
        metrics = MetricsCollector()
        store = ConversationStore(
            max_history=config.conversation.max_history,
            max_idle=timedelta(hours=config.conversation.max_idle_hours),
            on_conversation_end=metrics.record_conversation,
        )
        overrides: dict[str, Any] = {}
        if clock is not None:
            overrides["clock"] = clock
        if sleep is not None:
            overrides["sleep"] = sleep
        recovery = RecoveryService(config.resilience, metrics=metrics, **overrides)

        tools = ToolRegistry()
        tools.discover_and_register(config.tools, http_client, rng=rng)

        logger.info("app_state_built", tools=len(tools.all_tools()), available=len(tools.available_tools()))
        return cls(
            config=config,
            store=store,
            tools=tools,
            metrics=metrics,
            recovery=recovery,
            http_client=http_client,
        )

    @property
    def uptime(self) -> float:
        return time.monotonic() - self.started_at

    async def aclose(self) -> None:
        await self.http_client.aclose()
        logger.info("app_state_closed")
