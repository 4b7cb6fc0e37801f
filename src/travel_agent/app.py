"""Application orchestrator: wires all components and manages lifecycle."""

from __future__ import annotations

import asyncio

import uvicorn

from travel_agent.ai.client import AIClient, AnthropicClient
from travel_agent.ai.handler import MessageHandler
from travel_agent.config import AppConfig
from travel_agent.core.state import AppState
from travel_agent.log import get_logger
from travel_agent.messenger.telegram import TelegramAdapter
from travel_agent.services.service_manager import ServiceManager
from travel_agent.web.app import create_app

logger = get_logger(__name__)


class TravelAgentApp:
    """Top-level application orchestrator."""

    def __init__(self, config: AppConfig, ai_client: AIClient | None = None):
        self.config = config
        self.state = AppState.build(config)
        self.ai_client = ai_client or AnthropicClient(config.anthropic)
        self.handler = MessageHandler(self.ai_client, self.state)
        self.service_manager = ServiceManager(config, self.state.store)
        self.telegram: TelegramAdapter | None = None
        self._server: uvicorn.Server | None = None
        self._server_task: asyncio.Task[None] | None = None

    @property
    def server_task(self) -> asyncio.Task[None] | None:
        return self._server_task

    async def start(self) -> None:
        """Initialize and start all components."""
        # 1. Background services
        await self.service_manager.start_all()

        # 2. Telegram, only with a token
        if self.config.telegram.token:
            adapter = TelegramAdapter(self.config.telegram, self.state, self.handler)
            try:
                await adapter.start()
                self.telegram = adapter
            except Exception as e:
                logger.error("telegram_start_failed", error=str(e))
        else:
            logger.info("telegram_disabled", reason="no token configured")

        # 3. HTTP server
        if self.config.web.enabled:
            web_app = create_app(self.state, self.handler)
            server_config = uvicorn.Config(
                web_app,
                host=self.config.web.host,
                port=self.config.web.port,
                log_level=self.config.log_level.lower(),
                lifespan="off",
            )
            self._server = uvicorn.Server(server_config)
            self._server_task = asyncio.create_task(self._server.serve())
            logger.info("web_server_starting", host=self.config.web.host, port=self.config.web.port)

        logger.info(
            "travel_agent_started",
            environment=self.config.environment,
            web=self.config.web.enabled,
            telegram=self.telegram is not None,
            tools=[t.name for t in self.state.tools.available_tools()],
        )

    async def stop(self) -> None:
        """Gracefully shut down all components, in reverse start order."""
        if self._server is not None:
            self._server.should_exit = True
        if self._server_task is not None:
            try:
                await self._server_task
            except Exception as e:
                logger.error("web_server_stop_error", error=str(e))

        if self.telegram is not None:
            try:
                await self.telegram.stop()
            except Exception as e:
                logger.error("telegram_stop_error", error=str(e))

        await self.service_manager.stop_all()
        await self.state.aclose()
        logger.info("travel_agent_stopped")
