"""Tool registry for discovering and managing available tools."""

from __future__ import annotations

import random

import httpx

from travel_agent.ai.tools.base import Tool
from travel_agent.config import ToolsConfig
from travel_agent.log import get_logger

logger = get_logger(__name__)


class ToolRegistry:
    """Registry of all built-in tools, keyed by tool name."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool
        logger.info("tool_registered", tool_name=tool.name, available=tool.is_available())

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def all_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def available_tools(self) -> list[Tool]:
        """Tools the model may be offered right now."""
        return [t for t in self._tools.values() if t.is_available()]

    def availability(self) -> dict[str, bool]:
        return {t.name: t.is_available() for t in self._tools.values()}

    def discover_and_register(
        self,
        config: ToolsConfig,
        http_client: httpx.AsyncClient,
        rng: random.Random | None = None,
    ) -> None:
        """Import and register all built-in tools."""
        from travel_agent.ai.tools.currency import CurrencyTool
        from travel_agent.ai.tools.flights import FlightSearchTool
        from travel_agent.ai.tools.hotels import HotelSearchTool
        from travel_agent.ai.tools.search import WebSearchTool
        from travel_agent.ai.tools.timezone import TimezoneTool
        from travel_agent.ai.tools.weather import WeatherTool

        rng = rng or random.Random()

        self.register(WebSearchTool(config, http_client))
        self.register(WeatherTool(config, http_client))
        self.register(CurrencyTool(config, http_client))
        self.register(TimezoneTool(config, http_client))
        self.register(FlightSearchTool(rng))
        self.register(HotelSearchTool(rng))
