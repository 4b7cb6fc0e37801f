"""Web search tool backed by SerpAPI."""

from __future__ import annotations

from typing import Any

import httpx

from travel_agent.ai.tools.base import Tool, ToolArgumentError, ToolError, ToolNotConfiguredError, raise_for_upstream
from travel_agent.config import ToolsConfig
from travel_agent.log import get_logger

logger = get_logger(__name__)


class WebSearchTool(Tool):
    """Google results through SerpAPI. Only offered when an API key is configured."""

    def __init__(self, config: ToolsConfig, http_client: httpx.AsyncClient):
        self._api_key = config.serpapi_key
        self._url = config.serpapi_url
        self._timeout = config.http_timeout
        self._http = http_client

    @property
    def name(self) -> str:
        return "search_web"

    @property
    def description(self) -> str:
        return (
            "Search the web for current information about travel, destinations, "
            "weather, events, or any other topics"
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "The search query"},
                "country": {
                    "type": "string",
                    "description": 'Country code for localized results (e.g., "us", "uk", "ca")',
                },
            },
            "required": ["query"],
        }

    @property
    def service_key(self) -> str:
        return "search"

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def execute(self, **kwargs: Any) -> str:
        query = str(kwargs.get("query", "")).strip()
        if not query:
            raise ToolArgumentError("query is required")
        results = await self.search(query, country=kwargs.get("country") or "us")
        if not results:
            return f"No web results found for '{query}'."

        lines = []
        for result in results:
            link = f" ({result['link']})" if result.get("link") else ""
            lines.append(f"{result['title']}: {result.get('snippet') or ''}{link}")
        return "\n\n".join(lines)

    async def search(self, query: str, country: str = "us", num: int = 5) -> list[dict[str, Any]]:
        if not self.is_available():
            logger.warning("serpapi_not_configured")
            raise ToolNotConfiguredError("Web search service not available")

        params = {"api_key": self._api_key, "engine": "google", "q": query, "num": num, "gl": country, "hl": "en"}
        try:
            response = await self._http.get(self._url, params=params, timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise ToolError("Web search timed out") from e
        except httpx.HTTPError as e:
            raise ToolError("Web search temporarily unavailable") from e

        if not response.is_success:
            logger.error("serpapi_error", query=query, status=response.status_code)
        raise_for_upstream(response, "SERP", not_found="No search results available")

        results = self.parse_results(response.json())
        logger.info("serpapi_search_completed", query=query, results_count=len(results))
        return results

    @staticmethod
    def parse_results(data: dict[str, Any]) -> list[dict[str, Any]]:
        results = [
            {
                "title": r.get("title", ""),
                "link": r.get("link"),
                "snippet": r.get("snippet", ""),
                "position": r.get("position"),
            }
            for r in data.get("organic_results", [])
        ]
        answer_box = data.get("answer_box")
        if answer_box:
            results.insert(0, {
                "title": "Quick Answer",
                "snippet": answer_box.get("answer") or answer_box.get("snippet", ""),
                "link": None,
            })
        return results
