"""Current weather lookup via OpenWeatherMap."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from travel_agent.ai.tools.base import Tool, ToolArgumentError, ToolError, ToolNotConfiguredError, raise_for_upstream
from travel_agent.config import ToolsConfig
from travel_agent.log import get_logger

logger = get_logger(__name__)


def _local_time(unix_ts: int | None, offset_seconds: int) -> str:
    if not unix_ts:
        return "n/a"
    tz = timezone(timedelta(seconds=offset_seconds))
    return datetime.fromtimestamp(unix_ts, tz).strftime("%H:%M")


class WeatherTool(Tool):
    """Current conditions for a city. Needs an OpenWeatherMap API key."""

    def __init__(self, config: ToolsConfig, http_client: httpx.AsyncClient):
        self._api_key = config.weather_api_key
        self._base_url = config.weather_url.rstrip("/")
        self._timeout = config.weather_timeout
        self._http = http_client

    @property
    def name(self) -> str:
        return "get_current_weather"

    @property
    def description(self) -> str:
        return "Get current weather information for a specific location"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": 'The city name, state, and/or country (e.g., "Paris, France" or "New York, NY")',
                },
            },
            "required": ["location"],
        }

    @property
    def service_key(self) -> str:
        return "weather"

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def execute(self, **kwargs: Any) -> str:
        location = str(kwargs.get("location", "")).strip()
        if not location:
            raise ToolArgumentError("location is required")
        data = await self.get_current_weather(location)
        return self.format_weather(data)

    async def get_current_weather(self, location: str) -> dict[str, Any]:
        if not self.is_available():
            logger.warning("weather_api_not_configured")
            raise ToolNotConfiguredError("Weather service not available")

        logger.debug("weather_request", location=location)
        try:
            response = await self._http.get(
                f"{self._base_url}/weather",
                params={"q": location, "appid": self._api_key, "units": "metric"},
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise ToolError(f"Weather request timed out for {location}") from e
        except httpx.HTTPError as e:
            raise ToolError("Weather service temporarily unavailable") from e

        if not response.is_success:
            logger.error("weather_api_error", location=location, status=response.status_code)
        raise_for_upstream(response, "Weather", not_found=f"Weather data not found for location: {location}")

        data = response.json()
        logger.info("weather_retrieved", location=location, temperature=data.get("main", {}).get("temp"))
        return data

    @staticmethod
    def format_weather(data: dict[str, Any]) -> str:
        main = data.get("main", {})
        wind = data.get("wind") or {}
        sys_info = data.get("sys", {})
        conditions = (data.get("weather") or [{}])[0].get("description", "unknown")
        offset = data.get("timezone", 0)
        place = data.get("name", "unknown location")
        if sys_info.get("country"):
            place = f"{place}, {sys_info['country']}"

        return (
            f"Current weather in {place}:\n"
            f"Temperature: {round(main.get('temp', 0))}°C (feels like {round(main.get('feels_like', 0))}°C)\n"
            f"Conditions: {conditions}\n"
            f"Humidity: {main.get('humidity', 'n/a')}%\n"
            f"Wind: {wind.get('speed', 0)} m/s\n"
            f"Sunrise: {_local_time(sys_info.get('sunrise'), offset)}\n"
            f"Sunset: {_local_time(sys_info.get('sunset'), offset)}"
        )
