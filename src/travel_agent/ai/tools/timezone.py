"""Local time and UTC offset lookup via worldtimeapi.org."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx

from travel_agent.ai.tools.base import Tool, ToolArgumentError, ToolError, ToolNotFoundError, raise_for_upstream
from travel_agent.config import ToolsConfig
from travel_agent.log import get_logger

logger = get_logger(__name__)

CITY_TIMEZONES = {
    "new york": "America/New_York",
    "london": "Europe/London",
    "paris": "Europe/Paris",
    "tokyo": "Asia/Tokyo",
    "sydney": "Australia/Sydney",
    "los angeles": "America/Los_Angeles",
    "chicago": "America/Chicago",
    "berlin": "Europe/Berlin",
    "rome": "Europe/Rome",
    "madrid": "Europe/Madrid",
    "moscow": "Europe/Moscow",
    "dubai": "Asia/Dubai",
    "singapore": "Asia/Singapore",
    "hong kong": "Asia/Hong_Kong",
    "mumbai": "Asia/Kolkata",
    "delhi": "Asia/Kolkata",
    "bangkok": "Asia/Bangkok",
    "seoul": "Asia/Seoul",
    "beijing": "Asia/Shanghai",
    "shanghai": "Asia/Shanghai",
}

_DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def resolve_timezone(location: str) -> str:
    """Map a well-known city to its IANA zone, otherwise treat the input as a zone name."""
    return CITY_TIMEZONES.get(location.strip().lower(), location.strip())


class TimezoneTool(Tool):
    """Current local time for a city or IANA timezone."""

    def __init__(self, config: ToolsConfig, http_client: httpx.AsyncClient):
        self._base_url = config.timezone_url.rstrip("/")
        self._timeout = config.http_timeout
        self._http = http_client

    @property
    def name(self) -> str:
        return "get_timezone_info"

    @property
    def description(self) -> str:
        return "Get current time and timezone information for travel destinations"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": (
                        'City name, country, or timezone (e.g., "New York", "London", '
                        '"Tokyo", "America/New_York")'
                    ),
                },
            },
            "required": ["location"],
        }

    @property
    def service_key(self) -> str:
        return "timezone"

    async def execute(self, **kwargs: Any) -> str:
        location = str(kwargs.get("location", "")).strip()
        if not location:
            raise ToolArgumentError("location is required")

        zone = resolve_timezone(location)
        try:
            response = await self._http.get(f"{self._base_url}/timezone/{zone}", timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise ToolError("Timezone request timed out") from e
        except httpx.HTTPError as e:
            raise ToolError("Timezone service temporarily unavailable") from e

        if response.status_code == 404:
            raise ToolNotFoundError(
                f'Unknown location "{location}". Try a major city (like "London") '
                'or a timezone name (like "America/New_York").'
            )
        raise_for_upstream(response, "Timezone")

        logger.info("timezone_retrieved", location=location, timezone=zone)
        return self.format_timezone(location, response.json())

    @staticmethod
    def format_timezone(location: str, data: dict[str, Any]) -> str:
        local_time = datetime.fromisoformat(data["datetime"])
        utc_time = data.get("utc_datetime")
        day_of_week = data.get("day_of_week")
        day_name = _DAY_NAMES[day_of_week] if isinstance(day_of_week, int) and 0 <= day_of_week < 7 else "n/a"

        lines = [
            f"🕐 **Time Information for {location}**",
            "",
            f"**Current Local Time:** {local_time.strftime('%A, %B %d, %Y %H:%M:%S')}",
            "",
            f"**Timezone:** {data.get('timezone', 'n/a')}",
            f"**UTC Offset:** {data.get('utc_offset', 'n/a')}",
            f"**Day of Week:** {day_name}",
            f"**Day of Year:** {data.get('day_of_year', 'n/a')}",
            f"**Week Number:** {data.get('week_number', 'n/a')}",
        ]
        if utc_time:
            utc = datetime.fromisoformat(utc_time)
            lines += ["", f"**UTC Time:** {utc.strftime('%Y-%m-%d %H:%M:%S')} UTC"]
        return "\n".join(lines)
