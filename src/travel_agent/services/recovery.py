"""Retries with circuit breaking for outbound tool calls, plus canned fallbacks.

Transient failures never reach the user as exceptions: once retries are
exhausted (or the service's breaker is open) the caller gets a
service-specific "temporarily unavailable" text instead.
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from travel_agent.ai.tools.base import ToolArgumentError, ToolAuthError, ToolNotConfiguredError, ToolNotFoundError
from travel_agent.config import ResilienceConfig
from travel_agent.core.metrics import MetricsCollector
from travel_agent.log import get_logger

logger = get_logger(__name__)

Operation = Callable[[], Awaitable[str]]


@dataclass
class CircuitBreaker:
    error_count: int = 0
    open_until: float | None = None

    def is_open(self, now: float) -> bool:
        return self.open_until is not None and now < self.open_until


class RecoveryService:
    """Per-service retry wrapper with a cumulative-failure circuit breaker."""

    def __init__(
        self,
        config: ResilienceConfig | None = None,
        metrics: MetricsCollector | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: random.Random | None = None,
    ):
        self._config = config or ResilienceConfig()
        self._metrics = metrics
        self._clock = clock
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._breakers: dict[str, CircuitBreaker] = {}

    async def execute_with_retry(
        self,
        service_key: str,
        operation: Operation,
        max_attempts: int | None = None,
    ) -> str:
        """Run ``operation`` with retries, returning fallback text on exhaustion.

        Errors that a retry cannot fix propagate immediately and are not
        counted against the breaker.
        """
        if max_attempts is None:
            max_attempts = self._config.max_attempts
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

        breaker = self._breakers.get(service_key)
        if breaker and breaker.is_open(self._clock()):
            logger.warning("circuit_breaker_rejected", service=service_key, open_until=_iso(breaker.open_until))
            self._record(service_key, time.monotonic(), success=False)
            return self.get_fallback(service_key, f"circuit breaker open until {_iso(breaker.open_until)}")

        started = time.monotonic()
        last_error: Exception | None = None

        for attempt in range(1, max_attempts + 1):
            try:
                result = await operation()
            except (ToolAuthError, ToolArgumentError, ToolNotFoundError):
                self._record(service_key, started, success=False)
                raise
            except ToolNotConfiguredError as e:
                logger.warning("service_not_configured", service=service_key, error=str(e))
                self._record(service_key, started, success=False)
                return self.get_fallback(service_key, str(e))
            except Exception as e:
                last_error = e
                logger.warning(
                    "service_attempt_failed",
                    service=service_key,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error=str(e),
                )
                self._record_failure(service_key)
                if attempt < max_attempts:
                    await self._sleep(self.backoff_delay(attempt))
            else:
                self._breakers.pop(service_key, None)
                self._record(service_key, started, success=True)
                return result

        logger.error("service_failed", service=service_key, attempts=max_attempts, error=str(last_error))
        self._record(service_key, started, success=False)
        return self.get_fallback(service_key, str(last_error))

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait after the given 1-based attempt failed."""
        delay = min(self._config.backoff_base ** attempt, self._config.max_backoff)
        if self._config.jitter:
            delay += delay * self._config.jitter * self._rng.random()
        return delay

    def _record_failure(self, service_key: str) -> None:
        breaker = self._breakers.setdefault(service_key, CircuitBreaker())
        breaker.error_count += 1
        if breaker.error_count >= self._config.failure_threshold:
            breaker.open_until = self._clock() + self._config.cooldown_seconds
            logger.warning(
                "circuit_breaker_opened",
                service=service_key,
                error_count=breaker.error_count,
                open_until=_iso(breaker.open_until),
            )

    def _record(self, service_key: str, started: float, success: bool) -> None:
        if self._metrics is not None:
            self._metrics.record_tool_usage(service_key, time.monotonic() - started, success)

    def get_service_status(self) -> dict[str, dict[str, Any]]:
        now = self._clock()
        return {
            name: {
                "status": "unavailable" if breaker.is_open(now) else "available",
                "error_count": breaker.error_count,
                "open_until": _iso(breaker.open_until) if breaker.open_until else None,
            }
            for name, breaker in self._breakers.items()
        }

    def get_fallback(self, service_key: str, reason: str) -> str:
        template = FALLBACKS.get(service_key)
        if template is None:
            return GENERIC_FALLBACK.format(service=service_key, reason=reason)
        return template.format(reason=reason)


def _iso(timestamp: float | None) -> str | None:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


FALLBACKS = {
    "currency": """💱 **Currency Conversion Service Temporarily Unavailable**

I'm unable to get real-time exchange rates right now due to: {reason}

**Alternative Options:**
• Check xe.com or google.com for current rates
• Use your bank's mobile app for rates
• Major credit cards typically offer competitive exchange rates

**Approximate rates (may be outdated):**
• 1 USD ≈ 0.85 EUR
• 1 USD ≈ 0.75 GBP
• 1 USD ≈ 110 JPY
• 1 EUR ≈ 1.18 USD

*For accurate rates, please check current financial websites.*""",
    "weather": """🌤️ **Weather Service Temporarily Unavailable**

I'm unable to get current weather data due to: {reason}

**Alternative Weather Sources:**
• weather.com or weather.gov
• AccuWeather mobile app
• Local weather apps for your region
• Google search "weather [city name]"

**General Travel Weather Tips:**
• Check weather 7-10 days before travel
• Pack layers for temperature variations
• Check seasonal weather patterns for your destination
• Consider weather-related travel insurance""",
    "search": """🌐 **Web Search Service Temporarily Unavailable**

I'm unable to search the web right now due to: {reason}

**Alternative Search Options:**
• Google.com for general searches
• TripAdvisor for travel reviews and recommendations
• Booking.com for hotels and accommodations
• Kayak or Expedia for flights and travel deals

**Travel Planning Resources:**
• Lonely Planet for destination guides
• Official tourism websites for cities/countries
• Travel blogs and social media for current insights""",
    "flights": """✈️ **Flight Search Service Temporarily Unavailable**

I'm unable to search for flights right now due to: {reason}

**Alternative Flight Booking Options:**
• **Direct Airline Websites**: Often best prices and policies
• **Meta-search Sites**: Kayak, Skyscanner, Google Flights
• **Online Travel Agencies**: Expedia, Booking.com, Priceline
• **Travel Agents**: For complex itineraries

**Flight Booking Tips:**
• Book 6-8 weeks ahead for domestic flights
• Book 2-3 months ahead for international flights
• Consider flexible dates for better prices
• Check multiple airports in large cities""",
    "hotels": """🏨 **Hotel Search Service Temporarily Unavailable**

I'm unable to search for hotels right now due to: {reason}

**Alternative Accommodation Booking:**
• **Hotel Direct**: Best rates and cancellation policies
• **Booking Platforms**: Booking.com, Hotels.com, Expedia
• **Alternative Stays**: Airbnb, VRBO for apartments/homes
• **Hostels**: Hostelworld for budget-friendly options

**Booking Tips:**
• Book directly with hotels for loyalty benefits
• Check cancellation policies before booking
• Read recent reviews for current conditions
• Look for package deals with flights""",
    "timezone": """🕐 **Timezone Service Temporarily Unavailable**

I'm unable to get timezone information right now due to: {reason}

**Alternative Time Sources:**
• worldclock.com or timeanddate.com
• Google search "time in [city name]"
• Your phone's world clock app

**Time Planning Tips:**
• Consider jet lag when planning activities
• Book calls and meetings accounting for time differences
• Check if destination observes daylight saving time
• Set your devices to destination time upon arrival""",
}

GENERIC_FALLBACK = """⚠️ **Service Temporarily Unavailable**

The {service} service is currently experiencing issues: {reason}

**What you can do:**
• Try again in a few minutes
• Use alternative sources for this information
• Ask me about other travel services that are available

I can still help with other aspects of your travel planning that don't require this specific service."""
