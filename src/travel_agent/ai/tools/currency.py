"""Currency conversion using the free exchangerate-api endpoint."""

from __future__ import annotations

import time
from typing import Any, Callable

import httpx

from travel_agent.ai.tools.base import Tool, ToolArgumentError, ToolError, raise_for_upstream
from travel_agent.config import ToolsConfig
from travel_agent.log import get_logger

logger = get_logger(__name__)


class CurrencyTool(Tool):
    """Converts amounts between currencies. Rates are cached per pair."""

    def __init__(
        self,
        config: ToolsConfig,
        http_client: httpx.AsyncClient,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._base_url = config.currency_url.rstrip("/")
        self._timeout = config.http_timeout
        self._cache_seconds = config.currency_cache_seconds
        self._http = http_client
        self._clock = clock
        self._cache: dict[tuple[str, str], tuple[float, float]] = {}  # (from, to) -> (rate, fetched_at)

    @property
    def name(self) -> str:
        return "convert_currency"

    @property
    def description(self) -> str:
        return "Convert currency amounts for travel planning and budgeting"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "amount": {"type": "number", "description": "Amount to convert"},
                "from": {"type": "string", "description": "Source currency code (e.g., USD, EUR, GBP)"},
                "to": {"type": "string", "description": "Target currency code (e.g., USD, EUR, GBP)"},
            },
            "required": ["amount", "from", "to"],
        }

    @property
    def service_key(self) -> str:
        return "currency"

    async def execute(self, **kwargs: Any) -> str:
        try:
            amount = float(kwargs.get("amount"))
        except (TypeError, ValueError) as e:
            raise ToolArgumentError("amount must be a number") from e
        source = str(kwargs.get("from", "")).strip().upper()
        target = str(kwargs.get("to", "")).strip().upper()
        if not source or not target:
            raise ToolArgumentError("both 'from' and 'to' currency codes are required")

        if source == target:
            return f"{_format_amount(amount)} {source} = {_format_amount(amount)} {target} (same currency)"

        rate = await self.get_rate(source, target)
        return self.format_conversion(amount, source, target, rate)

    async def get_rate(self, source: str, target: str) -> float:
        cached = self._cache.get((source, target))
        if cached and self._clock() - cached[1] < self._cache_seconds:
            return cached[0]

        try:
            response = await self._http.get(f"{self._base_url}/{source}", timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise ToolError("Currency rate request timed out") from e
        except httpx.HTTPError as e:
            raise ToolError("Currency service temporarily unavailable") from e

        raise_for_upstream(response, "Currency", not_found=f"Currency {source} not supported")

        rates = response.json().get("rates", {})
        if target not in rates:
            raise ToolArgumentError(f"Currency {target} not supported")

        rate = float(rates[target])
        self._cache[(source, target)] = (rate, self._clock())
        logger.info("currency_rate_fetched", source=source, target=target, rate=rate)
        return rate

    @staticmethod
    def format_conversion(amount: float, source: str, target: str, rate: float) -> str:
        converted = amount * rate
        return (
            "💱 **Currency Conversion**\n\n"
            f"**{_format_amount(amount)} {source} = {converted:.2f} {target}**\n\n"
            f"Exchange Rate: 1 {source} = {rate:.4f} {target}\n\n"
            "*Rates are updated every hour. For large transactions, check with your bank "
            "or financial institution.*"
        )


def _format_amount(amount: float) -> str:
    return f"{amount:g}"
