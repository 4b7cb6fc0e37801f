"""AI client abstraction with an Anthropic API backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import anthropic

from travel_agent.ai.tools.base import ToolCall
from travel_agent.config import AnthropicConfig
from travel_agent.log import get_logger

logger = get_logger(__name__)


class AIErrorKind(StrEnum):
    INVALID_CREDENTIALS = "invalid_credentials"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    FAILED = "failed"


_ERROR_MESSAGES = {
    AIErrorKind.INVALID_CREDENTIALS: "Invalid AI API key",
    AIErrorKind.RATE_LIMITED: "AI API rate limit exceeded. Please try again later.",
    AIErrorKind.UPSTREAM_UNAVAILABLE: "AI service temporarily unavailable",
    AIErrorKind.FAILED: "Failed to generate AI response",
}


class AIClientError(Exception):
    """The model call failed. ``kind`` tells adapters how to report it."""

    def __init__(self, kind: AIErrorKind, message: str | None = None):
        super().__init__(message or _ERROR_MESSAGES[kind])
        self.kind = kind


@dataclass
class AIResponse:
    """Unified response from the AI backend."""

    text: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0
    raw: Any = None  # Backend-specific raw response

    @property
    def usage(self) -> dict[str, int]:
        return {"input_tokens": self.input_tokens, "output_tokens": self.output_tokens}


class AIClient(ABC):
    """Abstract base class for AI backends."""

    @abstractmethod
    async def chat(
        self,
        system: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int | None = None,
    ) -> AIResponse:
        """Send a conversation to the model and return its reply.

        Raises AIClientError on any backend failure.
        """
        ...


class AnthropicClient(AIClient):
    """Anthropic API backend using the official SDK."""

    def __init__(self, config: AnthropicConfig):
        self._config = config
        self._client = anthropic.AsyncAnthropic(
            api_key=config.api_key,
            base_url=config.base_url,
            max_retries=config.max_retries,
            timeout=config.timeout,
        )

    async def chat(
        self,
        system: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int | None = None,
    ) -> AIResponse:
        kwargs: dict[str, Any] = {
            "model": self._config.model,
            "max_tokens": max_tokens or self._config.max_tokens,
            "system": system,
            "messages": messages,
            "temperature": self._config.temperature,
        }
        if tools:
            kwargs["tools"] = tools

        logger.debug("api_request", model=self._config.model, message_count=len(messages), tool_count=len(tools or []))
        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.APIError as e:
            kind = classify_error(e)
            logger.error("api_error", kind=kind.value, error=str(e), error_type=type(e).__name__)
            raise AIClientError(kind) from e

        logger.debug(
            "api_response",
            model=self._config.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            stop_reason=response.stop_reason,
        )
        text = "".join(b.text for b in response.content if b.type == "text")
        tool_calls = [
            ToolCall(id=b.id, name=b.name, arguments=b.input)
            for b in response.content
            if b.type == "tool_use"
        ]
        return AIResponse(
            text=text,
            tool_calls=tool_calls,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            raw=response,
        )


def classify_error(error: anthropic.APIError) -> AIErrorKind:
    match error:
        case anthropic.AuthenticationError():
            return AIErrorKind.INVALID_CREDENTIALS
        case anthropic.RateLimitError():
            return AIErrorKind.RATE_LIMITED
        case anthropic.APIConnectionError():
            return AIErrorKind.UPSTREAM_UNAVAILABLE
        case anthropic.APIStatusError(status_code=status) if status >= 500:
            return AIErrorKind.UPSTREAM_UNAVAILABLE
        case _:
            return AIErrorKind.FAILED
