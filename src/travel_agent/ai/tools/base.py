"""Abstract tool interface for Claude tool use."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx


class ToolError(Exception):
    """A tool lookup failed. Transient by default, so the caller may retry."""


class ToolNotConfiguredError(ToolError):
    """The tool lacks the credentials or config it needs to run."""


class ToolAuthError(ToolError):
    """Upstream rejected our credentials. Retrying will not help."""


class ToolArgumentError(ToolError):
    """The model sent arguments the tool cannot use."""


class ToolNotFoundError(ToolError):
    """Upstream has nothing for the requested lookup. Retrying will not help."""


@dataclass(frozen=True, slots=True)
class ToolCall:
    """A tool invocation requested by the model."""

    id: str
    name: str
    arguments: dict[str, Any] | str = field(default_factory=dict)


def parse_arguments(arguments: dict[str, Any] | str) -> dict[str, Any]:
    if isinstance(arguments, dict):
        return arguments
    if not arguments:
        return {}
    try:
        parsed = json.loads(arguments)
    except json.JSONDecodeError as e:
        raise ToolArgumentError(f"Invalid tool arguments: {e.msg}") from e
    if not isinstance(parsed, dict):
        raise ToolArgumentError("Tool arguments must be a JSON object")
    return parsed


def raise_for_upstream(response: httpx.Response, service: str, *, not_found: str | None = None) -> None:
    """Map an upstream HTTP error status to a tool error with a readable message."""
    if response.is_success:
        return
    match response.status_code:
        case 401:
            raise ToolAuthError(f"Invalid {service} API key")
        case 404:
            raise ToolNotFoundError(not_found or f"{service} data not found")
        case 429:
            raise ToolError(f"{service} API rate limit exceeded")
        case _:
            raise ToolError(f"{service} service temporarily unavailable")


class Tool(ABC):
    """Base class for all Claude-callable tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name sent to the Anthropic API."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description for Claude."""
        ...

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema dict describing accepted parameters."""
        ...

    @property
    @abstractmethod
    def service_key(self) -> str:
        """Key used for circuit breaking and fallback text."""
        ...

    def is_available(self) -> bool:
        """Whether the tool has everything it needs to run. Free tools are always available."""
        return True

    @abstractmethod
    async def execute(self, **kwargs: Any) -> str:
        """Run the tool and return display text for the chat transcript."""
        ...

    async def run(self, call: ToolCall) -> str:
        """Parse the call's arguments and execute."""
        return await self.execute(**parse_arguments(call.arguments))

    def to_api_dict(self) -> dict[str, Any]:
        """Serialize to the Anthropic API tool definition format."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }
