"""Convert stored conversation history to Anthropic API message format."""

from __future__ import annotations

from typing import Any

from travel_agent.core.types import Role


def build_messages(history: list[dict[str, str]]) -> list[dict[str, Any]]:
    """Convert ``{role, content}`` history into Anthropic ``messages``.

    The API takes the system prompt separately and expects alternating turns
    that start with the user. System entries and leading assistant turns are
    dropped; consecutive same-role turns are merged.
    """
    messages: list[dict[str, Any]] = []
    for entry in history:
        role = entry["role"]
        if role == Role.SYSTEM:
            continue
        if not messages and role != Role.USER:
            continue
        if messages and messages[-1]["role"] == role:
            messages[-1]["content"] += "\n\n" + entry["content"]
        else:
            messages.append({"role": str(role), "content": entry["content"]})
    return messages
