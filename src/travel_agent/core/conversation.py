"""In-memory conversation history keyed by (platform, user_id)."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

from travel_agent.log import get_logger, mask_user_id

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Message:
    role: str  # "user" | "assistant" | "system"
    content: str
    timestamp: datetime


@dataclass
class Conversation:
    created_at: datetime
    last_activity: datetime
    messages: list[Message] = field(default_factory=list)


class ConversationStore:
    """Rolling per-user message history with a hard length cap and idle eviction.

    Nothing is persisted: a restart starts every user from an empty history.
    """

    def __init__(
        self,
        max_history: int = 20,
        max_idle: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = _utcnow,
        on_conversation_end: Callable[[int], None] | None = None,
    ):
        self._conversations: dict[tuple[str, str], Conversation] = {}
        self._max_history = max_history
        self._max_idle = max_idle
        self._clock = clock
        self._on_conversation_end = on_conversation_end
        self._started = time.monotonic()

    def get_conversation(self, platform: str, user_id: str) -> Conversation:
        """Return the stored conversation, or a fresh empty one that is not stored."""
        conversation = self._conversations.get((platform, user_id))
        if conversation is None:
            now = self._clock()
            return Conversation(created_at=now, last_activity=now)
        return conversation

    def add_message(self, platform: str, user_id: str, role: str, content: str) -> Conversation:
        key = (platform, user_id)
        now = self._clock()
        conversation = self._conversations.get(key)
        if conversation is None:
            conversation = Conversation(created_at=now, last_activity=now)
            self._conversations[key] = conversation

        conversation.messages.append(Message(role=role, content=content, timestamp=now))
        if len(conversation.messages) > self._max_history:
            conversation.messages = conversation.messages[-self._max_history:]
        conversation.last_activity = now

        logger.debug(
            "message_added",
            platform=platform,
            user_id=mask_user_id(user_id),
            role=role,
            message_count=len(conversation.messages),
        )
        return conversation

    def get_history(self, platform: str, user_id: str, limit: int = 10) -> list[dict[str, str]]:
        """Return the last *limit* messages as role/content dicts, oldest first."""
        if limit <= 0:
            return []
        conversation = self._conversations.get((platform, user_id))
        if conversation is None:
            return []
        return [
            {"role": msg.role, "content": msg.content}
            for msg in conversation.messages[-limit:]
        ]

    def clear_conversation(self, platform: str, user_id: str) -> None:
        conversation = self._conversations.pop((platform, user_id), None)
        if conversation is not None:
            self._ended(conversation)
        logger.info("conversation_cleared", platform=platform, user_id=mask_user_id(user_id))

    def cleanup(self) -> int:
        """Evict conversations idle for longer than the configured window."""
        cutoff = self._clock() - self._max_idle
        expired = [key for key, conv in self._conversations.items() if conv.last_activity < cutoff]
        for key in expired:
            self._ended(self._conversations.pop(key))

        if expired:
            logger.info("conversations_cleaned", cleaned=len(expired), remaining=len(self._conversations))
        return len(expired)

    def _ended(self, conversation: Conversation) -> None:
        if self._on_conversation_end is not None:
            self._on_conversation_end(len(conversation.messages))

    def get_stats(self) -> dict[str, object]:
        message_count = 0
        content_bytes = 0
        for conversation in self._conversations.values():
            message_count += len(conversation.messages)
            content_bytes += sum(len(m.content.encode("utf-8")) for m in conversation.messages)

        return {
            "total_conversations": len(self._conversations),
            "memory_usage": {"messages": message_count, "content_bytes": content_bytes},
            "uptime": round(time.monotonic() - self._started, 1),
        }

    def __len__(self) -> int:
        return len(self._conversations)
