"""Tests for the Telegram adapter helpers and message flow (no network)."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from travel_agent.ai.client import AIClientError, AIErrorKind
from travel_agent.ai.handler import MessageHandler
from travel_agent.core.types import Platform
from travel_agent.messenger.models import IncomingMessage
from travel_agent.messenger.telegram import (
    GENERIC_ERROR_TEXT,
    TelegramAdapter,
    format_stats,
    friendly_error,
    split_message,
)
from travel_agent.utils.validation import MessageValidationError

from conftest import FakeAIClient


def incoming(text: str, chat_id: str = "1001") -> IncomingMessage:
    return IncomingMessage(
        platform=Platform.TELEGRAM,
        chat_id=chat_id,
        user_id="555",
        user_display_name="Traveler",
        text=text,
        timestamp=datetime.now(timezone.utc),
    )


def make_adapter(state, client) -> TelegramAdapter:
    adapter = TelegramAdapter(state.config.telegram, state, MessageHandler(client, state))
    adapter.send_message = AsyncMock()
    adapter.send_typing_indicator = AsyncMock()
    return adapter


class TestSplitMessage:

    def test_short_message_unchanged(self):
        assert split_message("hi") == ["hi"]

    def test_splits_at_newline(self):
        text = "a" * 3000 + "\n" + "b" * 3000
        assert split_message(text) == ["a" * 3000, "b" * 3000]

    def test_hard_split_without_newline(self):
        chunks = split_message("x" * 9000)
        assert [len(c) for c in chunks] == [4000, 4000, 1000]

    def test_chunks_within_limit(self):
        text = "\n".join("line %d " % i * 20 for i in range(400))
        assert all(len(c) <= 4000 for c in split_message(text))


class TestFriendlyError:

    def test_rate_limited(self):
        assert friendly_error(AIClientError(AIErrorKind.RATE_LIMITED)).startswith("⏱️")

    @pytest.mark.parametrize("kind", [AIErrorKind.INVALID_CREDENTIALS, AIErrorKind.UPSTREAM_UNAVAILABLE])
    def test_unavailable(self, kind):
        assert friendly_error(AIClientError(kind)).startswith("🔑")

    def test_validation(self):
        assert "cannot be empty" in friendly_error(MessageValidationError("Message cannot be empty"))

    def test_other(self):
        assert friendly_error(RuntimeError("x")) == GENERIC_ERROR_TEXT
        assert friendly_error(AIClientError(AIErrorKind.FAILED)) == GENERIC_ERROR_TEXT


class TestHandleIncoming:

    @pytest.mark.asyncio
    async def test_replies_and_keys_by_chat(self, state, ai_client):
        adapter = make_adapter(state, ai_client)
        await adapter.handle_incoming(incoming("hello"))

        adapter.send_typing_indicator.assert_awaited_once_with("1001")
        sent = adapter.send_message.await_args.args[0]
        assert sent.chat_id == "1001"
        assert sent.text == "Hello! Where would you like to travel?"
        assert len(state.store.get_history(Platform.TELEGRAM, "1001")) == 2
        assert state.metrics.snapshot()["requests"]["by_endpoint"]["telegram"]["successful"] == 1

    @pytest.mark.asyncio
    async def test_ai_error_sends_friendly_text(self, state):
        adapter = make_adapter(state, FakeAIClient([AIClientError(AIErrorKind.RATE_LIMITED)]))
        await adapter.handle_incoming(incoming("hello"))

        sent = adapter.send_message.await_args.args[0]
        assert sent.text.startswith("⏱️")
        assert state.metrics.snapshot()["requests"]["by_endpoint"]["telegram"]["failed"] == 1

    @pytest.mark.asyncio
    async def test_stats_text(self, state, ai_client):
        adapter = make_adapter(state, ai_client)
        await adapter.handle_incoming(incoming("hello"))
        text = format_stats(state)
        assert "Active conversations: 1" in text
        assert "Stored messages: 2" in text

    @pytest.mark.asyncio
    async def test_start_requires_token(self, state, ai_client):
        adapter = TelegramAdapter(state.config.telegram, state, MessageHandler(ai_client, state))
        with pytest.raises(ValueError):
            await adapter.start()
