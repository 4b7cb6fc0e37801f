"""Tests for the in-memory ConversationStore."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from travel_agent.core.conversation import ConversationStore


class DateClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


# ============================================================================
# add_message / get_history
# ============================================================================

class TestHistory:

    def test_history_is_ordered_oldest_first(self):
        store = ConversationStore()
        store.add_message("web", "u1", "user", "one")
        store.add_message("web", "u1", "assistant", "two")
        store.add_message("web", "u1", "user", "three")

        assert store.get_history("web", "u1") == [
            {"role": "user", "content": "one"},
            {"role": "assistant", "content": "two"},
            {"role": "user", "content": "three"},
        ]

    def test_history_capped_at_max_history(self):
        store = ConversationStore()
        for i in range(25):
            store.add_message("web", "u1", "user", f"m{i}")

        conversation = store.get_conversation("web", "u1")
        assert len(conversation.messages) == 20
        assert conversation.messages[0].content == "m5"
        assert conversation.messages[-1].content == "m24"

    def test_custom_max_history(self):
        store = ConversationStore(max_history=3)
        for i in range(5):
            store.add_message("telegram", "42", "user", f"m{i}")
        assert [m["content"] for m in store.get_history("telegram", "42")] == ["m2", "m3", "m4"]

    def test_limit_returns_trailing_messages(self):
        store = ConversationStore()
        for i in range(10):
            store.add_message("web", "u1", "user", f"m{i}")
        assert [m["content"] for m in store.get_history("web", "u1", limit=4)] == ["m6", "m7", "m8", "m9"]

    def test_zero_limit_returns_empty(self):
        store = ConversationStore()
        store.add_message("web", "u1", "user", "hi")
        assert store.get_history("web", "u1", limit=0) == []

    def test_missing_conversation_returns_empty(self):
        assert ConversationStore().get_history("web", "nobody") == []

    def test_platforms_are_isolated(self):
        store = ConversationStore()
        store.add_message("web", "1", "user", "from web")
        store.add_message("telegram", "1", "user", "from telegram")
        assert store.get_history("web", "1") == [{"role": "user", "content": "from web"}]

    def test_get_conversation_does_not_create_entry(self):
        store = ConversationStore()
        conversation = store.get_conversation("web", "ghost")
        assert conversation.messages == []
        assert len(store) == 0

    def test_last_activity_updated(self):
        clock = DateClock()
        store = ConversationStore(clock=clock)
        store.add_message("web", "u1", "user", "hi")
        clock.now += timedelta(minutes=5)
        store.add_message("web", "u1", "user", "again")

        conversation = store.get_conversation("web", "u1")
        assert conversation.created_at < conversation.last_activity
        assert conversation.last_activity == clock.now


# ============================================================================
# clear / cleanup / stats
# ============================================================================

class TestLifecycle:

    def test_clear_yields_empty_history(self):
        store = ConversationStore()
        store.add_message("web", "u1", "user", "hi")
        store.clear_conversation("web", "u1")
        assert store.get_history("web", "u1") == []
        assert len(store) == 0

    def test_clear_missing_is_noop(self):
        ConversationStore().clear_conversation("web", "nobody")

    def test_cleanup_evicts_idle_conversations(self):
        clock = DateClock()
        store = ConversationStore(clock=clock)
        store.add_message("web", "old", "user", "hi")
        clock.now += timedelta(hours=23)
        store.add_message("web", "recent", "user", "hi")
        clock.now += timedelta(hours=2)

        assert store.cleanup() == 1
        assert store.get_history("web", "old") == []
        assert store.get_history("web", "recent") != []

    def test_cleanup_nothing_to_do(self):
        store = ConversationStore()
        store.add_message("web", "u1", "user", "hi")
        assert store.cleanup() == 0

    def test_stats(self):
        store = ConversationStore()
        store.add_message("web", "u1", "user", "hello")
        store.add_message("telegram", "2", "user", "héllo")

        stats = store.get_stats()
        assert stats["total_conversations"] == 2
        assert stats["memory_usage"] == {"messages": 2, "content_bytes": 5 + 6}
        assert stats["uptime"] >= 0

    def test_ended_conversations_are_reported(self):
        clock = DateClock()
        ended: list[int] = []
        store = ConversationStore(clock=clock, on_conversation_end=ended.append)
        store.add_message("web", "u1", "user", "hi")
        store.add_message("web", "u1", "assistant", "hello")
        store.add_message("web", "idle", "user", "hi")

        store.clear_conversation("web", "u1")
        store.clear_conversation("web", "nobody")
        clock.now += timedelta(hours=25)
        store.cleanup()

        assert ended == [2, 1]
