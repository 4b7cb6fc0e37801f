"""Tests for the background service manager and cleanup service."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from travel_agent.config import AppConfig
from travel_agent.core.conversation import ConversationStore
from travel_agent.services.cleanup import ConversationCleanupService
from travel_agent.services.service_manager import ServiceManager


class TestServiceManager:

    def test_no_cleanup_job_in_test_environment(self, config):
        assert ServiceManager(config, ConversationStore()).services == []

    def test_cleanup_job_outside_tests(self):
        config = AppConfig(environment="production", anthropic={"api_key": "k"})
        services = ServiceManager(config, ConversationStore()).services
        assert [s.service_name for s in services] == ["conversation_cleanup"]

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        config = AppConfig(environment="development", anthropic={"api_key": "k"})
        manager = ServiceManager(config, ConversationStore())
        await manager.start_all()
        assert await manager.health_check_all() == {"conversation_cleanup": True}
        await manager.stop_all()


class TestCleanupService:

    @pytest.mark.asyncio
    async def test_run_cleanup_evicts_idle(self):
        now = datetime(2026, 1, 15, tzinfo=timezone.utc)
        times = iter([now, now + timedelta(hours=30)])
        store = ConversationStore(clock=lambda: next(times))
        store.add_message("web", "u1", "user", "hi")

        assert await ConversationCleanupService(store).run_cleanup() == 1
        assert len(store) == 0
