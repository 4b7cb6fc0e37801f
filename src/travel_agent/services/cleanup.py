"""Periodic eviction of idle conversations."""

from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from travel_agent.core.conversation import ConversationStore
from travel_agent.log import get_logger
from travel_agent.services.base import Service

logger = get_logger(__name__)

CLEANUP_JOB_ID = "conversation_cleanup"


class ConversationCleanupService(Service):
    """Runs ``ConversationStore.cleanup`` on an APScheduler interval job."""

    def __init__(self, store: ConversationStore, interval_minutes: int = 60):
        self._store = store
        self._interval_minutes = interval_minutes
        self._scheduler = AsyncIOScheduler()

    @property
    def service_name(self) -> str:
        return "conversation_cleanup"

    async def start(self) -> None:
        self._scheduler.add_job(
            self.run_cleanup,
            IntervalTrigger(minutes=self._interval_minutes),
            id=CLEANUP_JOB_ID,
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info("cleanup_scheduler_started", interval_minutes=self._interval_minutes)

    async def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        logger.info("cleanup_scheduler_stopped")

    async def health_check(self) -> bool:
        return self._scheduler.running

    async def run_cleanup(self) -> int:
        removed = self._store.cleanup()
        logger.info("conversations_cleaned", removed=removed, remaining=len(self._store))
        return removed
