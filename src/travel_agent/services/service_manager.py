"""Service lifecycle manager."""

from __future__ import annotations

from travel_agent.config import AppConfig
from travel_agent.core.conversation import ConversationStore
from travel_agent.log import get_logger
from travel_agent.services.base import Service
from travel_agent.services.cleanup import ConversationCleanupService

logger = get_logger(__name__)


class ServiceManager:
    """Starts and stops the background services for one app lifetime."""

    def __init__(self, config: AppConfig, store: ConversationStore):
        self._services: list[Service] = []
        # No background sweeps under test; tests call cleanup() directly.
        if not config.is_test:
            self._services.append(
                ConversationCleanupService(store, config.conversation.cleanup_interval_minutes)
            )

    @property
    def services(self) -> list[Service]:
        return list(self._services)

    async def start_all(self) -> None:
        for service in self._services:
            await service.start()
        logger.info("all_services_started", services=[s.service_name for s in self._services])

    async def stop_all(self) -> None:
        """Stop services in reverse start order. One failing stop does not block the rest."""
        for service in reversed(self._services):
            try:
                await service.stop()
            except Exception as e:
                logger.error("service_stop_failed", service=service.service_name, error=str(e))
        logger.info("all_services_stopped")

    async def health_check_all(self) -> dict[str, bool]:
        return {s.service_name: await s.health_check() for s in self._services}
