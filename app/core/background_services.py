"""
Background services management for the application.

This module follows SRP by handling only background task orchestration.
"""

import asyncio
import logging
from typing import Any

from app.config.settings import get_settings
from app.core.container import DependencyContainer
from app.database.async_db import get_async_db_context

logger = logging.getLogger(__name__)
settings = get_settings()


class BackgroundServiceManager:
    """
    Manages background services lifecycle.

    Currently runs the periodic sweep of old read notifications.
    """

    def __init__(self, container: DependencyContainer) -> None:
        self._container = container
        self._background_tasks: set[asyncio.Task[Any]] = set()
        self._running = False

    async def start(self) -> None:
        """Start all background services."""
        if self._running:
            logger.warning("Background services already running")
            return

        logger.info("Starting background services...")

        if settings.NOTIFICATION_SWEEP_ENABLED:
            task = asyncio.create_task(
                self._run_notification_sweep(settings.NOTIFICATION_SWEEP_INTERVAL_HOURS * 3600),
                name="notification_sweep",
            )
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)
        else:
            logger.info("Notification sweep disabled via NOTIFICATION_SWEEP_ENABLED=False")

        self._running = True
        logger.info("Background services started")

    async def stop(self) -> None:
        """Stop all background services gracefully."""
        if not self._running:
            logger.warning("Background services not running")
            return

        logger.info("Stopping background services...")

        for task in list(self._background_tasks):
            if not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

        self._background_tasks.clear()
        self._running = False
        logger.info("Background services stopped")

    async def sweep_notifications(self) -> int:
        """Run one sweep in its own unit of work."""
        async with get_async_db_context() as session:
            service = self._container.engagement.create_notification_service(session)
            removed = await service.sweep_read()
        logger.info(f"Notification sweep removed {removed} read notifications")
        return removed

    async def _run_notification_sweep(self, interval_seconds: float) -> None:
        """
        Sweep on startup and then every `interval_seconds`.

        A failed sweep is logged and retried on the next tick.
        """
        try:
            while True:
                try:
                    await self.sweep_notifications()
                except Exception as e:
                    logger.error(f"Notification sweep failed: {e}", exc_info=True)
                await asyncio.sleep(interval_seconds)
        except asyncio.CancelledError:
            logger.info("Notification sweep cancelled")
            raise
