"""
Application lifecycle management using modern FastAPI lifespan pattern.

This module follows SRP by handling only application startup/shutdown logic.
Uses the modern `lifespan` context manager instead of deprecated on_event decorators.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config.settings import get_settings
from app.core.background_services import BackgroundServiceManager
from app.core.container import DependencyContainer, get_container
from app.core.domain import DomainEventPublisher
from app.database.async_db import async_engine

logger = logging.getLogger(__name__)
settings = get_settings()


class LifecycleManager:
    """
    Manages application lifecycle events.

    Handles startup initialization and graceful shutdown.
    Separates concerns from the main application factory.
    """

    def __init__(self, container: DependencyContainer | None = None) -> None:
        self.container = container or get_container(settings)
        self._background_service_manager = BackgroundServiceManager(self.container)
        self._initialized = False

    async def startup(self) -> None:
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info("Starting application lifecycle...")

        self._verify_configurations()

        # Redis is optional: the cache degrades to a no-op when unreachable
        await self.container.base.get_cache().connect()

        self.container.register_event_handlers()

        await self._background_service_manager.start()

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")

        await self._background_service_manager.stop()
        await self.container.close()
        DomainEventPublisher.clear_handlers()
        await async_engine.dispose()

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _verify_configurations(self) -> None:
        """Warn about settings that are unsafe outside development."""
        if not settings.is_development:
            if settings.JWT_ACCESS_SECRET.startswith("change-me") or settings.JWT_REFRESH_SECRET.startswith(
                "change-me"
            ):
                logger.warning("JWT secrets are still the defaults - set JWT_ACCESS_SECRET and JWT_REFRESH_SECRET")
            if not settings.SSLCOMMERZ_IS_LIVE:
                logger.warning("SSLCommerz is using the sandbox endpoint")

        if not settings.BKASH_APP_KEY:
            logger.info("BKASH_APP_KEY not configured - bKash payments will fail")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Modern FastAPI lifespan context manager.

    The container is exposed on `app.state.container` for request dependencies.

    Usage:
        app = FastAPI(lifespan=lifespan)
    """
    lifecycle = LifecycleManager()
    app.state.container = lifecycle.container

    # Startup
    await lifecycle.startup()

    yield  # Application runs here

    # Shutdown
    await lifecycle.shutdown()
