"""
Dependency Injection Container.

Centralized container for creating and managing all application dependencies.
Implements Dependency Inversion Principle by wiring concrete implementations to interfaces.

This module is the facade that composes all domain-specific containers.
"""

from __future__ import annotations

import logging

from app.config.settings import Settings
from app.database.async_db import get_async_db_context
from app.domains.catalog.application.event_handlers import CatalogCacheInvalidator
from app.domains.engagement.application.event_handlers import NotificationEventHandlers

from .analytics import AnalyticsContainer
from .base import BaseContainer
from .catalog import CatalogContainer
from .commerce import CommerceContainer
from .engagement import EngagementContainer
from .identity import IdentityContainer
from .payments import PaymentsContainer
from .shipping import ShippingContainer

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container (Facade).

    Single Responsibility: Compose and expose domain-specific containers.
    Singleton Pattern: One cache client and one HTTP client per gateway per process.
    """

    def __init__(self, settings: Settings | None = None):
        self._base = BaseContainer(settings)

        self._identity = IdentityContainer(self._base)
        self._catalog = CatalogContainer(self._base)
        self._commerce = CommerceContainer(self._base, self._catalog, self._identity)
        self._payments = PaymentsContainer(self._base, self._commerce)
        self._shipping = ShippingContainer(self._base, self._commerce)
        self._engagement = EngagementContainer(self._base, self._catalog, self._commerce, self._identity)
        self._analytics = AnalyticsContainer(self._base)

        logger.info("DependencyContainer initialized with all domain containers")

    @property
    def settings(self) -> Settings:
        return self._base.settings

    @property
    def base(self) -> BaseContainer:
        return self._base

    # ============================================================
    # DOMAIN CONTAINERS
    # ============================================================

    @property
    def identity(self) -> IdentityContainer:
        return self._identity

    @property
    def catalog(self) -> CatalogContainer:
        return self._catalog

    @property
    def commerce(self) -> CommerceContainer:
        return self._commerce

    @property
    def payments(self) -> PaymentsContainer:
        return self._payments

    @property
    def shipping(self) -> ShippingContainer:
        return self._shipping

    @property
    def engagement(self) -> EngagementContainer:
        return self._engagement

    @property
    def analytics(self) -> AnalyticsContainer:
        return self._analytics

    # ============================================================
    # EVENT WIRING
    # ============================================================

    def register_event_handlers(self) -> None:
        """Subscribe cross-domain reactions to the domain event publisher."""
        CatalogCacheInvalidator(self._base.get_cache()).register()
        NotificationEventHandlers(
            session_factory=get_async_db_context,
            service_factory=self._engagement.create_notification_service,
        ).register()
        logger.info("Domain event handlers registered")

    async def close(self) -> None:
        await self._base.close()


# ============================================================
# GLOBAL INSTANCE
# ============================================================

_container: DependencyContainer | None = None


def get_container(settings: Settings | None = None) -> DependencyContainer:
    """
    Get global container instance (singleton).

    Args:
        settings: Settings used on first creation only
    """
    global _container

    if _container is None:
        logger.info("Initializing global DependencyContainer")
        _container = DependencyContainer(settings)

    return _container


def reset_container() -> None:
    """
    Reset global container instance.

    Useful for testing or reconfiguration.
    """
    global _container
    logger.info("Resetting global DependencyContainer")
    _container = None


__all__ = [
    "DependencyContainer",
    "get_container",
    "reset_container",
    "BaseContainer",
    "IdentityContainer",
    "CatalogContainer",
    "CommerceContainer",
    "PaymentsContainer",
    "ShippingContainer",
    "EngagementContainer",
    "AnalyticsContainer",
]
