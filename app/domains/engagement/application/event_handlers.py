"""
Notification creation, run after the writing unit of work commits.

Each handler opens its own session: the originating transaction is already
closed, and a failure here must not touch it.
"""

import logging
from typing import Any, AsyncContextManager, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import DomainEventPublisher
from app.domains.commerce.domain.events import OrderPlaced, OrderStatusChanged
from app.domains.engagement.application.services import NotificationService
from app.domains.engagement.domain.events import ReviewSubmitted
from app.domains.identity.domain.events import UserRegistered

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]
ServiceFactory = Callable[[AsyncSession], NotificationService]


class NotificationEventHandlers:
    def __init__(self, session_factory: SessionFactory, service_factory: ServiceFactory):
        self.session_factory = session_factory
        self.service_factory = service_factory

    async def _run(self, producer: str, event: Any) -> None:
        async with self.session_factory() as session:
            service = self.service_factory(session)
            await getattr(service, producer)(event)
        logger.debug(f"{event.event_type} -> {producer}")

    async def on_order_placed(self, event: OrderPlaced) -> None:
        await self._run("notify_order_placed", event)

    async def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        await self._run("notify_order_status", event)

    async def on_review_submitted(self, event: ReviewSubmitted) -> None:
        await self._run("notify_review_submitted", event)

    async def on_user_registered(self, event: UserRegistered) -> None:
        await self._run("notify_user_registered", event)

    def register(self) -> None:
        DomainEventPublisher.subscribe(OrderPlaced, self.on_order_placed)
        DomainEventPublisher.subscribe(OrderStatusChanged, self.on_order_status_changed)
        DomainEventPublisher.subscribe(ReviewSubmitted, self.on_review_submitted)
        DomainEventPublisher.subscribe(UserRegistered, self.on_user_registered)


__all__ = ["NotificationEventHandlers"]
