"""
Base Domain Event Classes for Domain-Driven Design

Domain Events represent significant business occurrences (an order was placed,
a review was submitted). Use cases record them in the session-bound
`EventOutbox`; the outbox hands them to `DomainEventPublisher` only after the
unit of work commits.

Delivery is at-most-once: a handler failure is logged and dropped, never
retried and never propagated to the request that raised the event.
"""

import logging
from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Callable, Coroutine
from uuid import UUID, uuid4

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Domain events are immutable records of something that happened
    in the domain.

    Example:
        ```python
        @dataclass(frozen=True)
        class OrderPlaced(DomainEvent):
            order_id: UUID | None = None
            order_number: str = ""
            total: float = 0.0
        ```
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def event_type(self) -> str:
        """Get the event type name (class name)."""
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization."""
        result: dict[str, Any] = {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
        }
        for key, value in self.__dict__.items():
            if key in result:
                continue
            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, UUID):
                result[key] = str(value)
            else:
                result[key] = value
        return result


# Type aliases for event handlers
EventHandler = Callable[[Any], Coroutine[Any, Any, None]]


class DomainEventPublisher:
    """
    In-memory domain event publisher.

    Handlers are registered once at startup (see `app.core.lifecycle`).
    """

    _handlers: dict[str, list[EventHandler]] = {}

    @classmethod
    def subscribe(cls, event_type: type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to subscribe to
            handler: Async handler function
        """
        event_name = event_type.__name__
        if event_name not in cls._handlers:
            cls._handlers[event_name] = []
        cls._handlers[event_name].append(handler)

    @classmethod
    async def publish(cls, event: DomainEvent) -> None:
        """
        Publish a domain event to all subscribers.

        Args:
            event: Event to publish
        """
        event_name = event.event_type
        handlers = cls._handlers.get(event_name, [])

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                # Log error but don't fail other handlers
                logger.error(f"Error in event handler for {event_name}: {e}", exc_info=True)

    @classmethod
    async def publish_all(cls, events: list[DomainEvent]) -> None:
        """Publish multiple events in order."""
        for event in events:
            await cls.publish(event)

    @classmethod
    def clear_handlers(cls) -> None:
        """Clear all event handlers (useful for testing)."""
        cls._handlers.clear()


class EventOutbox:
    """
    Per-unit-of-work buffer of domain events.

    Events collected while a request runs are published by `flush()` once the
    session has committed, or dropped by `discard()` on rollback.
    """

    def __init__(self) -> None:
        self._events: list[DomainEvent] = []

    def __len__(self) -> int:
        return len(self._events)

    def record(self, event: DomainEvent) -> None:
        self._events.append(event)

    def collect_from(self, aggregate: Any) -> None:
        """Move the pending events of an aggregate root into the outbox."""
        for event in aggregate.get_domain_events():
            self._events.append(event)
        aggregate.clear_domain_events()

    def pending(self) -> list[DomainEvent]:
        return list(self._events)

    def discard(self) -> None:
        if self._events:
            logger.debug(f"Discarding {len(self._events)} unpublished domain events")
        self._events.clear()

    async def flush(self) -> None:
        """Publish and forget every buffered event."""
        events, self._events = self._events, []
        await DomainEventPublisher.publish_all(events)
