"""
Base Entity Classes for Domain-Driven Design

Entities are domain objects with identity and lifecycle.
They maintain their identity regardless of their attributes.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

# Type variable for entity ID (UUID in this service)
TId = TypeVar("TId")


def utcnow() -> datetime:
    """Timezone-aware current time used for every timestamp."""
    return datetime.now(UTC)


@dataclass
class Entity(ABC, Generic[TId]):
    """
    Base class for all domain entities.

    An entity is a domain object that has a distinct identity
    that runs through time and different states.

    Example:
        ```python
        @dataclass
        class Wishlist(Entity[UUID]):
            user_id: UUID | None = None
            items: list[WishlistItem] = field(default_factory=list)
        ```
    """

    id: TId | None = field(default=None)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they have the same ID."""
        if not isinstance(other, Entity):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = utcnow()


@dataclass
class AggregateRoot(Entity[TId], Generic[TId]):
    """
    Base class for aggregate roots.

    An aggregate root is the entry point to an aggregate. It guards the
    aggregate invariants and records the domain events its mutations raise;
    use cases hand those events to the session outbox.

    Example:
        ```python
        @dataclass
        class Order(AggregateRoot[UUID]):
            status: OrderStatus = OrderStatus.PENDING

            def change_status(self, new_status: OrderStatus, note: str) -> None:
                ensure_transition(self.status, new_status)
                self.status = new_status
                self._record_event(OrderStatusChanged(order_id=self.id, status=new_status.value))
        ```
    """

    _domain_events: list[Any] = field(default_factory=list, repr=False, compare=False)

    def _record_event(self, event: Any) -> None:
        """Record a domain event to be published later."""
        self._domain_events.append(event)

    def get_domain_events(self) -> list[Any]:
        """Get all recorded domain events."""
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        """Clear all recorded domain events (after handing them to the outbox)."""
        self._domain_events.clear()


def iso(value: datetime | None) -> str | None:
    """ISO-8601 rendering for optional timestamps in API payloads."""
    return value.isoformat() if value else None


def sid(value: Any) -> str | None:
    """String rendering for optional identifiers in API payloads."""
    return str(value) if value is not None else None
