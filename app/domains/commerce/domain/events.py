"""
Commerce domain events.
"""

from dataclasses import dataclass
from uuid import UUID

from app.core.domain import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    order_id: UUID | None = None
    order_number: str = ""
    user_id: UUID | None = None
    customer_name: str = ""
    total: float = 0.0
    summary: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    order_id: UUID | None = None
    order_number: str = ""
    user_id: UUID | None = None
    old_status: str = ""
    new_status: str = ""
