"""
Catalog domain events (consumed by cache invalidation).
"""

from dataclasses import dataclass
from uuid import UUID

from app.core.domain import DomainEvent


@dataclass(frozen=True)
class CategoryChanged(DomainEvent):
    category_id: UUID | None = None
    action: str = "updated"


@dataclass(frozen=True)
class ProductChanged(DomainEvent):
    product_id: UUID | None = None
    action: str = "updated"
