"""
Wishlist aggregate.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import AggregateRoot, BusinessRuleViolationException, EntityNotFoundException, iso, sid, utcnow


@dataclass
class WishlistItem:
    product_id: UUID
    added_at: datetime = field(default_factory=utcnow)
    notify_on_sale: bool = True
    notify_on_stock: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "product": str(self.product_id),
            "addedAt": iso(self.added_at),
            "notifyOnSale": self.notify_on_sale,
            "notifyOnStock": self.notify_on_stock,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WishlistItem":
        added_at = data.get("addedAt")
        return cls(
            product_id=UUID(data["product"]),
            added_at=datetime.fromisoformat(added_at) if added_at else utcnow(),
            notify_on_sale=bool(data.get("notifyOnSale", True)),
            notify_on_stock=bool(data.get("notifyOnStock", True)),
        )


@dataclass
class Wishlist(AggregateRoot[UUID]):
    """One wishlist per user; a product appears at most once."""

    user_id: UUID | None = None
    items: list[WishlistItem] = field(default_factory=list)

    @classmethod
    def for_user(cls, user_id: UUID) -> "Wishlist":
        return cls(id=uuid4(), user_id=user_id)

    def __len__(self) -> int:
        return len(self.items)

    def find(self, product_id: UUID) -> WishlistItem | None:
        return next((i for i in self.items if i.product_id == product_id), None)

    def contains(self, product_id: UUID) -> bool:
        return self.find(product_id) is not None

    def add(self, product_id: UUID, notify_on_sale: bool = True, notify_on_stock: bool = True) -> WishlistItem:
        if self.contains(product_id):
            raise BusinessRuleViolationException("wishlist_duplicate", "Product already in wishlist")
        item = WishlistItem(product_id=product_id, notify_on_sale=notify_on_sale, notify_on_stock=notify_on_stock)
        self.items.append(item)
        self.touch()
        return item

    def remove(self, product_id: UUID) -> bool:
        """Drop the product if present; returns whether anything was removed."""
        before = len(self.items)
        self.items = [i for i in self.items if i.product_id != product_id]
        if len(self.items) == before:
            return False
        self.touch()
        return True

    def clear(self) -> list[UUID]:
        removed = [i.product_id for i in self.items]
        self.items = []
        self.touch()
        return removed

    def set_preferences(
        self, product_id: UUID, notify_on_sale: bool | None = None, notify_on_stock: bool | None = None
    ) -> WishlistItem:
        item = self.find(product_id)
        if item is None:
            raise EntityNotFoundException("WishlistItem", product_id, "Product not in wishlist")
        if notify_on_sale is not None:
            item.notify_on_sale = notify_on_sale
        if notify_on_stock is not None:
            item.notify_on_stock = notify_on_stock
        self.touch()
        return item

    def to_dict(self, products: dict[UUID, dict[str, Any]] | None = None) -> dict[str, Any]:
        """Serialise, embedding product summaries when given."""
        products = products or {}
        items = []
        for item in self.items:
            data = item.to_dict()
            if item.product_id in products:
                data["product"] = products[item.product_id]
            items.append(data)
        return {
            "id": sid(self.id),
            "user": sid(self.user_id),
            "items": items,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
