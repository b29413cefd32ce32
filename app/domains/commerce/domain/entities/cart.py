"""
Cart aggregate.

Totals are never taken from callers: every mutation ends in `recalculate()`,
which keeps `subtotal == sum(price * quantity)` and
`total == max(0, subtotal - discount)`.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import AggregateRoot, EntityNotFoundException, iso, round_money, sid, utcnow


@dataclass
class CartItem:
    """Cart line; the price is captured when the line is added."""

    product_id: UUID
    name: str
    price: float
    quantity: int = 1
    image: str | None = None
    variant_id: UUID | None = None
    variant_sku: str | None = None
    variant_attributes: dict[str, str] = field(default_factory=dict)
    added_at: datetime = field(default_factory=utcnow)
    id: UUID = field(default_factory=uuid4)

    @property
    def line_total(self) -> float:
        return round_money(self.price * self.quantity)

    def matches(self, product_id: UUID, variant_sku: str | None) -> bool:
        """Same product and same variant (or both without variant)."""
        return self.product_id == product_id and self.variant_sku == variant_sku

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "product": str(self.product_id),
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "image": self.image,
            "variant": (
                {"id": sid(self.variant_id), "sku": self.variant_sku, "attributes": self.variant_attributes}
                if self.variant_sku
                else None
            ),
            "lineTotal": self.line_total,
            "addedAt": iso(self.added_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CartItem":
        variant = data.get("variant") or {}
        added_at = data.get("addedAt")
        return cls(
            id=UUID(data["id"]),
            product_id=UUID(data["product"]),
            name=data.get("name", ""),
            price=float(data.get("price", 0)),
            quantity=int(data.get("quantity", 1)),
            image=data.get("image"),
            variant_id=UUID(variant["id"]) if variant.get("id") else None,
            variant_sku=variant.get("sku"),
            variant_attributes=variant.get("attributes") or {},
            added_at=datetime.fromisoformat(added_at) if added_at else utcnow(),
        )


@dataclass
class Cart(AggregateRoot[UUID]):
    """One cart per user."""

    user_id: UUID | None = None
    items: list[CartItem] = field(default_factory=list)
    coupon_code: str | None = None
    discount: float = 0.0
    item_count: int = 0
    subtotal: float = 0.0
    total: float = 0.0

    @classmethod
    def for_user(cls, user_id: UUID) -> "Cart":
        return cls(id=uuid4(), user_id=user_id)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def recalculate(self) -> None:
        self.item_count = sum(i.quantity for i in self.items)
        self.subtotal = round_money(sum(i.price * i.quantity for i in self.items))
        self.discount = round_money(max(self.discount, 0.0))
        self.total = round_money(max(0.0, self.subtotal - self.discount))
        self.touch()

    def find_line(self, product_id: UUID, variant_sku: str | None = None) -> CartItem | None:
        for item in self.items:
            if item.matches(product_id, variant_sku):
                return item
        return None

    def get_item(self, item_id: UUID) -> CartItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise EntityNotFoundException("CartItem", item_id, "Item not found in cart")

    def add_line(self, item: CartItem) -> CartItem:
        """Merge into the identical line if present, else append."""
        existing = self.find_line(item.product_id, item.variant_sku)
        if existing:
            existing.quantity += item.quantity
            self.recalculate()
            return existing
        self.items.append(item)
        self.recalculate()
        return item

    def set_quantity(self, item_id: UUID, quantity: int) -> CartItem:
        item = self.get_item(item_id)
        item.quantity = quantity
        self.recalculate()
        return item

    def remove_item(self, item_id: UUID) -> None:
        self.items.remove(self.get_item(item_id))
        self.recalculate()

    def remove_product(self, product_id: UUID) -> None:
        self.items = [i for i in self.items if i.product_id != product_id]
        self.recalculate()

    def apply_coupon(self, code: str, discount: float) -> None:
        self.coupon_code = code
        self.discount = discount
        self.recalculate()

    def remove_coupon(self) -> None:
        self.coupon_code = None
        self.discount = 0.0
        self.recalculate()

    def clear(self) -> None:
        self.items = []
        self.remove_coupon()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "user": sid(self.user_id),
            "items": [i.to_dict() for i in self.items],
            "itemCount": self.item_count,
            "subtotal": self.subtotal,
            "discount": self.discount,
            "total": self.total,
            "couponCode": self.coupon_code,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
