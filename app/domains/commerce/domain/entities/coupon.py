"""
Coupon entity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import Entity, iso, round_money, sid, utcnow

from ..value_objects import CouponDiscountType, CouponScope


@dataclass
class Coupon(Entity[UUID]):
    """
    Discount code valid inside [start_date, end_date] while usage remains.
    """

    code: str = ""
    name: str = ""
    description: str | None = None
    discount_type: CouponDiscountType = CouponDiscountType.PERCENTAGE
    discount_value: float = 0.0
    max_discount: float | None = None
    min_purchase: float = 0.0
    start_date: datetime = field(default_factory=utcnow)
    end_date: datetime = field(default_factory=utcnow)
    usage_limit: int | None = None
    usage_per_user: int = 1
    used_count: int = 0
    applicable_to: CouponScope = CouponScope.ALL
    specific_products: list[UUID] = field(default_factory=list)
    specific_categories: list[UUID] = field(default_factory=list)
    is_active: bool = True

    def __post_init__(self) -> None:
        self.code = self.code.strip().upper()

    @classmethod
    def new(cls, **kwargs: Any) -> "Coupon":
        return cls(id=uuid4(), **kwargs)

    def is_valid(self, now: datetime | None = None) -> bool:
        """Active, inside its date window and below its usage limit."""
        now = now or utcnow()
        if not self.is_active or not (self.start_date <= now <= self.end_date):
            return False
        return self.usage_limit is None or self.used_count < self.usage_limit

    def applies_to(self, product_id: UUID, category_ids: set[UUID]) -> bool:
        if self.applicable_to == CouponScope.SPECIFIC_PRODUCTS:
            return product_id in self.specific_products
        if self.applicable_to == CouponScope.SPECIFIC_CATEGORIES:
            return bool(category_ids & set(self.specific_categories))
        return True

    def compute_discount(self, eligible_subtotal: float) -> float:
        """Percentage capped by `max_discount`, or fixed capped at the eligible amount."""
        if eligible_subtotal <= 0:
            return 0.0
        if self.discount_type == CouponDiscountType.PERCENTAGE:
            discount = eligible_subtotal * self.discount_value / 100
            if self.max_discount is not None:
                discount = min(discount, self.max_discount)
        else:
            discount = min(self.discount_value, eligible_subtotal)
        return round_money(discount)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "discountType": self.discount_type.value,
            "discountValue": self.discount_value,
            "maxDiscount": self.max_discount,
            "minPurchase": self.min_purchase,
            "startDate": iso(self.start_date),
            "endDate": iso(self.end_date),
            "usageLimit": self.usage_limit,
            "usagePerUser": self.usage_per_user,
            "usedCount": self.used_count,
            "applicableTo": self.applicable_to.value,
            "specificProducts": [str(p) for p in self.specific_products],
            "specificCategories": [str(c) for c in self.specific_categories],
            "isActive": self.is_active,
            "isValid": self.is_valid(),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
