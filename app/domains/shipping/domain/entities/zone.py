"""
Shipping zone and rate entities.
"""

import re
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import Entity, iso, round_money, sid

FALLBACK_ZONE_NAME = re.compile(r"outside|অন্যান্য", re.IGNORECASE)


@dataclass
class ShippingZone(Entity[UUID]):
    name: str = ""
    areas: list[str] = field(default_factory=list)
    is_active: bool = True

    @classmethod
    def new(cls, name: str, areas: list[str], is_active: bool = True) -> "ShippingZone":
        return cls(id=uuid4(), name=name.strip(), areas=[a.strip() for a in areas if a.strip()], is_active=is_active)

    @property
    def is_fallback(self) -> bool:
        """The catch-all zone for places no other zone lists."""
        return bool(FALLBACK_ZONE_NAME.search(self.name))

    def covers(self, city: str) -> bool:
        needle = city.strip().lower()
        return bool(needle) and any(needle in area.lower() for area in self.areas)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "name": self.name,
            "areas": list(self.areas),
            "isActive": self.is_active,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


@dataclass
class ShippingRate(Entity[UUID]):
    """
    Delivery option of a zone.

    Weight beyond `weight_limit` costs `additional_price_per_kg` per kg,
    fractions of a kg charged pro rata.
    """

    zone_id: UUID | None = None
    name: str = ""
    description: str | None = None
    price: float = 0.0
    free_shipping_minimum: float | None = None
    estimated_days_min: int = 1
    estimated_days_max: int = 3
    weight_limit: float | None = None
    additional_price_per_kg: float | None = None
    is_active: bool = True

    @classmethod
    def new(cls, **kwargs: Any) -> "ShippingRate":
        return cls(id=uuid4(), **kwargs)

    def is_free_for(self, order_total: float) -> bool:
        return bool(self.free_shipping_minimum) and order_total >= self.free_shipping_minimum  # type: ignore[operator]

    def overage(self, weight: float) -> float:
        if not self.weight_limit or not self.additional_price_per_kg or weight <= self.weight_limit:
            return 0.0
        return (weight - self.weight_limit) * self.additional_price_per_kg

    def quote(self, weight: float = 0.0, order_total: float = 0.0) -> dict[str, Any]:
        is_free = self.is_free_for(order_total)
        price = 0.0 if is_free else round_money(self.price + self.overage(weight))
        return {
            "rateId": sid(self.id),
            "name": self.name,
            "price": price,
            "isFree": is_free,
            "estimatedDays": {"min": self.estimated_days_min, "max": self.estimated_days_max},
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "zone": sid(self.zone_id),
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "freeShippingMinimum": self.free_shipping_minimum,
            "estimatedDays": {"min": self.estimated_days_min, "max": self.estimated_days_max},
            "weightLimit": self.weight_limit,
            "additionalPricePerKg": self.additional_price_per_kg,
            "isActive": self.is_active,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
