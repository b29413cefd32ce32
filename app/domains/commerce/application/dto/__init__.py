"""
Commerce DTOs
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class OrderFilters:
    """Admin order listing filters."""

    status: str | None = None
    payment_status: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    search: str | None = None


@dataclass
class PlaceOrderRequest:
    shipping_address: dict[str, Any]
    payment_method: str
    shipping_method: str = "standard"
    customer_note: str | None = None
    coupon_code: str | None = None


@dataclass
class CartValidation:
    valid: bool
    issues: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "issues": self.issues}


__all__ = ["OrderFilters", "PlaceOrderRequest", "CartValidation"]
