"""
Shipping value objects.
"""

from app.core.domain import StatusEnum


class ShipmentStatus(StatusEnum):
    PENDING = "pending"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    RETURNED = "returned"
    CANCELLED = "cancelled"

    def is_in_transit(self) -> bool:
        return self in (ShipmentStatus.PICKED_UP, ShipmentStatus.IN_TRANSIT, ShipmentStatus.OUT_FOR_DELIVERY)


class Carrier(StatusEnum):
    PATHAO = "pathao"
    STEADFAST = "steadfast"
    REDX = "redx"
    PAPERFLY = "paperfly"
    MANUAL = "manual"


__all__ = ["ShipmentStatus", "Carrier"]
