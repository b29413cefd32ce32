"""
Shipment entity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import Entity, iso, sid, utcnow

from ..value_objects import Carrier, ShipmentStatus


@dataclass
class TrackingEvent:
    status: str
    timestamp: datetime = field(default_factory=utcnow)
    location: str | None = None
    note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "location": self.location,
            "timestamp": iso(self.timestamp),
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrackingEvent":
        return cls(
            status=data["status"],
            location=data.get("location"),
            timestamp=datetime.fromisoformat(data["timestamp"]) if data.get("timestamp") else utcnow(),
            note=data.get("note"),
        )


@dataclass
class Shipment(Entity[UUID]):
    """
    Delivery of one order.

    Every status change appends to `tracking_history`.
    """

    order_id: UUID | None = None
    carrier: Carrier = Carrier.MANUAL
    carrier_order_id: str | None = None
    tracking_number: str | None = None
    tracking_url: str | None = None
    zone_id: UUID | None = None
    rate_id: UUID | None = None
    shipping_cost: float = 0.0
    weight: float | None = None
    status: ShipmentStatus = ShipmentStatus.PENDING
    tracking_history: list[TrackingEvent] = field(default_factory=list)
    picked_up_at: datetime | None = None
    delivered_at: datetime | None = None
    delivery_attempts: int = 0
    delivery_note: str | None = None
    proof_of_delivery: str | None = None

    @classmethod
    def open(cls, order_id: UUID, shipping_cost: float, **kwargs: Any) -> "Shipment":
        return cls(
            id=uuid4(),
            order_id=order_id,
            shipping_cost=shipping_cost,
            tracking_history=[TrackingEvent(status="Order placed")],
            **kwargs,
        )

    def change_status(self, status: ShipmentStatus, note: str | None = None, location: str | None = None) -> None:
        now = utcnow()
        self.status = status
        self.tracking_history.append(TrackingEvent(status=status.value, timestamp=now, location=location, note=note))
        if status == ShipmentStatus.PICKED_UP:
            self.picked_up_at = now
        elif status == ShipmentStatus.OUT_FOR_DELIVERY:
            self.delivery_attempts += 1
        elif status == ShipmentStatus.DELIVERED:
            self.delivered_at = now
        self.touch()

    def update_tracking(
        self, tracking_number: str, tracking_url: str | None = None, carrier: Carrier | None = None
    ) -> None:
        self.tracking_number = tracking_number
        if tracking_url:
            self.tracking_url = tracking_url
        if carrier:
            self.carrier = carrier
        self.touch()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "order": sid(self.order_id),
            "carrier": self.carrier.value,
            "carrierOrderId": self.carrier_order_id,
            "trackingNumber": self.tracking_number,
            "trackingUrl": self.tracking_url,
            "shippingZone": sid(self.zone_id),
            "shippingRate": sid(self.rate_id),
            "shippingCost": self.shipping_cost,
            "weight": self.weight,
            "status": self.status.value,
            "trackingHistory": [e.to_dict() for e in self.tracking_history],
            "pickedUpAt": iso(self.picked_up_at),
            "deliveredAt": iso(self.delivered_at),
            "deliveryAttempts": self.delivery_attempts,
            "deliveryNote": self.delivery_note,
            "proofOfDelivery": self.proof_of_delivery,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
