"""
Shipping zones, rates and shipments.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID

from .base import Base, TimestampMixin, uuid_pk


class ShippingZoneModel(Base, TimestampMixin):
    """Named group of cities/areas sharing the same rates."""

    __tablename__ = "shipping_zones"

    id = uuid_pk()
    name = Column(String(100), unique=True, nullable=False)
    areas = Column(ARRAY(String), nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)


class ShippingRateModel(Base, TimestampMixin):
    """Delivery option inside a zone."""

    __tablename__ = "shipping_rates"

    id = uuid_pk()
    zone_id = Column(UUID(as_uuid=True), ForeignKey("shipping_zones.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    price = Column(Float, nullable=False)
    free_shipping_minimum = Column(Float)
    estimated_days_min = Column(Integer, nullable=False, default=1)
    estimated_days_max = Column(Integer, nullable=False, default=3)
    weight_limit = Column(Float)
    additional_price_per_kg = Column(Float)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("idx_shipping_rates_zone", zone_id),)


class ShipmentModel(Base, TimestampMixin):
    """Physical shipment of an order; `tracking_history` is append-only."""

    __tablename__ = "shipments"

    id = uuid_pk()
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"), nullable=False)
    carrier = Column(String(30), nullable=False, default="manual")
    carrier_order_id = Column(String(100))
    tracking_number = Column(String(100), unique=True, index=True)
    tracking_url = Column(String(500))
    zone_id = Column(UUID(as_uuid=True), ForeignKey("shipping_zones.id", ondelete="SET NULL"))
    rate_id = Column(UUID(as_uuid=True), ForeignKey("shipping_rates.id", ondelete="SET NULL"))
    shipping_cost = Column(Float, nullable=False, default=0)
    weight = Column(Float)
    status = Column(String(30), nullable=False, default="pending")
    tracking_history = Column(JSONB, nullable=False, default=list)
    picked_up_at = Column(DateTime(timezone=True))
    delivered_at = Column(DateTime(timezone=True))
    delivery_attempts = Column(Integer, nullable=False, default=0)
    delivery_note = Column(Text)
    proof_of_delivery = Column(String(500))

    __table_args__ = (
        Index("idx_shipments_order", order_id),
        Index("idx_shipments_status", status),
    )
