"""
Order management models
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID

from .base import Base, TimestampMixin, uuid_pk


class OrderModel(Base, TimestampMixin):
    """
    Placed order.

    Items are snapshots (name, price, image at purchase time) stored as JSONB,
    so later product edits never rewrite history. `timeline` is append-only.
    """

    __tablename__ = "orders"

    id = uuid_pk()
    order_number = Column(String(30), unique=True, nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    items = Column(JSONB, nullable=False, default=list)
    shipping_address = Column(JSONB, nullable=False)
    billing_address = Column(JSONB)

    subtotal = Column(Float, nullable=False, default=0)
    shipping_cost = Column(Float, nullable=False, default=0)
    discount = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False, default=0)
    coupon_code = Column(String(50))
    coupon_discount = Column(Float, nullable=False, default=0)

    payment_method = Column(String(30), nullable=False)
    payment_status = Column(String(20), nullable=False, default="pending")
    transaction_id = Column(String(100))
    shipping_method = Column(String(20), nullable=False, default="standard")
    status = Column(String(20), nullable=False, default="pending")

    tracking_number = Column(String(100))
    timeline = Column(JSONB, nullable=False, default=list)

    customer_note = Column(Text)
    admin_note = Column(Text)
    cancel_reason = Column(Text)

    paid_at = Column(DateTime(timezone=True))
    delivered_at = Column(DateTime(timezone=True))
    cancelled_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_orders_user_created", user_id, "created_at"),
        Index("idx_orders_status", status),
        Index("idx_orders_payment_status", payment_status),
        Index("idx_orders_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<OrderModel(number='{self.order_number}', status='{self.status}', total={self.total})>"
