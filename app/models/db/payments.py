"""
Payment records for every gateway (SSLCommerz, bKash, Nagad, COD, bank transfer).
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID

from .base import Base, TimestampMixin, uuid_pk


class PaymentModel(Base, TimestampMixin):
    """One payment attempt against an order."""

    __tablename__ = "payments"

    id = uuid_pk()
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="BDT")
    method = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="pending")

    transaction_id = Column(String(60), unique=True, nullable=False, index=True)
    gateway_transaction_id = Column(String(120))
    gateway_response = Column(JSONB)

    # SSLCommerz
    val_id = Column(String(120))
    bank_tran_id = Column(String(120))
    card_type = Column(String(60))

    # bKash
    payment_id = Column(String(120), index=True)
    trx_id = Column(String(120))

    paid_at = Column(DateTime(timezone=True))
    refunded_at = Column(DateTime(timezone=True))
    refund_amount = Column(Float)
    refund_reason = Column(Text)
    failure_reason = Column(Text)

    __table_args__ = (
        Index("idx_payments_order", order_id),
        Index("idx_payments_user_created", user_id, "created_at"),
        Index("idx_payments_status", status),
    )
