"""
Discount coupons.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, UUID

from .base import Base, TimestampMixin, uuid_pk


class CouponModel(Base, TimestampMixin):
    """Coupon code; `code` is stored uppercase."""

    __tablename__ = "coupons"

    id = uuid_pk()
    code = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)

    discount_type = Column(String(20), nullable=False)  # percentage | fixed
    discount_value = Column(Float, nullable=False)
    max_discount = Column(Float)
    min_purchase = Column(Float, nullable=False, default=0)

    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)

    usage_limit = Column(Integer)
    usage_per_user = Column(Integer, nullable=False, default=1)
    used_count = Column(Integer, nullable=False, default=0)

    applicable_to = Column(String(30), nullable=False, default="all")
    specific_products = Column(ARRAY(UUID(as_uuid=True)), nullable=False, default=list)
    specific_categories = Column(ARRAY(UUID(as_uuid=True)), nullable=False, default=list)

    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("idx_coupons_active_window", is_active, start_date, end_date),)
