"""
Product reviews.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID

from .base import Base, TimestampMixin, uuid_pk


class ReviewModel(Base, TimestampMixin):
    """One review per (user, product)."""

    __tablename__ = "reviews"

    id = uuid_pk()
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"))

    rating = Column(Integer, nullable=False)
    title = Column(String(100))
    comment = Column(Text, nullable=False)
    images = Column(ARRAY(String), nullable=False, default=list)

    is_verified_purchase = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default="approved")
    helpful_count = Column(Integer, nullable=False, default=0)
    helpful_users = Column(ARRAY(UUID(as_uuid=True)), nullable=False, default=list)
    admin_reply = Column(JSONB)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_reviews_user_product"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating"),
        Index("idx_reviews_product_status", product_id, status),
    )
