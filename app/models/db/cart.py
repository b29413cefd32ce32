"""
Shopping cart and wishlist models (one of each per user).
"""

from sqlalchemy import Column, Float, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID

from .base import Base, TimestampMixin, uuid_pk


class CartModel(Base, TimestampMixin):
    """
    Cart with embedded line items.

    item_count, subtotal and total are derived from `items` on every save.
    """

    __tablename__ = "carts"

    id = uuid_pk()
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    items = Column(JSONB, nullable=False, default=list)
    coupon_code = Column(String(50))
    discount = Column(Float, nullable=False, default=0)
    item_count = Column(Integer, nullable=False, default=0)
    subtotal = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False, default=0)


class WishlistModel(Base, TimestampMixin):
    """Saved products with per-item notification preferences."""

    __tablename__ = "wishlists"

    id = uuid_pk()
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    items = Column(JSONB, nullable=False, default=list)
