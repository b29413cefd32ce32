"""
Database models package - one module per aggregate family
"""

from .base import Base, TimestampMixin
from .cart import CartModel, WishlistModel
from .catalog import CategoryModel, ProductModel, ProductVariantModel
from .coupons import CouponModel
from .notifications import NotificationModel
from .orders import OrderModel
from .payments import PaymentModel
from .reviews import ReviewModel
from .shipping import ShipmentModel, ShippingRateModel, ShippingZoneModel
from .user import UserModel

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Identity
    "UserModel",
    # Catalog
    "CategoryModel",
    "ProductModel",
    "ProductVariantModel",
    # Commerce
    "CartModel",
    "WishlistModel",
    "CouponModel",
    "OrderModel",
    "PaymentModel",
    # Shipping
    "ShippingZoneModel",
    "ShippingRateModel",
    "ShipmentModel",
    # Engagement
    "ReviewModel",
    "NotificationModel",
]
