from .cart_service import CartService
from .coupon_service import CouponQuote, CouponService
from .order_service import OrderService

__all__ = ["CartService", "CouponService", "CouponQuote", "OrderService"]
