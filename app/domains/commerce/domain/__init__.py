"""
Commerce Domain Layer
"""

from .entities import Cart, CartItem, Coupon, Order, OrderItem, TimelineEntry
from .events import OrderPlaced, OrderStatusChanged
from .value_objects import ORDER_TRANSITIONS, OrderPaymentStatus, OrderStatus, PaymentMethod, ShippingMethod

__all__ = [
    "Cart",
    "CartItem",
    "Coupon",
    "Order",
    "OrderItem",
    "TimelineEntry",
    "OrderPlaced",
    "OrderStatusChanged",
    "ORDER_TRANSITIONS",
    "OrderStatus",
    "OrderPaymentStatus",
    "PaymentMethod",
    "ShippingMethod",
]
