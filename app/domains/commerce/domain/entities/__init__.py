from .cart import Cart, CartItem
from .coupon import Coupon
from .order import Order, OrderItem, TimelineEntry, generate_order_number

__all__ = ["Cart", "CartItem", "Coupon", "Order", "OrderItem", "TimelineEntry", "generate_order_number"]
