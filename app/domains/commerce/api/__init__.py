"""
Commerce API Layer
"""

from app.domains.commerce.api.routes import cart_router, coupons_router, orders_router

__all__ = ["cart_router", "coupons_router", "orders_router"]
