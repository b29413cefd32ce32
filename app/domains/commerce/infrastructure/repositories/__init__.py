from .cart_repository import SQLAlchemyCartRepository
from .coupon_repository import SQLAlchemyCouponRepository
from .order_repository import SQLAlchemyOrderRepository

__all__ = ["SQLAlchemyCartRepository", "SQLAlchemyCouponRepository", "SQLAlchemyOrderRepository"]
