"""
Commerce value objects and the order status state machine.
"""

from app.core.domain import StatusEnum


class OrderStatus(StatusEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"

    def is_terminal(self) -> bool:
        return not ORDER_TRANSITIONS[self]

    def can_transition_to(self, target: "OrderStatus") -> bool:
        return target in ORDER_TRANSITIONS[self]

    def is_customer_cancellable(self) -> bool:
        return self in (OrderStatus.PENDING, OrderStatus.CONFIRMED)

    def counts_as_revenue(self) -> bool:
        return self not in (OrderStatus.CANCELLED, OrderStatus.RETURNED)


# Adjacency table of legal status changes
ORDER_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    OrderStatus.CONFIRMED: (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    OrderStatus.PROCESSING: (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    OrderStatus.SHIPPED: (OrderStatus.DELIVERED, OrderStatus.RETURNED),
    OrderStatus.DELIVERED: (OrderStatus.RETURNED,),
    OrderStatus.CANCELLED: (),
    OrderStatus.RETURNED: (),
}

STATUS_MESSAGES: dict[OrderStatus, str] = {
    OrderStatus.CONFIRMED: "Order has been confirmed",
    OrderStatus.PROCESSING: "Order is being processed",
    OrderStatus.SHIPPED: "Order has been shipped",
    OrderStatus.DELIVERED: "Order has been delivered",
    OrderStatus.CANCELLED: "Order has been cancelled",
    OrderStatus.RETURNED: "Order has been returned",
}


class OrderPaymentStatus(StatusEnum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIAL_REFUND = "partial_refund"


class PaymentMethod(StatusEnum):
    SSLCOMMERZ = "sslcommerz"
    BKASH = "bkash"
    NAGAD = "nagad"
    COD = "cod"
    BANK_TRANSFER = "bank_transfer"


class ShippingMethod(StatusEnum):
    STANDARD = "standard"
    EXPRESS = "express"


class CouponDiscountType(StatusEnum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CouponScope(StatusEnum):
    ALL = "all"
    SPECIFIC_PRODUCTS = "specific_products"
    SPECIFIC_CATEGORIES = "specific_categories"


__all__ = [
    "OrderStatus",
    "ORDER_TRANSITIONS",
    "STATUS_MESSAGES",
    "OrderPaymentStatus",
    "PaymentMethod",
    "ShippingMethod",
    "CouponDiscountType",
    "CouponScope",
]
