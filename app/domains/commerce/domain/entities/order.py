"""
Order aggregate.

Status changes go through `change_status`, the single place that enforces
ORDER_TRANSITIONS and appends to the timeline. Shipping uses the same method
when a shipment is delivered.
"""

import secrets
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import (
    AggregateRoot,
    InvalidOperationException,
    iso,
    round_money,
    sid,
    utcnow,
)

from ..events import OrderPlaced, OrderStatusChanged
from ..value_objects import (
    STATUS_MESSAGES,
    OrderPaymentStatus,
    OrderStatus,
    PaymentMethod,
    ShippingMethod,
)

_ORDER_SUFFIX_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


def generate_order_number(now: datetime | None = None) -> str:
    """ORD-YYMMDD-XXXXXX with a random uppercase alphanumeric suffix."""
    now = now or utcnow()
    suffix = "".join(secrets.choice(_ORDER_SUFFIX_ALPHABET) for _ in range(6))
    return f"ORD-{now:%y%m%d}-{suffix}"


@dataclass
class OrderItem:
    """Snapshot of a cart line at purchase time."""

    product_id: UUID
    name: str
    price: float
    quantity: int
    image: str | None = None
    variant_id: UUID | None = None
    variant_sku: str | None = None
    variant_attributes: dict[str, str] = field(default_factory=dict)

    @property
    def subtotal(self) -> float:
        return round_money(self.price * self.quantity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "product": str(self.product_id),
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "image": self.image,
            "variant": (
                {"id": sid(self.variant_id), "sku": self.variant_sku, "attributes": self.variant_attributes}
                if self.variant_sku
                else None
            ),
            "subtotal": self.subtotal,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderItem":
        variant = data.get("variant") or {}
        return cls(
            product_id=UUID(data["product"]),
            name=data.get("name", ""),
            price=float(data.get("price", 0)),
            quantity=int(data.get("quantity", 0)),
            image=data.get("image"),
            variant_id=UUID(variant["id"]) if variant.get("id") else None,
            variant_sku=variant.get("sku"),
            variant_attributes=variant.get("attributes") or {},
        )


@dataclass
class TimelineEntry:
    status: str
    message: str
    timestamp: datetime = field(default_factory=utcnow)
    updated_by: UUID | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "message": self.message,
            "timestamp": iso(self.timestamp),
            "updatedBy": sid(self.updated_by),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimelineEntry":
        return cls(
            status=data["status"],
            message=data.get("message", ""),
            timestamp=datetime.fromisoformat(data["timestamp"]) if data.get("timestamp") else utcnow(),
            updated_by=UUID(data["updatedBy"]) if data.get("updatedBy") else None,
        )


@dataclass
class Order(AggregateRoot[UUID]):
    """
    Placed order.

    Invariants:
    - status only moves along ORDER_TRANSITIONS
    - every status change appends exactly one timeline entry
    - total == subtotal + shipping_cost + tax - discount (floored at 0)
    """

    order_number: str = ""
    user_id: UUID | None = None
    items: list[OrderItem] = field(default_factory=list)
    shipping_address: dict[str, Any] = field(default_factory=dict)
    billing_address: dict[str, Any] | None = None

    subtotal: float = 0.0
    shipping_cost: float = 0.0
    discount: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    coupon_code: str | None = None
    coupon_discount: float = 0.0

    payment_method: PaymentMethod = PaymentMethod.COD
    payment_status: OrderPaymentStatus = OrderPaymentStatus.PENDING
    transaction_id: str | None = None
    shipping_method: ShippingMethod = ShippingMethod.STANDARD
    status: OrderStatus = OrderStatus.PENDING

    tracking_number: str | None = None
    timeline: list[TimelineEntry] = field(default_factory=list)

    customer_note: str | None = None
    admin_note: str | None = None
    cancel_reason: str | None = None

    paid_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None

    @classmethod
    def place(
        cls,
        user_id: UUID,
        customer_name: str,
        items: list[OrderItem],
        shipping_address: dict[str, Any],
        payment_method: PaymentMethod,
        shipping_method: ShippingMethod,
        shipping_cost: float,
        discount: float = 0.0,
        coupon_code: str | None = None,
        customer_note: str | None = None,
    ) -> "Order":
        subtotal = round_money(sum(i.price * i.quantity for i in items))
        order = cls(
            id=uuid4(),
            order_number=generate_order_number(),
            user_id=user_id,
            items=items,
            shipping_address=shipping_address,
            subtotal=subtotal,
            shipping_cost=round_money(shipping_cost),
            discount=round_money(discount),
            coupon_code=coupon_code,
            coupon_discount=round_money(discount),
            total=round_money(max(0.0, subtotal + shipping_cost - discount)),
            payment_method=payment_method,
            shipping_method=shipping_method,
            customer_note=customer_note,
            timeline=[TimelineEntry(status=OrderStatus.PENDING.value, message="Order placed successfully")],
        )
        order._record_event(
            OrderPlaced(
                order_id=order.id,
                order_number=order.order_number,
                user_id=user_id,
                customer_name=customer_name,
                total=order.total,
                summary=items[0].name if len(items) == 1 else f"{len(items)} items",
            )
        )
        return order

    @property
    def is_paid(self) -> bool:
        return self.payment_status == OrderPaymentStatus.PAID

    def _append(self, status: OrderStatus, message: str, updated_by: UUID | None = None) -> None:
        self.timeline.append(TimelineEntry(status=status.value, message=message, updated_by=updated_by))

    def change_status(
        self,
        new_status: OrderStatus,
        note: str | None = None,
        updated_by: UUID | None = None,
        tracking_number: str | None = None,
    ) -> OrderStatus:
        """
        Move to `new_status` if the transition table allows it.

        Returns the previous status.

        Raises:
            InvalidOperationException: Transition not in ORDER_TRANSITIONS
        """
        if not self.status.can_transition_to(new_status):
            raise InvalidOperationException(
                "change_status",
                self.status.value,
                f"Cannot change status from {self.status.value} to {new_status.value}",
            )

        previous = self.status
        now = utcnow()
        self.status = new_status
        if tracking_number:
            self.tracking_number = tracking_number
        if new_status == OrderStatus.DELIVERED:
            self.delivered_at = now
        if new_status == OrderStatus.CANCELLED:
            self.cancelled_at = now

        self._append(new_status, note or STATUS_MESSAGES[new_status], updated_by)
        self.touch()
        self._record_event(
            OrderStatusChanged(
                order_id=self.id,
                order_number=self.order_number,
                user_id=self.user_id,
                old_status=previous.value,
                new_status=new_status.value,
            )
        )
        return previous

    def cancel_by_customer(self, reason: str) -> None:
        """
        Raises:
            InvalidOperationException: Order already past confirmation
        """
        if not self.status.is_customer_cancellable():
            raise InvalidOperationException(
                "cancel", self.status.value, "Order cannot be cancelled at this stage"
            )
        self.cancel_reason = reason
        self.change_status(OrderStatus.CANCELLED, note=f"Order cancelled by customer: {reason}")

    def update_payment_status(self, payment_status: OrderPaymentStatus, transaction_id: str | None = None) -> None:
        """Record a payment outcome; a paid pending order is confirmed automatically."""
        self.payment_status = payment_status
        if transaction_id:
            self.transaction_id = transaction_id
        if payment_status == OrderPaymentStatus.PAID:
            self.paid_at = utcnow()
            if self.status == OrderStatus.PENDING:
                self.change_status(OrderStatus.CONFIRMED, note="Payment received, order confirmed")
        self._append(self.status, f"Payment status updated to {payment_status.value}")
        self.touch()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "orderNumber": self.order_number,
            "user": sid(self.user_id),
            "items": [i.to_dict() for i in self.items],
            "shippingAddress": self.shipping_address,
            "billingAddress": self.billing_address,
            "subtotal": self.subtotal,
            "shippingCost": self.shipping_cost,
            "discount": self.discount,
            "tax": self.tax,
            "total": self.total,
            "couponCode": self.coupon_code,
            "couponDiscount": self.coupon_discount,
            "paymentMethod": self.payment_method.value,
            "paymentStatus": self.payment_status.value,
            "transactionId": self.transaction_id,
            "shippingMethod": self.shipping_method.value,
            "status": self.status.value,
            "trackingNumber": self.tracking_number,
            "timeline": [t.to_dict() for t in self.timeline],
            "customerNote": self.customer_note,
            "adminNote": self.admin_note,
            "cancelReason": self.cancel_reason,
            "paidAt": iso(self.paid_at),
            "deliveredAt": iso(self.delivered_at),
            "cancelledAt": iso(self.cancelled_at),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
