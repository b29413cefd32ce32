"""
Payment entity.
"""

import secrets
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import (
    Entity,
    InvalidOperationException,
    iso,
    round_money,
    sid,
    to_base36,
    utcnow,
)

from ..value_objects import PaymentMethod, PaymentStatus


def generate_transaction_id(now: datetime | None = None) -> str:
    """TXN-{base36 epoch millis}-{8 hex}, uppercased."""
    now = now or utcnow()
    millis = int(now.timestamp() * 1000)
    return f"TXN-{to_base36(millis)}-{secrets.token_hex(4)}".upper()


@dataclass
class Payment(Entity[UUID]):
    """
    One payment attempt for an order.

    Lifecycle: pending -> completed | failed | cancelled; completed -> refunded.
    """

    order_id: UUID | None = None
    user_id: UUID | None = None
    amount: float = 0.0
    currency: str = "BDT"
    method: PaymentMethod = PaymentMethod.COD
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: str = field(default_factory=generate_transaction_id)

    gateway_transaction_id: str | None = None
    gateway_response: dict[str, Any] | None = None

    # SSLCommerz
    val_id: str | None = None
    bank_tran_id: str | None = None
    card_type: str | None = None

    # bKash
    payment_id: str | None = None
    trx_id: str | None = None

    paid_at: datetime | None = None
    refunded_at: datetime | None = None
    refund_amount: float | None = None
    refund_reason: str | None = None
    failure_reason: str | None = None

    @classmethod
    def start(
        cls,
        order_id: UUID,
        user_id: UUID,
        amount: float,
        method: PaymentMethod,
        currency: str = "BDT",
        transaction_id: str | None = None,
    ) -> "Payment":
        return cls(
            id=uuid4(),
            order_id=order_id,
            user_id=user_id,
            amount=round_money(amount),
            currency=currency,
            method=method,
            transaction_id=transaction_id or generate_transaction_id(),
        )

    @property
    def is_completed(self) -> bool:
        return self.status == PaymentStatus.COMPLETED

    def complete(self, gateway_transaction_id: str | None = None, response: dict[str, Any] | None = None) -> None:
        self.status = PaymentStatus.COMPLETED
        self.paid_at = utcnow()
        if gateway_transaction_id:
            self.gateway_transaction_id = gateway_transaction_id
        if response is not None:
            self.gateway_response = response
        self.touch()

    def fail(self, reason: str | None = None, response: dict[str, Any] | None = None) -> None:
        self.status = PaymentStatus.FAILED
        self.failure_reason = reason
        if response is not None:
            self.gateway_response = response
        self.touch()

    def cancel(self) -> None:
        self.status = PaymentStatus.CANCELLED
        self.touch()

    def refund(self, amount: float | None = None, reason: str | None = None) -> float:
        """
        Book a refund; no money moves through the gateway.

        Raises:
            InvalidOperationException: Payment not completed
        """
        if not self.is_completed:
            raise InvalidOperationException(
                "refund", self.status.value, "Only completed payments can be refunded"
            )
        self.status = PaymentStatus.REFUNDED
        self.refund_amount = round_money(amount or self.amount)
        self.refund_reason = reason
        self.refunded_at = utcnow()
        self.touch()
        return self.refund_amount

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "order": sid(self.order_id),
            "user": sid(self.user_id),
            "amount": self.amount,
            "currency": self.currency,
            "method": self.method.value,
            "status": self.status.value,
            "transactionId": self.transaction_id,
            "gatewayTransactionId": self.gateway_transaction_id,
            "valId": self.val_id,
            "bankTranId": self.bank_tran_id,
            "cardType": self.card_type,
            "paymentId": self.payment_id,
            "trxId": self.trx_id,
            "paidAt": iso(self.paid_at),
            "refundedAt": iso(self.refunded_at),
            "refundAmount": self.refund_amount,
            "refundReason": self.refund_reason,
            "failureReason": self.failure_reason,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
