"""
Payment Ports (Interfaces)
"""

from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from app.core.domain import PaginatedResult, Pagination
from app.domains.payments.application.dto import (
    BkashCheckout,
    BkashExecution,
    CustomerInfo,
    GatewaySession,
    PaymentFilters,
)
from app.domains.payments.domain.entities import Payment


@runtime_checkable
class IPaymentRepository(Protocol):
    """
    Interface for payment repository.
    """

    async def get_by_id(self, payment_id: UUID) -> Payment | None:
        ...

    async def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        ...

    async def get_by_gateway_payment_id(self, payment_id: str) -> Payment | None:
        """Find a bKash payment by the gateway's paymentID."""
        ...

    async def get_latest_for_order(self, order_id: UUID) -> Payment | None:
        ...

    async def create(self, payment: Payment) -> Payment:
        ...

    async def save(self, payment: Payment) -> Payment:
        ...

    async def list_for_user(self, user_id: UUID, pagination: Pagination) -> PaginatedResult[Payment]:
        ...

    async def list(self, pagination: Pagination, filters: PaymentFilters) -> PaginatedResult[Payment]:
        ...

    async def get_stats(self) -> dict[str, Any]:
        ...


@runtime_checkable
class ISSLCommerzGateway(Protocol):
    """
    Hosted checkout at SSLCommerz.
    """

    async def create_session(
        self, transaction_id: str, amount: float, customer: CustomerInfo, order_id: UUID, user_id: UUID
    ) -> GatewaySession:
        """
        Raises:
            PaymentException: Gateway refused the session
            IntegrationException: Gateway unreachable
        """
        ...

    async def validate(self, val_id: str) -> bool:
        """True when the validation API reports VALID or VALIDATED."""
        ...


@runtime_checkable
class IBkashGateway(Protocol):
    """
    bKash tokenized checkout.
    """

    async def create_payment(self, transaction_id: str, amount: float, payer_reference: str) -> BkashCheckout:
        ...

    async def execute_payment(self, payment_id: str) -> BkashExecution:
        ...


__all__ = ["IPaymentRepository", "ISSLCommerzGateway", "IBkashGateway"]
