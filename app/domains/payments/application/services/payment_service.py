"""
Payment Service

Starts payment attempts for orders and settles them from gateway callbacks.
A settled payment marks its order paid through the order aggregate, which
confirms a pending order on its own.
"""

import logging
from typing import Any
from uuid import UUID

from app.core.domain import (
    BusinessRuleViolationException,
    DomainException,
    EntityNotFoundException,
    EventOutbox,
    PaginatedResult,
    Pagination,
    PaymentException,
    ValidationException,
)
from app.domains.commerce.application.ports import IOrderRepository
from app.domains.commerce.domain.entities import Order
from app.domains.commerce.domain.value_objects import OrderPaymentStatus
from app.domains.payments.application.dto import CustomerInfo, PaymentFilters
from app.domains.payments.application.ports import IBkashGateway, IPaymentRepository, ISSLCommerzGateway
from app.domains.payments.domain.entities import Payment
from app.domains.payments.domain.value_objects import CallbackOutcome, PaymentMethod

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Payment orchestration across gateways.

    Callback handlers return the storefront URL to redirect the buyer to and
    never raise for gateway-side failures.
    """

    def __init__(
        self,
        payment_repository: IPaymentRepository,
        order_repository: IOrderRepository,
        sslcommerz: ISSLCommerzGateway,
        bkash: IBkashGateway,
        outbox: EventOutbox,
        frontend_url: str,
        currency: str = "BDT",
    ):
        self.payment_repository = payment_repository
        self.order_repository = order_repository
        self.sslcommerz = sslcommerz
        self.bkash = bkash
        self.outbox = outbox
        self.frontend_url = frontend_url.rstrip("/")
        self.currency = currency

    def _redirect(self, outcome: CallbackOutcome, **params: str) -> str:
        query = "&".join(f"{k}={v}" for k, v in params.items() if v)
        url = f"{self.frontend_url}/payment/{outcome.value}"
        return f"{url}?{query}" if query else url

    async def get_payment(self, payment_id: UUID) -> Payment:
        payment = await self.payment_repository.get_by_id(payment_id)
        if not payment:
            raise EntityNotFoundException("Payment", payment_id, "Payment not found")
        return payment

    # ========================================================================
    # Initiation
    # ========================================================================

    async def initiate(self, user_id: UUID, order_id: UUID, method: str) -> dict[str, Any]:
        """
        Open a payment attempt for one of the user's orders.

        Raises:
            EntityNotFoundException: Order missing or owned by someone else
            BusinessRuleViolationException: Order already paid
            ValidationException: Method without an online flow
        """
        order = await self.order_repository.get_for_user(order_id, user_id)
        if not order:
            raise EntityNotFoundException("Order", order_id, "Order not found")
        if order.is_paid:
            raise BusinessRuleViolationException("order_paid", "Order is already paid")

        payment_method = PaymentMethod(method)
        if payment_method == PaymentMethod.SSLCOMMERZ:
            return await self._initiate_sslcommerz(order, user_id)
        if payment_method == PaymentMethod.BKASH:
            return await self._initiate_bkash(order, user_id)
        if payment_method == PaymentMethod.COD:
            return await self._initiate_cod(order, user_id)
        raise ValidationException("Invalid payment method", field="method")

    async def _initiate_sslcommerz(self, order: Order, user_id: UUID) -> dict[str, Any]:
        payment = Payment.start(order.id, user_id, order.total, PaymentMethod.SSLCOMMERZ, self.currency)  # type: ignore[arg-type]
        address = order.shipping_address
        customer = CustomerInfo(
            name=address.get("fullName", ""),
            email=address.get("email", ""),
            phone=address.get("phone", ""),
            address=address.get("street", ""),
            city=address.get("city", ""),
            country=address.get("country") or "Bangladesh",
        )
        session = await self.sslcommerz.create_session(
            payment.transaction_id, payment.amount, customer, order.id, user_id  # type: ignore[arg-type]
        )
        payment.gateway_response = {"sessionkey": session.session_key}
        payment = await self.payment_repository.create(payment)
        logger.info(f"SSLCommerz payment {payment.transaction_id} opened for order {order.order_number}")
        return {"gatewayUrl": session.gateway_url, "transactionId": payment.transaction_id}

    async def _initiate_bkash(self, order: Order, user_id: UUID) -> dict[str, Any]:
        payment = Payment.start(order.id, user_id, order.total, PaymentMethod.BKASH, self.currency)  # type: ignore[arg-type]
        checkout = await self.bkash.create_payment(payment.transaction_id, payment.amount, str(user_id))
        payment.payment_id = checkout.payment_id
        payment = await self.payment_repository.create(payment)
        logger.info(f"bKash payment {payment.transaction_id} opened for order {order.order_number}")
        return {
            "bkashURL": checkout.bkash_url,
            "paymentId": checkout.payment_id,
            "transactionId": payment.transaction_id,
        }

    async def _initiate_cod(self, order: Order, user_id: UUID) -> dict[str, Any]:
        payment = Payment.start(order.id, user_id, order.total, PaymentMethod.COD, self.currency)  # type: ignore[arg-type]
        payment = await self.payment_repository.create(payment)
        if order.payment_method != PaymentMethod.COD:
            order.payment_method = PaymentMethod.COD
            order.touch()
            await self.order_repository.save(order)
        logger.info(f"COD payment {payment.transaction_id} recorded for order {order.order_number}")
        return payment.to_dict()

    async def _mark_order_paid(self, order_id: UUID, transaction_id: str | None) -> None:
        order = await self.order_repository.get_by_id(order_id)
        if order is None:
            logger.warning(f"Settled payment references missing order {order_id}")
            return
        if order.is_paid:
            return
        order.update_payment_status(OrderPaymentStatus.PAID, transaction_id)
        self.outbox.collect_from(order)
        await self.order_repository.save(order)

    # ========================================================================
    # SSLCommerz callbacks
    # ========================================================================

    async def handle_sslcommerz_success(self, data: dict[str, Any]) -> str:
        """Success and IPN callbacks; settling twice is a no-op."""
        tran_id = data.get("tran_id", "")
        val_id = data.get("val_id")
        payment = await self.payment_repository.get_by_transaction_id(tran_id) if tran_id else None
        if payment is None or not val_id or not await self.sslcommerz.validate(val_id):
            logger.warning(f"SSLCommerz validation failed for {tran_id or 'unknown transaction'}")
            return self._redirect(CallbackOutcome.FAILED, txn=tran_id)

        if not payment.is_completed:
            payment.val_id = val_id
            payment.bank_tran_id = data.get("bank_tran_id")
            payment.card_type = data.get("card_type")
            payment.complete(gateway_transaction_id=data.get("bank_tran_id"), response=data)
            await self.payment_repository.save(payment)
            await self._mark_order_paid(payment.order_id, tran_id)  # type: ignore[arg-type]
            logger.info(f"SSLCommerz payment {tran_id} completed")
        return self._redirect(CallbackOutcome.SUCCESS, txn=tran_id)

    async def handle_sslcommerz_fail(self, data: dict[str, Any]) -> str:
        tran_id = data.get("tran_id", "")
        payment = await self.payment_repository.get_by_transaction_id(tran_id) if tran_id else None
        if payment and not payment.is_completed:
            payment.fail(data.get("error"), response=data)
            await self.payment_repository.save(payment)
            logger.warning(f"SSLCommerz payment {tran_id} failed")
        return self._redirect(CallbackOutcome.FAILED, txn=tran_id)

    async def handle_sslcommerz_cancel(self, data: dict[str, Any]) -> str:
        tran_id = data.get("tran_id", "")
        payment = await self.payment_repository.get_by_transaction_id(tran_id) if tran_id else None
        if payment and not payment.is_completed:
            payment.cancel()
            await self.payment_repository.save(payment)
            logger.info(f"SSLCommerz payment {tran_id} cancelled by buyer")
        return self._redirect(CallbackOutcome.CANCELLED, txn=tran_id)

    # ========================================================================
    # bKash
    # ========================================================================

    async def execute_bkash(self, payment_id: str) -> Payment:
        """
        Execute an approved bKash payment.

        Raises:
            EntityNotFoundException: Unknown paymentID
            PaymentException: bKash declined the execution
        """
        payment = await self.payment_repository.get_by_gateway_payment_id(payment_id)
        if not payment:
            raise EntityNotFoundException("Payment", payment_id, "Payment not found")
        if payment.is_completed:
            return payment

        result = await self.bkash.execute_payment(payment_id)
        if not result.success:
            payment.fail(result.message, response=result.raw)
            await self.payment_repository.save(payment)
            raise PaymentException(result.message or "Payment failed", payment_id=payment_id)

        payment.trx_id = result.trx_id
        payment.complete(gateway_transaction_id=result.trx_id, response=result.raw)
        payment = await self.payment_repository.save(payment)
        await self._mark_order_paid(payment.order_id, result.trx_id)  # type: ignore[arg-type]
        logger.info(f"bKash payment {payment.transaction_id} completed (trx {result.trx_id})")
        return payment

    async def handle_bkash_callback(self, payment_id: str | None, status: str | None) -> str:
        if status != "success" or not payment_id:
            payment = await self.payment_repository.get_by_gateway_payment_id(payment_id) if payment_id else None
            if payment and not payment.is_completed:
                if status == "cancel":
                    payment.cancel()
                else:
                    payment.fail(f"bKash callback status: {status}")
                await self.payment_repository.save(payment)
            return self._redirect(CallbackOutcome.FAILED, method="bkash")

        try:
            await self.execute_bkash(payment_id)
        except DomainException as e:
            logger.warning(f"bKash execution failed for {payment_id}: {e.message}")
            return self._redirect(CallbackOutcome.FAILED, method="bkash")
        return self._redirect(CallbackOutcome.SUCCESS, method="bkash")

    # ========================================================================
    # Admin
    # ========================================================================

    async def mark_cod_paid(self, payment_id: UUID) -> Payment:
        payment = await self.get_payment(payment_id)
        if payment.method != PaymentMethod.COD:
            raise PaymentException("This is not a COD payment", payment_id=str(payment_id))
        payment.complete()
        payment = await self.payment_repository.save(payment)
        await self._mark_order_paid(payment.order_id, payment.transaction_id)  # type: ignore[arg-type]
        logger.info(f"COD payment {payment.transaction_id} marked paid")
        return payment

    async def refund(self, payment_id: UUID, amount: float | None = None, reason: str | None = None) -> Payment:
        """Bookkeeping refund: the payment and its order are flagged refunded."""
        payment = await self.get_payment(payment_id)
        refunded = payment.refund(amount, reason)
        payment = await self.payment_repository.save(payment)

        order = await self.order_repository.get_by_id(payment.order_id)  # type: ignore[arg-type]
        if order is not None:
            order.update_payment_status(OrderPaymentStatus.REFUNDED)
            self.outbox.collect_from(order)
            await self.order_repository.save(order)
        logger.info(f"Payment {payment.transaction_id} refunded ({refunded})")
        return payment

    # ========================================================================
    # Queries
    # ========================================================================

    async def get_order_payment(self, order_id: UUID, user_id: UUID) -> Payment:
        order = await self.order_repository.get_for_user(order_id, user_id)
        if not order:
            raise EntityNotFoundException("Order", order_id, "Order not found")
        payment = await self.payment_repository.get_latest_for_order(order_id)
        if not payment:
            raise EntityNotFoundException("Payment", order_id, "Payment not found")
        return payment

    async def list_user_payments(self, user_id: UUID, pagination: Pagination) -> PaginatedResult[Payment]:
        return await self.payment_repository.list_for_user(user_id, pagination)

    async def list_payments(self, pagination: Pagination, filters: PaymentFilters) -> PaginatedResult[Payment]:
        return await self.payment_repository.list(pagination, filters)

    async def get_stats(self) -> dict[str, Any]:
        return await self.payment_repository.get_stats()


__all__ = ["PaymentService"]
