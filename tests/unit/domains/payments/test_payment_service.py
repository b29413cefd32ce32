"""
Unit tests for payments: initiation per method, gateway callbacks and refunds.
"""

import re
from unittest.mock import AsyncMock
from uuid import uuid4

import httpx
import pytest

from app.core.domain import (
    BusinessRuleViolationException,
    IntegrationException,
    InvalidOperationException,
    PaymentException,
)
from app.domains.commerce.domain.entities import Order, OrderItem
from app.domains.commerce.domain.value_objects import (
    OrderPaymentStatus,
    OrderStatus,
    PaymentMethod,
    ShippingMethod,
)
from app.domains.payments.application.dto import (
    BkashCheckout,
    BkashExecution,
    CustomerInfo,
    GatewaySession,
)
from app.domains.payments.application.services import PaymentService
from app.domains.payments.domain.entities import Payment, generate_transaction_id
from app.domains.payments.domain.value_objects import PaymentStatus
from app.domains.payments.infrastructure.gateways import BkashGateway, SSLCommerzGateway

FRONTEND = "https://shop.example.com"

# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def order(user_id):
    order = Order.place(
        user_id=user_id,
        customer_name="Rahim Uddin",
        items=[OrderItem(product_id=uuid4(), name="Cotton Panjabi", price=1200.0, quantity=1)],
        shipping_address={"fullName": "Rahim Uddin", "phone": "01700000000", "city": "Dhaka"},
        payment_method=PaymentMethod.SSLCOMMERZ,
        shipping_method=ShippingMethod.STANDARD,
        shipping_cost=60,
    )
    order.clear_domain_events()
    return order


@pytest.fixture
def mock_payment_repository():
    repo = AsyncMock()
    repo.create.side_effect = lambda payment: payment
    repo.save.side_effect = lambda payment: payment
    return repo


@pytest.fixture
def mock_order_repository(order):
    repo = AsyncMock()
    repo.get_for_user.return_value = order
    repo.get_by_id.return_value = order
    repo.save.side_effect = lambda o: o
    return repo


@pytest.fixture
def sslcommerz():
    gateway = AsyncMock()
    gateway.create_session.return_value = GatewaySession(
        gateway_url="https://sandbox.sslcommerz.com/pay/abc", session_key="abc"
    )
    gateway.validate.return_value = True
    return gateway


@pytest.fixture
def bkash():
    gateway = AsyncMock()
    gateway.create_payment.return_value = BkashCheckout(bkash_url="https://bkash.example/pay", payment_id="BK-1")
    gateway.execute_payment.return_value = BkashExecution(success=True, trx_id="TRX9", raw={"statusCode": "0000"})
    return gateway


@pytest.fixture
def payment_service(mock_payment_repository, mock_order_repository, sslcommerz, bkash, outbox):
    return PaymentService(
        payment_repository=mock_payment_repository,
        order_repository=mock_order_repository,
        sslcommerz=sslcommerz,
        bkash=bkash,
        outbox=outbox,
        frontend_url=FRONTEND + "/",
    )


def pending_payment(order, method=PaymentMethod.SSLCOMMERZ) -> Payment:
    return Payment.start(order.id, order.user_id, order.total, method)


# ============================================================================
# Payment entity
# ============================================================================


@pytest.mark.unit
def test_transaction_id_format():
    assert re.fullmatch(r"TXN-[0-9A-Z]+-[0-9A-F]{8}", generate_transaction_id())


@pytest.mark.unit
def test_only_completed_payment_can_be_refunded(order):
    payment = pending_payment(order)

    with pytest.raises(InvalidOperationException, match="Only completed payments can be refunded"):
        payment.refund()


@pytest.mark.unit
def test_refund_defaults_to_full_amount(order):
    payment = pending_payment(order)
    payment.complete()

    assert payment.refund(reason="Damaged") == 1260.0
    assert payment.status == PaymentStatus.REFUNDED


# ============================================================================
# Initiation
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_initiate_sslcommerz(payment_service, sslcommerz, mock_payment_repository, user_id, order):
    result = await payment_service.initiate(user_id, order.id, "sslcommerz")

    assert result["gatewayUrl"] == "https://sandbox.sslcommerz.com/pay/abc"
    payment = mock_payment_repository.create.await_args.args[0]
    assert payment.amount == 1260.0
    assert payment.gateway_response == {"sessionkey": "abc"}
    customer = sslcommerz.create_session.await_args.args[2]
    assert customer.name == "Rahim Uddin"
    assert customer.country == "Bangladesh"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_initiate_bkash(payment_service, user_id, order):
    result = await payment_service.initiate(user_id, order.id, "bkash")

    assert result["bkashURL"] == "https://bkash.example/pay"
    assert result["paymentId"] == "BK-1"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_initiate_cod_switches_order_method(payment_service, mock_order_repository, user_id, order):
    result = await payment_service.initiate(user_id, order.id, "cod")

    assert result["method"] == "cod"
    assert result["status"] == "pending"
    assert order.payment_method == PaymentMethod.COD
    mock_order_repository.save.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_initiate_for_paid_order_rejected(payment_service, user_id, order):
    order.update_payment_status(OrderPaymentStatus.PAID)

    with pytest.raises(BusinessRuleViolationException, match="Order is already paid"):
        await payment_service.initiate(user_id, order.id, "sslcommerz")


# ============================================================================
# Callbacks
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sslcommerz_success_settles_payment_and_order(
    payment_service, mock_payment_repository, order, outbox
):
    payment = pending_payment(order)
    mock_payment_repository.get_by_transaction_id.return_value = payment

    url = await payment_service.handle_sslcommerz_success(
        {"tran_id": payment.transaction_id, "val_id": "VAL1", "bank_tran_id": "BANK1", "card_type": "VISA"}
    )

    assert url == f"{FRONTEND}/payment/success?txn={payment.transaction_id}"
    assert payment.is_completed
    assert payment.val_id == "VAL1"
    assert order.payment_status == OrderPaymentStatus.PAID
    assert order.status == OrderStatus.CONFIRMED
    assert len(outbox) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sslcommerz_success_is_idempotent(payment_service, mock_payment_repository, order):
    payment = pending_payment(order)
    payment.complete()
    mock_payment_repository.get_by_transaction_id.return_value = payment

    url = await payment_service.handle_sslcommerz_success({"tran_id": payment.transaction_id, "val_id": "VAL1"})

    assert url.startswith(f"{FRONTEND}/payment/success")
    mock_payment_repository.save.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sslcommerz_invalid_validation_redirects_to_failed(
    payment_service, mock_payment_repository, sslcommerz, order
):
    payment = pending_payment(order)
    mock_payment_repository.get_by_transaction_id.return_value = payment
    sslcommerz.validate.return_value = False

    url = await payment_service.handle_sslcommerz_success({"tran_id": payment.transaction_id, "val_id": "BAD"})

    assert url.startswith(f"{FRONTEND}/payment/failed")
    assert payment.status == PaymentStatus.PENDING


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sslcommerz_cancel(payment_service, mock_payment_repository, order):
    payment = pending_payment(order)
    mock_payment_repository.get_by_transaction_id.return_value = payment

    url = await payment_service.handle_sslcommerz_cancel({"tran_id": payment.transaction_id})

    assert url == f"{FRONTEND}/payment/cancelled?txn={payment.transaction_id}"
    assert payment.status == PaymentStatus.CANCELLED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_bkash_callback_success(payment_service, mock_payment_repository, order):
    payment = pending_payment(order, PaymentMethod.BKASH)
    mock_payment_repository.get_by_gateway_payment_id.return_value = payment

    url = await payment_service.handle_bkash_callback("BK-1", "success")

    assert url == f"{FRONTEND}/payment/success?method=bkash"
    assert payment.trx_id == "TRX9"
    assert order.is_paid


@pytest.mark.unit
@pytest.mark.asyncio
async def test_bkash_declined_execution(payment_service, mock_payment_repository, bkash, order):
    payment = pending_payment(order, PaymentMethod.BKASH)
    mock_payment_repository.get_by_gateway_payment_id.return_value = payment
    bkash.execute_payment.return_value = BkashExecution(success=False, message="Insufficient Balance")

    with pytest.raises(PaymentException, match="Insufficient Balance"):
        await payment_service.execute_bkash("BK-1")

    assert payment.status == PaymentStatus.FAILED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_bkash_callback_cancel(payment_service, mock_payment_repository, order):
    payment = pending_payment(order, PaymentMethod.BKASH)
    mock_payment_repository.get_by_gateway_payment_id.return_value = payment

    url = await payment_service.handle_bkash_callback("BK-1", "cancel")

    assert url == f"{FRONTEND}/payment/failed?method=bkash"
    assert payment.status == PaymentStatus.CANCELLED


# ============================================================================
# Admin
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_mark_cod_paid_rejects_online_payment(payment_service, mock_payment_repository, order):
    mock_payment_repository.get_by_id.return_value = pending_payment(order)

    with pytest.raises(PaymentException, match="This is not a COD payment"):
        await payment_service.mark_cod_paid(uuid4())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_refund_flags_order(payment_service, mock_payment_repository, order):
    payment = pending_payment(order)
    payment.complete()
    mock_payment_repository.get_by_id.return_value = payment

    refunded = await payment_service.refund(payment.id, 500.0, "Partial return")

    assert refunded.refund_amount == 500.0
    assert order.payment_status == OrderPaymentStatus.REFUNDED


# ============================================================================
# Gateway adapters
# ============================================================================


def mock_client(base_url: str, handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=base_url, transport=httpx.MockTransport(handler))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sslcommerz_session_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = request.content.decode()
        return httpx.Response(200, json={"status": "SUCCESS", "GatewayPageURL": "https://pay", "sessionkey": "k"})

    gateway = SSLCommerzGateway("store", "secret", "https://sandbox.test", "https://api.test/api/v1/payments")
    gateway.http._client = mock_client("https://sandbox.test", handler)

    session = await gateway.create_session(
        "TXN-1", 1260.0, CustomerInfo("Rahim", "r@example.com", "017", "Road 1", "Dhaka"), uuid4(), uuid4()
    )
    await gateway.close()

    assert session.gateway_url == "https://pay"
    assert "tran_id=TXN-1" in seen["body"]
    assert "sslcommerz%2Fsuccess" in seen["body"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sslcommerz_refused_session():
    gateway = SSLCommerzGateway("store", "secret", "https://sandbox.test", "https://api.test")
    gateway.http._client = mock_client(
        "https://sandbox.test", lambda r: httpx.Response(200, json={"status": "FAILED", "failedreason": "Bad store"})
    )

    with pytest.raises(PaymentException, match="Bad store"):
        await gateway.create_session("TXN-1", 10.0, CustomerInfo("a", "b", "c", "d", "e"), uuid4(), uuid4())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_bkash_token_is_cached():
    calls = {"token": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/token/grant"):
            calls["token"] += 1
            return httpx.Response(200, json={"id_token": "tok", "expires_in": 3600})
        assert request.headers["Authorization"] == "tok"
        return httpx.Response(200, json={"statusCode": "0000", "trxID": "TRX1"})

    gateway = BkashGateway("key", "secret", "user", "pass", "https://bkash.test", "https://api.test/cb")
    gateway.http._client = mock_client("https://bkash.test", handler)

    first = await gateway.execute_payment("BK-1")
    second = await gateway.execute_payment("BK-2")

    assert first.success and second.trx_id == "TRX1"
    assert calls["token"] == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_bkash_execute_is_sent_once_on_timeout():
    calls = {"execute": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/token/grant"):
            return httpx.Response(200, json={"id_token": "tok", "expires_in": 3600})
        calls["execute"] += 1
        if calls["execute"] == 1:
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200, json={"statusCode": "0000", "trxID": "TRX1"})

    gateway = BkashGateway("key", "secret", "user", "pass", "https://bkash.test", "https://api.test/cb")
    gateway.http._client = mock_client("https://bkash.test", handler)

    with pytest.raises(IntegrationException) as exc_info:
        await gateway.execute_payment("BK-1")

    assert exc_info.value.status_code == 502
    assert calls["execute"] == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sslcommerz_session_not_retried_on_server_error():
    calls = {"init": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["init"] += 1
        return httpx.Response(503, text="Service Unavailable")

    gateway = SSLCommerzGateway("store", "secret", "https://sandbox.test", "https://api.test")
    gateway.http._client = mock_client("https://sandbox.test", handler)

    with pytest.raises(IntegrationException):
        await gateway.create_session("TXN-1", 10.0, CustomerInfo("a", "b", "c", "d", "e"), uuid4(), uuid4())

    assert calls["init"] == 1
