"""
Unit tests for order placement and the order status state machine.
"""

import re
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.core.domain import (
    BusinessRuleViolationException,
    EntityNotFoundException,
    InsufficientStockException,
    InvalidOperationException,
    ValidationException,
)
from app.domains.commerce.application.dto import CartValidation, PlaceOrderRequest
from app.domains.commerce.application.services import CouponQuote, OrderService
from app.domains.commerce.application.use_cases import PlaceOrderUseCase, ShippingRates
from app.domains.commerce.domain.entities import Cart, CartItem, Coupon, Order, OrderItem
from app.domains.commerce.domain.entities.order import generate_order_number
from app.domains.commerce.domain.events import OrderPlaced, OrderStatusChanged
from app.domains.commerce.domain.services import calculate_shipping_cost
from app.domains.commerce.domain.value_objects import (
    OrderPaymentStatus,
    OrderStatus,
    PaymentMethod,
    ShippingMethod,
)


def place_order(user_id=None, price: float = 1200.0, quantity: int = 1) -> Order:
    order = Order.place(
        user_id=user_id or uuid4(),
        customer_name="Rahim Uddin",
        items=[OrderItem(product_id=uuid4(), name="Cotton Panjabi", price=price, quantity=quantity)],
        shipping_address={"city": "Dhaka"},
        payment_method=PaymentMethod.COD,
        shipping_method=ShippingMethod.STANDARD,
        shipping_cost=60,
    )
    order.clear_domain_events()
    return order


# ============================================================================
# Order aggregate
# ============================================================================


@pytest.mark.unit
def test_order_number_format():
    assert re.fullmatch(r"ORD-\d{6}-[A-Z0-9]{6}", generate_order_number())


@pytest.mark.unit
def test_place_computes_totals_and_timeline():
    order = Order.place(
        user_id=uuid4(),
        customer_name="Rahim Uddin",
        items=[
            OrderItem(product_id=uuid4(), name="Panjabi", price=1000.0, quantity=2),
            OrderItem(product_id=uuid4(), name="Tupi", price=150.0, quantity=1),
        ],
        shipping_address={"city": "Dhaka"},
        payment_method=PaymentMethod.COD,
        shipping_method=ShippingMethod.EXPRESS,
        shipping_cost=150,
        discount=100,
        coupon_code="EID10",
    )

    assert order.subtotal == 2150.0
    assert order.total == 2200.0
    assert order.status == OrderStatus.PENDING
    assert [t.message for t in order.timeline] == ["Order placed successfully"]
    event = order.get_domain_events()[0]
    assert isinstance(event, OrderPlaced)
    assert event.summary == "2 items"


@pytest.mark.unit
def test_legal_transition_appends_timeline():
    order = place_order()

    previous = order.change_status(OrderStatus.CONFIRMED)

    assert previous == OrderStatus.PENDING
    assert order.timeline[-1].message == "Order has been confirmed"
    assert isinstance(order.get_domain_events()[0], OrderStatusChanged)


@pytest.mark.unit
def test_illegal_transition_rejected():
    order = place_order()

    with pytest.raises(InvalidOperationException, match="Cannot change status from pending to delivered"):
        order.change_status(OrderStatus.DELIVERED)

    assert len(order.timeline) == 1


@pytest.mark.unit
def test_terminal_statuses():
    assert OrderStatus.CANCELLED.is_terminal()
    assert OrderStatus.RETURNED.is_terminal()
    assert not OrderStatus.DELIVERED.is_terminal()


@pytest.mark.unit
def test_customer_cannot_cancel_shipped_order():
    order = place_order()
    for status in (OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED):
        order.change_status(status)

    with pytest.raises(InvalidOperationException, match="Order cannot be cancelled at this stage"):
        order.cancel_by_customer("Changed my mind")


@pytest.mark.unit
def test_payment_confirms_pending_order():
    order = place_order()

    order.update_payment_status(OrderPaymentStatus.PAID, "TXN-1")

    assert order.status == OrderStatus.CONFIRMED
    assert order.is_paid
    assert order.paid_at is not None
    assert order.transaction_id == "TXN-1"


@pytest.mark.unit
@pytest.mark.parametrize(
    "method,subtotal,expected",
    [
        (ShippingMethod.STANDARD, 1000, 60.0),
        (ShippingMethod.EXPRESS, 1000, 150.0),
        (ShippingMethod.EXPRESS, 5000, 0.0),
    ],
)
def test_checkout_shipping_cost(method, subtotal, expected):
    assert calculate_shipping_cost(method, subtotal) == expected


# ============================================================================
# OrderService
# ============================================================================


@pytest.fixture
def mock_order_repository():
    repo = AsyncMock()
    repo.save.side_effect = lambda order: order
    repo.create.side_effect = lambda order: order
    return repo


@pytest.fixture
def mock_product_repository():
    repo = AsyncMock()
    repo.adjust_stock.return_value = True
    return repo


@pytest.fixture
def order_service(mock_order_repository, mock_product_repository, outbox):
    return OrderService(
        order_repository=mock_order_repository, product_repository=mock_product_repository, outbox=outbox
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_cancel_restores_stock(
    order_service, mock_order_repository, mock_product_repository, make_product, outbox
):
    order = place_order(quantity=2)
    product = make_product(id=order.items[0].product_id)
    mock_order_repository.get_by_id.return_value = order
    mock_product_repository.get_many.return_value = [product]

    await order_service.update_status(order.id, "cancelled", note="Out of stock at warehouse")

    mock_product_repository.adjust_stock.assert_awaited_once_with(product.id, 2, variant_id=None)
    assert order.timeline[-1].message == "Out of stock at warehouse"
    assert isinstance(outbox.pending()[0], OrderStatusChanged)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_customer_cancel(order_service, mock_order_repository, mock_product_repository):
    user_id = uuid4()
    order = place_order(user_id=user_id)
    mock_order_repository.get_for_user.return_value = order
    mock_product_repository.get_many.return_value = []

    cancelled = await order_service.cancel(order.id, user_id, "Ordered by mistake")

    assert cancelled.status == OrderStatus.CANCELLED
    assert cancelled.cancel_reason == "Ordered by mistake"
    assert cancelled.cancelled_at is not None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_other_users_order_not_found(order_service, mock_order_repository):
    mock_order_repository.get_for_user.return_value = None

    with pytest.raises(EntityNotFoundException, match="Order not found"):
        await order_service.get_user_order(uuid4(), uuid4())


# ============================================================================
# PlaceOrderUseCase
# ============================================================================


@pytest.fixture
def cart(customer, make_product):
    cart = Cart.for_user(customer.id)
    cart.add_line(CartItem(product_id=uuid4(), name="Cotton Panjabi", price=1200.0, quantity=2))
    return cart


@pytest.fixture
def place_order_use_case(mock_order_repository, mock_product_repository, cart, outbox):
    cart_repository = AsyncMock()
    cart_repository.get_by_user.return_value = cart
    cart_service = AsyncMock()
    cart_service.validate_cart.return_value = CartValidation(valid=True, issues=[])
    cart_service.get_cart.return_value = cart
    mock_product_repository.get_many.return_value = []
    return PlaceOrderUseCase(
        cart_repository=cart_repository,
        order_repository=mock_order_repository,
        product_repository=mock_product_repository,
        coupon_repository=AsyncMock(),
        user_repository=AsyncMock(),
        cart_service=cart_service,
        coupon_service=AsyncMock(),
        outbox=outbox,
        shipping_rates=ShippingRates(free_threshold=5000, standard=60, express=150),
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_place_order_from_cart(place_order_use_case, customer, cart, outbox):
    order = await place_order_use_case.execute(
        customer, PlaceOrderRequest(shipping_address={"city": "Dhaka"}, payment_method="cod")
    )

    assert order.subtotal == 2400.0
    assert order.shipping_cost == 60.0
    assert order.total == 2460.0
    assert order.shipping_address["country"] == "Bangladesh"
    assert cart.is_empty
    assert isinstance(outbox.pending()[0], OrderPlaced)
    place_order_use_case.user_repository.record_purchase.assert_awaited_once_with(customer.id, 2460.0)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_place_order_with_empty_cart(place_order_use_case, customer, cart):
    cart.clear()

    with pytest.raises(ValidationException, match="Cart is empty"):
        await place_order_use_case.execute(
            customer, PlaceOrderRequest(shipping_address={"city": "Dhaka"}, payment_method="cod")
        )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_place_order_fails_validation(place_order_use_case, customer):
    place_order_use_case.cart_service.validate_cart.return_value = CartValidation(
        valid=False, issues=['"Cotton Panjabi" is out of stock']
    )

    with pytest.raises(ValidationException, match="Cart validation failed"):
        await place_order_use_case.execute(
            customer, PlaceOrderRequest(shipping_address={"city": "Dhaka"}, payment_method="cod")
        )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_place_order_aborts_on_stock_race(
    place_order_use_case, mock_product_repository, mock_order_repository, customer, cart, make_product
):
    product = make_product(id=cart.items[0].product_id, quantity=1)
    mock_product_repository.get_many.return_value = [product]
    mock_product_repository.adjust_stock.return_value = False

    with pytest.raises(InsufficientStockException, match='Insufficient stock for "Cotton Panjabi"'):
        await place_order_use_case.execute(
            customer, PlaceOrderRequest(shipping_address={"city": "Dhaka"}, payment_method="cod")
        )

    mock_order_repository.create.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_place_order_rejects_coupon_lost_to_race(
    place_order_use_case, mock_product_repository, mock_order_repository, customer
):
    coupon = Coupon.new(code="EID10", name="Eid sale", discount_value=10, usage_limit=1)
    place_order_use_case.coupon_service.quote.return_value = CouponQuote(coupon=coupon, discount=240.0)
    place_order_use_case.coupon_repository.increment_usage.return_value = False

    with pytest.raises(BusinessRuleViolationException, match="Invalid or expired coupon"):
        await place_order_use_case.execute(
            customer,
            PlaceOrderRequest(shipping_address={"city": "Dhaka"}, payment_method="cod", coupon_code="EID10"),
        )

    place_order_use_case.coupon_repository.increment_usage.assert_awaited_once_with(coupon.id)
    mock_product_repository.adjust_stock.assert_not_awaited()
    mock_order_repository.create.assert_not_awaited()
