"""
Unit tests for the cart: line merging, stock checks, coupon pricing and validation.
"""

from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.core.domain import (
    BusinessRuleViolationException,
    InsufficientStockException,
    ValidationException,
    utcnow,
)
from app.domains.catalog.domain.value_objects import ProductStatus
from app.domains.commerce.application.services import CartService, CouponService
from app.domains.commerce.domain.entities import Cart, CartItem, Coupon
from app.domains.commerce.domain.value_objects import CouponDiscountType, CouponScope

# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def mock_cart_repository():
    repo = AsyncMock()
    repo.get_by_user.return_value = None
    repo.save.side_effect = lambda cart: cart
    return repo


@pytest.fixture
def mock_product_repository():
    return AsyncMock()


@pytest.fixture
def mock_coupon_repository():
    return AsyncMock()


@pytest.fixture
def mock_order_repository():
    repo = AsyncMock()
    repo.count_coupon_uses.return_value = 0
    return repo


@pytest.fixture
def coupon_service(mock_coupon_repository, mock_order_repository, mock_product_repository):
    return CouponService(
        coupon_repository=mock_coupon_repository,
        order_repository=mock_order_repository,
        product_repository=mock_product_repository,
    )


@pytest.fixture
def cart_service(mock_cart_repository, mock_product_repository, coupon_service):
    return CartService(
        cart_repository=mock_cart_repository,
        product_repository=mock_product_repository,
        coupon_service=coupon_service,
    )


def make_coupon(**overrides) -> Coupon:
    data = {
        "code": "eid10",
        "name": "Eid sale",
        "discount_type": CouponDiscountType.PERCENTAGE,
        "discount_value": 10,
        "start_date": utcnow() - timedelta(days=1),
        "end_date": utcnow() + timedelta(days=1),
    }
    data.update(overrides)
    return Coupon.new(**data)


def cart_with(user_id, *lines: tuple) -> Cart:
    cart = Cart.for_user(user_id)
    for product_id, price, quantity in lines:
        cart.add_line(CartItem(product_id=product_id, name="Item", price=price, quantity=quantity))
    return cart


# ============================================================================
# Cart aggregate
# ============================================================================


@pytest.mark.unit
def test_cart_totals_follow_lines(user_id):
    cart = cart_with(user_id, (uuid4(), 100.0, 2), (uuid4(), 50.5, 1))

    assert cart.item_count == 3
    assert cart.subtotal == 250.5
    assert cart.total == 250.5


@pytest.mark.unit
def test_identical_lines_merge(user_id):
    product_id = uuid4()
    cart = cart_with(user_id, (product_id, 100.0, 1), (product_id, 100.0, 2))

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 3


@pytest.mark.unit
def test_discount_never_drives_total_negative(user_id):
    cart = cart_with(user_id, (uuid4(), 100.0, 1))

    cart.apply_coupon("BIG", 500.0)

    assert cart.total == 0.0


@pytest.mark.unit
def test_clear_drops_coupon(user_id):
    cart = cart_with(user_id, (uuid4(), 100.0, 1))
    cart.apply_coupon("EID10", 10.0)

    cart.clear()

    assert cart.is_empty
    assert cart.coupon_code is None
    assert cart.total == 0.0


# ============================================================================
# CartService
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_item_creates_cart_and_prices_from_catalog(
    cart_service, mock_product_repository, make_product, user_id
):
    product = make_product(price=1000.0, compare_price=1200.0)
    mock_product_repository.get_by_id.return_value = product

    cart = await cart_service.add_item(user_id, product.id, quantity=2)

    assert cart.user_id == user_id
    assert cart.items[0].price == 1000.0
    assert cart.subtotal == 2000.0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_item_checks_merged_quantity(
    cart_service, mock_cart_repository, mock_product_repository, make_product, user_id
):
    product = make_product(quantity=3)
    mock_product_repository.get_by_id.return_value = product
    mock_cart_repository.get_by_user.return_value = cart_with(user_id, (product.id, product.price, 2))

    with pytest.raises(InsufficientStockException, match="Only 3 items available in stock"):
        await cart_service.add_item(user_id, product.id, quantity=2)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_inactive_product_rejected(cart_service, mock_product_repository, make_product, user_id):
    mock_product_repository.get_by_id.return_value = make_product(status=ProductStatus.DRAFT)

    with pytest.raises(BusinessRuleViolationException, match="Product is not available"):
        await cart_service.add_item(user_id, uuid4())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_apply_coupon_prices_discount(
    cart_service, mock_cart_repository, mock_coupon_repository, user_id
):
    mock_cart_repository.get_by_user.return_value = cart_with(user_id, (uuid4(), 1000.0, 1))
    mock_coupon_repository.get_by_code.return_value = make_coupon()

    cart = await cart_service.apply_coupon(user_id, " eid10 ")

    assert cart.coupon_code == "EID10"
    assert cart.discount == 100.0
    assert cart.total == 900.0
    mock_coupon_repository.get_by_code.assert_awaited_once_with("EID10")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_coupon_dropped_when_cart_no_longer_qualifies(
    cart_service, mock_cart_repository, mock_coupon_repository, user_id
):
    cart = cart_with(user_id, (uuid4(), 600.0, 1))
    cart.apply_coupon("EID10", 60.0)
    mock_cart_repository.get_by_user.return_value = cart
    mock_coupon_repository.get_by_code.return_value = make_coupon(min_purchase=500)

    updated = await cart_service.remove_item(user_id, cart.items[0].id)

    assert updated.coupon_code is None
    assert updated.discount == 0.0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validate_cart_reports_price_and_stock(
    cart_service, mock_cart_repository, mock_product_repository, make_product, user_id
):
    repriced = make_product(price=1300.0)
    short = make_product(name="Saree", quantity=1)
    cart = Cart.for_user(user_id)
    cart.add_line(CartItem(product_id=repriced.id, name="Cotton Panjabi", price=1200.0, quantity=1))
    cart.add_line(CartItem(product_id=short.id, name="Saree", price=short.price, quantity=3))
    mock_cart_repository.get_by_user.return_value = cart
    mock_product_repository.get_many.return_value = [repriced, short]

    result = await cart_service.validate_cart(user_id)

    assert not result.valid
    assert 'Price of "Cotton Panjabi" has changed from ৳1200 to ৳1300' in result.issues
    assert 'Only 1 units of "Saree" available' in result.issues
    assert cart.items[0].price == 1300.0
    mock_cart_repository.save.assert_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validate_empty_cart_is_valid(cart_service, user_id):
    result = await cart_service.validate_cart(user_id)

    assert result.to_dict() == {"valid": True, "issues": []}


# ============================================================================
# CouponService
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_expired_coupon_rejected(coupon_service, mock_coupon_repository, user_id):
    mock_coupon_repository.get_by_code.return_value = make_coupon(end_date=utcnow() - timedelta(hours=1))

    with pytest.raises(BusinessRuleViolationException, match="Invalid or expired coupon"):
        await coupon_service.quote("EID10", cart_with(user_id, (uuid4(), 100.0, 1)), user_id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_coupon_usage_limit_exhausted(coupon_service, mock_coupon_repository, user_id):
    coupon = make_coupon(usage_limit=100, used_count=100)
    mock_coupon_repository.get_by_code.return_value = coupon

    assert not coupon.is_valid()
    assert make_coupon(usage_limit=100, used_count=99).is_valid()
    with pytest.raises(BusinessRuleViolationException, match="Invalid or expired coupon"):
        await coupon_service.quote("EID10", cart_with(user_id, (uuid4(), 100.0, 1)), user_id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_coupon_minimum_purchase(coupon_service, mock_coupon_repository, user_id):
    mock_coupon_repository.get_by_code.return_value = make_coupon(min_purchase=500)

    with pytest.raises(BusinessRuleViolationException, match="Minimum purchase of ৳500 required"):
        await coupon_service.quote("EID10", cart_with(user_id, (uuid4(), 100.0, 1)), user_id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_coupon_per_user_limit(coupon_service, mock_coupon_repository, mock_order_repository, user_id):
    mock_coupon_repository.get_by_code.return_value = make_coupon()
    mock_order_repository.count_coupon_uses.return_value = 1

    with pytest.raises(BusinessRuleViolationException, match="You have already used this coupon"):
        await coupon_service.quote("EID10", cart_with(user_id, (uuid4(), 100.0, 1)), user_id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_percentage_coupon_capped(coupon_service, mock_coupon_repository, user_id):
    mock_coupon_repository.get_by_code.return_value = make_coupon(discount_value=50, max_discount=200)

    quote = await coupon_service.quote("EID10", cart_with(user_id, (uuid4(), 1000.0, 1)), user_id)

    assert quote.discount == 200.0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_product_scoped_coupon_only_counts_matching_lines(coupon_service, mock_coupon_repository, user_id):
    eligible, other = uuid4(), uuid4()
    mock_coupon_repository.get_by_code.return_value = make_coupon(
        discount_type=CouponDiscountType.FIXED,
        discount_value=300,
        applicable_to=CouponScope.SPECIFIC_PRODUCTS,
        specific_products=[eligible],
    )

    quote = await coupon_service.quote("EID10", cart_with(user_id, (eligible, 200.0, 1), (other, 900.0, 1)), user_id)

    assert quote.discount == 200.0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_category_scoped_coupon_not_applicable(
    coupon_service, mock_coupon_repository, mock_product_repository, make_product, user_id
):
    product = make_product()
    mock_product_repository.get_many.return_value = [product]
    mock_coupon_repository.get_by_code.return_value = make_coupon(
        applicable_to=CouponScope.SPECIFIC_CATEGORIES, specific_categories=[uuid4()]
    )

    with pytest.raises(BusinessRuleViolationException, match="not applicable to items in your cart"):
        await coupon_service.quote("EID10", cart_with(user_id, (product.id, 100.0, 1)), user_id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_coupon_rejects_percentage_over_100(coupon_service, mock_coupon_repository):
    mock_coupon_repository.code_exists.return_value = False

    with pytest.raises(ValidationException, match="cannot exceed 100"):
        await coupon_service.create_coupon(
            {
                "code": "huge",
                "name": "Huge",
                "discount_type": "percentage",
                "discount_value": 150,
                "start_date": utcnow(),
                "end_date": utcnow() + timedelta(days=1),
            }
        )
