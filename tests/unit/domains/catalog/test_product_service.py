"""
Unit tests for ProductService and the Product aggregate's pricing and stock rules.
"""

from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.core.domain import (
    BusinessRuleViolationException,
    DuplicateEntityException,
    EntityNotFoundException,
    ValidationException,
    utcnow,
)
from app.domains.catalog.application.services import ProductService
from app.domains.catalog.domain.entities import ProductVariant
from app.domains.catalog.domain.events import ProductChanged
from app.domains.catalog.domain.value_objects import DiscountType, ProductStatus


@pytest.fixture
def mock_product_repository():
    repo = AsyncMock()
    repo.slug_exists.return_value = False
    repo.sku_exists.return_value = False
    repo.adjust_stock.return_value = True
    repo.create.side_effect = lambda product: product
    repo.save.side_effect = lambda product: product
    return repo


@pytest.fixture
def mock_category_repository():
    return AsyncMock()


@pytest.fixture
def product_service(mock_product_repository, mock_category_repository, outbox):
    cache = AsyncMock()
    cache.get.return_value = None
    return ProductService(
        product_repository=mock_product_repository,
        category_repository=mock_category_repository,
        cache=cache,
        outbox=outbox,
    )


# ============================================================================
# Product aggregate
# ============================================================================


@pytest.mark.unit
def test_final_price_ignores_discount_when_not_on_sale(make_product):
    product = make_product(discount_type=DiscountType.PERCENTAGE, discount_value=10)

    assert product.final_price == 1200.0


@pytest.mark.unit
def test_final_price_percentage_and_fixed(make_product):
    percentage = make_product(is_on_sale=True, discount_type=DiscountType.PERCENTAGE, discount_value=10)
    fixed = make_product(is_on_sale=True, discount_type=DiscountType.FIXED, discount_value=1500)

    assert percentage.final_price == 1080.0
    assert fixed.final_price == 0.0


@pytest.mark.unit
def test_discount_percentage_from_compare_price(make_product):
    assert make_product(compare_price=1500.0).discount_percentage == 20
    assert make_product(compare_price=1000.0).discount_percentage == 0


@pytest.mark.unit
def test_stock_virtuals(make_product):
    assert make_product(quantity=3).is_low_stock
    assert not make_product(quantity=0).is_in_stock
    assert make_product(quantity=0, allow_backorder=True).is_in_stock
    assert make_product(quantity=0, track_quantity=False).is_in_stock


@pytest.mark.unit
def test_variant_stock(make_product):
    product = make_product(
        has_variants=True,
        variants=[
            ProductVariant(name="M", sku="PJ-M", price=1200.0, quantity=0),
            ProductVariant(name="L", sku="PJ-L", price=1250.0, quantity=4),
        ],
    )

    assert product.is_in_stock
    assert product.total_stock == 4
    assert product.find_variant(sku="PJ-L").price == 1250.0


@pytest.mark.unit
def test_apply_stock_change_refuses_negative(make_product):
    product = make_product(quantity=2)

    with pytest.raises(BusinessRuleViolationException, match="Insufficient stock"):
        product.apply_stock_change(3, subtract=True)

    assert product.quantity == 2


@pytest.mark.unit
def test_can_fulfil_respects_backorder(make_product):
    assert not make_product(quantity=2).can_fulfil(3)
    assert make_product(quantity=2, allow_backorder=True).can_fulfil(3)


@pytest.mark.unit
def test_refresh_derived_flags(make_product):
    now = utcnow()
    product = make_product(
        sales_count=150,
        sale_start_date=now - timedelta(days=1),
        sale_end_date=now + timedelta(days=1),
    )

    product.refresh_derived_flags(now)

    assert product.is_best_seller
    assert product.is_on_sale
    assert product.published_at == now


# ============================================================================
# ProductService
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_product_normalizes_slug(product_service, mock_category_repository, outbox):
    category_id = uuid4()
    mock_category_repository.get_by_id.return_value = object()

    product = await product_service.create_product(
        {"name": "Cotton Panjabi", "slug": "Cotton Panjabi!", "price": 1200.0, "category_id": category_id,
         "status": "active"}
    )

    assert product.slug == "cotton-panjabi"
    assert product.status == ProductStatus.ACTIVE
    assert product.published_at is not None
    mock_category_repository.refresh_product_count.assert_awaited_once_with(category_id)
    assert isinstance(outbox.pending()[0], ProductChanged)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_product_duplicate_sku(product_service, mock_product_repository):
    mock_product_repository.sku_exists.return_value = True

    with pytest.raises(DuplicateEntityException, match="Product with this SKU already exists"):
        await product_service.create_product({"name": "Panjabi", "sku": "PJ-1", "price": 10.0})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_product_duplicate_variant_skus(product_service):
    variants = [
        {"name": "M", "sku": "PJ-M", "price": 10.0},
        {"name": "M2", "sku": "PJ-M", "price": 10.0},
    ]

    with pytest.raises(ValidationException, match="Variant SKUs must be unique"):
        await product_service.create_product({"name": "Panjabi", "price": 10.0, "variants": variants})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_product_not_found(product_service, mock_product_repository):
    mock_product_repository.get_by_id.return_value = None

    with pytest.raises(EntityNotFoundException, match="Product not found"):
        await product_service.get_product(uuid4())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_product_tracks_view(product_service, mock_product_repository, make_product):
    product = make_product(view_count=5)
    mock_product_repository.get_by_id.return_value = product

    result = await product_service.get_product(product.id, track_view=True)

    assert result.view_count == 6
    mock_product_repository.increment_view_count.assert_awaited_once_with(product.id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_stock_subtract_uses_negative_delta(product_service, mock_product_repository, make_product):
    product = make_product()
    mock_product_repository.get_by_id.return_value = product

    await product_service.update_stock(product.id, 3, operation="subtract")

    mock_product_repository.adjust_stock.assert_awaited_once_with(product.id, -3, variant_id=None)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_stock_insufficient(product_service, mock_product_repository, make_product):
    product = make_product(quantity=1)
    mock_product_repository.get_by_id.return_value = product
    mock_product_repository.adjust_stock.return_value = False

    with pytest.raises(BusinessRuleViolationException, match="Insufficient stock"):
        await product_service.update_stock(product.id, 5, operation="subtract")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_stock_unknown_variant(product_service, mock_product_repository, make_product):
    product = make_product()
    mock_product_repository.get_by_id.return_value = product

    with pytest.raises(EntityNotFoundException, match="Invalid product variant"):
        await product_service.update_stock(product.id, 1, variant_id=uuid4())


@pytest.mark.unit
@pytest.mark.asyncio
async def test_bulk_delete_returns_count(product_service, mock_product_repository):
    mock_product_repository.bulk_delete.return_value = 2

    assert await product_service.bulk_delete([uuid4(), uuid4()]) == 2
