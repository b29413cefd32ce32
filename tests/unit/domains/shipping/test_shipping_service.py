"""
Unit tests for shipping: zone lookup, rate quotes and shipment status.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.domain import (
    BusinessRuleViolationException,
    InvalidOperationException,
    ValidationException,
)
from app.domains.shipping.application.services import ShippingService
from app.domains.shipping.domain.entities import Shipment, ShippingRate, ShippingZone
from app.domains.shipping.domain.value_objects import ShipmentStatus

DHAKA = ShippingZone.new("Inside Dhaka", ["Dhaka", "Gazipur "])
OUTSIDE = ShippingZone.new("Outside Dhaka", [])


@pytest.fixture
def mock_zone_repository():
    repo = AsyncMock()
    repo.list_zones.return_value = [DHAKA, OUTSIDE]
    repo.save.side_effect = lambda zone: zone
    return repo


@pytest.fixture
def mock_rate_repository():
    repo = AsyncMock()
    repo.save.side_effect = lambda rate: rate
    return repo


@pytest.fixture
def mock_shipment_repository():
    repo = AsyncMock()
    repo.get_by_order.return_value = None
    repo.tracking_number_exists.return_value = False
    repo.save.side_effect = lambda shipment: shipment
    return repo


@pytest.fixture
def order_service():
    return AsyncMock()


@pytest.fixture
def shipping_service(mock_zone_repository, mock_rate_repository, mock_shipment_repository, order_service):
    return ShippingService(
        zone_repository=mock_zone_repository,
        rate_repository=mock_rate_repository,
        shipment_repository=mock_shipment_repository,
        order_service=order_service,
    )


# ============================================================================
# Zones and rates
# ============================================================================


@pytest.mark.unit
def test_zone_new_trims_areas():
    zone = ShippingZone.new(" Chattogram ", ["Chattogram", " ", "Cox's Bazar "])

    assert zone.name == "Chattogram"
    assert zone.areas == ["Chattogram", "Cox's Bazar"]


@pytest.mark.unit
def test_zone_covers_is_case_insensitive_substring():
    assert DHAKA.covers("dhaka")
    assert DHAKA.covers("Gazi")
    assert not DHAKA.covers("Sylhet")
    assert not DHAKA.covers("  ")


@pytest.mark.unit
def test_rate_overage_charges_fractional_kg():
    rate = ShippingRate.new(name="Standard", price=60, weight_limit=1, additional_price_per_kg=20)

    assert rate.quote(weight=2.5)["price"] == 90.0
    assert rate.quote(weight=0.5)["price"] == 60.0
    assert ShippingRate.new(price=60, weight_limit=2, additional_price_per_kg=20).quote(weight=2.5)["price"] == 70.0


@pytest.mark.unit
def test_rate_free_above_minimum():
    rate = ShippingRate.new(name="Standard", price=60, free_shipping_minimum=3000)

    quote = rate.quote(order_total=3000)

    assert quote["isFree"] is True
    assert quote["price"] == 0.0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_calculate_uses_matching_zone(shipping_service, mock_rate_repository):
    mock_rate_repository.list_by_zone.return_value = [ShippingRate.new(zone_id=DHAKA.id, name="Standard", price=60)]

    quote = await shipping_service.calculate("Dhaka", weight=1, order_total=500)

    assert quote.zone is DHAKA
    assert quote.rates[0]["price"] == 60.0
    mock_rate_repository.list_by_zone.assert_awaited_once_with(DHAKA.id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_calculate_falls_back_to_outside_zone(shipping_service):
    quote = await shipping_service.calculate("Rajshahi")

    assert quote.zone is OUTSIDE


@pytest.mark.unit
@pytest.mark.asyncio
async def test_calculate_falls_back_to_bangla_named_zone(shipping_service, mock_zone_repository):
    others = ShippingZone.new("অন্যান্য এলাকা", [])
    mock_zone_repository.list_zones.return_value = [DHAKA, others]

    quote = await shipping_service.calculate("Rajshahi")

    assert quote.zone is others


@pytest.mark.unit
def test_fallback_zone_name_is_case_insensitive():
    assert ShippingZone.new("OUTSIDE DHAKA", []).is_fallback
    assert not DHAKA.is_fallback


@pytest.mark.unit
@pytest.mark.asyncio
async def test_calculate_without_any_zone(shipping_service, mock_zone_repository, mock_rate_repository):
    mock_zone_repository.list_zones.return_value = [DHAKA]

    quote = await shipping_service.calculate("Rajshahi")

    assert quote.zone is None
    assert quote.rates == []
    assert quote.to_dict() == {"zone": None, "rates": []}
    mock_rate_repository.list_by_zone.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_rate_checks_delivery_window(shipping_service, mock_zone_repository):
    mock_zone_repository.get_by_id.return_value = DHAKA

    with pytest.raises(ValidationException, match="cannot be less than minimum"):
        await shipping_service.create_rate(
            DHAKA.id, {"name": "Express", "price": 120, "estimated_days_min": 3, "estimated_days_max": 1}
        )


# ============================================================================
# Shipments
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_shipment_takes_order_shipping_cost(shipping_service, order_service):
    order_id = uuid4()
    order_service.get_order.return_value = MagicMock(shipping_cost=60.0, order_number="ORD-1")

    shipment = await shipping_service.create_shipment(order_id, carrier="pathao")

    assert shipment.shipping_cost == 60.0
    assert shipment.carrier.value == "pathao"
    assert [e.status for e in shipment.tracking_history] == ["Order placed"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_one_shipment_per_order(shipping_service, mock_shipment_repository, order_service):
    order_id = uuid4()
    mock_shipment_repository.get_by_order.return_value = Shipment.open(order_id, 60.0)

    with pytest.raises(BusinessRuleViolationException, match="Shipment already exists for this order"):
        await shipping_service.create_shipment(order_id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delivery_delivers_the_order(shipping_service, mock_shipment_repository, order_service):
    shipment = Shipment.open(uuid4(), 60.0)
    mock_shipment_repository.get_by_id.return_value = shipment
    admin_id = uuid4()

    updated = await shipping_service.update_status(shipment.id, "delivered", location="Dhaka", updated_by=admin_id)

    order_service.update_status.assert_awaited_once_with(shipment.order_id, "delivered", updated_by=admin_id)
    assert updated.status == ShipmentStatus.DELIVERED
    assert updated.delivered_at is not None
    assert updated.tracking_history[-1].location == "Dhaka"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delivery_blocked_by_order_state(shipping_service, mock_shipment_repository, order_service):
    shipment = Shipment.open(uuid4(), 60.0)
    mock_shipment_repository.get_by_id.return_value = shipment
    order_service.update_status.side_effect = InvalidOperationException(
        "change_status", "pending", "Cannot change status from pending to delivered"
    )

    with pytest.raises(InvalidOperationException):
        await shipping_service.update_status(shipment.id, "delivered")

    assert shipment.status == ShipmentStatus.PENDING
    mock_shipment_repository.save.assert_not_awaited()


@pytest.mark.unit
def test_out_for_delivery_counts_attempts():
    shipment = Shipment.open(uuid4(), 60.0)

    shipment.change_status(ShipmentStatus.OUT_FOR_DELIVERY)
    shipment.change_status(ShipmentStatus.OUT_FOR_DELIVERY)

    assert shipment.delivery_attempts == 2
    assert ShipmentStatus.OUT_FOR_DELIVERY.is_in_transit()
