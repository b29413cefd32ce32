"""
Shipping API Routes

Public cost quotes and tracking, customer shipment lookup, admin management.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_current_user, get_pagination, require_admin
from app.api.responses import paginated_response, success_response
from app.core.domain import Pagination
from app.domains.identity.domain.entities import User
from app.domains.shipping.api.dependencies import get_shipping_service
from app.domains.shipping.api.schemas import (
    RateCreate,
    RateUpdate,
    ShipmentCreate,
    ShipmentStatusBody,
    TrackingInfoBody,
    ZoneCreate,
    ZoneUpdate,
)
from app.domains.shipping.application.services import ShippingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipping", tags=["Shipping"])


# ============================================================================
# Public
# ============================================================================


@router.get("/calculate")
async def calculate_cost(
    city: str = Query(..., min_length=1),  # noqa: B008
    weight: float = Query(0, ge=0),  # noqa: B008
    order_total: float = Query(0, alias="orderTotal", ge=0),  # noqa: B008
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    quote = await service.calculate(city, weight, order_total)
    return success_response(quote.to_dict(), "Shipping cost calculated")


@router.get("/track/{tracking_number}")
async def track_shipment(
    tracking_number: str,
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    return success_response(await service.track(tracking_number), "Tracking info fetched")


@router.get("/zones")
async def list_zones(service: ShippingService = Depends(get_shipping_service)):  # noqa: B008
    zones = await service.list_zones()
    return success_response([z.to_dict() for z in zones], "Shipping zones fetched")


@router.get("/rates")
async def list_rates(service: ShippingService = Depends(get_shipping_service)):  # noqa: B008
    rates = await service.list_rates()
    return success_response([r.to_dict() for r in rates], "Shipping rates fetched")


@router.get("/rates/zone/{zone_id}")
async def rates_by_zone(
    zone_id: UUID,
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    rates = await service.rates_by_zone(zone_id)
    return success_response([r.to_dict() for r in rates], "Shipping rates fetched")


# ============================================================================
# Customer
# ============================================================================


@router.get("/order/{order_id}")
async def shipment_for_order(
    order_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    shipment = await service.get_for_order(order_id, None if user.is_staff else user.id)
    return success_response(shipment.to_dict(), "Shipment fetched")


# ============================================================================
# Admin
# ============================================================================


@router.post("/zones", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_zone(
    body: ZoneCreate,
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    zone = await service.create_zone(body.name, body.areas, body.is_active)
    return success_response(zone.to_dict(), "Shipping zone created")


@router.patch("/zones/{zone_id}", dependencies=[Depends(require_admin)])
async def update_zone(
    zone_id: UUID,
    body: ZoneUpdate,
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    zone = await service.update_zone(zone_id, body.model_dump(exclude_unset=True))
    return success_response(zone.to_dict(), "Shipping zone updated")


@router.delete("/zones/{zone_id}", dependencies=[Depends(require_admin)])
async def delete_zone(
    zone_id: UUID,
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    await service.delete_zone(zone_id)
    return success_response(None, "Shipping zone deleted")


@router.post("/rates", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_rate(
    body: RateCreate,
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    rate = await service.create_rate(body.zone_id, body.to_data())
    return success_response(rate.to_dict(), "Shipping rate created")


@router.patch("/rates/{rate_id}", dependencies=[Depends(require_admin)])
async def update_rate(
    rate_id: UUID,
    body: RateUpdate,
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    changes = body.to_data(exclude_unset=True)
    if body.zone_id:
        changes["zone_id"] = body.zone_id
    rate = await service.update_rate(rate_id, changes)
    return success_response(rate.to_dict(), "Shipping rate updated")


@router.delete("/rates/{rate_id}", dependencies=[Depends(require_admin)])
async def delete_rate(
    rate_id: UUID,
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    await service.delete_rate(rate_id)
    return success_response(None, "Shipping rate deleted")


@router.get("/shipments", dependencies=[Depends(require_admin)])
async def list_shipments(
    status_filter: str | None = Query(None, alias="status"),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    result = await service.list_shipments(pagination, status_filter)
    return paginated_response(result, "Shipments fetched")


@router.post("/shipments", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
async def create_shipment(
    body: ShipmentCreate,
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    shipment = await service.create_shipment(
        body.order_id,
        carrier=body.carrier,
        zone_id=body.zone_id,
        rate_id=body.rate_id,
        shipping_cost=body.shipping_cost,
        weight=body.weight,
        tracking_number=body.tracking_number,
    )
    return success_response(shipment.to_dict(), "Shipment created")


@router.get("/stats", dependencies=[Depends(require_admin)])
async def shipping_stats(service: ShippingService = Depends(get_shipping_service)):  # noqa: B008
    return success_response(await service.get_stats(), "Shipping statistics fetched")


@router.patch("/shipments/{shipment_id}/status")
async def update_shipment_status(
    shipment_id: UUID,
    body: ShipmentStatusBody,
    actor: User = Depends(require_admin),  # noqa: B008
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    shipment = await service.update_status(
        shipment_id, body.status, note=body.note, location=body.location, updated_by=actor.id
    )
    return success_response(shipment.to_dict(), "Shipment status updated")


@router.patch("/shipments/{shipment_id}/tracking", dependencies=[Depends(require_admin)])
async def update_tracking_info(
    shipment_id: UUID,
    body: TrackingInfoBody,
    service: ShippingService = Depends(get_shipping_service),  # noqa: B008
):
    shipment = await service.update_tracking(
        shipment_id,
        body.tracking_number,
        tracking_url=body.tracking_url,
        carrier=body.carrier,
        delivery_note=body.delivery_note,
    )
    return success_response(shipment.to_dict(), "Tracking info updated")
