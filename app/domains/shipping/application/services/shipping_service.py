"""
Shipping Service

Zone/rate management, cost quotes and shipment tracking. Delivering a
shipment moves its order to delivered through OrderService, so the order
transition table stays the only authority over order status.
"""

import logging
from typing import Any
from uuid import UUID

from app.core.domain import (
    BusinessRuleViolationException,
    DuplicateEntityException,
    EntityNotFoundException,
    PaginatedResult,
    Pagination,
    ValidationException,
)
from app.domains.commerce.application.services import OrderService
from app.domains.commerce.domain.value_objects import OrderStatus
from app.domains.shipping.application.dto import ShippingQuote
from app.domains.shipping.application.ports import (
    IShipmentRepository,
    IShippingRateRepository,
    IShippingZoneRepository,
)
from app.domains.shipping.domain.entities import Shipment, ShippingRate, ShippingZone
from app.domains.shipping.domain.value_objects import Carrier, ShipmentStatus

logger = logging.getLogger(__name__)

RATE_FIELDS = (
    "name",
    "description",
    "price",
    "free_shipping_minimum",
    "estimated_days_min",
    "estimated_days_max",
    "weight_limit",
    "additional_price_per_kg",
    "is_active",
)


class ShippingService:
    def __init__(
        self,
        zone_repository: IShippingZoneRepository,
        rate_repository: IShippingRateRepository,
        shipment_repository: IShipmentRepository,
        order_service: OrderService,
    ):
        self.zone_repository = zone_repository
        self.rate_repository = rate_repository
        self.shipment_repository = shipment_repository
        self.order_service = order_service

    # ========================================================================
    # Zones
    # ========================================================================

    async def get_zone(self, zone_id: UUID) -> ShippingZone:
        zone = await self.zone_repository.get_by_id(zone_id)
        if not zone:
            raise EntityNotFoundException("ShippingZone", zone_id, "Shipping zone not found")
        return zone

    async def list_zones(self, include_inactive: bool = False) -> list[ShippingZone]:
        return await self.zone_repository.list_zones(active_only=not include_inactive)

    async def create_zone(self, name: str, areas: list[str], is_active: bool = True) -> ShippingZone:
        if await self.zone_repository.name_exists(name.strip()):
            raise DuplicateEntityException("ShippingZone", "name", name, "Shipping zone with this name already exists")
        zone = await self.zone_repository.save(ShippingZone.new(name, areas, is_active))
        logger.info(f"Shipping zone created: {zone.name}")
        return zone

    async def update_zone(self, zone_id: UUID, changes: dict[str, Any]) -> ShippingZone:
        zone = await self.get_zone(zone_id)
        if changes.get("name"):
            name = changes["name"].strip()
            if name != zone.name and await self.zone_repository.name_exists(name, exclude_id=zone.id):
                raise DuplicateEntityException(
                    "ShippingZone", "name", name, "Shipping zone with this name already exists"
                )
            zone.name = name
        if changes.get("areas") is not None:
            zone.areas = [a.strip() for a in changes["areas"] if a.strip()]
        if changes.get("is_active") is not None:
            zone.is_active = changes["is_active"]
        zone.touch()
        return await self.zone_repository.save(zone)

    async def delete_zone(self, zone_id: UUID) -> None:
        zone = await self.get_zone(zone_id)
        await self.zone_repository.delete(zone_id)
        logger.info(f"Shipping zone deleted: {zone.name}")

    # ========================================================================
    # Rates
    # ========================================================================

    async def get_rate(self, rate_id: UUID) -> ShippingRate:
        rate = await self.rate_repository.get_by_id(rate_id)
        if not rate:
            raise EntityNotFoundException("ShippingRate", rate_id, "Shipping rate not found")
        return rate

    async def list_rates(self) -> list[ShippingRate]:
        return await self.rate_repository.list_rates()

    async def rates_by_zone(self, zone_id: UUID) -> list[ShippingRate]:
        return await self.rate_repository.list_by_zone(zone_id)

    @staticmethod
    def _check_rate(rate: ShippingRate) -> None:
        if rate.estimated_days_max < rate.estimated_days_min:
            raise ValidationException("Maximum estimated days cannot be less than minimum", field="estimatedDays")

    async def create_rate(self, zone_id: UUID, data: dict[str, Any]) -> ShippingRate:
        await self.get_zone(zone_id)
        rate = ShippingRate.new(zone_id=zone_id, **{k: data[k] for k in RATE_FIELDS if data.get(k) is not None})
        self._check_rate(rate)
        return await self.rate_repository.save(rate)

    async def update_rate(self, rate_id: UUID, changes: dict[str, Any]) -> ShippingRate:
        rate = await self.get_rate(rate_id)
        if changes.get("zone_id"):
            rate.zone_id = (await self.get_zone(changes["zone_id"])).id
        for key in RATE_FIELDS:
            if key in changes:
                setattr(rate, key, changes[key])
        self._check_rate(rate)
        rate.touch()
        return await self.rate_repository.save(rate)

    async def delete_rate(self, rate_id: UUID) -> None:
        await self.get_rate(rate_id)
        await self.rate_repository.delete(rate_id)

    # ========================================================================
    # Cost calculation
    # ========================================================================

    async def find_zone(self, city: str) -> ShippingZone | None:
        """Active zone listing `city`, else the active fallback ("outside") zone."""
        zones = await self.zone_repository.list_zones(active_only=True)
        for zone in zones:
            if zone.covers(city):
                return zone
        return next((z for z in zones if z.is_fallback), None)

    async def calculate(self, city: str, weight: float = 0.0, order_total: float = 0.0) -> ShippingQuote:
        """
        Quote every active rate of the zone serving `city`.

        With no matching zone and no fallback zone the quote is empty.
        """
        zone = await self.find_zone(city)
        if zone is None:
            logger.info(f"No shipping zone serves {city!r}")
            return ShippingQuote(zone=None)
        rates = await self.rate_repository.list_by_zone(zone.id)  # type: ignore[arg-type]
        return ShippingQuote(zone=zone, rates=[r.quote(weight, order_total) for r in rates])

    # ========================================================================
    # Shipments
    # ========================================================================

    async def get_shipment(self, shipment_id: UUID) -> Shipment:
        shipment = await self.shipment_repository.get_by_id(shipment_id)
        if not shipment:
            raise EntityNotFoundException("Shipment", shipment_id, "Shipment not found")
        return shipment

    async def create_shipment(
        self,
        order_id: UUID,
        carrier: str = Carrier.MANUAL.value,
        zone_id: UUID | None = None,
        rate_id: UUID | None = None,
        shipping_cost: float | None = None,
        weight: float | None = None,
        tracking_number: str | None = None,
    ) -> Shipment:
        order = await self.order_service.get_order(order_id)
        if await self.shipment_repository.get_by_order(order_id):
            raise BusinessRuleViolationException("shipment_exists", "Shipment already exists for this order")
        if tracking_number and await self.shipment_repository.tracking_number_exists(tracking_number):
            raise DuplicateEntityException(
                "Shipment", "trackingNumber", tracking_number, "Tracking number is already in use"
            )

        shipment = Shipment.open(
            order_id,
            order.shipping_cost if shipping_cost is None else shipping_cost,
            carrier=Carrier(carrier),
            zone_id=zone_id,
            rate_id=rate_id,
            weight=weight,
            tracking_number=tracking_number,
        )
        shipment = await self.shipment_repository.save(shipment)
        logger.info(f"Shipment created for order {order.order_number}")
        return shipment

    async def get_for_order(self, order_id: UUID, user_id: UUID | None = None) -> Shipment:
        """Shipment of an order; with `user_id` the order must belong to that user."""
        if user_id is not None:
            await self.order_service.get_user_order(order_id, user_id)
        shipment = await self.shipment_repository.get_by_order(order_id)
        if not shipment:
            raise EntityNotFoundException("Shipment", order_id, "Shipment not found")
        return shipment

    async def track(self, tracking_number: str) -> dict[str, Any]:
        shipment = await self.shipment_repository.get_by_tracking_number(tracking_number)
        if not shipment:
            raise EntityNotFoundException("Shipment", tracking_number, "Shipment not found")
        order = await self.order_service.get_order(shipment.order_id)  # type: ignore[arg-type]
        return {
            "order": {
                "id": str(order.id),
                "orderNumber": order.order_number,
                "status": order.status.value,
                "shippingAddress": order.shipping_address,
                "createdAt": order.to_dict()["createdAt"],
            },
            "shipment": shipment.to_dict(),
        }

    async def list_shipments(self, pagination: Pagination, status: str | None = None) -> PaginatedResult[Shipment]:
        return await self.shipment_repository.list(pagination, status)

    async def update_status(
        self,
        shipment_id: UUID,
        status: str,
        note: str | None = None,
        location: str | None = None,
        updated_by: UUID | None = None,
    ) -> Shipment:
        """
        Append a tracking event; delivery also delivers the order.

        Raises:
            InvalidOperationException: Order cannot move to delivered from its current status
        """
        shipment = await self.get_shipment(shipment_id)
        new_status = ShipmentStatus(status)

        if new_status == ShipmentStatus.DELIVERED:
            await self.order_service.update_status(
                shipment.order_id, OrderStatus.DELIVERED.value, updated_by=updated_by  # type: ignore[arg-type]
            )

        shipment.change_status(new_status, note=note, location=location)
        shipment = await self.shipment_repository.save(shipment)
        logger.info(f"Shipment {shipment.id} -> {new_status.value}")
        return shipment

    async def update_tracking(
        self,
        shipment_id: UUID,
        tracking_number: str,
        tracking_url: str | None = None,
        carrier: str | None = None,
        delivery_note: str | None = None,
    ) -> Shipment:
        shipment = await self.get_shipment(shipment_id)
        if await self.shipment_repository.tracking_number_exists(tracking_number, exclude_id=shipment.id):
            raise DuplicateEntityException(
                "Shipment", "trackingNumber", tracking_number, "Tracking number is already in use"
            )
        shipment.update_tracking(tracking_number, tracking_url, Carrier(carrier) if carrier else None)
        if delivery_note is not None:
            shipment.delivery_note = delivery_note
        return await self.shipment_repository.save(shipment)

    async def get_stats(self) -> dict[str, Any]:
        return await self.shipment_repository.get_stats()


__all__ = ["ShippingService"]
