"""
Shipping Ports (Interfaces)
"""

from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from app.core.domain import PaginatedResult, Pagination
from app.domains.shipping.domain.entities import Shipment, ShippingRate, ShippingZone


@runtime_checkable
class IShippingZoneRepository(Protocol):
    async def get_by_id(self, zone_id: UUID) -> ShippingZone | None:
        ...

    async def name_exists(self, name: str, exclude_id: UUID | None = None) -> bool:
        ...

    async def list_zones(self, active_only: bool = True) -> list[ShippingZone]:
        """Zones ordered by name."""
        ...

    async def save(self, zone: ShippingZone) -> ShippingZone:
        ...

    async def delete(self, zone_id: UUID) -> None:
        ...


@runtime_checkable
class IShippingRateRepository(Protocol):
    async def get_by_id(self, rate_id: UUID) -> ShippingRate | None:
        ...

    async def list_by_zone(self, zone_id: UUID, active_only: bool = True) -> list[ShippingRate]:
        """Rates of a zone, cheapest first."""
        ...

    async def list_rates(self, active_only: bool = True) -> list[ShippingRate]:
        ...

    async def save(self, rate: ShippingRate) -> ShippingRate:
        ...

    async def delete(self, rate_id: UUID) -> None:
        ...


@runtime_checkable
class IShipmentRepository(Protocol):
    async def get_by_id(self, shipment_id: UUID) -> Shipment | None:
        ...

    async def get_by_order(self, order_id: UUID) -> Shipment | None:
        ...

    async def get_by_tracking_number(self, tracking_number: str) -> Shipment | None:
        ...

    async def tracking_number_exists(self, tracking_number: str, exclude_id: UUID | None = None) -> bool:
        ...

    async def save(self, shipment: Shipment) -> Shipment:
        ...

    async def list(self, pagination: Pagination, status: str | None = None) -> PaginatedResult[Shipment]:
        ...

    async def get_stats(self) -> dict[str, Any]:
        ...


__all__ = ["IShippingZoneRepository", "IShippingRateRepository", "IShipmentRepository"]
