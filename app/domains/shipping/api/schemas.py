"""
Shipping API Schemas
"""

from uuid import UUID

from pydantic import Field

from app.api.schemas.common import CamelModel
from app.domains.shipping.domain.value_objects import Carrier, ShipmentStatus


class ZoneCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    areas: list[str] = Field(..., min_length=1)
    is_active: bool = True


class ZoneUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    areas: list[str] | None = None
    is_active: bool | None = None


class EstimatedDays(CamelModel):
    min: int = Field(..., ge=0)
    max: int = Field(..., ge=0)


class RateBase(CamelModel):
    description: str | None = Field(None, max_length=500)
    free_shipping_minimum: float | None = Field(None, ge=0)
    weight_limit: float | None = Field(None, ge=0)
    additional_price_per_kg: float | None = Field(None, ge=0)

    def to_data(self, exclude_unset: bool = False) -> dict:
        data = self.model_dump(exclude_unset=exclude_unset, exclude={"zone_id", "estimated_days"})
        estimated = getattr(self, "estimated_days", None)
        if estimated is not None:
            data["estimated_days_min"] = estimated.min
            data["estimated_days_max"] = estimated.max
        return data


class RateCreate(RateBase):
    zone_id: UUID = Field(..., alias="zone")
    name: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0)
    estimated_days: EstimatedDays
    is_active: bool = True


class RateUpdate(RateBase):
    zone_id: UUID | None = Field(None, alias="zone")
    name: str | None = Field(None, min_length=1, max_length=100)
    price: float | None = Field(None, ge=0)
    estimated_days: EstimatedDays | None = None
    is_active: bool | None = None


class ShipmentCreate(CamelModel):
    order_id: UUID = Field(..., alias="order")
    carrier: Carrier = Carrier.MANUAL
    zone_id: UUID | None = Field(None, alias="shippingZone")
    rate_id: UUID | None = Field(None, alias="shippingRate")
    shipping_cost: float | None = Field(None, ge=0)
    weight: float | None = Field(None, ge=0)
    tracking_number: str | None = None


class ShipmentStatusBody(CamelModel):
    status: ShipmentStatus
    note: str | None = None
    location: str | None = None


class TrackingInfoBody(CamelModel):
    tracking_number: str = Field(..., min_length=1, max_length=100)
    tracking_url: str | None = Field(None, max_length=500)
    carrier: Carrier | None = None
    delivery_note: str | None = None
