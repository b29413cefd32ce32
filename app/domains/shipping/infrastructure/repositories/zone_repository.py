"""
Shipping zone and rate repositories.
"""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.shipping.application.ports import IShippingRateRepository, IShippingZoneRepository
from app.domains.shipping.domain.entities import ShippingRate, ShippingZone
from app.models.db import ShippingRateModel, ShippingZoneModel


class SQLAlchemyShippingZoneRepository(IShippingZoneRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, zone_id: UUID) -> ShippingZoneModel | None:
        result = await self.session.execute(select(ShippingZoneModel).where(ShippingZoneModel.id == zone_id))
        return result.scalar_one_or_none()

    async def get_by_id(self, zone_id: UUID) -> ShippingZone | None:
        model = await self._get_model(zone_id)
        return self._to_entity(model) if model else None

    async def name_exists(self, name: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(ShippingZoneModel.id).where(func.lower(ShippingZoneModel.name) == name.lower())
        if exclude_id:
            stmt = stmt.where(ShippingZoneModel.id != exclude_id)
        return (await self.session.execute(stmt)).first() is not None

    async def list_zones(self, active_only: bool = True) -> list[ShippingZone]:
        stmt = select(ShippingZoneModel).order_by(ShippingZoneModel.name.asc())
        if active_only:
            stmt = stmt.where(ShippingZoneModel.is_active.is_(True))
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def save(self, zone: ShippingZone) -> ShippingZone:
        model = await self._get_model(zone.id) if zone.id else None  # type: ignore[arg-type]
        if model is None:
            model = ShippingZoneModel(id=zone.id)
            self.session.add(model)
        model.name = zone.name
        model.areas = list(zone.areas)
        model.is_active = zone.is_active
        await self.session.flush()
        return self._to_entity(model)

    async def delete(self, zone_id: UUID) -> None:
        await self.session.execute(delete(ShippingZoneModel).where(ShippingZoneModel.id == zone_id))

    def _to_entity(self, model: ShippingZoneModel) -> ShippingZone:
        zone = ShippingZone(
            id=model.id,
            name=model.name,
            areas=list(model.areas or []),
            is_active=bool(model.is_active),
        )
        if model.created_at is not None:
            zone.created_at = model.created_at
        if model.updated_at is not None:
            zone.updated_at = model.updated_at
        return zone


class SQLAlchemyShippingRateRepository(IShippingRateRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, rate_id: UUID) -> ShippingRateModel | None:
        result = await self.session.execute(select(ShippingRateModel).where(ShippingRateModel.id == rate_id))
        return result.scalar_one_or_none()

    async def get_by_id(self, rate_id: UUID) -> ShippingRate | None:
        model = await self._get_model(rate_id)
        return self._to_entity(model) if model else None

    async def list_by_zone(self, zone_id: UUID, active_only: bool = True) -> list[ShippingRate]:
        stmt = select(ShippingRateModel).where(ShippingRateModel.zone_id == zone_id)
        if active_only:
            stmt = stmt.where(ShippingRateModel.is_active.is_(True))
        result = await self.session.execute(stmt.order_by(ShippingRateModel.price.asc()))
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_rates(self, active_only: bool = True) -> list[ShippingRate]:
        stmt = (
            select(ShippingRateModel)
            .join(ShippingZoneModel, ShippingZoneModel.id == ShippingRateModel.zone_id)
            .order_by(ShippingZoneModel.name.asc(), ShippingRateModel.price.asc())
        )
        if active_only:
            stmt = stmt.where(ShippingRateModel.is_active.is_(True))
        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def save(self, rate: ShippingRate) -> ShippingRate:
        model = await self._get_model(rate.id) if rate.id else None  # type: ignore[arg-type]
        if model is None:
            model = ShippingRateModel(id=rate.id)
            self.session.add(model)
        model.zone_id = rate.zone_id
        model.name = rate.name
        model.description = rate.description
        model.price = rate.price
        model.free_shipping_minimum = rate.free_shipping_minimum
        model.estimated_days_min = rate.estimated_days_min
        model.estimated_days_max = rate.estimated_days_max
        model.weight_limit = rate.weight_limit
        model.additional_price_per_kg = rate.additional_price_per_kg
        model.is_active = rate.is_active
        await self.session.flush()
        return self._to_entity(model)

    async def delete(self, rate_id: UUID) -> None:
        await self.session.execute(delete(ShippingRateModel).where(ShippingRateModel.id == rate_id))

    def _to_entity(self, model: ShippingRateModel) -> ShippingRate:
        rate = ShippingRate(
            id=model.id,
            zone_id=model.zone_id,
            name=model.name,
            description=model.description,
            price=float(model.price or 0),
            free_shipping_minimum=model.free_shipping_minimum,
            estimated_days_min=model.estimated_days_min,
            estimated_days_max=model.estimated_days_max,
            weight_limit=model.weight_limit,
            additional_price_per_kg=model.additional_price_per_kg,
            is_active=bool(model.is_active),
        )
        if model.created_at is not None:
            rate.created_at = model.created_at
        if model.updated_at is not None:
            rate.updated_at = model.updated_at
        return rate
