"""
Shipment Repository Implementation
"""

from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import PaginatedResult, Pagination
from app.domains.shipping.application.ports import IShipmentRepository
from app.domains.shipping.domain.entities import Shipment, TrackingEvent
from app.domains.shipping.domain.value_objects import Carrier, ShipmentStatus
from app.models.db import ShipmentModel

IN_TRANSIT_STATUSES = [s.value for s in ShipmentStatus if s.is_in_transit()]


class SQLAlchemyShipmentRepository(IShipmentRepository):
    """
    SQLAlchemy implementation of shipment repository.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, *conditions) -> ShipmentModel | None:
        result = await self.session.execute(
            select(ShipmentModel)
            .where(*conditions)
            .order_by(ShipmentModel.created_at.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, shipment_id: UUID) -> Shipment | None:
        model = await self._get_model(ShipmentModel.id == shipment_id)
        return self._to_entity(model) if model else None

    async def get_by_order(self, order_id: UUID) -> Shipment | None:
        model = await self._get_model(ShipmentModel.order_id == order_id)
        return self._to_entity(model) if model else None

    async def get_by_tracking_number(self, tracking_number: str) -> Shipment | None:
        model = await self._get_model(ShipmentModel.tracking_number == tracking_number)
        return self._to_entity(model) if model else None

    async def tracking_number_exists(self, tracking_number: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(ShipmentModel.id).where(ShipmentModel.tracking_number == tracking_number)
        if exclude_id:
            stmt = stmt.where(ShipmentModel.id != exclude_id)
        return (await self.session.execute(stmt)).first() is not None

    async def save(self, shipment: Shipment) -> Shipment:
        model = await self._get_model(ShipmentModel.id == shipment.id)
        if model is None:
            model = ShipmentModel(id=shipment.id, order_id=shipment.order_id)
            self.session.add(model)
        self._apply(model, shipment)
        await self.session.flush()
        return self._to_entity(model)

    async def list(self, pagination: Pagination, status: str | None = None) -> PaginatedResult[Shipment]:
        conditions = [ShipmentModel.status == status] if status else []
        total = (await self.session.execute(select(func.count(ShipmentModel.id)).where(*conditions))).scalar_one()
        result = await self.session.execute(
            select(ShipmentModel)
            .where(*conditions)
            .order_by(ShipmentModel.created_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        return PaginatedResult(
            items=[self._to_entity(m) for m in result.scalars().all()],
            total=total,
            pagination=pagination,
        )

    async def get_stats(self) -> dict[str, Any]:
        rows = await self.session.execute(
            select(ShipmentModel.status, func.count(ShipmentModel.id)).group_by(ShipmentModel.status)
        )
        counts = dict(rows.all())

        delivery_days = func.extract("epoch", ShipmentModel.delivered_at - ShipmentModel.created_at) / 86400
        avg_days = (
            await self.session.execute(
                select(func.avg(delivery_days)).where(
                    ShipmentModel.status == ShipmentStatus.DELIVERED.value,
                    ShipmentModel.delivered_at.is_not(None),
                )
            )
        ).scalar_one()

        return {
            "totalShipments": sum(counts.values()),
            "pending": counts.get(ShipmentStatus.PENDING.value, 0),
            "inTransit": sum(counts.get(s, 0) for s in IN_TRANSIT_STATUSES),
            "delivered": counts.get(ShipmentStatus.DELIVERED.value, 0),
            "returned": counts.get(ShipmentStatus.RETURNED.value, 0),
            "cancelled": counts.get(ShipmentStatus.CANCELLED.value, 0),
            "avgDeliveryDays": round(float(avg_days or 0), 1),
        }

    # Mapping methods

    def _apply(self, model: ShipmentModel, shipment: Shipment) -> None:
        model.carrier = shipment.carrier.value
        model.carrier_order_id = shipment.carrier_order_id
        model.tracking_number = shipment.tracking_number
        model.tracking_url = shipment.tracking_url
        model.zone_id = shipment.zone_id
        model.rate_id = shipment.rate_id
        model.shipping_cost = shipment.shipping_cost
        model.weight = shipment.weight
        model.status = shipment.status.value
        model.tracking_history = [e.to_dict() for e in shipment.tracking_history]
        model.picked_up_at = shipment.picked_up_at
        model.delivered_at = shipment.delivered_at
        model.delivery_attempts = shipment.delivery_attempts
        model.delivery_note = shipment.delivery_note
        model.proof_of_delivery = shipment.proof_of_delivery

    def _to_entity(self, model: ShipmentModel) -> Shipment:
        shipment = Shipment(
            id=model.id,
            order_id=model.order_id,
            carrier=Carrier(model.carrier),
            carrier_order_id=model.carrier_order_id,
            tracking_number=model.tracking_number,
            tracking_url=model.tracking_url,
            zone_id=model.zone_id,
            rate_id=model.rate_id,
            shipping_cost=float(model.shipping_cost or 0),
            weight=model.weight,
            status=ShipmentStatus(model.status),
            tracking_history=[TrackingEvent.from_dict(e) for e in (model.tracking_history or [])],
            picked_up_at=model.picked_up_at,
            delivered_at=model.delivered_at,
            delivery_attempts=model.delivery_attempts or 0,
            delivery_note=model.delivery_note,
            proof_of_delivery=model.proof_of_delivery,
        )
        if model.created_at is not None:
            shipment.created_at = model.created_at
        if model.updated_at is not None:
            shipment.updated_at = model.updated_at
        return shipment
