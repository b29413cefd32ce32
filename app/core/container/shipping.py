"""
Shipping Domain Container.
"""

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.shipping.application.services import ShippingService
from app.domains.shipping.infrastructure.repositories import (
    SQLAlchemyShipmentRepository,
    SQLAlchemyShippingRateRepository,
    SQLAlchemyShippingZoneRepository,
)

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer
    from app.core.container.commerce import CommerceContainer


class ShippingContainer:
    def __init__(self, base: "BaseContainer", commerce: "CommerceContainer"):
        self._base = base
        self._commerce = commerce

    # ==================== REPOSITORIES ====================

    def create_zone_repository(self, db: AsyncSession) -> SQLAlchemyShippingZoneRepository:
        return SQLAlchemyShippingZoneRepository(session=db)

    def create_rate_repository(self, db: AsyncSession) -> SQLAlchemyShippingRateRepository:
        return SQLAlchemyShippingRateRepository(session=db)

    def create_shipment_repository(self, db: AsyncSession) -> SQLAlchemyShipmentRepository:
        return SQLAlchemyShipmentRepository(session=db)

    # ==================== SERVICES ====================

    def create_shipping_service(self, db: AsyncSession) -> ShippingService:
        """Shipment status changes go through the order service."""
        return ShippingService(
            zone_repository=self.create_zone_repository(db),
            rate_repository=self.create_rate_repository(db),
            shipment_repository=self.create_shipment_repository(db),
            order_service=self._commerce.create_order_service(db),
        )
