from .shipment_repository import SQLAlchemyShipmentRepository
from .zone_repository import SQLAlchemyShippingRateRepository, SQLAlchemyShippingZoneRepository

__all__ = [
    "SQLAlchemyShipmentRepository",
    "SQLAlchemyShippingRateRepository",
    "SQLAlchemyShippingZoneRepository",
]
