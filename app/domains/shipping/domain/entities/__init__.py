from .shipment import Shipment, TrackingEvent
from .zone import ShippingRate, ShippingZone

__all__ = ["Shipment", "TrackingEvent", "ShippingRate", "ShippingZone"]
