from .shipping_service import ShippingService

__all__ = ["ShippingService"]
