from .place_order import PlaceOrderUseCase, ShippingRates

__all__ = ["PlaceOrderUseCase", "ShippingRates"]
