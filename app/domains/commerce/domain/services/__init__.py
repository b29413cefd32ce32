from .shipping_cost import calculate_shipping_cost

__all__ = ["calculate_shipping_cost"]
