"""
Flat shipping charge applied at checkout.
"""

from ..value_objects import ShippingMethod


def calculate_shipping_cost(
    method: ShippingMethod,
    subtotal: float,
    free_threshold: float = 5000,
    standard_cost: float = 60,
    express_cost: float = 150,
) -> float:
    """Free at or above `free_threshold`, otherwise a flat rate per method."""
    if subtotal >= free_threshold:
        return 0.0
    if method == ShippingMethod.EXPRESS:
        return float(express_cost)
    return float(standard_cost)
