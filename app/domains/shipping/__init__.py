"""
Shipping Domain

Zones and rates for cost quotes, and shipments tracking delivery of orders.
"""
