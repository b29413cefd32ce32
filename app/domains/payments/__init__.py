"""
Payments Domain

Payment attempts against orders through SSLCommerz, bKash or cash on delivery.
"""
