"""
Shipping Infrastructure Layer
"""
