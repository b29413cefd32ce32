"""
Shipping Domain Layer
"""
