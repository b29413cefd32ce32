"""
Shipping Application Layer
"""
