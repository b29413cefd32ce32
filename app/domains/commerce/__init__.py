"""
Commerce Domain

Shopping cart, coupons and the order lifecycle.
"""
