"""
Analytics Domain

Read-side reporting over orders, users, products and reviews.
"""
