"""
Catalog Domain

Category tree and products (with variants, stock and pricing virtuals).
"""
