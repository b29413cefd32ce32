"""
Catalog Infrastructure Layer
"""
