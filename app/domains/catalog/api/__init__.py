"""
Catalog API Layer
"""

from app.domains.catalog.api.routes import categories_router, products_router

__all__ = ["categories_router", "products_router"]
