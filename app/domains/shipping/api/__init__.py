"""
Shipping API Layer
"""

from app.domains.shipping.api.routes import router as shipping_router

__all__ = ["shipping_router"]
