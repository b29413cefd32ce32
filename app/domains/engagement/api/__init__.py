"""
Engagement API Layer
"""

from app.domains.engagement.api.routes import notifications_router, reviews_router, wishlist_router

__all__ = ["reviews_router", "wishlist_router", "notifications_router"]
