"""
Analytics API Layer
"""

from app.domains.analytics.api.routes import router as analytics_router

__all__ = ["analytics_router"]
