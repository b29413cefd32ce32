from .analytics_repository import SQLAlchemyAnalyticsRepository

__all__ = ["SQLAlchemyAnalyticsRepository"]
