"""
Analytics Domain Container.
"""

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.analytics.application.services import AnalyticsService
from app.domains.analytics.infrastructure.repositories import SQLAlchemyAnalyticsRepository

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer


class AnalyticsContainer:
    def __init__(self, base: "BaseContainer"):
        self._base = base

    def create_analytics_repository(self, db: AsyncSession) -> SQLAlchemyAnalyticsRepository:
        return SQLAlchemyAnalyticsRepository(session=db)

    def create_analytics_service(self, db: AsyncSession) -> AnalyticsService:
        return AnalyticsService(analytics_repository=self.create_analytics_repository(db))
