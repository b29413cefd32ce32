"""
Analytics API Dependencies
"""

from datetime import datetime

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_di_container
from app.core.container import DependencyContainer
from app.database.async_db import get_async_db
from app.domains.analytics.application.services import AnalyticsService


def get_analytics_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> AnalyticsService:
    return container.analytics.create_analytics_service(db)


def get_date_window(
    start_date: datetime | None = Query(None, alias="startDate"),  # noqa: B008
    end_date: datetime | None = Query(None, alias="endDate"),  # noqa: B008
) -> tuple[datetime | None, datetime | None]:
    return start_date, end_date


__all__ = ["get_analytics_service", "get_date_window"]
