"""
Catalog cache invalidation, run after the writing unit of work commits.
"""

import logging

from app.core.cache import CacheKeys
from app.core.domain import DomainEventPublisher
from app.domains.catalog.application.ports import ICacheService
from app.domains.catalog.domain.events import CategoryChanged, ProductChanged

logger = logging.getLogger(__name__)


class CatalogCacheInvalidator:
    def __init__(self, cache: ICacheService):
        self.cache = cache

    async def on_category_changed(self, event: CategoryChanged) -> None:
        removed = await self.cache.delete_pattern(f"{CacheKeys.CATEGORIES}:*")
        logger.debug(f"Category {event.action}: dropped {removed} cached entries")

    async def on_product_changed(self, event: ProductChanged) -> None:
        removed = await self.cache.delete_pattern(f"{CacheKeys.PRODUCTS}:*")
        logger.debug(f"Product {event.action}: dropped {removed} cached entries")

    def register(self) -> None:
        DomainEventPublisher.subscribe(CategoryChanged, self.on_category_changed)
        DomainEventPublisher.subscribe(ProductChanged, self.on_product_changed)


__all__ = ["CatalogCacheInvalidator"]
