"""
Category Repository Implementation

SQLAlchemy implementation of ICategoryRepository.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.catalog.application.ports import ICategoryRepository
from app.domains.catalog.domain.entities import Category
from app.models.db import CategoryModel, ProductModel

logger = logging.getLogger(__name__)


class SQLAlchemyCategoryRepository(ICategoryRepository):
    """
    SQLAlchemy implementation of category repository.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, category_id: UUID) -> CategoryModel | None:
        result = await self.session.execute(select(CategoryModel).where(CategoryModel.id == category_id))
        return result.scalar_one_or_none()

    async def get_by_id(self, category_id: UUID) -> Category | None:
        model = await self._get_model(category_id)
        return self._to_entity(model) if model else None

    async def get_by_slug(self, slug: str) -> Category | None:
        result = await self.session.execute(select(CategoryModel).where(CategoryModel.slug == slug))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_many(self, category_ids: list[UUID]) -> list[Category]:
        if not category_ids:
            return []
        result = await self.session.execute(select(CategoryModel).where(CategoryModel.id.in_(category_ids)))
        return [self._to_entity(m) for m in result.scalars().all()]

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(CategoryModel.id).where(CategoryModel.slug == slug)
        if exclude_id:
            stmt = stmt.where(CategoryModel.id != exclude_id)
        return (await self.session.execute(stmt)).first() is not None

    async def list(
        self,
        include_inactive: bool = False,
        parent_id: UUID | None = None,
        roots_only: bool = False,
        featured: bool | None = None,
        show_in_menu: bool | None = None,
        show_in_home: bool | None = None,
        limit: int | None = None,
    ) -> list[Category]:
        stmt = select(CategoryModel)
        if not include_inactive:
            stmt = stmt.where(CategoryModel.is_active.is_(True))
        if parent_id:
            stmt = stmt.where(CategoryModel.parent_id == parent_id)
        if roots_only:
            stmt = stmt.where(CategoryModel.parent_id.is_(None))
        if featured is not None:
            stmt = stmt.where(CategoryModel.is_featured.is_(featured))
        if show_in_menu is not None:
            stmt = stmt.where(CategoryModel.show_in_menu.is_(show_in_menu))
        if show_in_home is not None:
            stmt = stmt.where(CategoryModel.show_in_home.is_(show_in_home))
        stmt = stmt.order_by(CategoryModel.display_order, CategoryModel.name)
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def get_descendants(self, category_id: UUID) -> list[Category]:
        result = await self.session.execute(
            select(CategoryModel)
            .where(CategoryModel.ancestors.any(category_id))
            .order_by(CategoryModel.level)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def has_children(self, category_id: UUID) -> bool:
        result = await self.session.execute(
            select(CategoryModel.id).where(CategoryModel.parent_id == category_id).limit(1)
        )
        return result.first() is not None

    async def create(self, category: Category) -> Category:
        try:
            model = CategoryModel(id=category.id)
            self._apply(model, category)
            self.session.add(model)
            await self.session.flush()
            return self._to_entity(model)
        except Exception as e:
            logger.error(f"Error creating category {category.slug}: {e}")
            raise

    async def save(self, category: Category) -> Category:
        model = await self._get_model(category.id)  # type: ignore[arg-type]
        if model is None:
            return await self.create(category)
        self._apply(model, category)
        await self.session.flush()
        return self._to_entity(model)

    async def delete(self, category_id: UUID) -> None:
        await self.session.execute(delete(CategoryModel).where(CategoryModel.id == category_id))

    async def update_display_order(self, orders: list[tuple[UUID, int]]) -> int:
        updated = 0
        for category_id, display_order in orders:
            result = await self.session.execute(
                update(CategoryModel).where(CategoryModel.id == category_id).values(display_order=display_order)
            )
            updated += result.rowcount or 0
        return updated

    async def refresh_product_count(self, category_id: UUID) -> int:
        count_stmt = select(func.count(ProductModel.id)).where(
            or_(ProductModel.category_id == category_id, ProductModel.sub_category_id == category_id),
            ProductModel.status == "active",
        )
        count = (await self.session.execute(count_stmt)).scalar_one()
        await self.session.execute(
            update(CategoryModel).where(CategoryModel.id == category_id).values(product_count=count)
        )
        return count

    async def count_active(self) -> int:
        stmt = select(func.count(CategoryModel.id)).where(CategoryModel.is_active.is_(True))
        return (await self.session.execute(stmt)).scalar_one()

    # Mapping methods

    def _apply(self, model: CategoryModel, category: Category) -> None:
        model.name = category.name
        model.slug = category.slug
        model.description = category.description
        model.icon = category.icon
        model.image = category.image
        model.banner = category.banner
        model.parent_id = category.parent_id
        model.level = category.level
        model.ancestors = list(category.ancestors)
        model.is_active = category.is_active
        model.is_featured = category.is_featured
        model.display_order = category.display_order
        model.show_in_menu = category.show_in_menu
        model.show_in_home = category.show_in_home
        model.meta_title = category.meta_title
        model.meta_description = category.meta_description
        model.meta_keywords = list(category.meta_keywords)

    def _to_entity(self, model: CategoryModel) -> Category:
        category = Category(
            id=model.id,
            name=model.name,
            slug=model.slug,
            description=model.description,
            icon=model.icon,
            image=model.image,
            banner=model.banner,
            parent_id=model.parent_id,
            level=model.level or 0,
            ancestors=list(model.ancestors or []),
            is_active=bool(model.is_active),
            is_featured=bool(model.is_featured),
            display_order=model.display_order or 0,
            show_in_menu=bool(model.show_in_menu),
            show_in_home=bool(model.show_in_home),
            product_count=model.product_count or 0,
            meta_title=model.meta_title,
            meta_description=model.meta_description,
            meta_keywords=list(model.meta_keywords or []),
        )
        if model.created_at is not None:
            category.created_at = model.created_at
        if model.updated_at is not None:
            category.updated_at = model.updated_at
        return category
