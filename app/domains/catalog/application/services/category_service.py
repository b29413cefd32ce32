"""
Category Service

Category CRUD and the tree-shaped read models (tree, menu, breadcrumbs).
Tree reads are cached; every write records a CategoryChanged event that
invalidates the cache after commit.
"""

import logging
from typing import Any
from uuid import UUID

from app.core.cache import CacheKeys
from app.core.domain import (
    DuplicateEntityException,
    EntityNotFoundException,
    EventOutbox,
    Slug,
    ValidationException,
)
from app.domains.catalog.application.ports import ICacheService, ICategoryRepository
from app.domains.catalog.domain.entities import Category
from app.domains.catalog.domain.events import CategoryChanged
from app.domains.catalog.domain.services import (
    build_breadcrumbs,
    build_category_tree,
    fits_under,
    subtree_depth,
    would_create_cycle,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "description",
    "icon",
    "image",
    "banner",
    "is_active",
    "is_featured",
    "display_order",
    "show_in_menu",
    "show_in_home",
    "meta_title",
    "meta_description",
    "meta_keywords",
)

TREE_TTL = 600


class CategoryService:
    def __init__(self, category_repository: ICategoryRepository, cache: ICacheService, outbox: EventOutbox):
        self.category_repository = category_repository
        self.cache = cache
        self.outbox = outbox

    # Reads

    async def get_category(self, category_id: UUID) -> Category:
        category = await self.category_repository.get_by_id(category_id)
        if not category:
            raise EntityNotFoundException("Category", category_id, "Category not found")
        return category

    async def get_by_slug(self, slug: str) -> Category:
        category = await self.category_repository.get_by_slug(slug)
        if not category:
            raise EntityNotFoundException("Category", slug, "Category not found")
        return category

    async def list_categories(self, include_inactive: bool = False) -> list[dict[str, Any]]:
        key = CacheKeys.build(CacheKeys.CATEGORIES, "all", int(include_inactive))
        cached = await self.cache.get(key)
        if cached is not None:
            return cached
        categories = [c.to_dict() for c in await self.category_repository.list(include_inactive=include_inactive)]
        await self.cache.set(key, categories, ttl=TREE_TTL)
        return categories

    async def get_tree(self) -> list[dict[str, Any]]:
        key = CacheKeys.build(CacheKeys.CATEGORIES, "tree")
        cached = await self.cache.get(key)
        if cached is not None:
            return cached
        tree = build_category_tree(await self.category_repository.list())
        await self.cache.set(key, tree, ttl=TREE_TTL)
        return tree

    async def get_menu(self) -> list[dict[str, Any]]:
        key = CacheKeys.build(CacheKeys.CATEGORIES, "menu")
        cached = await self.cache.get(key)
        if cached is not None:
            return cached
        menu = build_category_tree(await self.category_repository.list(show_in_menu=True))
        await self.cache.set(key, menu, ttl=TREE_TTL)
        return menu

    async def get_roots(self) -> list[Category]:
        return await self.category_repository.list(roots_only=True)

    async def get_children(self, parent_id: UUID) -> list[Category]:
        return await self.category_repository.list(parent_id=parent_id)

    async def get_featured(self, limit: int = 6) -> list[Category]:
        return await self.category_repository.list(featured=True, limit=limit)

    async def get_home(self) -> list[Category]:
        return await self.category_repository.list(show_in_home=True)

    async def get_with_children(self, category_id: UUID) -> dict[str, Any]:
        category = await self.get_category(category_id)
        children = await self.category_repository.list(parent_id=category_id)
        return {**category.to_dict(), "children": [c.to_dict() for c in children]}

    async def get_breadcrumbs(self, category_id: UUID) -> list[dict[str, Any]]:
        category = await self.get_category(category_id)
        ancestors = await self.category_repository.get_many(list(category.ancestors))
        return build_breadcrumbs(category, ancestors)

    # Writes

    async def _resolve_parent(self, parent_id: UUID | None) -> Category | None:
        if parent_id is None:
            return None
        parent = await self.category_repository.get_by_id(parent_id)
        if not parent:
            raise EntityNotFoundException("Category", parent_id, "Parent category not found")
        return parent

    async def _ensure_unique_slug(self, slug: str, exclude_id: UUID | None = None) -> None:
        if await self.category_repository.slug_exists(slug, exclude_id=exclude_id):
            raise DuplicateEntityException("Category", "slug", slug, "Category with this slug already exists")

    def _changed(self, category: Category, action: str) -> None:
        self.outbox.record(CategoryChanged(category_id=category.id, action=action))

    async def create_category(self, data: dict[str, Any]) -> Category:
        slug = Slug.normalize(data["slug"]) if data.get("slug") else Slug.from_name(data["name"]).value
        await self._ensure_unique_slug(slug)

        parent = await self._resolve_parent(data.get("parent_id"))
        category = Category.new(
            slug=slug,
            **{key: data[key] for key in EDITABLE_FIELDS if data.get(key) is not None},
        )
        category.place_under(parent)

        category = await self.category_repository.create(category)
        self._changed(category, "created")
        logger.info(f"Category created: {category.slug} (level {category.level})")
        return category

    async def update_category(self, category_id: UUID, changes: dict[str, Any]) -> Category:
        category = await self.get_category(category_id)

        if changes.get("slug"):
            slug = Slug.normalize(changes["slug"])
            if slug != category.slug:
                await self._ensure_unique_slug(slug, exclude_id=category.id)
                category.slug = slug

        if "parent_id" in changes and changes["parent_id"] != category.parent_id:
            await self._move(category, changes["parent_id"])

        for key in EDITABLE_FIELDS:
            if key in changes and changes[key] is not None:
                setattr(category, key, changes[key])
        category.touch()

        category = await self.category_repository.save(category)
        self._changed(category, "updated")
        return category

    async def _move(self, category: Category, parent_id: UUID | None) -> None:
        """Re-parent a category and re-derive the ancestors of its whole subtree."""
        if parent_id == category.id:
            raise ValidationException("Category cannot be its own parent", field="parentCategory")

        parent = await self._resolve_parent(parent_id)
        if parent is not None and would_create_cycle(category.id, parent):  # type: ignore[arg-type]
            raise ValidationException("Cannot set a descendant as parent", field="parentCategory")

        descendants = await self.category_repository.get_descendants(category.id)  # type: ignore[arg-type]
        if not fits_under(parent, subtree_depth(category, descendants)):
            raise ValidationException("Maximum category nesting level is 3", field="parentCategory")

        old_prefix = [*category.ancestors, category.id]
        category.place_under(parent)
        new_prefix = [*category.ancestors, category.id]
        for descendant in descendants:
            descendant.rebase(old_prefix, new_prefix)  # type: ignore[arg-type]
            await self.category_repository.save(descendant)

        logger.info(f"Category {category.id} moved under {parent_id}; {len(descendants)} descendants re-based")

    async def delete_category(self, category_id: UUID) -> None:
        category = await self.get_category(category_id)
        if await self.category_repository.has_children(category_id):
            raise ValidationException("Cannot delete category with children. Delete children first.")
        await self.category_repository.delete(category_id)
        self._changed(category, "deleted")
        logger.info(f"Category deleted: {category.slug}")

    async def reorder(self, orders: list[tuple[UUID, int]]) -> int:
        updated = await self.category_repository.update_display_order(orders)
        self.outbox.record(CategoryChanged(action="reordered"))
        return updated

    async def refresh_product_count(self, category_id: UUID) -> int:
        await self.get_category(category_id)
        return await self.category_repository.refresh_product_count(category_id)


__all__ = ["CategoryService"]
