"""
Category Entity for the catalog tree.
"""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import AggregateRoot, ValidationException, iso, sid

# Roots are level 0; three levels in total
MAX_CATEGORY_LEVEL = 2


@dataclass
class Category(AggregateRoot[UUID]):
    """
    Node of the category tree.

    Invariants:
    - level == parent.level + 1 (0 for roots) and level <= MAX_CATEGORY_LEVEL
    - ancestors == parent.ancestors + [parent.id]
    """

    name: str = ""
    slug: str = ""
    description: str | None = None
    icon: str | None = None
    image: str | None = None
    banner: str | None = None

    parent_id: UUID | None = None
    level: int = 0
    ancestors: list[UUID] = field(default_factory=list)

    is_active: bool = True
    is_featured: bool = False
    display_order: int = 0
    show_in_menu: bool = True
    show_in_home: bool = False
    product_count: int = 0

    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: list[str] = field(default_factory=list)

    @classmethod
    def new(cls, **kwargs: Any) -> "Category":
        return cls(id=uuid4(), **kwargs)

    @property
    def status(self) -> str:
        return "active" if self.is_active else "inactive"

    def place_under(self, parent: "Category | None") -> None:
        """
        Re-derive level and ancestors from a parent (None makes a root).

        Raises:
            ValidationException: Resulting depth exceeds the limit
        """
        if parent is None:
            level, ancestors = 0, []
        else:
            level, ancestors = parent.level + 1, [*parent.ancestors, parent.id]
        if level > MAX_CATEGORY_LEVEL:
            raise ValidationException("Maximum category nesting level is 3", field="parentCategory")
        self.parent_id = parent.id if parent else None
        self.level = level
        self.ancestors = ancestors  # type: ignore[assignment]
        self.touch()

    def rebase(self, old_prefix: list[UUID], new_prefix: list[UUID]) -> None:
        """Replace the ancestors prefix of a descendant after its subtree moved."""
        self.ancestors = [*new_prefix, *self.ancestors[len(old_prefix):]]
        self.level = len(self.ancestors)
        self.touch()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "icon": self.icon,
            "image": self.image,
            "banner": self.banner,
            "parentCategory": sid(self.parent_id),
            "level": self.level,
            "ancestors": [str(a) for a in self.ancestors],
            "status": self.status,
            "isActive": self.is_active,
            "isFeatured": self.is_featured,
            "order": self.display_order,
            "showInMenu": self.show_in_menu,
            "showInHome": self.show_in_home,
            "productCount": self.product_count,
            "metaTitle": self.meta_title,
            "metaDescription": self.meta_description,
            "metaKeywords": self.meta_keywords,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
