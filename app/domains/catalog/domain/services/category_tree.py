"""
Category tree rules that need no storage.

Cycle prevention happens at write time through `would_create_cycle`; tree
assembly at read time trusts that invariant.
"""

from typing import Any
from uuid import UUID

from ..entities import MAX_CATEGORY_LEVEL, Category


def would_create_cycle(category_id: UUID, new_parent: Category) -> bool:
    """
    True when making `new_parent` the parent of `category_id` would close a loop.

    That is the case when the parent is the category itself or one of its
    descendants (the category appears in the parent's ancestors).
    """
    return new_parent.id == category_id or category_id in new_parent.ancestors


def subtree_depth(category: Category, descendants: list[Category]) -> int:
    """Levels below `category` in its current subtree (0 for a leaf)."""
    if not descendants:
        return 0
    return max(d.level for d in descendants) - category.level


def fits_under(parent: Category | None, depth_below: int) -> bool:
    """Whether a subtree of the given depth can hang under `parent`."""
    new_level = 0 if parent is None else parent.level + 1
    return new_level + depth_below <= MAX_CATEGORY_LEVEL


def build_category_tree(categories: list[Category]) -> list[dict[str, Any]]:
    """
    Assemble nested nodes from a flat list.

    Two passes: create one node per category, then link each node to its
    parent's `children`. Nodes whose parent is absent from the list are roots.
    Input order is preserved among siblings.
    """
    nodes: dict[UUID, dict[str, Any]] = {}
    for category in categories:
        node = category.to_dict()
        node["children"] = []
        nodes[category.id] = node  # type: ignore[index]

    roots: list[dict[str, Any]] = []
    for category in categories:
        node = nodes[category.id]  # type: ignore[index]
        parent = nodes.get(category.parent_id) if category.parent_id else None
        if parent is not None:
            parent["children"].append(node)
        else:
            roots.append(node)
    return roots


def build_breadcrumbs(category: Category, ancestors: list[Category]) -> list[dict[str, Any]]:
    """Ancestors in root-to-leaf order followed by the category itself."""
    by_id = {a.id: a for a in ancestors}
    trail = [by_id[a] for a in category.ancestors if a in by_id]
    return [{"id": str(c.id), "name": c.name, "slug": c.slug, "level": c.level} for c in [*trail, category]]
