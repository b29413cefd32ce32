from .category_tree import (
    build_breadcrumbs,
    build_category_tree,
    fits_under,
    subtree_depth,
    would_create_cycle,
)

__all__ = [
    "build_breadcrumbs",
    "build_category_tree",
    "fits_under",
    "subtree_depth",
    "would_create_cycle",
]
