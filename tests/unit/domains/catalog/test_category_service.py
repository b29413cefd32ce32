"""
Unit tests for CategoryService: tree depth, moves and deletes.
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.core.domain import DuplicateEntityException, EntityNotFoundException, ValidationException
from app.domains.catalog.application.services import CategoryService
from app.domains.catalog.domain.entities import Category
from app.domains.catalog.domain.events import CategoryChanged
from app.domains.catalog.domain.services import build_breadcrumbs, build_category_tree


def make_category(name: str, parent: Category | None = None) -> Category:
    category = Category.new(name=name, slug=name.lower())
    category.place_under(parent)
    return category


@pytest.fixture
def tree():
    men = make_category("Men")
    clothing = make_category("Clothing", men)
    panjabi = make_category("Panjabi", clothing)
    return men, clothing, panjabi


@pytest.fixture
def mock_category_repository():
    repo = AsyncMock()
    repo.slug_exists.return_value = False
    repo.has_children.return_value = False
    repo.get_descendants.return_value = []
    repo.create.side_effect = lambda category: category
    repo.save.side_effect = lambda category: category
    return repo


@pytest.fixture
def mock_cache():
    cache = AsyncMock()
    cache.get.return_value = None
    return cache


@pytest.fixture
def category_service(mock_category_repository, mock_cache, outbox):
    return CategoryService(category_repository=mock_category_repository, cache=mock_cache, outbox=outbox)


# ============================================================================
# Create
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_child_derives_level_and_ancestors(category_service, mock_category_repository, tree, outbox):
    men, clothing, _ = tree
    mock_category_repository.get_by_id.return_value = clothing

    category = await category_service.create_category({"name": "Shirts", "slug": "Shirts", "parent_id": clothing.id})

    assert category.slug == "shirts"
    assert category.level == 2
    assert category.ancestors == [men.id, clothing.id]
    assert isinstance(outbox.pending()[0], CategoryChanged)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_below_third_level_is_rejected(category_service, mock_category_repository, tree):
    _, _, panjabi = tree
    mock_category_repository.get_by_id.return_value = panjabi

    with pytest.raises(ValidationException, match="Maximum category nesting level is 3"):
        await category_service.create_category({"name": "Too Deep", "parent_id": panjabi.id})

    mock_category_repository.create.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_duplicate_slug(category_service, mock_category_repository):
    mock_category_repository.slug_exists.return_value = True

    with pytest.raises(DuplicateEntityException, match="Category with this slug already exists"):
        await category_service.create_category({"name": "Men", "slug": "men"})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_with_missing_parent(category_service, mock_category_repository):
    mock_category_repository.get_by_id.return_value = None

    with pytest.raises(EntityNotFoundException, match="Parent category not found"):
        await category_service.create_category({"name": "Orphan", "parent_id": uuid4()})


# ============================================================================
# Move
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_category_cannot_be_its_own_parent(category_service, mock_category_repository, tree):
    men, _, _ = tree
    mock_category_repository.get_by_id.return_value = men

    with pytest.raises(ValidationException, match="Category cannot be its own parent"):
        await category_service.update_category(men.id, {"parent_id": men.id})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_descendant_cannot_become_parent(category_service, mock_category_repository, tree):
    men, _, panjabi = tree
    mock_category_repository.get_by_id.side_effect = lambda cid: {men.id: men, panjabi.id: panjabi}[cid]

    with pytest.raises(ValidationException, match="Cannot set a descendant as parent"):
        await category_service.update_category(men.id, {"parent_id": panjabi.id})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_move_rejected_when_subtree_would_be_too_deep(category_service, mock_category_repository, tree):
    _, clothing, panjabi = tree
    women = make_category("Women")
    tops = make_category("Tops", women)
    mock_category_repository.get_by_id.side_effect = lambda cid: {clothing.id: clothing, tops.id: tops}[cid]
    mock_category_repository.get_descendants.return_value = [panjabi]

    with pytest.raises(ValidationException, match="Maximum category nesting level is 3"):
        await category_service.update_category(clothing.id, {"parent_id": tops.id})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_move_rebases_descendants(category_service, mock_category_repository, tree):
    men, clothing, panjabi = tree
    women = make_category("Women")
    mock_category_repository.get_by_id.side_effect = lambda cid: {clothing.id: clothing, women.id: women}[cid]
    mock_category_repository.get_descendants.return_value = [panjabi]

    moved = await category_service.update_category(clothing.id, {"parent_id": women.id})

    assert moved.parent_id == women.id
    assert moved.ancestors == [women.id]
    assert panjabi.ancestors == [women.id, clothing.id]
    assert panjabi.level == 2
    assert men.id not in panjabi.ancestors
    mock_category_repository.save.assert_any_await(panjabi)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_move_to_root(category_service, mock_category_repository, tree):
    _, clothing, panjabi = tree
    mock_category_repository.get_by_id.return_value = clothing
    mock_category_repository.get_descendants.return_value = [panjabi]

    moved = await category_service.update_category(clothing.id, {"parent_id": None})

    assert moved.level == 0
    assert moved.ancestors == []
    assert panjabi.ancestors == [clothing.id]
    assert panjabi.level == 1


# ============================================================================
# Delete and reads
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_delete_with_children_is_rejected(category_service, mock_category_repository, tree):
    men, _, _ = tree
    mock_category_repository.get_by_id.return_value = men
    mock_category_repository.has_children.return_value = True

    with pytest.raises(ValidationException, match="Delete children first"):
        await category_service.delete_category(men.id)

    mock_category_repository.delete.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_tree_is_served_from_cache(category_service, mock_category_repository, mock_cache):
    mock_cache.get.return_value = [{"name": "Men", "children": []}]

    tree = await category_service.get_tree()

    assert tree[0]["name"] == "Men"
    mock_category_repository.list.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_tree_is_cached_after_build(category_service, mock_category_repository, mock_cache, tree):
    mock_category_repository.list.return_value = list(tree)

    await category_service.get_tree()

    mock_cache.set.assert_awaited_once()


@pytest.mark.unit
def test_build_category_tree_nests_children(tree):
    men, clothing, panjabi = tree
    orphan_parent_missing = make_category("Loose", make_category("Hidden"))

    roots = build_category_tree([men, clothing, panjabi, orphan_parent_missing])

    assert [r["name"] for r in roots] == ["Men", "Loose"]
    assert roots[0]["children"][0]["name"] == "Clothing"
    assert roots[0]["children"][0]["children"][0]["name"] == "Panjabi"


@pytest.mark.unit
def test_breadcrumbs_run_root_to_leaf(tree):
    men, clothing, panjabi = tree

    crumbs = build_breadcrumbs(panjabi, [clothing, men])

    assert [c["slug"] for c in crumbs] == ["men", "clothing", "panjabi"]
