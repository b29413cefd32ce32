"""
Unit tests for reviews and wishlists.
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.core.domain import (
    AuthorizationException,
    BusinessRuleViolationException,
    EntityNotFoundException,
    InsufficientStockException,
)
from app.domains.catalog.domain.value_objects import ProductStatus
from app.domains.engagement.application.dto import RatingSummary
from app.domains.engagement.application.services import ReviewService, WishlistService
from app.domains.engagement.domain.entities import Review, Wishlist
from app.domains.engagement.domain.events import ReviewSubmitted
from app.domains.engagement.domain.value_objects import ReviewStatus

# ============================================================================
# Reviews
# ============================================================================


@pytest.fixture
def mock_review_repository():
    repo = AsyncMock()
    repo.get_by_user_and_product.return_value = None
    repo.rating_summary.return_value = RatingSummary(avg_rating=4.5, review_count=2)
    repo.create.side_effect = lambda review: review
    repo.save.side_effect = lambda review: review
    return repo


@pytest.fixture
def mock_product_repository(make_product):
    repo = AsyncMock()
    repo.get_by_id.return_value = make_product()
    return repo


@pytest.fixture
def mock_order_repository():
    repo = AsyncMock()
    repo.has_delivered_product.return_value = True
    return repo


@pytest.fixture
def review_service(mock_review_repository, mock_product_repository, mock_order_repository, outbox):
    return ReviewService(
        review_repository=mock_review_repository,
        product_repository=mock_product_repository,
        order_repository=mock_order_repository,
        outbox=outbox,
    )


def make_review(user_id=None, rating: int = 4) -> Review:
    review = Review.submit(user_id=user_id or uuid4(), product_id=uuid4(), rating=rating, comment="Good fabric")
    review.clear_domain_events()
    return review


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_review_is_published_and_verified(
    review_service, mock_product_repository, outbox
):
    user_id, product_id = uuid4(), uuid4()

    review = await review_service.create_review(user_id, product_id, 5, "Great fit", user_name="Rahim Uddin")

    assert review.status == ReviewStatus.APPROVED
    assert review.is_verified_purchase
    event = outbox.pending()[0]
    assert isinstance(event, ReviewSubmitted)
    assert event.product_name == "Cotton Panjabi"
    mock_product_repository.update_rating.assert_awaited_once_with(product_id, 4.5, 2)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_one_review_per_product(review_service, mock_review_repository):
    mock_review_repository.get_by_user_and_product.return_value = make_review()

    with pytest.raises(BusinessRuleViolationException, match="You have already reviewed this product"):
        await review_service.create_review(uuid4(), uuid4(), 4, "Again")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_review_for_unknown_product(review_service, mock_product_repository):
    mock_product_repository.get_by_id.return_value = None

    with pytest.raises(EntityNotFoundException, match="Product not found"):
        await review_service.create_review(uuid4(), uuid4(), 4, "Nice")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_rating_edit_resyncs_product(review_service, mock_review_repository, mock_product_repository):
    user_id = uuid4()
    review = make_review(user_id, rating=4)
    mock_review_repository.get_by_id.return_value = review

    await review_service.update_review(review.id, user_id, {"rating": 2})

    mock_product_repository.update_rating.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_comment_edit_does_not_resync(review_service, mock_review_repository, mock_product_repository):
    user_id = uuid4()
    review = make_review(user_id)
    mock_review_repository.get_by_id.return_value = review

    await review_service.update_review(review.id, user_id, {"comment": "Updated"})

    mock_product_repository.update_rating.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_stranger_cannot_delete_review(review_service, mock_review_repository):
    mock_review_repository.get_by_id.return_value = make_review()

    with pytest.raises(AuthorizationException):
        await review_service.delete_review(uuid4(), uuid4())

    mock_review_repository.delete.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_admin_can_delete_any_review(review_service, mock_review_repository):
    review = make_review()
    mock_review_repository.get_by_id.return_value = review

    await review_service.delete_review(review.id, uuid4(), is_admin=True)

    mock_review_repository.delete.assert_awaited_once_with(review.id)


@pytest.mark.unit
def test_helpful_vote_toggles():
    review = make_review()
    voter = uuid4()

    assert review.toggle_helpful(voter) is True
    assert review.toggle_helpful(voter) is False
    assert review.helpful_count == 0


@pytest.mark.unit
def test_rejected_review_stops_counting():
    review = make_review()

    review.moderate(ReviewStatus.REJECTED)

    assert not review.counts_toward_rating


# ============================================================================
# Wishlist
# ============================================================================


@pytest.fixture
def mock_wishlist_repository():
    repo = AsyncMock()
    repo.get_by_user.return_value = None
    repo.save.side_effect = lambda wishlist: wishlist
    return repo


@pytest.fixture
def cart_service():
    return AsyncMock()


@pytest.fixture
def wishlist_service(mock_wishlist_repository, mock_product_repository, cart_service):
    return WishlistService(
        wishlist_repository=mock_wishlist_repository,
        product_repository=mock_product_repository,
        user_repository=AsyncMock(),
        cart_service=cart_service,
    )


@pytest.mark.unit
def test_wishlist_rejects_duplicates():
    wishlist = Wishlist.for_user(uuid4())
    product_id = uuid4()
    wishlist.add(product_id)

    with pytest.raises(BusinessRuleViolationException, match="Product already in wishlist"):
        wishlist.add(product_id)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_add_keeps_counters_in_step(wishlist_service, mock_product_repository):
    user_id, product_id = uuid4(), uuid4()

    wishlist = await wishlist_service.add(user_id, product_id)

    assert wishlist.contains(product_id)
    mock_product_repository.adjust_wishlist_count.assert_awaited_once_with(product_id, 1)
    wishlist_service.user_repository.set_wishlist_total.assert_awaited_with(user_id, 1)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_toggle_removes_present_product(wishlist_service, mock_wishlist_repository, mock_product_repository):
    user_id, product_id = uuid4(), uuid4()
    wishlist = Wishlist.for_user(user_id)
    wishlist.add(product_id)
    mock_wishlist_repository.get_by_user.return_value = wishlist

    added, result = await wishlist_service.toggle(user_id, product_id)

    assert added is False
    assert len(result) == 0
    mock_product_repository.adjust_wishlist_count.assert_awaited_once_with(product_id, -1)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_remove_absent_product_is_noop(wishlist_service, mock_product_repository):
    await wishlist_service.remove(uuid4(), uuid4())

    mock_product_repository.adjust_wishlist_count.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_move_all_to_cart_reports_failures(
    wishlist_service, mock_wishlist_repository, mock_product_repository, cart_service, make_product
):
    user_id = uuid4()
    in_stock = make_product(name="Panjabi")
    sold_out = make_product(name="Saree", quantity=0)
    draft = make_product(name="Lungi", status=ProductStatus.DRAFT)
    racing = make_product(name="Tupi")
    wishlist = Wishlist.for_user(user_id)
    for product in (in_stock, sold_out, draft, racing):
        wishlist.add(product.id)
    wishlist.add(uuid4())
    mock_wishlist_repository.get_by_user.return_value = wishlist
    mock_product_repository.get_many.return_value = [in_stock, sold_out, draft, racing]

    async def add_item(user, product_id, quantity):
        if product_id == racing.id:
            raise InsufficientStockException(str(product_id), 1, 0)

    cart_service.add_item.side_effect = add_item

    result = await wishlist_service.move_all_to_cart(user_id)

    assert result.to_dict() == {"added": 1, "failed": ["Saree", "Lungi", "Tupi"]}
    assert len(wishlist) == 5
