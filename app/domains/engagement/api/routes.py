"""
Engagement API Routes

Reviews, wishlist and notification feeds.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_current_user, get_pagination, require_admin
from app.api.responses import paginated_response, success_response
from app.core.domain import Pagination
from app.domains.engagement.api.dependencies import (
    get_notification_service,
    get_review_service,
    get_wishlist_service,
)
from app.domains.engagement.api.schemas import (
    ReviewCreate,
    ReviewReplyBody,
    ReviewStatusBody,
    ReviewUpdate,
    WishlistAddBody,
    WishlistPreferencesBody,
)
from app.domains.engagement.application.services import NotificationService, ReviewService, WishlistService
from app.domains.engagement.domain.value_objects import ReviewSort
from app.domains.identity.domain.entities import User

logger = logging.getLogger(__name__)

reviews_router = APIRouter(prefix="/reviews", tags=["Reviews"])
wishlist_router = APIRouter(prefix="/wishlist", tags=["Wishlist"])
notifications_router = APIRouter(prefix="/notifications", tags=["Notifications"])


# ============================================================================
# Reviews
# ============================================================================


@reviews_router.get("/product/{product_id}")
async def product_reviews(
    product_id: UUID,
    sort: ReviewSort = Query(ReviewSort.NEWEST),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: ReviewService = Depends(get_review_service),  # noqa: B008
):
    page, summary = await service.get_product_reviews(product_id, pagination, sort.value)
    return success_response(
        {
            "reviews": [r.to_dict() for r in page.items],
            "avgRating": summary.avg_rating,
            "ratingDistribution": summary.to_dict()["ratingDistribution"],
        },
        "Reviews fetched successfully",
        meta=page.meta(),
    )


@reviews_router.post("", status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewCreate,
    user: User = Depends(get_current_user),  # noqa: B008
    service: ReviewService = Depends(get_review_service),  # noqa: B008
):
    review = await service.create_review(
        user.id,
        body.product_id,
        body.rating,
        body.comment,
        title=body.title,
        images=body.images,
        user_name=user.full_name,
    )
    return success_response(review.to_dict(), "Review submitted successfully")


@reviews_router.get("/my")
async def my_reviews(
    user: User = Depends(get_current_user),  # noqa: B008
    service: ReviewService = Depends(get_review_service),  # noqa: B008
):
    reviews = await service.list_user_reviews(user.id)
    return success_response([r.to_dict() for r in reviews], "Your reviews fetched successfully")


@reviews_router.get("/admin/all", dependencies=[Depends(require_admin)])
async def all_reviews(
    status_filter: str | None = Query(None, alias="status"),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: ReviewService = Depends(get_review_service),  # noqa: B008
):
    result = await service.list_reviews(pagination, status_filter)
    return paginated_response(result, "Reviews fetched successfully")


@reviews_router.get("/admin/stats", dependencies=[Depends(require_admin)])
async def review_stats(service: ReviewService = Depends(get_review_service)):  # noqa: B008
    return success_response(await service.get_stats(), "Review statistics fetched")


@reviews_router.patch("/admin/{review_id}/status", dependencies=[Depends(require_admin)])
async def update_review_status(
    review_id: UUID,
    body: ReviewStatusBody,
    service: ReviewService = Depends(get_review_service),  # noqa: B008
):
    review = await service.update_status(review_id, body.status)
    return success_response(review.to_dict(), "Review status updated")


@reviews_router.post("/admin/{review_id}/reply", dependencies=[Depends(require_admin)])
async def reply_to_review(
    review_id: UUID,
    body: ReviewReplyBody,
    service: ReviewService = Depends(get_review_service),  # noqa: B008
):
    review = await service.reply(review_id, body.reply)
    return success_response(review.to_dict(), "Reply added successfully")


@reviews_router.patch("/{review_id}")
async def update_review(
    review_id: UUID,
    body: ReviewUpdate,
    user: User = Depends(get_current_user),  # noqa: B008
    service: ReviewService = Depends(get_review_service),  # noqa: B008
):
    review = await service.update_review(review_id, user.id, body.model_dump(exclude_unset=True))
    return success_response(review.to_dict(), "Review updated successfully")


@reviews_router.delete("/{review_id}")
async def delete_review(
    review_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: ReviewService = Depends(get_review_service),  # noqa: B008
):
    await service.delete_review(review_id, user.id, is_admin=user.is_staff)
    return success_response(None, "Review deleted successfully")


@reviews_router.post("/{review_id}/helpful")
async def mark_helpful(
    review_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: ReviewService = Depends(get_review_service),  # noqa: B008
):
    review = await service.toggle_helpful(review_id, user.id)
    return success_response(review.to_dict(), "Review marked as helpful")


# ============================================================================
# Wishlist
# ============================================================================


@wishlist_router.get("")
async def get_wishlist(
    user: User = Depends(get_current_user),  # noqa: B008
    service: WishlistService = Depends(get_wishlist_service),  # noqa: B008
):
    wishlist = await service.get_wishlist(user.id)
    return success_response(await service.render(wishlist), "Wishlist fetched successfully")


@wishlist_router.get("/count")
async def wishlist_count(
    user: User = Depends(get_current_user),  # noqa: B008
    service: WishlistService = Depends(get_wishlist_service),  # noqa: B008
):
    count = await service.get_count(user.id)
    return success_response({"count": count}, "Wishlist count fetched")


@wishlist_router.get("/check/{product_id}")
async def check_wishlist(
    product_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: WishlistService = Depends(get_wishlist_service),  # noqa: B008
):
    found = await service.contains(user.id, product_id)
    return success_response({"isInWishlist": found}, "Check completed")


@wishlist_router.post("")
async def add_to_wishlist(
    body: WishlistAddBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: WishlistService = Depends(get_wishlist_service),  # noqa: B008
):
    wishlist = await service.add(user.id, body.product_id, body.notify_on_sale, body.notify_on_stock)
    return success_response(await service.render(wishlist), "Added to wishlist")


@wishlist_router.post("/toggle/{product_id}")
async def toggle_wishlist(
    product_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: WishlistService = Depends(get_wishlist_service),  # noqa: B008
):
    added, wishlist = await service.toggle(user.id, product_id)
    return success_response(
        {"added": added, "wishlist": await service.render(wishlist)},
        "Added to wishlist" if added else "Removed from wishlist",
    )


@wishlist_router.post("/move-to-cart")
async def move_to_cart(
    user: User = Depends(get_current_user),  # noqa: B008
    service: WishlistService = Depends(get_wishlist_service),  # noqa: B008
):
    result = await service.move_all_to_cart(user.id)
    return success_response(result.to_dict(), f"{result.added} items added to cart")


@wishlist_router.patch("/{product_id}/preferences")
async def update_preferences(
    product_id: UUID,
    body: WishlistPreferencesBody,
    user: User = Depends(get_current_user),  # noqa: B008
    service: WishlistService = Depends(get_wishlist_service),  # noqa: B008
):
    wishlist = await service.update_preferences(
        user.id, product_id, body.notify_on_sale, body.notify_on_stock
    )
    return success_response(await service.render(wishlist), "Preferences updated")


@wishlist_router.delete("/{product_id}")
async def remove_from_wishlist(
    product_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: WishlistService = Depends(get_wishlist_service),  # noqa: B008
):
    wishlist = await service.remove(user.id, product_id)
    return success_response(await service.render(wishlist), "Removed from wishlist")


@wishlist_router.delete("")
async def clear_wishlist(
    user: User = Depends(get_current_user),  # noqa: B008
    service: WishlistService = Depends(get_wishlist_service),  # noqa: B008
):
    await service.clear(user.id)
    return success_response(None, "Wishlist cleared")


# ============================================================================
# Notifications
# ============================================================================


@notifications_router.get("/my")
async def my_notifications(
    user: User = Depends(get_current_user),  # noqa: B008
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: NotificationService = Depends(get_notification_service),  # noqa: B008
):
    result = await service.list_user(user.id, pagination)
    return paginated_response(result, "Notifications retrieved successfully")


@notifications_router.get("/my/unread-count")
async def my_unread_count(
    user: User = Depends(get_current_user),  # noqa: B008
    service: NotificationService = Depends(get_notification_service),  # noqa: B008
):
    count = await service.unread_count(user.id)
    return success_response({"count": count}, "Unread count retrieved")


@notifications_router.patch("/my/mark-all-read")
async def my_mark_all_read(
    user: User = Depends(get_current_user),  # noqa: B008
    service: NotificationService = Depends(get_notification_service),  # noqa: B008
):
    await service.mark_all_read(user.id)
    return success_response(None, "All notifications marked as read")


@notifications_router.get("/admin", dependencies=[Depends(require_admin)])
async def admin_notifications(
    pagination: Pagination = Depends(get_pagination),  # noqa: B008
    service: NotificationService = Depends(get_notification_service),  # noqa: B008
):
    result = await service.list_admin(pagination)
    return paginated_response(result, "Notifications retrieved successfully")


@notifications_router.get("/admin/unread-count", dependencies=[Depends(require_admin)])
async def admin_unread_count(service: NotificationService = Depends(get_notification_service)):  # noqa: B008
    return success_response({"count": await service.unread_count()}, "Unread count retrieved")


@notifications_router.patch("/admin/mark-all-read", dependencies=[Depends(require_admin)])
async def admin_mark_all_read(service: NotificationService = Depends(get_notification_service)):  # noqa: B008
    await service.mark_all_read()
    return success_response(None, "All notifications marked as read")


@notifications_router.patch("/{notification_id}/read")
async def mark_read(
    notification_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: NotificationService = Depends(get_notification_service),  # noqa: B008
):
    notification = await service.mark_read(notification_id, user.id, is_admin=user.is_staff)
    return success_response(notification.to_dict(), "Notification marked as read")


@notifications_router.delete("/{notification_id}")
async def delete_notification(
    notification_id: UUID,
    user: User = Depends(get_current_user),  # noqa: B008
    service: NotificationService = Depends(get_notification_service),  # noqa: B008
):
    await service.delete(notification_id, user.id, is_admin=user.is_staff)
    return success_response(None, "Notification deleted")
