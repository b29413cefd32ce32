"""
Review Service

Product `rating`/`reviewCount` are denormalised from the approved reviews.
Every mutation that can change that aggregate ends in
`sync_product_rating`, inside the same unit of work.
"""

import logging
from typing import Any
from uuid import UUID

from app.core.domain import (
    AuthorizationException,
    BusinessRuleViolationException,
    EntityNotFoundException,
    EventOutbox,
    PaginatedResult,
    Pagination,
)
from app.domains.catalog.application.ports import IProductRepository
from app.domains.commerce.application.ports import IOrderRepository
from app.domains.engagement.application.dto import RatingSummary
from app.domains.engagement.application.ports import IReviewRepository
from app.domains.engagement.domain.entities import Review
from app.domains.engagement.domain.value_objects import ReviewSort, ReviewStatus

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(
        self,
        review_repository: IReviewRepository,
        product_repository: IProductRepository,
        order_repository: IOrderRepository,
        outbox: EventOutbox,
    ):
        self.review_repository = review_repository
        self.product_repository = product_repository
        self.order_repository = order_repository
        self.outbox = outbox

    async def get_review(self, review_id: UUID) -> Review:
        review = await self.review_repository.get_by_id(review_id)
        if not review:
            raise EntityNotFoundException("Review", review_id, "Review not found")
        return review

    async def sync_product_rating(self, product_id: UUID) -> RatingSummary:
        summary = await self.review_repository.rating_summary(product_id)
        await self.product_repository.update_rating(product_id, summary.avg_rating, summary.review_count)
        return summary

    async def create_review(
        self,
        user_id: UUID,
        product_id: UUID,
        rating: int,
        comment: str,
        title: str | None = None,
        images: list[str] | None = None,
        user_name: str = "",
    ) -> Review:
        """
        Submit a review; a delivered order containing the product marks it
        as a verified purchase.

        Raises:
            EntityNotFoundException: Unknown product
            BusinessRuleViolationException: User already reviewed the product
        """
        product = await self.product_repository.get_by_id(product_id)
        if not product:
            raise EntityNotFoundException("Product", product_id, "Product not found")
        if await self.review_repository.get_by_user_and_product(user_id, product_id):
            raise BusinessRuleViolationException("review_duplicate", "You have already reviewed this product")

        review = Review.submit(
            user_id=user_id,
            product_id=product_id,
            rating=rating,
            comment=comment,
            title=title,
            images=images,
            verified_purchase=await self.order_repository.has_delivered_product(user_id, product_id),
            product_name=product.name,
            user_name=user_name,
        )
        self.outbox.collect_from(review)
        review = await self.review_repository.create(review)
        await self.sync_product_rating(product_id)
        logger.info(f"Review {review.id} submitted for product {product_id} ({rating}/5)")
        return review

    async def get_product_reviews(
        self, product_id: UUID, pagination: Pagination, sort: str = ReviewSort.NEWEST.value
    ) -> tuple[PaginatedResult[Review], RatingSummary]:
        page = await self.review_repository.list_for_product(product_id, pagination, ReviewSort(sort).value)
        summary = await self.review_repository.rating_summary(product_id)
        return page, summary

    async def list_user_reviews(self, user_id: UUID) -> list[Review]:
        return await self.review_repository.list_for_user(user_id)

    async def update_review(self, review_id: UUID, user_id: UUID, changes: dict[str, Any]) -> Review:
        review = await self.review_repository.get_by_id(review_id)
        if not review or review.user_id != user_id:
            raise EntityNotFoundException("Review", review_id, "Review not found")
        rating_changed = review.edit(changes)
        review = await self.review_repository.save(review)
        if rating_changed:
            await self.sync_product_rating(review.product_id)  # type: ignore[arg-type]
        return review

    async def delete_review(self, review_id: UUID, user_id: UUID, is_admin: bool = False) -> None:
        """
        Raises:
            EntityNotFoundException: Unknown review
            AuthorizationException: Caller is neither the author nor staff
        """
        review = await self.get_review(review_id)
        if not is_admin and review.user_id != user_id:
            raise AuthorizationException(operation="delete_review", user_id=str(user_id))
        await self.review_repository.delete(review_id)
        await self.sync_product_rating(review.product_id)  # type: ignore[arg-type]
        logger.info(f"Review {review_id} deleted by {user_id}")

    async def toggle_helpful(self, review_id: UUID, user_id: UUID) -> Review:
        review = await self.get_review(review_id)
        review.toggle_helpful(user_id)
        return await self.review_repository.save(review)

    async def list_reviews(self, pagination: Pagination, status: str | None = None) -> PaginatedResult[Review]:
        return await self.review_repository.list(pagination, ReviewStatus(status).value if status else None)

    async def update_status(self, review_id: UUID, status: str) -> Review:
        review = await self.get_review(review_id)
        review.moderate(ReviewStatus(status))
        review = await self.review_repository.save(review)
        await self.sync_product_rating(review.product_id)  # type: ignore[arg-type]
        logger.info(f"Review {review_id} -> {review.status.value}")
        return review

    async def reply(self, review_id: UUID, message: str) -> Review:
        review = await self.get_review(review_id)
        review.reply(message)
        return await self.review_repository.save(review)

    async def get_stats(self) -> dict[str, Any]:
        return await self.review_repository.get_stats()


__all__ = ["ReviewService"]
