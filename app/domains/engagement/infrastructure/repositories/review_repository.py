"""
Review Repository Implementation
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import PaginatedResult, Pagination
from app.domains.engagement.application.dto import RatingSummary
from app.domains.engagement.application.ports import IReviewRepository
from app.domains.engagement.domain.entities import Review
from app.domains.engagement.domain.value_objects import ReviewSort, ReviewStatus
from app.models.db import ReviewModel

SORT_ORDER = {
    ReviewSort.NEWEST.value: (ReviewModel.created_at.desc(),),
    ReviewSort.OLDEST.value: (ReviewModel.created_at.asc(),),
    ReviewSort.HIGHEST.value: (ReviewModel.rating.desc(), ReviewModel.created_at.desc()),
    ReviewSort.LOWEST.value: (ReviewModel.rating.asc(), ReviewModel.created_at.desc()),
    ReviewSort.HELPFUL.value: (ReviewModel.helpful_count.desc(), ReviewModel.created_at.desc()),
}


class SQLAlchemyReviewRepository(IReviewRepository):
    """
    SQLAlchemy implementation of review repository.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, *conditions) -> ReviewModel | None:
        result = await self.session.execute(
            select(ReviewModel).where(*conditions).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, review_id: UUID) -> Review | None:
        model = await self._get_model(ReviewModel.id == review_id)
        return self._to_entity(model) if model else None

    async def get_by_user_and_product(self, user_id: UUID, product_id: UUID) -> Review | None:
        model = await self._get_model(ReviewModel.user_id == user_id, ReviewModel.product_id == product_id)
        return self._to_entity(model) if model else None

    async def create(self, review: Review) -> Review:
        model = ReviewModel(id=review.id, user_id=review.user_id, product_id=review.product_id)
        self._apply(model, review)
        self.session.add(model)
        await self.session.flush()
        return self._to_entity(model)

    async def save(self, review: Review) -> Review:
        model = await self._get_model(ReviewModel.id == review.id)
        if model is None:
            return await self.create(review)
        self._apply(model, review)
        await self.session.flush()
        return self._to_entity(model)

    async def delete(self, review_id: UUID) -> None:
        await self.session.execute(delete(ReviewModel).where(ReviewModel.id == review_id))
        await self.session.flush()

    async def _page(self, conditions: list, pagination: Pagination, order_by: tuple) -> PaginatedResult[Review]:
        total = (await self.session.execute(select(func.count(ReviewModel.id)).where(*conditions))).scalar_one()
        result = await self.session.execute(
            select(ReviewModel).where(*conditions).order_by(*order_by).offset(pagination.offset).limit(pagination.limit)
        )
        return PaginatedResult(
            items=[self._to_entity(m) for m in result.scalars().all()],
            total=total,
            pagination=pagination,
        )

    async def list_for_product(
        self, product_id: UUID, pagination: Pagination, sort: str = "newest"
    ) -> PaginatedResult[Review]:
        conditions = [ReviewModel.product_id == product_id, ReviewModel.status == ReviewStatus.APPROVED.value]
        return await self._page(conditions, pagination, SORT_ORDER.get(sort, SORT_ORDER["newest"]))

    async def list_for_user(self, user_id: UUID) -> list[Review]:
        result = await self.session.execute(
            select(ReviewModel).where(ReviewModel.user_id == user_id).order_by(ReviewModel.created_at.desc())
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list(self, pagination: Pagination, status: str | None = None) -> PaginatedResult[Review]:
        conditions = [ReviewModel.status == status] if status else []
        return await self._page(conditions, pagination, (ReviewModel.created_at.desc(),))

    async def rating_summary(self, product_id: UUID) -> RatingSummary:
        rows = await self.session.execute(
            select(ReviewModel.rating, func.count(ReviewModel.id))
            .where(ReviewModel.product_id == product_id, ReviewModel.status == ReviewStatus.APPROVED.value)
            .group_by(ReviewModel.rating)
        )
        summary = RatingSummary()
        for rating, count in rows.all():
            summary.distribution[int(rating)] = count
        summary.review_count = sum(summary.distribution.values())
        if summary.review_count:
            weighted = sum(rating * count for rating, count in summary.distribution.items())
            summary.avg_rating = round(weighted / summary.review_count, 1)
        return summary

    async def get_stats(self) -> dict[str, Any]:
        rows = await self.session.execute(
            select(ReviewModel.status, func.count(ReviewModel.id)).group_by(ReviewModel.status)
        )
        counts = dict(rows.all())
        avg = (
            await self.session.execute(
                select(func.avg(ReviewModel.rating)).where(ReviewModel.status == ReviewStatus.APPROVED.value)
            )
        ).scalar_one()
        return {
            "total": sum(counts.values()),
            "pending": counts.get(ReviewStatus.PENDING.value, 0),
            "approved": counts.get(ReviewStatus.APPROVED.value, 0),
            "rejected": counts.get(ReviewStatus.REJECTED.value, 0),
            "averageRating": round(float(avg or 0), 1),
        }

    # Mapping methods

    def _apply(self, model: ReviewModel, review: Review) -> None:
        model.order_id = review.order_id
        model.rating = review.rating
        model.title = review.title
        model.comment = review.comment
        model.images = list(review.images)
        model.is_verified_purchase = review.is_verified_purchase
        model.status = review.status.value
        model.helpful_count = review.helpful_count
        model.helpful_users = list(review.helpful_users)
        model.admin_reply = (
            {"message": review.admin_reply, "repliedAt": review.admin_reply_at.isoformat()}
            if review.admin_reply and review.admin_reply_at
            else None
        )

    def _to_entity(self, model: ReviewModel) -> Review:
        reply = model.admin_reply or {}
        review = Review(
            id=model.id,
            user_id=model.user_id,
            product_id=model.product_id,
            order_id=model.order_id,
            rating=model.rating,
            title=model.title,
            comment=model.comment,
            images=list(model.images or []),
            is_verified_purchase=model.is_verified_purchase,
            status=ReviewStatus(model.status),
            helpful_count=model.helpful_count or 0,
            helpful_users=list(model.helpful_users or []),
            admin_reply=reply.get("message"),
            admin_reply_at=datetime.fromisoformat(reply["repliedAt"]) if reply.get("repliedAt") else None,
        )
        if model.created_at is not None:
            review.created_at = model.created_at
        if model.updated_at is not None:
            review.updated_at = model.updated_at
        return review
