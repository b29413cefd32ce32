"""
Review entity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from app.core.domain import AggregateRoot, iso, sid, utcnow
from app.domains.engagement.domain.events import ReviewSubmitted
from app.domains.engagement.domain.value_objects import ReviewStatus


@dataclass
class Review(AggregateRoot[UUID]):
    """
    A user's rating of a product; at most one per (user, product).

    New reviews are published immediately (status approved); moderation can
    reject them later.
    """

    user_id: UUID | None = None
    product_id: UUID | None = None
    order_id: UUID | None = None
    rating: int = 5
    title: str | None = None
    comment: str = ""
    images: list[str] = field(default_factory=list)
    is_verified_purchase: bool = False
    status: ReviewStatus = ReviewStatus.APPROVED
    helpful_count: int = 0
    helpful_users: list[UUID] = field(default_factory=list)
    admin_reply: str | None = None
    admin_reply_at: datetime | None = None

    @classmethod
    def submit(
        cls,
        user_id: UUID,
        product_id: UUID,
        rating: int,
        comment: str,
        title: str | None = None,
        images: list[str] | None = None,
        verified_purchase: bool = False,
        product_name: str = "",
        user_name: str = "",
    ) -> "Review":
        review = cls(
            id=uuid4(),
            user_id=user_id,
            product_id=product_id,
            rating=rating,
            title=title,
            comment=comment,
            images=list(images or []),
            is_verified_purchase=verified_purchase,
        )
        review._record_event(
            ReviewSubmitted(
                review_id=review.id,
                product_id=product_id,
                product_name=product_name,
                user_id=user_id,
                user_name=user_name,
                rating=rating,
            )
        )
        return review

    @property
    def counts_toward_rating(self) -> bool:
        return self.status == ReviewStatus.APPROVED

    def edit(self, changes: dict[str, Any]) -> bool:
        """Apply owner edits; returns True when the rating changed."""
        old_rating = self.rating
        for key in ("rating", "title", "comment", "images"):
            if key in changes and changes[key] is not None:
                setattr(self, key, changes[key])
        self.touch()
        return self.rating != old_rating

    def toggle_helpful(self, user_id: UUID) -> bool:
        """Flip the user's helpful vote; returns True when the vote was added."""
        if user_id in self.helpful_users:
            self.helpful_users.remove(user_id)
            self.helpful_count = max(0, self.helpful_count - 1)
            added = False
        else:
            self.helpful_users.append(user_id)
            self.helpful_count += 1
            added = True
        self.touch()
        return added

    def moderate(self, status: ReviewStatus) -> None:
        self.status = status
        self.touch()

    def reply(self, message: str) -> None:
        self.admin_reply = message
        self.admin_reply_at = utcnow()
        self.touch()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": sid(self.id),
            "user": sid(self.user_id),
            "product": sid(self.product_id),
            "order": sid(self.order_id),
            "rating": self.rating,
            "title": self.title,
            "comment": self.comment,
            "images": list(self.images),
            "isVerifiedPurchase": self.is_verified_purchase,
            "status": self.status.value,
            "helpfulCount": self.helpful_count,
            "adminReply": self.admin_reply,
            "adminReplyAt": iso(self.admin_reply_at),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
