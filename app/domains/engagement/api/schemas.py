"""
Engagement API Schemas
"""

from uuid import UUID

from pydantic import Field

from app.api.schemas.common import CamelModel
from app.domains.engagement.domain.value_objects import ReviewStatus


class ReviewCreate(CamelModel):
    product_id: UUID
    rating: int = Field(..., ge=1, le=5)
    title: str | None = Field(None, max_length=100)
    comment: str = Field(..., min_length=1, max_length=1000)
    images: list[str] = Field(default_factory=list, max_length=5)


class ReviewUpdate(CamelModel):
    rating: int | None = Field(None, ge=1, le=5)
    title: str | None = Field(None, max_length=100)
    comment: str | None = Field(None, min_length=1, max_length=1000)
    images: list[str] | None = Field(None, max_length=5)


class ReviewStatusBody(CamelModel):
    status: ReviewStatus


class ReviewReplyBody(CamelModel):
    reply: str = Field(..., min_length=1, max_length=1000)


class WishlistAddBody(CamelModel):
    product_id: UUID
    notify_on_sale: bool = True
    notify_on_stock: bool = True


class WishlistPreferencesBody(CamelModel):
    notify_on_sale: bool | None = None
    notify_on_stock: bool | None = None
