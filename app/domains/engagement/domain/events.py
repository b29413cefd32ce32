"""
Engagement domain events.
"""

from dataclasses import dataclass
from uuid import UUID

from app.core.domain import DomainEvent


@dataclass(frozen=True)
class ReviewSubmitted(DomainEvent):
    review_id: UUID | None = None
    product_id: UUID | None = None
    product_name: str = ""
    user_id: UUID | None = None
    user_name: str = ""
    rating: int = 0
