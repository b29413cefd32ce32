"""
Engagement DTOs
"""

from dataclasses import dataclass, field
from typing import Any

RATING_LEVELS = (1, 2, 3, 4, 5)


@dataclass
class RatingSummary:
    """Aggregate over the approved reviews of one product."""

    avg_rating: float = 0.0
    review_count: int = 0
    distribution: dict[int, int] = field(default_factory=lambda: dict.fromkeys(RATING_LEVELS, 0))

    def to_dict(self) -> dict[str, Any]:
        return {
            "avgRating": self.avg_rating,
            "reviewCount": self.review_count,
            "ratingDistribution": {str(k): v for k, v in sorted(self.distribution.items())},
        }


@dataclass
class MoveToCartResult:
    added: int = 0
    failed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"added": self.added, "failed": list(self.failed)}


__all__ = ["RATING_LEVELS", "RatingSummary", "MoveToCartResult"]
