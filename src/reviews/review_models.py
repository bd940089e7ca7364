"""
Review Data Models
==================

Canonical review entity and the statistics structures derived from it.
Every channel record is normalized into a Review before it reaches the
filter engine or the aggregator.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Union
from enum import Enum


# Rating assigned when a record carries neither a rating nor category scores.
NEUTRAL_RATING = 7.5

# Reviews rated strictly below this count toward the "needs attention" backlog.
NEEDS_ATTENTION_THRESHOLD = 8

RECENT_ACTIVITY_LIMIT = 5

MIN_RATING = 0.0
MAX_RATING = 10.0


class RatingSource(str, Enum):
    """How a review's rating was obtained."""
    GUEST = "guest"
    CATEGORIES = "categories"
    DEFAULT = "default"


class ReviewStatus(str, Enum):
    """Approval status filter values."""
    APPROVED = "approved"
    PENDING = "pending"


@dataclass(frozen=True)
class CategoryScore:
    """A single category sub-score (0-10)."""
    category: str
    score: float


@dataclass
class Review:
    """
    Canonical review.

    Content fields come from the channel record. `approved` is not part of
    the record: it is joined from the approval store each time a batch is
    normalized.
    """
    id: Union[int, str]
    guest_name: str
    listing_name: str
    channel: str
    rating: float
    submitted_at: str
    text: str
    category_scores: List[CategoryScore] = field(default_factory=list)
    approved: bool = False
    rating_source: RatingSource = RatingSource.GUEST
    review_type: Optional[str] = None
    status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation (camelCase)."""
        return {
            "id": self.id,
            "type": self.review_type,
            "status": self.status,
            "guestName": self.guest_name,
            "listingName": self.listing_name,
            "channel": self.channel,
            "rating": self.rating,
            "ratingSource": self.rating_source.value,
            "categoryScores": [
                {"category": c.category, "rating": c.score}
                for c in self.category_scores
            ],
            "submittedAt": self.submitted_at,
            "text": self.text,
            "approved": self.approved,
        }


# ============================================================================
# STATISTICS
# ============================================================================

@dataclass
class OverallStats:
    total: int
    average_rating: str
    approved_count: int
    pending_count: int
    approval_rate_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "averageRating": self.average_rating,
            "approvedCount": self.approved_count,
            "pendingCount": self.pending_count,
            "approvalRatePercent": self.approval_rate_percent,
        }


@dataclass
class PropertyStats:
    count: int
    average_rating: str
    approved_count: int
    approval_rate_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "averageRating": self.average_rating,
            "approvedCount": self.approved_count,
            "approvalRatePercent": self.approval_rate_percent,
        }


@dataclass
class ChannelStats:
    count: int
    average_rating: str

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "averageRating": self.average_rating}


@dataclass
class ActivityItem:
    """Display projection of a review for the recent-activity feed."""
    id: Union[int, str]
    guest_name: str
    listing_name: str
    rating: float
    submitted_at: str
    approved: bool
    channel: str

    @classmethod
    def from_review(cls, review: Review) -> "ActivityItem":
        return cls(
            id=review.id,
            guest_name=review.guest_name,
            listing_name=review.listing_name,
            rating=review.rating,
            submitted_at=review.submitted_at,
            approved=review.approved,
            channel=review.channel,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "guestName": self.guest_name,
            "listingName": self.listing_name,
            "rating": self.rating,
            "submittedAt": self.submitted_at,
            "approved": self.approved,
            "channel": self.channel,
        }


@dataclass
class ReviewStatistics:
    """Full statistics view for one review set."""
    overall: OverallStats
    by_property: Dict[str, PropertyStats]
    by_channel: Dict[str, ChannelStats]
    needs_attention_count: int
    recent_activity: List[ActivityItem]
    category_averages: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall.to_dict(),
            "byProperty": {k: v.to_dict() for k, v in self.by_property.items()},
            "byChannel": {k: v.to_dict() for k, v in self.by_channel.items()},
            "needsAttentionCount": self.needs_attention_count,
            "recentActivity": [a.to_dict() for a in self.recent_activity],
            "categoryAverages": dict(self.category_averages),
        }
