"""
Review Desk API Models
======================

Pydantic models for API response serialization.
Field names match the dashboard's camelCase payloads.
"""

from pydantic import BaseModel
from typing import List, Dict, Optional, Union

from ..reviews.review_models import Review, ReviewStatistics


class CategoryScoreModel(BaseModel):
    category: str
    rating: float


class ReviewModel(BaseModel):
    """Canonical review as returned to the dashboard."""
    id: Union[int, str]
    type: Optional[str] = None
    status: Optional[str] = None
    guestName: str
    listingName: str
    channel: str
    rating: float
    ratingSource: str
    categoryScores: List[CategoryScoreModel] = []
    submittedAt: str
    text: str
    approved: bool = False

    @classmethod
    def from_review(cls, review: Review) -> "ReviewModel":
        return cls(**review.to_dict())


class ReviewListResponse(BaseModel):
    """Fetch result envelope."""
    success: bool = True
    data: List[ReviewModel]
    total: int
    source: str
    message: str


class ApprovalResponse(BaseModel):
    success: bool = True
    message: str
    reviewId: str
    approved: bool


class OverallStatsModel(BaseModel):
    total: int
    averageRating: str
    approvedCount: int
    pendingCount: int
    approvalRatePercent: float


class PropertyStatsModel(BaseModel):
    count: int
    averageRating: str
    approvedCount: int
    approvalRatePercent: float


class ChannelStatsModel(BaseModel):
    count: int
    averageRating: str


class ActivityModel(BaseModel):
    id: Union[int, str]
    guestName: str
    listingName: str
    rating: float
    submittedAt: str
    approved: bool
    channel: str


class StatisticsModel(BaseModel):
    overall: OverallStatsModel
    byProperty: Dict[str, PropertyStatsModel]
    byChannel: Dict[str, ChannelStatsModel]
    needsAttentionCount: int
    recentActivity: List[ActivityModel]
    categoryAverages: Dict[str, str] = {}

    @classmethod
    def from_statistics(cls, stats: ReviewStatistics) -> "StatisticsModel":
        return cls(**stats.to_dict())


class StatisticsResponse(BaseModel):
    success: bool = True
    data: StatisticsModel


class PropertyReviewsResponse(BaseModel):
    success: bool = True
    data: List[ReviewModel]
    total: int
    listingId: str


class ErrorResponse(BaseModel):
    """Failure envelope."""
    success: bool = False
    error: str
    message: str


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str
    environment: str
