"""
Review Statistics Aggregator
============================

Computes dashboard statistics for a set of canonical reviews:

    overall            totals, average rating, approval counts and rate
    byProperty         per listing: count, average, approvals, approval rate
    byChannel          per channel: count, average
    needsAttention     reviews rated below the attention threshold
    recentActivity     latest N reviews, projected for display
    categoryAverages   mean category score over approved reviews

Averages are one-decimal strings ("0.0" for an empty set). Any ratio with
a zero denominator is 0.

Usage:
    aggregator = ReviewStatsAggregator()
    stats = aggregator.build(filtered_view, backlog=all_reviews)
"""

import logging
from typing import List, Dict, Optional, Sequence

from .normalizer import round_one_decimal
from .review_filters import sort_reviews, SortOrder
from .review_models import (
    Review,
    OverallStats,
    PropertyStats,
    ChannelStats,
    ActivityItem,
    ReviewStatistics,
    NEEDS_ATTENTION_THRESHOLD,
    RECENT_ACTIVITY_LIMIT,
)

logger = logging.getLogger(__name__)


def format_average(total: float, count: int) -> str:
    if count == 0:
        return "0.0"
    return f"{round_one_decimal(total / count):.1f}"


def percent(part: int, whole: int) -> float:
    if whole == 0:
        return 0
    return round_one_decimal(part / whole * 100)


class ReviewStatsAggregator:
    """
    Builds ReviewStatistics from canonical reviews.

    The attention threshold and recent-activity size default to the
    dashboard's fixed values.
    """

    def __init__(
        self,
        attention_threshold: float = NEEDS_ATTENTION_THRESHOLD,
        recent_limit: int = RECENT_ACTIVITY_LIMIT,
    ):
        self.attention_threshold = attention_threshold
        self.recent_limit = recent_limit

    def overall(self, reviews: Sequence[Review]) -> OverallStats:
        total = len(reviews)
        approved = sum(1 for r in reviews if r.approved)
        return OverallStats(
            total=total,
            average_rating=format_average(sum(r.rating for r in reviews), total),
            approved_count=approved,
            pending_count=total - approved,
            approval_rate_percent=percent(approved, total),
        )

    def by_property(self, reviews: Sequence[Review]) -> Dict[str, PropertyStats]:
        buckets: Dict[str, List[Review]] = {}
        for review in reviews:
            buckets.setdefault(review.listing_name, []).append(review)

        stats = {}
        for listing, group in buckets.items():
            approved = sum(1 for r in group if r.approved)
            stats[listing] = PropertyStats(
                count=len(group),
                average_rating=format_average(sum(r.rating for r in group), len(group)),
                approved_count=approved,
                approval_rate_percent=percent(approved, len(group)),
            )
        return stats

    def by_channel(self, reviews: Sequence[Review]) -> Dict[str, ChannelStats]:
        totals: Dict[str, List[float]] = {}
        for review in reviews:
            totals.setdefault(review.channel, []).append(review.rating)

        return {
            channel: ChannelStats(
                count=len(ratings),
                average_rating=format_average(sum(ratings), len(ratings)),
            )
            for channel, ratings in totals.items()
        }

    def needs_attention_count(self, reviews: Sequence[Review]) -> int:
        return sum(1 for r in reviews if r.rating < self.attention_threshold)

    def recent_activity(self, reviews: Sequence[Review]) -> List[ActivityItem]:
        latest = sort_reviews(reviews, SortOrder.NEWEST)[:self.recent_limit]
        return [ActivityItem.from_review(r) for r in latest]

    def category_averages(self, reviews: Sequence[Review]) -> Dict[str, str]:
        """
        Mean score per category across approved reviews that carry it.
        Categories keep first-seen order.
        """
        sums: Dict[str, List[float]] = {}
        for review in reviews:
            if not review.approved:
                continue
            for score in review.category_scores:
                sums.setdefault(score.category, []).append(score.score)

        return {
            category: format_average(sum(values), len(values))
            for category, values in sums.items()
        }

    def build(
        self,
        reviews: Sequence[Review],
        backlog: Optional[Sequence[Review]] = None,
    ) -> ReviewStatistics:
        """
        Compute the full statistics view.

        Args:
            reviews: The set to describe (full set or a filtered view)
            backlog: Set used for needs-attention; defaults to `reviews`.
                Dashboards pass the unfiltered set here.
        """
        reviews = list(reviews)
        backlog = reviews if backlog is None else list(backlog)

        stats = ReviewStatistics(
            overall=self.overall(reviews),
            by_property=self.by_property(reviews),
            by_channel=self.by_channel(reviews),
            needs_attention_count=self.needs_attention_count(backlog),
            recent_activity=self.recent_activity(reviews),
            category_averages=self.category_averages(reviews),
        )

        logger.debug(
            f"Statistics built: {stats.overall.total} reviews, "
            f"{len(stats.by_property)} properties, "
            f"{stats.needs_attention_count} need attention"
        )
        return stats
