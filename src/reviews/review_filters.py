"""
Review Filter & Sort Engine
===========================

Applies a query (text search, property, minimum rating, approval status,
channel, date range) and a sort order to a list of canonical reviews.
All filters are optional and combine with AND. Sorting is stable and runs
after filtering. The input list is never mutated.

Unparsable `submitted_at` values are treated as the earliest possible
instant: any `date_from` excludes them, `date_to` keeps them, they sort
last in newest-first and first in oldest-first.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, time, timezone
from enum import Enum
from typing import List, Optional, Iterable

from .review_models import Review, ReviewStatus

logger = logging.getLogger(__name__)


class QueryValidationError(ValueError):
    """A query parameter could not be interpreted."""
    pass


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    RATING_DESC = "rating_desc"
    RATING_ASC = "rating_asc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortOrder":
        """Accepts enum values and the dashboard keys (date-desc, ...)."""
        if not value:
            return cls.NEWEST
        key = value.strip().lower()
        legacy = {
            "date-desc": cls.NEWEST,
            "date-asc": cls.OLDEST,
            "rating-desc": cls.RATING_DESC,
            "rating-asc": cls.RATING_ASC,
        }
        if key in legacy:
            return legacy[key]
        try:
            return cls(key)
        except ValueError:
            logger.debug(f"Unknown sort key '{value}', using newest first")
            return cls.NEWEST


# Placement for reviews whose timestamp cannot be parsed
EARLIEST = datetime.min


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-like timestamp ("2024-11-28 16:20:12", "2024-11-28T16:20:12Z",
    "2024-11-28"). Aware values are converted to naive UTC.
    Returns None when the value is empty or unparsable.
    """
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    except (ValueError, OverflowError):
        # offsets pushing past year 1 or 9999 overflow in astimezone
        return None
    return parsed


def _is_date_only(value: str) -> bool:
    return len(value.strip()) == 10


def sort_key_date(review: Review) -> datetime:
    return parse_timestamp(review.submitted_at) or EARLIEST


@dataclass
class ReviewQuery:
    """Filters and sort order for a review listing. Unset fields do not filter."""
    search_text: Optional[str] = None
    property: Optional[str] = None
    min_rating: Optional[int] = None
    status: Optional[str] = None
    channel: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    sort: SortOrder = SortOrder.NEWEST

    @classmethod
    def from_params(
        cls,
        search: Optional[str] = None,
        property: Optional[str] = None,
        min_rating: Optional[int] = None,
        status: Optional[str] = None,
        channel: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> "ReviewQuery":
        """
        Build a query from raw request parameters.

        A date-only `date_to` ("2024-11-28") covers that whole day.

        Raises:
            QueryValidationError: If a date bound cannot be parsed
        """
        start = end = None
        if date_from:
            start = parse_timestamp(date_from)
            if start is None:
                raise QueryValidationError(f"Invalid dateFrom: {date_from}")
        if date_to:
            end = parse_timestamp(date_to)
            if end is None:
                raise QueryValidationError(f"Invalid dateTo: {date_to}")
            if _is_date_only(date_to):
                end = datetime.combine(end.date(), time.max)

        return cls(
            search_text=search or None,
            property=property or None,
            min_rating=min_rating,
            status=status or None,
            channel=channel or None,
            date_from=start,
            date_to=end,
            sort=SortOrder.parse(sort),
        )

    def is_empty(self) -> bool:
        return not any([
            self.search_text, self.property, self.min_rating is not None,
            self.status, self.channel, self.date_from, self.date_to,
        ])


def matches(review: Review, query: ReviewQuery) -> bool:
    """True if the review passes every filter set on the query."""
    if query.search_text:
        needle = query.search_text.lower()
        if not (
            needle in review.guest_name.lower()
            or needle in review.text.lower()
            or needle in review.listing_name.lower()
        ):
            return False

    if query.property and review.listing_name != query.property:
        return False

    if query.min_rating is not None and review.rating < query.min_rating:
        return False

    if query.status == ReviewStatus.APPROVED.value and not review.approved:
        return False
    if query.status == ReviewStatus.PENDING.value and review.approved:
        return False

    if query.channel and review.channel != query.channel:
        return False

    if query.date_from is not None or query.date_to is not None:
        submitted = sort_key_date(review)
        if query.date_from is not None and submitted < query.date_from:
            return False
        if query.date_to is not None and submitted > query.date_to:
            return False

    return True


def filter_reviews(reviews: Iterable[Review], query: ReviewQuery) -> List[Review]:
    return [r for r in reviews if matches(r, query)]


def sort_reviews(reviews: Iterable[Review], order: SortOrder = SortOrder.NEWEST) -> List[Review]:
    """Stable sort; equal keys keep their input order in both directions."""
    if order == SortOrder.OLDEST:
        return sorted(reviews, key=sort_key_date)
    if order == SortOrder.RATING_DESC:
        return sorted(reviews, key=lambda r: r.rating, reverse=True)
    if order == SortOrder.RATING_ASC:
        return sorted(reviews, key=lambda r: r.rating)
    return sorted(reviews, key=sort_key_date, reverse=True)


def apply_query(reviews: Iterable[Review], query: Optional[ReviewQuery] = None) -> List[Review]:
    """Filter then sort. A missing query means no filters, newest first."""
    query = query or ReviewQuery()
    return sort_reviews(filter_reviews(reviews, query), query.sort)


def reviews_for_property(
    reviews: Iterable[Review],
    listing_id: str,
    approved_only: bool = False,
) -> List[Review]:
    """
    Reviews whose listing name contains `listing_id` or whose id equals it.
    """
    selected = [
        r for r in reviews
        if listing_id in r.listing_name or str(r.id) == listing_id
    ]
    if approved_only:
        selected = [r for r in selected if r.approved]
    return selected
