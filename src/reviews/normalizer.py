"""
Review Normalizer
=================

Converts channel-specific review records into canonical Review objects.

Rating derivation:
    1. A numeric `rating` on the record is used directly (0-10 scale).
    2. Otherwise the mean of the category scores, rounded to one decimal.
    3. Otherwise NEUTRAL_RATING. This is a placeholder, not a guest score;
       such reviews carry rating_source=DEFAULT.

The approval flag is joined from an approval snapshot (review id string ->
bool). Normalization performs no I/O and never mutates its input.

Usage:
    approvals = store.snapshot()
    reviews = normalize_batch(records, channel="hostaway", approvals=approvals)
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Any, Optional, Mapping, Iterable

from .review_models import (
    Review,
    CategoryScore,
    RatingSource,
    NEUTRAL_RATING,
    MIN_RATING,
    MAX_RATING,
)

logger = logging.getLogger(__name__)


class NormalizationError(ValueError):
    """Raised when a record cannot be turned into a Review."""
    pass


def round_one_decimal(value: float) -> float:
    """Round half-up to one decimal place (8.25 -> 8.3)."""
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _coerce_score(value: Any) -> Optional[float]:
    """Numeric score clamped to 0-10, or None if not a usable number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        score = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(score):
        return None
    return max(MIN_RATING, min(MAX_RATING, score))


def parse_category_scores(raw: Mapping[str, Any]) -> List[CategoryScore]:
    """
    Extract category sub-scores from a raw record.

    Hostaway sends `reviewCategory: [{"category": ..., "rating": ...}]`.
    Other channels may send `categoryScores` with `category`/`categoryName`
    and `score`/`rating` keys. A missing score counts as 0.
    """
    entries = raw.get("reviewCategory")
    if entries is None:
        entries = raw.get("categoryScores")
    if not isinstance(entries, (list, tuple)):
        return []

    scores = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        name = entry.get("category", entry.get("categoryName"))
        value = entry.get("rating", entry.get("score"))
        scores.append(CategoryScore(
            category=str(name) if name is not None else "",
            score=_coerce_score(value) or 0.0,
        ))
    return scores


def calculate_overall_rating(
    category_scores: List[CategoryScore],
    neutral_rating: float = NEUTRAL_RATING,
) -> float:
    """Mean of category scores (one decimal), or the neutral rating if none."""
    if not category_scores:
        return neutral_rating
    total = sum(c.score for c in category_scores)
    return round_one_decimal(total / len(category_scores))


def normalize_review(
    raw: Mapping[str, Any],
    channel: str,
    approvals: Mapping[str, bool],
    neutral_rating: float = NEUTRAL_RATING,
) -> Review:
    """
    Build a canonical Review from one raw channel record.

    Args:
        raw: Channel record (Hostaway field names)
        channel: Source tag for the batch this record came from
        approvals: Snapshot of the approval store
        neutral_rating: Rating used when nothing can be derived

    Raises:
        NormalizationError: If the record has no identifier
    """
    review_id = raw.get("id")
    if review_id is None or review_id == "":
        raise NormalizationError("Review record has no id")

    category_scores = parse_category_scores(raw)

    direct = _coerce_score(raw.get("rating"))
    if direct is not None:
        rating = direct
        rating_source = RatingSource.GUEST
    elif category_scores:
        rating = calculate_overall_rating(category_scores, neutral_rating)
        rating_source = RatingSource.CATEGORIES
    else:
        rating = neutral_rating
        rating_source = RatingSource.DEFAULT

    return Review(
        id=review_id,
        guest_name=str(raw.get("guestName") or ""),
        listing_name=str(raw.get("listingName") or ""),
        channel=channel,
        rating=rating,
        submitted_at=str(raw.get("submittedAt") or ""),
        text=str(raw.get("publicReview") or raw.get("text") or ""),
        category_scores=category_scores,
        approved=bool(approvals.get(str(review_id), False)),
        rating_source=rating_source,
        review_type=raw.get("type"),
        status=raw.get("status"),
    )


def normalize_batch(
    records: Iterable[Mapping[str, Any]],
    channel: str,
    approvals: Mapping[str, bool],
    neutral_rating: float = NEUTRAL_RATING,
) -> List[Review]:
    """Normalize every record of one channel batch, preserving order."""
    reviews = [
        normalize_review(raw, channel, approvals, neutral_rating)
        for raw in records
    ]
    defaulted = sum(1 for r in reviews if r.rating_source == RatingSource.DEFAULT)
    if defaulted:
        logger.debug(f"{defaulted}/{len(reviews)} {channel} reviews got the neutral rating")
    return reviews
