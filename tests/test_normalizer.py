"""
Tests for the review normalizer.

Covers rating derivation (direct, category mean, neutral default),
approval join, channel tagging and idempotency.

Usage:
    pytest tests/test_normalizer.py -v
"""

import math

import pytest

from src.reviews.normalizer import (
    normalize_review,
    normalize_batch,
    calculate_overall_rating,
    parse_category_scores,
    round_one_decimal,
    NormalizationError,
)
from src.reviews.review_models import CategoryScore, RatingSource, NEUTRAL_RATING


# ============================================================================
# TEST DATA
# ============================================================================

def make_raw(review_id=1, rating=None, categories=None, **overrides) -> dict:
    """Helper to create a Hostaway-shaped record."""
    raw = {
        "id": review_id,
        "type": "guest-to-host",
        "status": "published",
        "rating": rating,
        "publicReview": "Lovely stay.",
        "reviewCategory": categories if categories is not None else [],
        "submittedAt": "2024-11-28 16:20:12",
        "guestName": "Lisa Rodriguez",
        "listingName": "2B N1 A - 29 Shoreditch Heights",
    }
    raw.update(overrides)
    return raw


def cats(*pairs) -> list:
    return [{"category": name, "rating": score} for name, score in pairs]


# ============================================================================
# RATING DERIVATION
# ============================================================================

class TestRatingDerivation:

    def test_category_mean_scenario(self):
        """cleanliness 9 + location 7 -> 8.0"""
        raw = make_raw(1, categories=cats(("cleanliness", 9), ("location", 7)))
        review = normalize_review(raw, "hostaway", {})
        assert review.rating == 8.0
        assert review.rating_source == RatingSource.CATEGORIES

    def test_direct_rating_used_as_is(self):
        raw = make_raw(2, rating=6, categories=cats(("cleanliness", 10)))
        review = normalize_review(raw, "hostaway", {})
        assert review.rating == 6.0
        assert review.rating_source == RatingSource.GUEST

    def test_zero_rating_is_not_treated_as_missing(self):
        raw = make_raw(3, rating=0, categories=cats(("cleanliness", 10)))
        assert normalize_review(raw, "hostaway", {}).rating == 0.0

    def test_neutral_default_without_scores(self):
        review = normalize_review(make_raw(4), "hostaway", {})
        assert review.rating == NEUTRAL_RATING
        assert review.rating_source == RatingSource.DEFAULT

    def test_custom_neutral_rating(self):
        review = normalize_review(make_raw(4), "hostaway", {}, neutral_rating=5.0)
        assert review.rating == 5.0

    def test_mean_rounds_to_one_decimal(self):
        raw = make_raw(5, categories=cats(("a", 9), ("b", 8), ("c", 8)))
        assert normalize_review(raw, "hostaway", {}).rating == 8.3

    def test_half_rounds_up(self):
        # mean 8.25
        raw = make_raw(6, categories=cats(("a", 8.5), ("b", 8), ("c", 8), ("d", 8.5)))
        assert normalize_review(raw, "hostaway", {}).rating == 8.3

    def test_null_category_score_counts_as_zero(self):
        raw = make_raw(7, categories=cats(("a", 10), ("b", None)))
        assert normalize_review(raw, "hostaway", {}).rating == 5.0

    def test_out_of_range_rating_is_clamped(self):
        assert normalize_review(make_raw(8, rating=14), "hostaway", {}).rating == 10.0
        assert normalize_review(make_raw(9, rating=-2), "hostaway", {}).rating == 0.0

    def test_non_numeric_rating_falls_back_to_categories(self):
        raw = make_raw(10, rating="great", categories=cats(("a", 6)))
        review = normalize_review(raw, "hostaway", {})
        assert review.rating == 6.0
        assert review.rating_source == RatingSource.CATEGORIES

    def test_nan_rating_is_ignored(self):
        review = normalize_review(make_raw(11, rating=float("nan")), "hostaway", {})
        assert review.rating == NEUTRAL_RATING

    @pytest.mark.parametrize("rating,categories", [
        (None, cats(("a", 10), ("b", 10))),
        (None, cats(("a", 0))),
        (None, []),
        (10, []),
        (99, []),
        (None, cats(("a", 25), ("b", -4))),
    ])
    def test_rating_always_within_scale(self, rating, categories):
        review = normalize_review(make_raw(12, rating=rating, categories=categories), "x", {})
        assert math.isfinite(review.rating)
        assert 0 <= review.rating <= 10


class TestCategoryScores:

    def test_hostaway_categories_keep_order(self):
        raw = make_raw(1, categories=cats(("cleanliness", 9), ("location", 10)))
        assert parse_category_scores(raw) == [
            CategoryScore("cleanliness", 9.0),
            CategoryScore("location", 10.0),
        ]

    def test_generic_category_scores_key(self):
        raw = make_raw(1)
        del raw["reviewCategory"]
        raw["categoryScores"] = [{"categoryName": "value", "score": 7}]
        assert parse_category_scores(raw) == [CategoryScore("value", 7.0)]

    def test_missing_categories_give_empty_list(self):
        raw = make_raw(1)
        raw["reviewCategory"] = None
        assert parse_category_scores(raw) == []

    @pytest.mark.parametrize("value", [5, "cleanliness", {"category": "value", "rating": 9}])
    def test_non_list_categories_are_ignored(self, value):
        raw = make_raw(1, reviewCategory=value)
        assert parse_category_scores(raw) == []

        review = normalize_review(raw, "hostaway", {})
        assert review.rating == NEUTRAL_RATING
        assert review.rating_source == RatingSource.DEFAULT

    def test_calculate_overall_rating_empty(self):
        assert calculate_overall_rating([]) == NEUTRAL_RATING

    def test_round_one_decimal(self):
        assert round_one_decimal(8.25) == 8.3
        assert round_one_decimal(8.24) == 8.2
        assert round_one_decimal(8.0) == 8.0


# ============================================================================
# APPROVAL JOIN & SHAPE
# ============================================================================

class TestNormalizeReview:

    def test_approval_joined_by_string_id(self):
        review = normalize_review(make_raw(7453), "hostaway", {"7453": True})
        assert review.approved is True

    def test_absent_approval_defaults_to_pending(self):
        review = normalize_review(make_raw(7453), "hostaway", {"1": True})
        assert review.approved is False

    def test_channel_comes_from_caller(self):
        raw = make_raw(1, channel="airbnb")
        assert normalize_review(raw, "google", {}).channel == "google"

    def test_fields_mapped(self):
        review = normalize_review(make_raw(42), "hostaway", {})
        assert review.id == 42
        assert review.guest_name == "Lisa Rodriguez"
        assert review.listing_name == "2B N1 A - 29 Shoreditch Heights"
        assert review.text == "Lovely stay."
        assert review.submitted_at == "2024-11-28 16:20:12"
        assert review.review_type == "guest-to-host"
        assert review.status == "published"

    def test_null_public_review_falls_back_to_text(self):
        raw = make_raw(1, publicReview=None, text="Lovely")
        assert normalize_review(raw, "google", {}).text == "Lovely"

    def test_public_review_preferred_over_text(self):
        raw = make_raw(1, text="Other")
        assert normalize_review(raw, "hostaway", {}).text == "Lovely stay."

    def test_no_text_at_all_is_empty(self):
        raw = make_raw(1, publicReview=None)
        assert normalize_review(raw, "hostaway", {}).text == ""

    def test_missing_id_raises(self):
        raw = make_raw(None)
        with pytest.raises(NormalizationError):
            normalize_review(raw, "hostaway", {})

    def test_idempotent_and_pure(self):
        raw = make_raw(5, categories=cats(("a", 9), ("b", 7)))
        before = dict(raw)
        first = normalize_review(raw, "hostaway", {"5": True})
        second = normalize_review(raw, "hostaway", {"5": True})
        assert first == second
        assert raw == before

    def test_approval_rejoined_fresh_each_time(self):
        raw = make_raw(5)
        assert normalize_review(raw, "hostaway", {}).approved is False
        assert normalize_review(raw, "hostaway", {"5": True}).approved is True

    def test_to_dict_shape(self):
        raw = make_raw(9, categories=cats(("cleanliness", 9), ("location", 7)))
        data = normalize_review(raw, "hostaway", {}).to_dict()
        assert data["rating"] == 8.0
        assert data["ratingSource"] == "categories"
        assert data["categoryScores"] == [
            {"category": "cleanliness", "rating": 9.0},
            {"category": "location", "rating": 7.0},
        ]
        assert data["approved"] is False


class TestNormalizeBatch:

    def test_preserves_order(self):
        records = [make_raw(3), make_raw(1), make_raw(2)]
        reviews = normalize_batch(records, "hostaway", {})
        assert [r.id for r in reviews] == [3, 1, 2]

    def test_empty_batch(self):
        assert normalize_batch([], "hostaway", {}) == []
