"""
Tests for ReviewService: fetch, approval toggle, statistics and
property-scoped fetch, wired to fake channel sources.

Usage:
    pytest tests/test_review_service.py -v
"""

from unittest.mock import Mock

import pytest
import requests

from src.api.services import ReviewService, ReviewServiceError
from src.data.config import HostawayConfig, ReviewPolicyConfig
from src.data.fallback_reviews import FALLBACK_REVIEWS
from src.data.hostaway_client import HostawayClient
from src.data.review_source import ReviewSource, SourceResult, FetchParams
from src.reviews.approval_store import InMemoryApprovalStore, ApprovalValidationError
from src.reviews.review_filters import ReviewQuery


class FakeSource(ReviewSource):
    """Channel returning canned records, or failing."""

    def __init__(self, channel, records=None, fallback=None, reason=None):
        self.channel = channel
        self._records = records or []
        self._fallback = fallback or []
        self._reason = reason
        self.calls = []

    @property
    def fallback_records(self):
        return self._fallback

    def fetch(self, params):
        self.calls.append(params)
        if self._reason:
            return SourceResult.failure(self.channel, self._reason)
        return SourceResult.success(self.channel, list(self._records))


def make_raw(review_id, rating=None, listing="Loft A", submitted="2024-11-28 16:20:12", **extra):
    raw = {
        "id": review_id,
        "rating": rating,
        "publicReview": "text",
        "reviewCategory": [],
        "submittedAt": submitted,
        "guestName": f"Guest {review_id}",
        "listingName": listing,
    }
    raw.update(extra)
    return raw


def policy() -> ReviewPolicyConfig:
    return ReviewPolicyConfig(neutral_rating=7.5, attention_threshold=8, recent_limit=5)


class TestFetch:

    def setup_method(self):
        self.store = InMemoryApprovalStore()

    def test_external_source(self):
        source = FakeSource("hostaway", records=[make_raw(1, rating=9), make_raw(2, rating=6)])
        service = ReviewService([source], self.store, policy())

        result = service.fetch_reviews(FetchParams(limit=10))

        assert result.source == "external"
        assert result.total == 2
        assert source.calls[0].limit == 10
        assert all(r.channel == "hostaway" for r in result.reviews)

    def test_timeout_falls_back(self):
        session = Mock()
        session.get.side_effect = requests.Timeout("slow")
        client = HostawayClient(config=HostawayConfig(api_key="k"), session=session)
        service = ReviewService([client], self.store, policy())

        result = service.fetch_reviews()

        assert result.source == "fallback"
        assert result.reviews
        assert len(result.reviews) == len(FALLBACK_REVIEWS)

    def test_approval_survives_refetch(self):
        source = FakeSource("hostaway", reason="down", fallback=FALLBACK_REVIEWS)
        service = ReviewService([source], self.store, policy())

        service.set_approval(7453, True)
        reviews = {r.id: r for r in service.fetch_reviews().reviews}

        assert reviews[7453].approved is True
        assert reviews[7454].approved is False

    def test_non_boolean_approval_rejected(self):
        service = ReviewService([], self.store, policy())
        with pytest.raises(ApprovalValidationError):
            service.set_approval(7453, "yes")
        assert self.store.get_approval(7453) is False

    def test_approval_for_unknown_id_applies_later(self):
        source = FakeSource("hostaway", records=[make_raw(1, rating=9)])
        service = ReviewService([source], self.store, policy())

        service.set_approval("555", True)
        source._records.append(make_raw(555, rating=9))

        approved = [r.id for r in service.fetch_reviews().reviews if r.approved]
        assert approved == [555]

    def test_query_applied(self):
        source = FakeSource("hostaway", records=[
            make_raw(1, rating=9), make_raw(2, rating=6), make_raw(3, rating=9),
        ])
        service = ReviewService([source], self.store, policy())
        service.set_approval(3, True)

        result = service.fetch_reviews(query=ReviewQuery(status="pending", min_rating=8))
        assert [r.id for r in result.reviews] == [1]

    def test_channel_selection(self):
        hostaway = FakeSource("hostaway", records=[make_raw(1, rating=9)])
        google = FakeSource("google", records=[make_raw("g-1", rating=8)])
        service = ReviewService([hostaway, google], self.store, policy())

        assert service.channels == ["hostaway", "google"]
        assert [r.id for r in service.fetch_reviews(channel="google").reviews] == ["g-1"]
        assert hostaway.calls == []

    def test_mixed_sources_report_fallback(self):
        ok = FakeSource("hostaway", records=[make_raw(1, rating=9)])
        down = FakeSource("google", reason="timeout", fallback=[make_raw("g-1", rating=8)])
        service = ReviewService([ok, down], self.store, policy())

        result = service.fetch_reviews()

        assert result.source == "fallback"
        assert result.total == 2

    def test_neutral_rating_from_policy(self):
        source = FakeSource("hostaway", records=[make_raw(1)])
        custom = ReviewPolicyConfig(neutral_rating=5.0, attention_threshold=8, recent_limit=5)
        service = ReviewService([source], self.store, custom)
        assert service.fetch_reviews().reviews[0].rating == 5.0

    def test_unexpected_error_is_masked(self):
        source = FakeSource("hostaway", records=[{"guestName": "no id"}])
        service = ReviewService([source], self.store, policy())

        with pytest.raises(ReviewServiceError) as exc_info:
            service.fetch_reviews()
        assert exc_info.value.error == "Failed to fetch reviews"


class TestStatistics:

    def setup_method(self):
        self.store = InMemoryApprovalStore()
        self.source = FakeSource("hostaway", reason="down", fallback=FALLBACK_REVIEWS)
        self.service = ReviewService([self.source], self.store, policy())

    def test_fallback_statistics(self):
        self.service.set_approval(7453, True)
        stats = self.service.get_statistics()

        assert stats.overall.total == 5
        assert stats.overall.approved_count == 1
        assert stats.overall.approval_rate_percent == 20.0
        # 7454 (7.0) and 7457 (neutral 7.5)
        assert stats.needs_attention_count == 2
        assert [a.id for a in stats.recent_activity] == [7455, 7453, 7454, 7456, 7457]
        assert stats.category_averages["cleanliness"] == "9.0"

    def test_filtered_view_keeps_full_backlog(self):
        stats = self.service.get_statistics(ReviewQuery(min_rating=9))
        assert stats.overall.total == 2
        assert stats.needs_attention_count == 2

    def test_property_reviews(self):
        self.service.set_approval(7455, True)
        reviews = self.service.property_reviews("Shoreditch")
        assert [r.id for r in reviews] == [7453, 7455]

        approved = self.service.property_reviews("Shoreditch", approved_only=True)
        assert [r.id for r in approved] == [7455]

    def test_property_reviews_by_id(self):
        assert [r.id for r in self.service.property_reviews("7456")] == [7456]
