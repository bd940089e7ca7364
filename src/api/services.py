"""
Review Desk API Services
========================

Business logic layer for the API. Wires channel sources, the approval
store, the normalizer, the filter engine and the aggregator together.

Every fetch re-reads the channel (or its fallback) and re-normalizes the
batch against a fresh approval snapshot; nothing is cached between calls.
Unexpected failures are logged with full detail and re-raised as
ReviewServiceError carrying only a generic, operation-level message.
"""

from typing import Optional, List, Union
from dataclasses import dataclass
import logging
import threading

from ..data.config import ReviewPolicyConfig, get_settings
from ..data.hostaway_client import HostawayClient
from ..data.review_source import (
    ReviewSource,
    ReviewBatch,
    FetchParams,
    resolve_batch,
    SOURCE_EXTERNAL,
    SOURCE_FALLBACK,
)
from ..reviews.approval_store import (
    ApprovalStore,
    ApprovalValidationError,
    get_approval_store,
)
from ..reviews.normalizer import normalize_batch
from ..reviews.review_filters import (
    ReviewQuery,
    QueryValidationError,
    apply_query,
    reviews_for_property,
)
from ..reviews.review_models import Review, ReviewStatistics
from ..reviews.review_stats import ReviewStatsAggregator

logger = logging.getLogger(__name__)


class ReviewServiceError(Exception):
    """Unexpected failure inside a service operation."""

    def __init__(self, error: str):
        self.error = error
        super().__init__(error)


@dataclass
class FetchResult:
    """Normalized reviews plus where they came from."""
    reviews: List[Review]
    source: str
    message: str

    @property
    def total(self) -> int:
        return len(self.reviews)


@dataclass
class ApprovalResult:
    review_id: str
    approved: bool

    @property
    def message(self) -> str:
        return f"Review {'approved' if self.approved else 'hidden'} successfully"


class ReviewService:
    """
    Operations behind the review routes.

    Args:
        sources: Channel sources, one batch per channel per fetch
        approvals: Approval store shared by all requests
        policy: Rating/dashboard constants
    """

    def __init__(
        self,
        sources: List[ReviewSource],
        approvals: ApprovalStore,
        policy: Optional[ReviewPolicyConfig] = None,
    ):
        self.sources = sources
        self.approvals = approvals
        self.policy = policy or ReviewPolicyConfig()
        self.aggregator = ReviewStatsAggregator(
            attention_threshold=self.policy.attention_threshold,
            recent_limit=self.policy.recent_limit,
        )

    @property
    def channels(self) -> List[str]:
        return [s.channel for s in self.sources]

    def _sources_for(self, channel: Optional[str]) -> List[ReviewSource]:
        if channel is None:
            return self.sources
        return [s for s in self.sources if s.channel == channel]

    def _load_batches(self, params: FetchParams, channel: Optional[str]) -> List[ReviewBatch]:
        batches = []
        for source in self._sources_for(channel):
            result = source.fetch(params)
            batch = resolve_batch(result, source.fallback_records, source.display_name)
            if batch.is_fallback:
                logger.info(
                    f"{source.display_name}: {batch.message}",
                    extra={"channel": source.channel, "source": batch.source},
                )
            batches.append(batch)
        return batches

    def _load(self, params: Optional[FetchParams], channel: Optional[str] = None) -> FetchResult:
        """Fetch every requested channel and normalize against one approval snapshot."""
        batches = self._load_batches(params or FetchParams(), channel)
        approvals = self.approvals.snapshot()

        reviews: List[Review] = []
        for batch in batches:
            reviews.extend(normalize_batch(
                batch.records,
                channel=batch.channel,
                approvals=approvals,
                neutral_rating=self.policy.neutral_rating,
            ))

        if batches and all(not b.is_fallback for b in batches):
            source = SOURCE_EXTERNAL
        else:
            source = SOURCE_FALLBACK
        message = "; ".join(b.message for b in batches) or "No review channels configured"
        return FetchResult(reviews=reviews, source=source, message=message)

    # =========================================================================
    # Operations
    # =========================================================================

    def fetch_reviews(
        self,
        params: Optional[FetchParams] = None,
        query: Optional[ReviewQuery] = None,
        channel: Optional[str] = None,
    ) -> FetchResult:
        """Fetch, normalize, then filter/sort with the query."""
        try:
            loaded = self._load(params, channel)
            reviews = apply_query(loaded.reviews, query)
        except QueryValidationError:
            raise
        except Exception as e:
            logger.exception(f"Review fetch failed: {e}")
            raise ReviewServiceError("Failed to fetch reviews") from e

        logger.info(
            f"Serving {len(reviews)}/{loaded.total} reviews ({loaded.source})",
            extra={"source": loaded.source},
        )
        return FetchResult(reviews=reviews, source=loaded.source, message=loaded.message)

    def set_approval(self, review_id: Union[int, str], approved: bool) -> ApprovalResult:
        """
        Record the operator's decision for a review id.

        Raises:
            ApprovalValidationError: If approved is not a boolean
        """
        try:
            self.approvals.set_approval(review_id, approved)
        except ApprovalValidationError:
            raise
        except Exception as e:
            logger.exception(f"Approval update failed for {review_id}: {e}")
            raise ReviewServiceError("Failed to update approval status") from e
        return ApprovalResult(review_id=str(review_id), approved=approved)

    def get_statistics(
        self,
        query: Optional[ReviewQuery] = None,
        params: Optional[FetchParams] = None,
    ) -> ReviewStatistics:
        """
        Statistics over the query's view. The needs-attention count always
        covers the full fetched set.
        """
        try:
            loaded = self._load(params)
            view = apply_query(loaded.reviews, query)
            return self.aggregator.build(view, backlog=loaded.reviews)
        except QueryValidationError:
            raise
        except Exception as e:
            logger.exception(f"Statistics computation failed: {e}")
            raise ReviewServiceError("Failed to fetch statistics") from e

    def property_reviews(self, listing_id: str, approved_only: bool = False) -> List[Review]:
        """Reviews for one property (listing-name substring or review id)."""
        try:
            loaded = self._load(None)
            return reviews_for_property(loaded.reviews, listing_id, approved_only)
        except Exception as e:
            logger.exception(f"Property reviews failed for {listing_id}: {e}")
            raise ReviewServiceError("Failed to fetch property reviews") from e


# Shared service instance (lazy-loaded)
_service: Optional[ReviewService] = None
_service_lock = threading.Lock()


def build_review_service() -> ReviewService:
    """Create a service from the global settings."""
    settings = get_settings()
    return ReviewService(
        sources=[HostawayClient(settings.hostaway)],
        approvals=get_approval_store(),
        policy=settings.policy,
    )


def get_review_service() -> ReviewService:
    """FastAPI dependency returning the shared ReviewService."""
    global _service
    with _service_lock:
        if _service is None:
            _service = build_review_service()
        return _service
