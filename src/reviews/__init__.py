"""
Review Desk Core
================

Normalization, approval state, filtering and aggregation of guest reviews.

Modules:
    review_models   - Canonical Review and statistics structures
    normalizer      - Channel record -> Review (derived rating, approval join)
    approval_store  - Thread-safe approve/hide flags per review id
    review_filters  - Query filters and stable sorting
    review_stats    - Overall / per-property / per-channel statistics
"""

from .review_models import (
    Review,
    CategoryScore,
    RatingSource,
    ReviewStatistics,
    NEUTRAL_RATING,
    NEEDS_ATTENTION_THRESHOLD,
)
from .normalizer import normalize_review, normalize_batch, NormalizationError
from .approval_store import (
    ApprovalStore,
    InMemoryApprovalStore,
    ApprovalValidationError,
    get_approval_store,
)
from .review_filters import (
    ReviewQuery,
    SortOrder,
    QueryValidationError,
    apply_query,
    reviews_for_property,
)
from .review_stats import ReviewStatsAggregator
