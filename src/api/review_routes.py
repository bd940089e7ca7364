"""
Review API Routes
=================

GET   /api/reviews                          - fetch every configured channel
GET   /api/reviews/hostaway                 - fetch the Hostaway channel
PATCH /api/reviews/{review_id}/approval     - approve / hide a review
GET   /api/reviews/statistics               - aggregated statistics
GET   /api/reviews/property/{listing_id}    - reviews for one property
GET   /api/reviews/export                   - CSV of the filtered view

The fetch, statistics and export routes accept the same optional filters:
search, property, minRating, status, channel, dateFrom, dateTo, sort.
"""

import csv
import io
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import StreamingResponse

from ..data.review_source import FetchParams
from ..reviews.approval_store import ApprovalValidationError
from ..reviews.review_filters import ReviewQuery
from .models import (
    ReviewModel,
    ReviewListResponse,
    ApprovalResponse,
    StatisticsModel,
    StatisticsResponse,
    PropertyReviewsResponse,
)
from .services import ReviewService, FetchResult, get_review_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def fetch_params(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    sortBy: str = Query("submittedAt"),
    sortOrder: str = Query("desc"),
) -> FetchParams:
    """Paging hints forwarded to the channel API."""
    return FetchParams(limit=limit, offset=offset, sort_by=sortBy, sort_order=sortOrder)


def review_query(
    search: Optional[str] = Query(None, description="Guest, text or property substring"),
    property: Optional[str] = Query(None, description="Exact listing name"),
    minRating: Optional[int] = Query(None, ge=0, le=10),
    status: Optional[str] = Query(None, description="approved | pending"),
    channel: Optional[str] = Query(None),
    dateFrom: Optional[str] = Query(None),
    dateTo: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, description="newest | oldest | rating_desc | rating_asc"),
) -> ReviewQuery:
    return ReviewQuery.from_params(
        search=search,
        property=property,
        min_rating=minRating,
        status=status,
        channel=channel,
        date_from=dateFrom,
        date_to=dateTo,
        sort=sort,
    )


def _list_response(result: FetchResult) -> ReviewListResponse:
    return ReviewListResponse(
        data=[ReviewModel.from_review(r) for r in result.reviews],
        total=result.total,
        source=result.source,
        message=result.message,
    )


@router.get("", response_model=ReviewListResponse)
def get_reviews(
    params: FetchParams = Depends(fetch_params),
    query: ReviewQuery = Depends(review_query),
    service: ReviewService = Depends(get_review_service),
):
    """Reviews from every configured channel, filtered and sorted."""
    return _list_response(service.fetch_reviews(params, query))


@router.get("/hostaway", response_model=ReviewListResponse)
def get_hostaway_reviews(
    params: FetchParams = Depends(fetch_params),
    query: ReviewQuery = Depends(review_query),
    service: ReviewService = Depends(get_review_service),
):
    """
    Reviews from Hostaway, normalized.

    Falls back to the fixed local dataset when the API is unavailable;
    `source` tells which one was served.
    """
    return _list_response(service.fetch_reviews(params, query, channel="hostaway"))


@router.patch("/{review_id}/approval", response_model=ApprovalResponse)
def update_approval(
    review_id: str,
    payload: Any = Body(None),
    service: ReviewService = Depends(get_review_service),
):
    """Set `approved` (strict boolean) for a review id. Any other body is a 400."""
    approved = payload.get("approved") if isinstance(payload, dict) else None
    if not isinstance(approved, bool):
        raise ApprovalValidationError("Invalid approval status. Must be boolean.")

    result = service.set_approval(review_id, approved)
    return ApprovalResponse(
        message=result.message,
        reviewId=result.review_id,
        approved=result.approved,
    )


@router.get("/statistics", response_model=StatisticsResponse)
def get_statistics(
    query: ReviewQuery = Depends(review_query),
    service: ReviewService = Depends(get_review_service),
):
    """Statistics for the filtered view; needsAttentionCount covers all reviews."""
    stats = service.get_statistics(query)
    return StatisticsResponse(data=StatisticsModel.from_statistics(stats))


@router.get("/property/{listing_id}", response_model=PropertyReviewsResponse)
def get_property_reviews(
    listing_id: str,
    approved_only: bool = Query(False),
    service: ReviewService = Depends(get_review_service),
):
    """Reviews whose listing name contains `listing_id`, or whose id equals it."""
    reviews = service.property_reviews(listing_id, approved_only)
    return PropertyReviewsResponse(
        data=[ReviewModel.from_review(r) for r in reviews],
        total=len(reviews),
        listingId=listing_id,
    )


@router.get("/export")
def export_reviews_csv(
    query: ReviewQuery = Depends(review_query),
    service: ReviewService = Depends(get_review_service),
):
    """Export the filtered view as CSV."""
    result = service.fetch_reviews(query=query)

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["Property", "Guest", "Rating", "Review", "Date", "Channel", "Status"])

    for review in result.reviews:
        writer.writerow([
            review.listing_name,
            review.guest_name,
            f"{review.rating:.1f}",
            review.text,
            review.submitted_at,
            review.channel,
            "Approved" if review.approved else "Pending",
        ])

    output.seek(0)
    filename = f"reviews_export_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M')}.csv"
    logger.info(f"Exported {result.total} reviews to CSV")

    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
