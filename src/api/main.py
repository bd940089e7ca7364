"""
Review Desk FastAPI Application
===============================

REST API for the guest review dashboard.

Endpoints:
    GET   /api/health                         - Health check
    GET   /api/reviews                        - Normalized reviews, all channels
    GET   /api/reviews/hostaway               - Normalized Hostaway reviews
    PATCH /api/reviews/{id}/approval          - Approve / hide a review
    GET   /api/reviews/statistics             - Aggregated statistics
    GET   /api/reviews/property/{listing_id}  - Reviews for one property
    GET   /api/reviews/export                 - CSV of the filtered view

Usage:
    uvicorn src.api.main:app --reload --port 5000

    Or with CLI:
    python -m src.api.main
"""

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
from datetime import datetime, timezone

from ..data.config import get_settings
from ..reviews.approval_store import ApprovalValidationError
from ..reviews.review_filters import QueryValidationError
from .logging_config import setup_logging
from .models import HealthResponse, ErrorResponse
from .review_routes import router as review_router
from .services import ReviewServiceError, get_review_service

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    setup_logging(settings.logging)

    logger.info("Starting Review Desk API...")

    service = get_review_service()
    logger.info(f"Review channels: {', '.join(service.channels)}")
    if not settings.hostaway.has_credentials:
        logger.warning("HOSTAWAY_API_KEY not set, Hostaway requests will use fallback data")

    yield

    logger.info("Shutting down Review Desk API...")


app = FastAPI(
    title="Review Desk API",
    description="Guest review normalization, approval and statistics",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(review_router)


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def _error(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(ApprovalValidationError)
async def approval_validation_handler(request: Request, exc: ApprovalValidationError):
    return _error(400, str(exc), "Field 'approved' must be true or false")


@app.exception_handler(QueryValidationError)
async def query_validation_handler(request: Request, exc: QueryValidationError):
    return _error(400, "Invalid query parameters", str(exc))


@app.exception_handler(ReviewServiceError)
async def service_error_handler(request: Request, exc: ReviewServiceError):
    # Details were logged where the error was raised
    return _error(500, exc.error, GENERIC_ERROR_MESSAGE)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error(500, "Internal server error", GENERIC_ERROR_MESSAGE)


# ============================================================================
# HEALTH ENDPOINT
# ============================================================================

@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Liveness check."""
    settings = get_settings()
    return HealthResponse(
        message="Review Desk API is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.environment,
    )


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = get_settings().api.port

    print("=" * 60)
    print("REVIEW DESK API SERVER")
    print("=" * 60)
    print()
    print(f"Starting server at http://localhost:{port}")
    print()
    print("Endpoints:")
    print("  GET   /api/health")
    print("  GET   /api/reviews/hostaway")
    print("  PATCH /api/reviews/{id}/approval")
    print("  GET   /api/reviews/statistics")
    print("  GET   /api/reviews/property/{listing_id}")
    print("  GET   /api/reviews/export")
    print()
    print("=" * 60)

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info",
    )
