"""
Hostaway Review Client
======================

Fetches guest reviews from the Hostaway API.

Each call makes exactly one HTTP request with an explicit timeout.
Timeouts, transport errors, non-2xx responses, malformed JSON and empty
results are reported as a failed SourceResult; the caller substitutes
the fixed fallback dataset.

Configuration:
    HOSTAWAY_API_KEY, HOSTAWAY_ACCOUNT_ID, HOSTAWAY_BASE_URL, HOSTAWAY_TIMEOUT

Usage:
    client = HostawayClient()
    result = client.fetch(FetchParams(limit=100))
    if result.ok:
        print(f"{len(result.records)} reviews")
"""

import logging
from typing import List, Dict, Any, Optional, Sequence

import requests

from .config import HostawayConfig, get_settings
from .fallback_reviews import FALLBACK_REVIEWS
from .review_source import ReviewSource, SourceResult, FetchParams

logger = logging.getLogger(__name__)


class HostawayClient(ReviewSource):
    """Single-attempt Hostaway reviews client."""

    channel = "hostaway"

    def __init__(
        self,
        config: Optional[HostawayConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or get_settings().hostaway
        self.session = session or requests.Session()
        self._requests_made = 0
        self._failures = 0

    @property
    def display_name(self) -> str:
        return "Hostaway"

    @property
    def fallback_records(self) -> Sequence[Dict[str, Any]]:
        return FALLBACK_REVIEWS

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "X-HOSTAWAY-ACCOUNT-ID": str(self.config.account_id),
            "Accept": "application/json",
        }

    def fetch(self, params: Optional[FetchParams] = None) -> SourceResult:
        """
        Fetch one page of reviews.

        Returns:
            SourceResult with records, or with an UpstreamUnavailable error
        """
        params = params or FetchParams()

        if not self.config.has_credentials:
            return self._fail("API key not configured")

        logger.info(f"Fetching reviews from Hostaway API (limit={params.limit}, offset={params.offset})")

        try:
            response = self.session.get(
                f"{self.config.base_url}/reviews",
                headers=self._headers(),
                params=params.to_query(),
                timeout=self.config.request_timeout,
            )
            self._requests_made += 1
        except requests.Timeout:
            return self._fail(f"timed out after {self.config.request_timeout}s")
        except requests.RequestException as e:
            return self._fail(f"request failed: {e}")

        if response.status_code != 200:
            return self._fail(f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            return self._fail(f"invalid JSON: {e}")

        records = self._parse_records(payload)
        if records is None:
            return self._fail("unexpected response shape")
        if not records:
            return self._fail("no reviews returned")

        logger.info(f"Fetched {len(records)} reviews from Hostaway API")
        return SourceResult.success(self.channel, records)

    def _parse_records(self, payload: Any) -> Optional[List[Dict[str, Any]]]:
        """Extract `result` records; None if the shape is wrong."""
        if not isinstance(payload, dict):
            return None
        result = payload.get("result")
        if not isinstance(result, list):
            return None
        if not all(self._is_record(r) for r in result):
            return None
        return result

    @staticmethod
    def _is_record(record: Any) -> bool:
        if not isinstance(record, dict) or record.get("id") is None:
            return False
        categories = record.get("reviewCategory")
        return categories is None or isinstance(categories, list)

    def _fail(self, reason: str) -> SourceResult:
        self._failures += 1
        logger.warning(
            f"Hostaway API unavailable: {reason}",
            extra={"channel": self.channel, "source": "fallback"},
        )
        return SourceResult.failure(self.channel, reason)

    def get_stats(self) -> Dict[str, Any]:
        """Get client statistics."""
        return {
            "requests_made": self._requests_made,
            "failures": self._failures,
        }
