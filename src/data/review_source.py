"""
Review Sources & Fallback Policy
================================

A review source fetches one channel's raw records. Its outcome is a
SourceResult value: either records or an UpstreamUnavailable error, never
an exception. `resolve_batch` then applies the fallback policy as a pure
function of that result.

Usage:
    result = client.fetch(FetchParams(limit=50))
    batch = resolve_batch(result, FALLBACK_REVIEWS, channel="hostaway")
    batch.records, batch.source   # "external" or "fallback"
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Sequence


SOURCE_EXTERNAL = "external"
SOURCE_FALLBACK = "fallback"


class UpstreamUnavailable(Exception):
    """Channel source timed out, failed at transport level, or sent bad data."""

    def __init__(self, channel: str, reason: str):
        self.channel = channel
        self.reason = reason
        super().__init__(f"{channel} unavailable: {reason}")


@dataclass
class FetchParams:
    """Paging/sort hints passed through to the channel API."""
    limit: int = 100
    offset: int = 0
    sort_by: str = "submittedAt"
    sort_order: str = "desc"

    def to_query(self) -> Dict[str, Any]:
        return {
            "limit": self.limit,
            "offset": self.offset,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
        }


@dataclass
class SourceResult:
    """Outcome of one fetch: records on success, error otherwise."""
    channel: str
    records: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[UpstreamUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, channel: str, records: List[Dict[str, Any]]) -> "SourceResult":
        return cls(channel=channel, records=records)

    @classmethod
    def failure(cls, channel: str, reason: str) -> "SourceResult":
        return cls(channel=channel, error=UpstreamUnavailable(channel, reason))


@dataclass
class ReviewBatch:
    """Raw records selected for normalization, with their provenance."""
    channel: str
    records: List[Dict[str, Any]]
    source: str
    message: str

    @property
    def is_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK


class ReviewSource(ABC):
    """One external review channel."""

    channel: str = ""

    @abstractmethod
    def fetch(self, params: FetchParams) -> SourceResult:
        """Fetch raw records once. Must not raise for upstream failures."""

    @property
    @abstractmethod
    def fallback_records(self) -> Sequence[Dict[str, Any]]:
        """Fixed local dataset served when the channel is unavailable."""

    @property
    def display_name(self) -> str:
        return self.channel.capitalize()


def resolve_batch(
    result: SourceResult,
    fallback: Sequence[Dict[str, Any]],
    display_name: Optional[str] = None,
) -> ReviewBatch:
    """
    Choose the records to normalize: upstream data when the fetch succeeded
    with records, the fixed fallback set otherwise.
    """
    name = display_name or result.channel
    if result.ok and result.records:
        return ReviewBatch(
            channel=result.channel,
            records=list(result.records),
            source=SOURCE_EXTERNAL,
            message=f"Data from {name} API",
        )

    reason = result.error.reason if result.error else "no records returned"
    return ReviewBatch(
        channel=result.channel,
        records=[dict(r) for r in fallback],
        source=SOURCE_FALLBACK,
        message=f"Using fallback data ({name} unavailable: {reason})",
    )
