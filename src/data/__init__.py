"""
Review Desk Data Module
=======================

Channel sources and configuration.

This module provides:
    - HostawayClient: Single-attempt Hostaway reviews client with timeout
    - SourceResult / resolve_batch: Explicit upstream outcome and fallback policy
    - FALLBACK_REVIEWS: Fixed dataset served when a channel is unavailable
    - Settings: Environment-driven configuration

Quick Start:
    from src.data import HostawayClient, FetchParams, resolve_batch

    client = HostawayClient()
    batch = resolve_batch(client.fetch(FetchParams()), client.fallback_records)
    print(batch.source, len(batch.records))

Configuration:
    Set environment variables or create a .env file.
    See src/data/config.py for all available options.
"""

from .config import get_settings, Settings
from .review_source import (
    ReviewSource,
    SourceResult,
    ReviewBatch,
    FetchParams,
    UpstreamUnavailable,
    resolve_batch,
    SOURCE_EXTERNAL,
    SOURCE_FALLBACK,
)
from .hostaway_client import HostawayClient
from .fallback_reviews import FALLBACK_REVIEWS

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "get_settings",
    "Settings",
    # Sources
    "ReviewSource",
    "SourceResult",
    "ReviewBatch",
    "FetchParams",
    "UpstreamUnavailable",
    "resolve_batch",
    "SOURCE_EXTERNAL",
    "SOURCE_FALLBACK",
    "HostawayClient",
    "FALLBACK_REVIEWS",
]
