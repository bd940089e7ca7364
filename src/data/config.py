"""
Review Desk Configuration Module
================================

Centralized configuration management using environment variables.
Supports both .env files and system environment variables.

Environment Variables:
    HOSTAWAY_BASE_URL: Hostaway API root (default: https://api.hostaway.com/v1)
    HOSTAWAY_ACCOUNT_ID: Hostaway account id (default: 61148)
    HOSTAWAY_API_KEY: Bearer token; when unset the fallback dataset is served
    HOSTAWAY_TIMEOUT: Request timeout in seconds (default: 10)

    REVIEWS_NEUTRAL_RATING: Rating for records without scores (default: 7.5)
    REVIEWS_ATTENTION_THRESHOLD: "Needs attention" cutoff (default: 8)
    REVIEWS_RECENT_LIMIT: Recent activity size (default: 5)

    CORS_ORIGINS: Extra comma-separated allowed origins
    LOG_LEVEL / LOG_JSON / LOG_FILE: Logging options
    ENVIRONMENT: development / production (default: development)
"""

import os
from dataclasses import dataclass, field
from typing import Optional, List
from pathlib import Path
from dotenv import load_dotenv

from ..reviews.review_models import (
    NEUTRAL_RATING,
    NEEDS_ATTENTION_THRESHOLD,
    RECENT_ACTIVITY_LIMIT,
)


# Load environment variables from .env file if present
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable, or `default` when unset."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be an integer, got: {value}")


def get_env_float(key: str, default: float) -> float:
    """Get environment variable as float."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be a float, got: {value}")


def get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def get_env_list(key: str) -> List[str]:
    """Get comma-separated environment variable as a list."""
    value = os.getenv(key, "")
    return [v.strip() for v in value.split(",") if v.strip()]


@dataclass
class HostawayConfig:
    """Hostaway API configuration."""

    base_url: str = field(default_factory=lambda: get_env("HOSTAWAY_BASE_URL", "https://api.hostaway.com/v1"))
    account_id: str = field(default_factory=lambda: get_env("HOSTAWAY_ACCOUNT_ID", "61148"))
    api_key: Optional[str] = field(default_factory=lambda: get_env("HOSTAWAY_API_KEY"))

    # Single attempt, no retries
    request_timeout: float = field(default_factory=lambda: get_env_float("HOSTAWAY_TIMEOUT", 10.0))

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        self.base_url = self.base_url.rstrip("/")


@dataclass
class ReviewPolicyConfig:
    """Rating and dashboard policy constants."""

    neutral_rating: float = field(default_factory=lambda: get_env_float("REVIEWS_NEUTRAL_RATING", NEUTRAL_RATING))
    attention_threshold: float = field(
        default_factory=lambda: get_env_float("REVIEWS_ATTENTION_THRESHOLD", NEEDS_ATTENTION_THRESHOLD)
    )
    recent_limit: int = field(default_factory=lambda: get_env_int("REVIEWS_RECENT_LIMIT", RECENT_ACTIVITY_LIMIT))

    def __post_init__(self):
        """Validate configuration."""
        if not 0 <= self.neutral_rating <= 10:
            raise ValueError("neutral_rating must be between 0 and 10")
        if self.recent_limit <= 0:
            raise ValueError("recent_limit must be positive")


@dataclass
class ApiConfig:
    """HTTP layer configuration."""

    cors_origins: List[str] = field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ] + get_env_list("CORS_ORIGINS"))
    port: int = field(default_factory=lambda: get_env_int("PORT", 5000))


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: get_env("LOG_FILE"))

    # Structured logging
    json_logs: bool = field(default_factory=lambda: get_env_bool("LOG_JSON", False))


@dataclass
class Settings:
    """Main application settings container."""

    hostaway: HostawayConfig = field(default_factory=HostawayConfig)
    policy: ReviewPolicyConfig = field(default_factory=ReviewPolicyConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Application metadata
    app_name: str = "review-desk"
    app_version: str = "1.0.0"
    environment: str = field(default_factory=lambda: get_env("ENVIRONMENT", "development"))


def load_settings() -> Settings:
    """
    Load and validate all application settings.

    Raises:
        ValueError: If configuration is invalid
    """
    return Settings()


# Global settings instance (lazy-loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton pattern).

    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
