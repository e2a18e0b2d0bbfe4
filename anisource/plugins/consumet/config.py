"""
Consumet Plugin Configuration

This module handles configuration validation and defaults for the consumet plugin.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)

KNOWN_PROVIDERS = ("gogoanime", "zoro", "animepahe", "9anime", "animefox")


class ConsumetConfig(BaseModel):
    """Configuration model for the consumet plugin."""

    api_base_url: str = Field(default="https://api.consumet.org", description="Consumet API root")
    provider: str = Field(default="gogoanime", description="Anime provider route on the API")
    timeout: float = Field(default=30, description="Request timeout in seconds")
    max_retries: int = Field(default=0, ge=0, le=5, description="Extra attempts per request")
    rate_limit: float = Field(default=0.0, ge=0.0, description="Minimum seconds between requests")
    server: Optional[str] = Field(default=None, description="Streaming server passed to /watch")

    @field_validator('api_base_url')
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must be an http(s) URL")
        return v.rstrip("/")

    @field_validator('provider')
    @classmethod
    def validate_provider(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in KNOWN_PROVIDERS:
            logger.warning(f"Unknown consumet provider '{v}', requests may fail")
        return v

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v < 1:
            raise ValueError("Timeout must be at least 1 second")
        return v


def get_default_config() -> Dict[str, Any]:
    """Get default configuration for the consumet plugin."""
    return ConsumetConfig().model_dump()


def merge_with_defaults(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Merge provided config with defaults.

    Args:
        config: User configuration dictionary

    Returns:
        Merged configuration dictionary
    """
    merged = get_default_config()
    if config:
        merged.update(config)
    return merged
