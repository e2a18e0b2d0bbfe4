"""
Configuration Schemas - Pydantic models for configuration validation.

This module defines the data structures and validation rules for
application settings and provider plugin configurations.
"""

import logging
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


logger = logging.getLogger(__name__)


class ResolverSettings(BaseModel):
    """Defaults the command line passes to the resolver."""

    dubbed: bool = Field(
        default=False,
        description="Search for dubbed releases by default"
    )
    index: int = Field(
        default=0,
        ge=0,
        le=50,
        description="Search result to pick when not searching for dubs"
    )
    provider_timeout: float = Field(
        default=20.0,
        ge=1.0,
        le=300.0,
        description="Seconds allowed for each provider call"
    )
    dub_suffix: str = Field(
        default="(Dub)",
        min_length=1,
        description="Marker appended to search strings in dub mode"
    )
    max_concurrent: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum episodes resolved at the same time"
    )


class UISettings(BaseModel):
    """User interface configuration settings."""

    color_theme: Literal["default", "dark", "light"] = Field(
        default="default",
        description="Color theme for the CLI interface"
    )


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level"
    )
    file: Optional[str] = Field(
        default=None,
        description="Optional log file (stderr only when unset)"
    )

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


class AppSettings(BaseModel):
    """Main application settings container."""

    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    ui: UISettings = Field(default_factory=UISettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class SourceConfig(BaseModel):
    """Configuration for an individual provider plugin."""

    enabled: bool = Field(
        default=False,
        description="Whether the source is enabled"
    )
    priority: int = Field(
        default=1,
        ge=1,
        le=100,
        description="Source priority (lower numbers = tried first)"
    )
    name: Optional[str] = Field(
        default=None,
        description="Display name for the source"
    )
    description: Optional[str] = Field(
        default=None,
        description="Description of the source"
    )
    config: Dict[str, Any] = Field(
        default_factory=dict,
        description="Source-specific configuration"
    )

    @field_validator('config')
    @classmethod
    def validate_config(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Validate common source-specific keys."""
        if 'rate_limit' in v and not isinstance(v['rate_limit'], (int, float)):
            raise ValueError("rate_limit must be a number")

        if 'timeout' in v and (not isinstance(v['timeout'], (int, float)) or v['timeout'] <= 0):
            raise ValueError("timeout must be a positive number")

        return v


class GlobalSourceConfig(BaseModel):
    """Global configuration for source management."""

    plugin_timeout: int = Field(
        default=30,
        ge=5,
        le=300,
        description="Default HTTP timeout for plugins without their own"
    )
    fallback_across_sources: bool = Field(
        default=True,
        description="Try the next enabled source when one finds nothing"
    )


class SourcesConfig(BaseModel):
    """Sources configuration container."""

    sources: Dict[str, SourceConfig] = Field(
        default_factory=dict,
        description="Individual source configurations"
    )
    global_config: GlobalSourceConfig = Field(
        default_factory=GlobalSourceConfig,
        description="Global source management settings"
    )

    @model_validator(mode='after')
    def validate_source_priorities(self) -> 'SourcesConfig':
        """Warn about duplicate priorities; order between them is by name."""
        priorities: Dict[int, str] = {}
        for name, config in self.sources.items():
            if config.enabled and config.priority in priorities:
                logger.warning(
                    f"Duplicate priority {config.priority} for sources "
                    f"{name} and {priorities[config.priority]}"
                )
            if config.enabled:
                priorities[config.priority] = name

        return self

    def get_enabled_sources(self) -> Dict[str, SourceConfig]:
        """Get all enabled sources sorted by priority."""
        enabled = {
            name: config for name, config in self.sources.items()
            if config.enabled
        }

        return dict(sorted(
            enabled.items(),
            key=lambda item: (item[1].priority, item[0])
        ))

    def add_source(self, name: str, config: SourceConfig) -> None:
        """Add a new source configuration."""
        self.sources[name] = config

    def get_source(self, name: str) -> Optional[SourceConfig]:
        """Get configuration for a specific source."""
        return self.sources.get(name)


# Export all configuration models
__all__ = [
    "ResolverSettings",
    "UISettings",
    "LoggingSettings",
    "AppSettings",
    "SourceConfig",
    "GlobalSourceConfig",
    "SourcesConfig",
]
