"""
Core Layer - Resolution pipeline and application services.

This module contains the data models, title variant generation, the
episode resolver, configuration handling and provider plugin management.
"""

from anisource.core.config_manager import ConfigManager
from anisource.core.config_schemas import AppSettings, SourcesConfig, SourceConfig
from anisource.core.config_defaults import get_default_settings, get_default_sources
from anisource.core.exceptions import (
    AniSourceError,
    ConfigurationError,
    InvalidRequestError,
    PluginError,
    ProviderUnavailableError,
    ResolutionCancelledError,
)
from anisource.core.models import (
    CanonicalTitles,
    ProviderCandidate,
    ProviderEpisode,
    ResolutionRequest,
    ResolutionResult,
    ResolutionStatus,
    TitleSource,
    TitleVariant,
    VariantAttempt,
    VariantOutcome,
    VideoSource,
)
from anisource.core.titles import generate_variants, titles_from_media
from anisource.core.resolver import EpisodeResolver
from anisource.core.plugin_manager import PluginManager

__all__ = [
    # Data Models
    "CanonicalTitles",
    "ProviderCandidate",
    "ProviderEpisode",
    "ResolutionRequest",
    "ResolutionResult",
    "ResolutionStatus",
    "TitleSource",
    "TitleVariant",
    "VariantAttempt",
    "VariantOutcome",
    "VideoSource",
    # Resolution
    "generate_variants",
    "titles_from_media",
    "EpisodeResolver",
    "PluginManager",
    # Configuration Management
    "ConfigManager",
    "AppSettings",
    "SourcesConfig",
    "SourceConfig",
    "get_default_settings",
    "get_default_sources",
    # Exceptions
    "AniSourceError",
    "ConfigurationError",
    "InvalidRequestError",
    "PluginError",
    "ProviderUnavailableError",
    "ResolutionCancelledError",
]
