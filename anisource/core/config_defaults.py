"""
Configuration Defaults - Default configuration values.

This module provides the default settings and provider configuration
written on first run.
"""

from anisource.core.config_schemas import AppSettings, SourcesConfig, SourceConfig


def get_default_settings() -> AppSettings:
    """
    Get default application settings.

    Returns:
        AppSettings instance with sensible defaults
    """
    return AppSettings()


def get_default_sources() -> SourcesConfig:
    """
    Get default sources configuration.

    The consumet provider is enabled; the offline sample provider is
    registered but disabled.

    Returns:
        SourcesConfig instance with the bundled providers
    """
    sources_config = SourcesConfig()

    sources_config.add_source("consumet", SourceConfig(
        enabled=True,
        priority=1,
        name="Consumet",
        description="Consumet-compatible REST API (gogoanime by default)",
        config={
            "api_base_url": "https://api.consumet.org",
            "provider": "gogoanime",
            "timeout": 30,
        }
    ))

    sources_config.add_source("sample", SourceConfig(
        enabled=False,
        priority=99,
        name="Sample Source",
        description="Offline provider for testing and development",
        config={}
    ))

    return sources_config


# Export utility functions
__all__ = [
    "get_default_settings",
    "get_default_sources",
]
