"""
Plugin Layer - Content provider implementations.

This module contains the provider plugin interface and the bundled
providers that search, list episodes and resolve video sources.
"""

from anisource.plugins.base import BasePlugin, PluginMetadata

__all__ = [
    "BasePlugin",
    "PluginMetadata",
]
