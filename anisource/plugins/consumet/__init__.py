"""
Consumet Plugin - Provider plugin for consumet-compatible REST APIs.

This plugin resolves episodes through the anime routes of a consumet
deployment: search, episode listing and source extraction.
"""

from .plugin import ConsumetPlugin
from .config import ConsumetConfig, get_default_config, merge_with_defaults

__all__ = [
    "ConsumetPlugin",
    "ConsumetConfig",
    "get_default_config",
    "merge_with_defaults",
]
