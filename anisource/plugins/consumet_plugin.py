"""
Consumet Plugin Entry Point

This module exposes the consumet plugin for discovery by the plugin manager.
"""

from anisource.plugins.consumet import ConsumetPlugin

__all__ = ["ConsumetPlugin"]
