"""
CLI Context - Global application state shared by the commands.

The main callback stores the configuration manager and the debug flag here
so command modules can reach them without circular imports.
"""

from typing import Optional

from anisource.core import ConfigManager


# Global application state
_config_manager: Optional[ConfigManager] = None
_debug: bool = False


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    if _config_manager is None:
        raise RuntimeError("Configuration manager not initialized")
    return _config_manager


def set_config_manager(config_manager: ConfigManager) -> None:
    """Set the global configuration manager instance."""
    global _config_manager
    _config_manager = config_manager


def is_debug() -> bool:
    return _debug


def set_debug(debug: bool) -> None:
    global _debug
    _debug = debug


__all__ = [
    "get_config_manager",
    "set_config_manager",
    "is_debug",
    "set_debug",
]
