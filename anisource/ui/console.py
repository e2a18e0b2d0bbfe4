"""
Console - The shared Rich console and the named styles it renders with.

Tables and panels refer to styles by name (``primary``, ``muted``,
``status.enabled`` ...), so switching the color theme only swaps the
style table below.
"""

from typing import Dict, Optional

from rich.console import Console
from rich.theme import Theme


DEFAULT_THEME = "default"

THEME_STYLES: Dict[str, Dict[str, str]] = {
    "default": {
        "primary": "blue",
        "accent": "magenta",
        "muted": "dim white",
        "info": "blue",
        "warning": "yellow",
        "error": "red",
        "status.enabled": "green",
    },
    "dark": {
        "primary": "bright_blue",
        "accent": "bright_magenta",
        "muted": "bright_black",
        "info": "bright_blue",
        "warning": "bright_yellow",
        "error": "bright_red",
        "status.enabled": "bright_green",
    },
    "light": {
        "primary": "blue",
        "accent": "dark_magenta",
        "muted": "grey37",
        "info": "blue",
        "warning": "dark_orange",
        "error": "dark_red",
        "status.enabled": "dark_green",
    },
}

_console: Optional[Console] = None


def build_theme(theme_name: str = DEFAULT_THEME) -> Theme:
    """Rich theme for a theme name, falling back to the default theme."""
    styles = dict(THEME_STYLES.get(theme_name, THEME_STYLES[DEFAULT_THEME]))
    styles["table.header"] = f"bold {styles['primary']}"
    styles["link"] = f"underline {styles['primary']}"
    styles["status.disabled"] = styles["muted"]
    styles["status.error"] = styles["error"]
    return Theme(styles)


def setup_console(theme_name: str = DEFAULT_THEME, width: Optional[int] = None) -> Console:
    """
    Replace the global console with one using the given theme.

    Args:
        theme_name: One of THEME_STYLES; unknown names use the default
        width: Console width override
    """
    global _console

    _console = Console(theme=build_theme(theme_name), width=width)
    return _console


def get_console() -> Console:
    """Get the global console, creating a default one on first use."""
    if _console is None:
        return setup_console()
    return _console


__all__ = [
    "DEFAULT_THEME",
    "THEME_STYLES",
    "build_theme",
    "setup_console",
    "get_console",
]
