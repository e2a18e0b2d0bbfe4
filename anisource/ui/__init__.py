"""
UI Layer - Console setup and error display.

This module contains the Rich based pieces shared by the CLI commands.
"""

from anisource.ui.console import THEME_STYLES, build_theme, get_console, setup_console
from anisource.ui.error_handler import ErrorHandler, handle_error, display_warning, display_info
from anisource.ui.progress import status_spinner

__all__ = [
    # Console
    "THEME_STYLES",
    "build_theme",
    "get_console",
    "setup_console",
    # Error Handling
    "ErrorHandler",
    "handle_error",
    "display_warning",
    "display_info",
    # Progress
    "status_spinner",
]
