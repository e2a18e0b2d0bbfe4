"""
Error Handler - Error panels with context and suggestions.

This module provides consistent error display for the command line front
end. Each anisource exception type gets its own panel title, the fields it
carries and a short list of things to try.
"""

import traceback
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from anisource.core.exceptions import (
    AniSourceError,
    ConfigurationError,
    InvalidRequestError,
    PluginError,
    ProviderUnavailableError,
    ResolutionCancelledError,
)
from anisource.ui.console import get_console


class ErrorHandler:
    """Handles error display with consistent formatting and helpful context."""

    @property
    def console(self) -> Console:
        return get_console()

    def handle_error(
        self,
        error: Exception,
        context: Optional[str] = None,
        show_traceback: bool = False
    ) -> None:
        """
        Handle and display an error with appropriate formatting.

        Args:
            error: Exception to handle
            context: Additional context about where the error occurred
            show_traceback: Whether to show the full traceback
        """
        if isinstance(error, AniSourceError):
            self._handle_anisource_error(error, context, show_traceback)
        else:
            self._handle_generic_error(error, context, show_traceback)

    def _handle_anisource_error(
        self,
        error: AniSourceError,
        context: Optional[str] = None,
        show_traceback: bool = False
    ) -> None:
        if isinstance(error, ConfigurationError):
            self._display_configuration_error(error, context, show_traceback)
        elif isinstance(error, PluginError):
            self._display_plugin_error(error, context, show_traceback)
        elif isinstance(error, ProviderUnavailableError):
            self._display_provider_error(error, context, show_traceback)
        elif isinstance(error, InvalidRequestError):
            self._display_request_error(error, context, show_traceback)
        elif isinstance(error, ResolutionCancelledError):
            self.display_warning(error.message, title="🛑 Cancelled")
        else:
            self._display_panel(
                "❌ Error", error.message, [], context,
                ["Run again with [cyan]--debug[/cyan] for more detail"],
                error.details if show_traceback else None,
            )

    def _display_configuration_error(
        self,
        error: ConfigurationError,
        context: Optional[str] = None,
        show_traceback: bool = False
    ) -> None:
        """Display configuration error with specific suggestions."""
        fields = []
        if error.config_path:
            fields.append(("Configuration file", f"[cyan]{escape(str(error.config_path))}[/cyan]"))

        suggestions = [
            "Check configuration file syntax and format",
            "Use [cyan]anisource config show[/cyan] to inspect current values",
            "Reset to defaults with [cyan]anisource config reset[/cyan]",
        ]

        self._display_panel(
            "⚙️  Configuration Error", error.message, fields, context, suggestions,
            error.details if show_traceback else None,
        )

    def _display_plugin_error(
        self,
        error: PluginError,
        context: Optional[str] = None,
        show_traceback: bool = False
    ) -> None:
        """Display plugin error with source management hints."""
        fields = []
        if error.plugin_name:
            fields.append(("Source", f"[cyan]{escape(str(error.plugin_name))}[/cyan]"))

        suggestions = [
            "List sources with [cyan]anisource sources list[/cyan]",
            "Enable a source with [cyan]anisource sources enable <name>[/cyan]",
        ]

        self._display_panel(
            "🔌 Source Error", error.message, fields, context, suggestions,
            error.details if show_traceback else None,
        )

    def _display_provider_error(
        self,
        error: ProviderUnavailableError,
        context: Optional[str] = None,
        show_traceback: bool = False
    ) -> None:
        """Display provider error with connectivity hints."""
        fields = []
        if error.provider:
            fields.append(("Provider", f"[cyan]{escape(str(error.provider))}[/cyan]"))
        if error.url:
            fields.append(("URL", f"[link]{escape(error.url)}[/link]"))
        if error.status_code:
            fields.append(("Status", str(error.status_code)))

        suggestions = [
            "Check your internet connection",
            "Check the provider with [cyan]anisource sources check[/cyan]",
            "Raise the per-call timeout with [cyan]--timeout[/cyan]",
        ]

        self._display_panel(
            "🌐 Provider Unavailable", error.message, fields, context, suggestions,
            error.details if show_traceback else None,
        )

    def _display_request_error(
        self,
        error: InvalidRequestError,
        context: Optional[str] = None,
        show_traceback: bool = False
    ) -> None:
        """Display request validation error."""
        fields = []
        if error.field_name:
            fields.append(("Field", f"[cyan]{escape(str(error.field_name))}[/cyan]"))
        if error.invalid_value is not None:
            fields.append(("Value", escape(repr(error.invalid_value))))

        suggestions = [
            "Episode numbers start at 1",
            "Pass at least one non-empty title",
        ]

        self._display_panel(
            "❌ Invalid Request", error.message, fields, context, suggestions,
            error.details if show_traceback else None,
        )

    def _handle_generic_error(
        self,
        error: Exception,
        context: Optional[str] = None,
        show_traceback: bool = False
    ) -> None:
        """Handle generic Python exceptions."""
        error_type = error.__class__.__name__
        suggestions = [
            "Check the command syntax and arguments",
            "Report this issue if it persists",
        ]

        self._display_panel(
            "💥 Unexpected Error", f"{error_type}: {error}", [], context, suggestions,
            traceback.format_exc() if show_traceback else None,
        )

    def _display_panel(
        self,
        title: str,
        message: str,
        fields: List[tuple],
        context: Optional[str],
        suggestions: List[str],
        details: Optional[object] = None,
    ) -> None:
        content_parts = [f"[error]{escape(message)}[/error]"]

        for label, value in fields:
            content_parts.append(f"[dim]{label}:[/dim] {value}")

        if context:
            content_parts.append(f"\n[dim]Context:[/dim] {escape(context)}")

        if suggestions:
            content_parts.append("\n[info]💡 Suggestions:[/info]")
            for suggestion in suggestions:
                content_parts.append(f"• {suggestion}")

        if details:
            content_parts.append(f"\n[dim]Details:[/dim]\n{escape(str(details))}")

        panel = Panel(
            "\n".join(content_parts),
            title=title,
            border_style="error",
            padding=(1, 2)
        )

        self.console.print(panel)

    def display_warning(self, message: str, title: str = "⚠️  Warning") -> None:
        """
        Display a warning message.

        Args:
            message: Warning message
            title: Warning title
        """
        panel = Panel(
            f"[warning]{message}[/warning]",
            title=f"[warning]{title}[/warning]",
            border_style="warning",
            padding=(1, 2)
        )

        self.console.print(panel)

    def display_info(self, message: str, title: str = "ℹ️  Information") -> None:
        """Display an information message."""
        panel = Panel(
            f"[info]{message}[/info]",
            title=f"[info]{title}[/info]",
            border_style="info",
            padding=(1, 2)
        )

        self.console.print(panel)


# Global error handler instance
_error_handler = ErrorHandler()


def handle_error(
    error: Exception,
    context: Optional[str] = None,
    show_traceback: bool = False
) -> None:
    """
    Handle and display an error using the global error handler.

    Args:
        error: Exception to handle
        context: Additional context
        show_traceback: Whether to show traceback
    """
    _error_handler.handle_error(error, context, show_traceback)


def display_warning(message: str, title: str = "⚠️  Warning") -> None:
    """Display a warning message using the global error handler."""
    _error_handler.display_warning(message, title)


def display_info(message: str, title: str = "ℹ️  Information") -> None:
    """Display an information message using the global error handler."""
    _error_handler.display_info(message, title)


__all__ = [
    "ErrorHandler",
    "handle_error",
    "display_warning",
    "display_info",
]
