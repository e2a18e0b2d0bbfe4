"""
Core Exceptions - Custom exception classes for anisource.

This module defines the exception hierarchy used throughout the resolver,
the provider plugins and the command line front end. Per-variant misses
during a resolution are not exceptions; they are recorded as attempts.
"""

from typing import Optional, Any


class AniSourceError(Exception):
    """Base exception class for all anisource-specific errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        """
        Initialize anisource error.

        Args:
            message: Human-readable error message
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ConfigurationError(AniSourceError):
    """Raised when configuration-related errors occur."""

    def __init__(self, message: str, config_path: Optional[str] = None, details: Optional[Any] = None):
        """
        Initialize configuration error.

        Args:
            message: Error description
            config_path: Path to the problematic configuration file
            details: Additional error context
        """
        super().__init__(message, details)
        self.config_path = config_path


class PluginError(AniSourceError):
    """Raised when a provider plugin cannot be loaded or misbehaves."""

    def __init__(self, message: str, plugin_name: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.plugin_name = plugin_name


class ProviderUnavailableError(AniSourceError):
    """
    Raised when a provider call fails.

    Covers network failures, HTTP error statuses, payloads that cannot be
    decoded and per-call timeouts. Distinct from an empty result.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        provider: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        """
        Initialize provider error.

        Args:
            message: Error description
            url: URL that caused the error
            status_code: HTTP status code if applicable
            provider: Name of the provider plugin
            details: Additional error context
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code
        self.provider = provider


class InvalidRequestError(AniSourceError):
    """Raised when a caller passes a request that violates the resolver contract."""

    def __init__(self, message: str, field_name: Optional[str] = None, invalid_value: Optional[Any] = None, details: Optional[Any] = None):
        """
        Initialize invalid request error.

        Args:
            message: Error description
            field_name: Name of the offending request field
            invalid_value: The value that was rejected
            details: Additional error context
        """
        super().__init__(message, details)
        self.field_name = field_name
        self.invalid_value = invalid_value


class ResolutionCancelledError(AniSourceError):
    """Raised when a caller cancels a resolution between provider calls."""


# Export all exception classes
__all__ = [
    "AniSourceError",
    "ConfigurationError",
    "PluginError",
    "ProviderUnavailableError",
    "InvalidRequestError",
    "ResolutionCancelledError",
]
