"""
Base Plugin Interface - Abstract base class for content provider plugins.

Every provider is adapted behind the same three operations: search for
candidate entries, locate an episode within a chosen entry, and resolve the
playable sources of that episode. This module defines that interface plus
the shared HTTP plumbing (session, rate limiting, error mapping).
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin, urlparse

import aiohttp
from pydantic import BaseModel, Field

from anisource.core.exceptions import InvalidRequestError, ProviderUnavailableError
from anisource.core.models import ProviderCandidate, ProviderEpisode, VideoSource


logger = logging.getLogger(__name__)


class PluginMetadata(BaseModel):
    """Metadata information for a plugin."""

    name: str = Field(..., description="Plugin display name")
    version: str = Field(default="1.0.0", description="Plugin version")
    author: str = Field(default="Unknown", description="Plugin author")
    description: str = Field(default="", description="Plugin description")
    website: Optional[str] = Field(None, description="Provider website URL")
    rate_limit: float = Field(default=0.0, ge=0.0, description="Minimum seconds between requests")


class BasePlugin(ABC):
    """
    Abstract base class for content provider plugins.

    Subclasses implement ``search``, ``get_episodes`` and ``resolve_sources``.
    ``locate_episode`` is positional over ``get_episodes`` and rarely needs
    overriding.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the plugin with configuration.

        Args:
            config: Plugin-specific configuration dictionary
        """
        self.config = config or {}
        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time = 0.0

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._initialize_config()

    def _initialize_config(self) -> None:
        """Initialize plugin configuration with defaults."""
        self.timeout = self.config.get('timeout', 30)
        self.user_agent = self.config.get(
            'user_agent',
            'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
            '(KHTML, like Gecko) Chrome/124.0 Safari/537.36'
        )
        self.max_retries = self.config.get('max_retries', 0)
        self.retry_delay = self.config.get('retry_delay', 1.0)

    @property
    @abstractmethod
    def metadata(self) -> PluginMetadata:
        """Get plugin metadata information."""

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Get the base URL requests are resolved against."""

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session with proper configuration."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            headers = {
                'User-Agent': self.user_agent,
                'Accept': 'application/json, text/plain, */*',
                'Accept-Language': 'en-US,en;q=0.5',
            }
            self._session = aiohttp.ClientSession(timeout=timeout, headers=headers)

        return self._session

    async def _rate_limit(self) -> None:
        """
        Enforce rate limiting between requests.

        Each caller reserves its start time before sleeping, so concurrent
        requests on one plugin are spaced out as well.
        """
        now = time.monotonic()
        start = max(now, self._last_request_time + self.metadata.rate_limit)
        self._last_request_time = start

        if start > now:
            await asyncio.sleep(start - now)

    def _absolute(self, url: str) -> str:
        if not urlparse(url).netloc:
            return urljoin(self.base_url, url)
        return url

    async def _get_json(self, url: str, **kwargs) -> Any:
        """
        GET a URL and decode its JSON body.

        Raises:
            ProviderUnavailableError: On HTTP >= 400, decode failure, or
                network errors after ``max_retries`` extra attempts
        """
        await self._rate_limit()
        url = self._absolute(url)
        last_exception: Optional[BaseException] = None

        for attempt in range(self.max_retries + 1):
            try:
                self.logger.debug(f"GET {url} (attempt {attempt + 1})")

                async with self.session.get(url, **kwargs) as response:
                    if response.status >= 400:
                        error_text = await response.text()
                        raise ProviderUnavailableError(
                            f"HTTP {response.status} error for {url}",
                            url=url,
                            status_code=response.status,
                            provider=self.name,
                            details=error_text[:500],
                        )

                    return await response.json(content_type=None)

            except ValueError as e:
                raise ProviderUnavailableError(
                    f"Malformed response from {url}: {e}",
                    url=url,
                    provider=self.name,
                )
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                self.logger.warning(f"Request failed (attempt {attempt + 1}): {e}")

                if attempt < self.max_retries:
                    await asyncio.sleep(self.retry_delay * (attempt + 1))

        raise ProviderUnavailableError(
            f"Request failed after {self.max_retries + 1} attempts: {last_exception}",
            url=url,
            provider=self.name,
            details=str(last_exception),
        )

    @abstractmethod
    async def search(self, query: str) -> List[ProviderCandidate]:
        """
        Search the provider for anime entries.

        Args:
            query: Search string

        Returns:
            Candidates in provider order (empty when nothing matches)

        Raises:
            ProviderUnavailableError: If the provider cannot be reached
        """

    @abstractmethod
    async def get_episodes(self, anime_id: str) -> List[ProviderEpisode]:
        """
        Get the provider's full episode list for an entry.

        Args:
            anime_id: Provider-side anime identifier

        Returns:
            Episodes in the order the provider lists them

        Raises:
            ProviderUnavailableError: If the provider cannot be reached
        """

    @abstractmethod
    async def resolve_sources(self, episode_id: str) -> List[VideoSource]:
        """
        Get the playable sources of an episode.

        Args:
            episode_id: Provider-side episode identifier

        Returns:
            Video sources in provider order (possibly empty)

        Raises:
            ProviderUnavailableError: If the provider cannot be reached
        """

    async def locate_episode(self, anime_id: str, episode_number: int) -> Optional[str]:
        """
        Map a 1-based episode number to a provider episode id.

        Episode N is the (N-1)th entry of the provider list; provider
        numbering is not consulted.

        Returns:
            Episode id, or None when the list is shorter than N
        """
        if episode_number < 1:
            raise InvalidRequestError(
                "Episode number must be at least 1",
                field_name="episode_number",
                invalid_value=episode_number,
            )

        episodes = await self.get_episodes(anime_id)
        if len(episodes) < episode_number:
            self.logger.debug(
                f"{anime_id} lists {len(episodes)} episodes, episode {episode_number} not available"
            )
            return None

        return episodes[episode_number - 1].episode_id

    async def validate_connection(self) -> bool:
        """
        Validate that the plugin can reach its provider.

        Returns:
            True if a trivial search succeeds, False otherwise
        """
        try:
            await self.search("test")
            return True
        except Exception as e:
            self.logger.error(f"Connection validation failed: {e}")
            return False

    async def cleanup(self) -> None:
        """Clean up resources used by the plugin."""
        if self._session and not self._session.closed:
            await self._session.close()
            self.logger.debug("HTTP session closed")
        self._session = None

    async def __aenter__(self) -> "BasePlugin":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.cleanup()

    def __str__(self) -> str:
        return f"{self.metadata.name} v{self.metadata.version}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.metadata.name}')"


# Export base plugin class and metadata
__all__ = ["BasePlugin", "PluginMetadata"]
