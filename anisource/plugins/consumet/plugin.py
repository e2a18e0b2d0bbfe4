"""
Consumet Plugin - Provider plugin backed by a consumet-compatible REST API.

Search, episode listing and source extraction all go through the anime
routes of the API for one configured provider (gogoanime by default).
"""

import logging
from typing import Any, Dict, List, Optional

from anisource.core.exceptions import ProviderUnavailableError
from anisource.core.models import ProviderCandidate, ProviderEpisode, VideoSource
from anisource.plugins.base import BasePlugin, PluginMetadata

from .api import ConsumetAPI
from .config import ConsumetConfig, merge_with_defaults
from .parser import ConsumetParser


logger = logging.getLogger(__name__)


class ConsumetPlugin(BasePlugin):
    """
    Consumet plugin for resolving episodes through a consumet deployment.

    The provider route decides which upstream site is scraped; the API
    already returns JSON, so no HTML parsing happens here.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize consumet plugin.

        Args:
            config: Plugin configuration dictionary
        """
        merged_config = merge_with_defaults(config)

        try:
            self.plugin_config = ConsumetConfig(**merged_config)
        except ValueError as e:
            logger.warning(f"Invalid consumet configuration, using defaults: {e}")
            self.plugin_config = ConsumetConfig()
            merged_config = self.plugin_config.model_dump()

        super().__init__(merged_config)

        self._metadata = PluginMetadata(
            name=f"consumet/{self.plugin_config.provider}",
            version="1.0.0",
            author="anisource",
            description=f"Consumet API ({self.plugin_config.provider}) provider",
            website=self.plugin_config.api_base_url,
            rate_limit=self.plugin_config.rate_limit,
        )
        self.api = ConsumetAPI(
            self._get_json,
            api_base_url=self.plugin_config.api_base_url,
            provider=self.plugin_config.provider,
        )
        self.parser = ConsumetParser()

    @property
    def metadata(self) -> PluginMetadata:
        return self._metadata

    @property
    def base_url(self) -> str:
        return self.plugin_config.api_base_url

    def _malformed(self, what: str, error: Exception) -> ProviderUnavailableError:
        return ProviderUnavailableError(
            f"Malformed {what} response from {self.name}: {error}",
            provider=self.name,
        )

    async def search(self, query: str) -> List[ProviderCandidate]:
        """
        Search the provider.

        Args:
            query: Search string

        Returns:
            Candidates in provider order
        """
        if not query or not query.strip():
            return []

        data = await self.api.search(query.strip())
        try:
            candidates = self.parser.parse_search_results(data)
        except ValueError as e:
            raise self._malformed("search", e)

        logger.debug(f"{self.name}: {len(candidates)} results for '{query}'")
        return candidates

    async def get_episodes(self, anime_id: str) -> List[ProviderEpisode]:
        """
        Get the episode list of an entry.

        Args:
            anime_id: Provider-side anime identifier
        """
        data = await self.api.anime_info(anime_id)
        try:
            return self.parser.parse_episodes(data)
        except ValueError as e:
            raise self._malformed("info", e)

    async def resolve_sources(self, episode_id: str) -> List[VideoSource]:
        """
        Get the playable sources of an episode.

        Args:
            episode_id: Provider-side episode identifier
        """
        data = await self.api.watch(episode_id, server=self.plugin_config.server)
        try:
            sources = self.parser.parse_sources(data)
        except ValueError as e:
            raise self._malformed("watch", e)

        logger.debug(f"{self.name}: {len(sources)} sources for {episode_id}")
        return sources

    def __repr__(self) -> str:
        return f"ConsumetPlugin(api='{self.base_url}', provider='{self.plugin_config.provider}')"
