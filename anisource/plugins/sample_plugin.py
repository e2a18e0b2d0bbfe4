"""
Sample Plugin - Offline provider for testing and development.

This plugin serves a small in-memory catalog through the BasePlugin
interface, so the resolver and the command line can be exercised without
network access.
"""

import logging
from typing import Any, Dict, List

from anisource.core.exceptions import ProviderUnavailableError
from anisource.core.models import ProviderCandidate, ProviderEpisode, VideoSource
from anisource.plugins.base import BasePlugin, PluginMetadata


logger = logging.getLogger(__name__)

SAMPLE_CATALOG: List[Dict[str, Any]] = [
    {"id": "shingeki-no-kyojin", "title": "Shingeki no Kyojin", "episodes": 25},
    {"id": "shingeki-no-kyojin-dub", "title": "Shingeki no Kyojin (Dub)", "episodes": 25},
    {"id": "shingeki-no-kyojin-season-2", "title": "Shingeki no Kyojin Season 2", "episodes": 12},
    {"id": "kimetsu-no-yaiba", "title": "Kimetsu no Yaiba", "episodes": 26},
    {"id": "kimetsu-no-yaiba-dub", "title": "Kimetsu no Yaiba (Dub)", "episodes": 26},
    {"id": "one-piece", "title": "One Piece", "episodes": 50},
]


class SamplePlugin(BasePlugin):
    """
    Sample plugin backed by SAMPLE_CATALOG.

    Search is a case-insensitive substring match on titles; every episode
    resolves to an HLS playlist and an MP4 fallback.
    """

    @property
    def metadata(self) -> PluginMetadata:
        return PluginMetadata(
            name="sample",
            version="1.0.0",
            author="anisource",
            description="Offline provider for testing and development",
            website="https://example.com",
        )

    @property
    def base_url(self) -> str:
        return "https://example.com"

    async def search(self, query: str) -> List[ProviderCandidate]:
        logger.debug(f"Sample plugin searching for: {query}")
        needle = query.strip().lower()
        if not needle:
            return []

        matches = [entry for entry in SAMPLE_CATALOG if needle in entry["title"].lower()]
        return [
            ProviderCandidate(
                anime_id=entry["id"],
                title=entry["title"],
                position=position,
                url=f"{self.base_url}/anime/{entry['id']}",
            )
            for position, entry in enumerate(matches)
        ]

    async def get_episodes(self, anime_id: str) -> List[ProviderEpisode]:
        for entry in SAMPLE_CATALOG:
            if entry["id"] == anime_id:
                return [
                    ProviderEpisode(episode_id=f"{anime_id}-episode-{n}", number=n)
                    for n in range(1, entry["episodes"] + 1)
                ]

        raise ProviderUnavailableError(
            f"Unknown sample entry: {anime_id}",
            url=f"{self.base_url}/anime/{anime_id}",
            status_code=404,
            provider=self.name,
        )

    async def resolve_sources(self, episode_id: str) -> List[VideoSource]:
        logger.debug(f"Sample plugin resolving sources for: {episode_id}")
        return [
            VideoSource(
                url=f"{self.base_url}/stream/{episode_id}/master.m3u8",
                is_playlist=True,
                quality="default",
            ),
            VideoSource(
                url=f"{self.base_url}/download/{episode_id}/1080p.mp4",
                is_playlist=False,
                quality="1080p",
            ),
        ]

    async def validate_connection(self) -> bool:
        return True


__all__ = ["SamplePlugin", "SAMPLE_CATALOG"]
