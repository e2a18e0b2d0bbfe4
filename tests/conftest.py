import asyncio
from typing import Dict, List, Optional

import pytest

from anisource.core.exceptions import ProviderUnavailableError
from anisource.core.models import ProviderCandidate, ProviderEpisode, VideoSource
from anisource.plugins.base import BasePlugin, PluginMetadata


class FakePlugin(BasePlugin):
    """In-memory provider that records every call it receives.

    ``results`` maps a search query to the anime ids returned for it,
    ``episodes`` maps an anime id to its episode count and ``sources`` maps
    an episode id to the URLs it resolves to (default: one m3u8 per episode).
    Queries listed in ``failing`` raise ProviderUnavailableError and those
    in ``slow`` sleep for ``delay`` seconds.
    """

    def __init__(
        self,
        results: Optional[Dict[str, List[str]]] = None,
        episodes: Optional[Dict[str, int]] = None,
        sources: Optional[Dict[str, List[str]]] = None,
        failing: Optional[List[str]] = None,
        slow: Optional[List[str]] = None,
        delay: float = 1.0,
        name: str = "fake",
    ):
        super().__init__({})
        self._name = name
        self.results = results or {}
        self.episodes = episodes or {}
        self.sources = sources
        self.failing = failing or []
        self.slow = slow or []
        self.delay = delay
        self.calls: List[tuple] = []

    @property
    def metadata(self) -> PluginMetadata:
        return PluginMetadata(name=self._name)

    @property
    def base_url(self) -> str:
        return "https://fake.test"

    async def search(self, query: str) -> List[ProviderCandidate]:
        self.calls.append(("search", query))
        if query in self.failing:
            raise ProviderUnavailableError("provider down", provider=self.name)
        if query in self.slow:
            await asyncio.sleep(self.delay)
        return [
            ProviderCandidate(anime_id=anime_id, title=anime_id, position=position)
            for position, anime_id in enumerate(self.results.get(query, []))
        ]

    async def get_episodes(self, anime_id: str) -> List[ProviderEpisode]:
        self.calls.append(("episodes", anime_id))
        return [
            ProviderEpisode(episode_id=f"{anime_id}-ep-{n}", number=n)
            for n in range(1, self.episodes.get(anime_id, 0) + 1)
        ]

    async def resolve_sources(self, episode_id: str) -> List[VideoSource]:
        self.calls.append(("sources", episode_id))
        if self.sources is None:
            urls = [f"https://cdn.fake.test/{episode_id}.m3u8"]
        else:
            urls = self.sources.get(episode_id, [])
        return [VideoSource(url=url, is_playlist=url.endswith(".m3u8")) for url in urls]

    def searches(self) -> List[str]:
        return [args[1] for args in self.calls if args[0] == "search"]


@pytest.fixture
def fake_plugin_class():
    return FakePlugin
