"""
Consumet API Client

This module builds the consumet REST routes and fetches their JSON payloads.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import quote


logger = logging.getLogger(__name__)

FetchJson = Callable[..., Awaitable[Any]]


class ConsumetAPI:
    """Client for the anime routes of a consumet-compatible API."""

    def __init__(self, fetch_json: FetchJson, api_base_url: str, provider: str = "gogoanime"):
        """
        Initialize consumet API client.

        Args:
            fetch_json: Coroutine function performing a GET and decoding JSON
            api_base_url: Root of the consumet deployment
            provider: Provider route, e.g. ``gogoanime``
        """
        self._fetch_json = fetch_json
        self.base_url = f"{api_base_url.rstrip('/')}/anime/{provider}"

    async def search(self, query: str, page: int = 1) -> Any:
        """GET /anime/{provider}/{query}"""
        url = f"{self.base_url}/{quote(query, safe='')}"
        logger.debug(f"Searching consumet: '{query}' (page {page})")
        return await self._fetch_json(url, params={"page": page})

    async def anime_info(self, anime_id: str) -> Any:
        """GET /anime/{provider}/info/{id}"""
        url = f"{self.base_url}/info/{quote(anime_id, safe='')}"
        return await self._fetch_json(url)

    async def watch(self, episode_id: str, server: Optional[str] = None) -> Any:
        """GET /anime/{provider}/watch/{episodeId}"""
        url = f"{self.base_url}/watch/{quote(episode_id, safe='')}"
        params: Dict[str, str] = {"server": server} if server else {}
        return await self._fetch_json(url, params=params)
