"""
Consumet Data Parser

This module turns consumet JSON payloads into provider candidates, episode
lists and video sources. Individual malformed entries are skipped; a payload
that is not an object, or whose entry list is not a list, is rejected.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from anisource.core.models import ProviderCandidate, ProviderEpisode, VideoSource


logger = logging.getLogger(__name__)


def _payload(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object for {what}, got {type(data).__name__}")
    return data


def _entries(data: Any, key: str, what: str) -> List[Any]:
    entries = _payload(data, what).get(key)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ValueError(f"Expected a list for {what} '{key}', got {type(entries).__name__}")
    return entries


def _title_text(title: Any) -> str:
    # some providers return {"romaji": ..., "english": ...} instead of a string
    if isinstance(title, dict):
        return title.get("english") or title.get("romaji") or title.get("native") or ""
    return str(title) if title else ""


class ConsumetParser:
    """Parser for consumet API responses."""

    def parse_search_results(self, data: Any) -> List[ProviderCandidate]:
        """
        Parse a search payload.

        Args:
            data: Decoded ``{"results": [...]}`` payload

        Returns:
            Candidates with positions assigned in payload order
        """
        candidates: List[ProviderCandidate] = []

        for entry in _entries(data, "results", "search"):
            if not isinstance(entry, dict) or not entry.get("id"):
                logger.warning(f"Skipping malformed search entry: {entry!r}")
                continue

            try:
                candidate = ProviderCandidate(
                    anime_id=str(entry["id"]),
                    title=_title_text(entry.get("title")) or str(entry["id"]),
                    position=len(candidates),
                    url=entry.get("url"),
                )
            except ValidationError as e:
                logger.warning(f"Skipping invalid search entry {entry.get('id')!r}: {e}")
                continue

            candidates.append(candidate)

        logger.debug(f"Parsed {len(candidates)} search results")
        return candidates

    def parse_episodes(self, data: Any) -> List[ProviderEpisode]:
        """
        Parse an info payload into its episode list, order preserved.

        Args:
            data: Decoded ``{"episodes": [...]}`` payload
        """
        episodes: List[ProviderEpisode] = []

        for entry in _entries(data, "episodes", "anime info"):
            if not isinstance(entry, dict) or not entry.get("id"):
                logger.warning(f"Skipping malformed episode entry: {entry!r}")
                continue

            try:
                episode = ProviderEpisode(
                    episode_id=str(entry["id"]),
                    number=self._number(entry.get("number")),
                    title=entry.get("title"),
                )
            except ValidationError as e:
                logger.warning(f"Skipping invalid episode entry {entry.get('id')!r}: {e}")
                continue

            episodes.append(episode)

        return episodes

    def parse_sources(self, data: Any) -> List[VideoSource]:
        """
        Parse a watch payload into video sources, order preserved.

        Args:
            data: Decoded ``{"sources": [...]}`` payload
        """
        sources: List[VideoSource] = []

        for entry in _entries(data, "sources", "watch"):
            if not isinstance(entry, dict) or not entry.get("url"):
                logger.warning(f"Skipping malformed source entry: {entry!r}")
                continue

            url = str(entry["url"])
            is_playlist = entry.get("isM3U8")
            if is_playlist is None:
                is_playlist = ".m3u8" in url

            try:
                source = VideoSource(
                    url=url,
                    is_playlist=bool(is_playlist),
                    quality=entry.get("quality"),
                )
            except ValidationError as e:
                logger.warning(f"Skipping invalid source entry {url!r}: {e}")
                continue

            sources.append(source)

        return sources

    @staticmethod
    def _number(value: Any) -> Optional[float]:
        try:
            return float(value) if value is not None else None
        except (TypeError, ValueError):
            return None
