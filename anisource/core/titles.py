"""
Title Variants - Search string generation from catalog titles.

Providers name their entries inconsistently, so an exact-title search often
misses. This module expands the canonical titles of a catalog entry into an
ordered list of search strings, and reads titles and episode counts out of
AniList-shaped media mappings supplied by the catalog layer.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from anisource.core.models import CanonicalTitles, TitleSource, TitleVariant


logger = logging.getLogger(__name__)

SEASON_MARKER = "Season "
PART_MARKER = "Part "
COLON = ":"


def _remove_all(text: str, marker: str) -> str:
    return text.replace(marker, "")


def _rewrites(text: str) -> List[str]:
    """Mechanical rewrites of one title, in rule order."""
    rewrites = []

    if SEASON_MARKER in text:
        rewrites.append(_remove_all(text, SEASON_MARKER))
    # computed from the original title, not from the season rewrite above
    if SEASON_MARKER in text and PART_MARKER in text:
        rewrites.append(_remove_all(_remove_all(text, SEASON_MARKER), PART_MARKER))
    if PART_MARKER in text:
        rewrites.append(_remove_all(text, PART_MARKER))
    if COLON in text:
        rewrites.append(_remove_all(text, COLON))

    return rewrites


def generate_variants(titles: CanonicalTitles) -> List[TitleVariant]:
    """
    Expand canonical titles into ordered search variants.

    Romaji comes first, then English, then synonyms in input order. Each of
    those is then rewritten ("Season ", "Season "+"Part ", "Part ", ":")
    and the rewrites are appended after all originals. Duplicates are kept.

    Args:
        titles: Canonical titles of the catalog entry

    Returns:
        Ordered list of title variants, empty when no title is present
    """
    variants: List[TitleVariant] = []

    if titles.romaji and titles.romaji.strip():
        variants.append(TitleVariant(text=titles.romaji, source=TitleSource.ROMAJI))
    if titles.english and titles.english.strip():
        variants.append(TitleVariant(text=titles.english, source=TitleSource.ENGLISH))
    for synonym in titles.synonyms:
        variants.append(TitleVariant(text=synonym, source=TitleSource.SYNONYM))

    originals = list(variants)
    for variant in originals:
        for rewrite in _rewrites(variant.text):
            if rewrite.strip():
                variants.append(TitleVariant(text=rewrite, source=TitleSource.DERIVED))

    logger.debug(f"Generated {len(variants)} title variants from {len(originals)} titles")
    return variants


def variant_strings(titles: CanonicalTitles) -> List[str]:
    """Plain-text form of generate_variants."""
    return [variant.text for variant in generate_variants(titles)]


def titles_from_media(media: Mapping[str, Any]) -> CanonicalTitles:
    """
    Read canonical titles from an AniList media mapping.

    Args:
        media: Mapping with optional ``title`` ({romaji, english}) and ``synonyms``

    Returns:
        CanonicalTitles (empty if the media has no title block)
    """
    title_block = media.get("title") or {}
    if not isinstance(title_block, Mapping):
        return CanonicalTitles()

    return CanonicalTitles(
        romaji=title_block.get("romaji"),
        english=title_block.get("english"),
        synonyms=media.get("synonyms") or [],
    )


def display_title(media: Mapping[str, Any]) -> str:
    """English title if present, else romaji, else an empty string."""
    title_block = media.get("title") or {}
    return title_block.get("english") or title_block.get("romaji") or ""


def _next_airing(media: Mapping[str, Any]) -> Optional[int]:
    next_airing: Optional[Dict[str, Any]] = media.get("nextAiringEpisode")
    if not next_airing or next_airing.get("episode") is None:
        return None
    return int(next_airing["episode"]) - 1


def episode_count(media: Mapping[str, Any]) -> Optional[int]:
    """
    Total episode count of an entry.

    Falls back to the episodes aired so far when the total is unknown.
    """
    if media.get("episodes") is not None:
        return int(media["episodes"])
    return _next_airing(media)


def available_episodes(media: Mapping[str, Any]) -> Optional[int]:
    """
    Number of episodes already released.

    Uses the next airing episode when the entry is still airing, otherwise
    the total episode count.
    """
    aired = _next_airing(media)
    if aired is not None:
        return aired
    if media.get("episodes") is not None:
        return int(media["episodes"])
    return None


__all__ = [
    "generate_variants",
    "variant_strings",
    "titles_from_media",
    "display_title",
    "episode_count",
    "available_episodes",
]
