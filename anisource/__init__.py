"""
anisource - Episode source resolution for anime catalogs.

Given the titles of a catalog entry and an episode number, anisource
searches content providers under several title variants and returns the
first playable set of video sources it finds.
"""

__version__ = "0.1.0"
__author__ = "anisource contributors"

# Package metadata
__title__ = "anisource"
__description__ = "Episode source resolution for anime catalogs"
__license__ = "MIT"

# Version info tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split(".")))

from anisource.core.models import (
    CanonicalTitles,
    ResolutionRequest,
    ResolutionResult,
    VideoSource,
)
from anisource.core.titles import generate_variants
from anisource.core.resolver import EpisodeResolver

__all__ = [
    "__version__",
    "CanonicalTitles",
    "ResolutionRequest",
    "ResolutionResult",
    "VideoSource",
    "generate_variants",
    "EpisodeResolver",
]
