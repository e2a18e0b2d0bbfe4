"""
Core Data Models - Pydantic models for the episode resolution pipeline.

This module defines the value objects passed between the title generator,
the provider plugins and the resolver: title variants, provider candidates
and episodes, video sources, and the request/result pair of one resolution.
All models are created per call and never shared between resolutions.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TitleSource(str, Enum):
    """Where a title variant came from."""

    ROMAJI = "romaji"
    ENGLISH = "english"
    SYNONYM = "synonym"
    DERIVED = "derived"

    def __str__(self) -> str:
        return self.value


class TitleVariant(BaseModel):
    """A single search string plus its provenance."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Search string sent to the provider")
    source: Optional[TitleSource] = Field(None, description="Provenance of the string")

    def __str__(self) -> str:
        return self.text


class CanonicalTitles(BaseModel):
    """Canonical titles of a catalog entry."""

    romaji: Optional[str] = Field(None, description="Romanized title")
    english: Optional[str] = Field(None, description="Localized English title")
    synonyms: List[str] = Field(default_factory=list, description="Alternative titles")

    @field_validator('synonyms', mode='before')
    @classmethod
    def validate_synonyms(cls, v: Any) -> List[str]:
        """Accept None and drop blank synonyms."""
        if v is None:
            return []
        return [s for s in v if isinstance(s, str) and s.strip()]

    @property
    def is_empty(self) -> bool:
        return not (self.romaji or self.english or self.synonyms)


class ProviderCandidate(BaseModel):
    """An anime entry returned by a provider search."""

    model_config = ConfigDict(frozen=True)

    anime_id: str = Field(..., min_length=1, description="Provider-side anime identifier")
    title: str = Field(..., description="Title as displayed by the provider")
    position: int = Field(..., ge=0, description="Rank in the provider's result list")
    url: Optional[str] = Field(None, description="Provider page for the entry")

    def __str__(self) -> str:
        return f"{self.title} [{self.anime_id}]"


class ProviderEpisode(BaseModel):
    """One entry of a provider's episode list."""

    model_config = ConfigDict(frozen=True)

    episode_id: str = Field(..., min_length=1, description="Provider-side episode identifier")
    number: Optional[float] = Field(None, description="Number reported by the provider")
    title: Optional[str] = Field(None, description="Episode title if provided")


class VideoSource(BaseModel):
    """A playable stream reference for one episode."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="Stream or file URL")
    is_playlist: bool = Field(False, description="Whether the URL is an HLS (m3u8) playlist")
    quality: Optional[str] = Field(None, description="Quality label reported by the provider")

    def __str__(self) -> str:
        label = self.quality or "unknown"
        return f"{label}: {self.url}"


class ResolutionRequest(BaseModel):
    """
    Input of one resolution.

    Title variants are tried in order. ``dubbed`` switches the search to the
    dub convention; otherwise ``index`` selects which search result to use.
    Range checks happen in the resolver so that violations surface as
    InvalidRequestError rather than model validation errors.
    """

    model_config = ConfigDict(frozen=True)

    title_variants: List[TitleVariant] = Field(default_factory=list)
    episode_number: int = Field(..., description="1-based episode number")
    dubbed: bool = Field(False, description="Search for the dubbed release")
    index: int = Field(0, description="Search result to pick when not dubbed")

    @field_validator('title_variants', mode='before')
    @classmethod
    def coerce_variants(cls, v: Any) -> Any:
        """Allow plain strings as variants."""
        if v is None:
            return []
        return [TitleVariant(text=item) if isinstance(item, str) else item for item in v]


class VariantOutcome(str, Enum):
    """Result of trying a single title variant."""

    RESOLVED = "resolved"
    NO_CANDIDATE = "no_candidate"
    EPISODE_NOT_LOCATABLE = "episode_not_locatable"
    EMPTY_SOURCE_SET = "empty_source_set"
    PROVIDER_UNAVAILABLE = "provider_unavailable"

    def __str__(self) -> str:
        return self.value


class VariantAttempt(BaseModel):
    """Record of one variant tried against one provider."""

    model_config = ConfigDict(frozen=True)

    variant: TitleVariant
    query: str = Field(..., description="String actually sent to the provider")
    outcome: VariantOutcome
    provider: Optional[str] = None
    candidate: Optional[ProviderCandidate] = None
    episode_id: Optional[str] = None
    detail: Optional[str] = None


class ResolutionStatus(str, Enum):
    """Terminal status of a resolution."""

    FOUND = "found"
    NOT_FOUND = "not_found"


class ResolutionResult(BaseModel):
    """
    Output of one resolution.

    Either FOUND with a non-empty list of sources, or NOT_FOUND with none.
    The attempt trail records every variant tried, in order.
    """

    model_config = ConfigDict(frozen=True)

    status: ResolutionStatus
    sources: List[VideoSource] = Field(default_factory=list)
    variant: Optional[TitleVariant] = None
    candidate: Optional[ProviderCandidate] = None
    episode_id: Optional[str] = None
    provider: Optional[str] = None
    attempts: List[VariantAttempt] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_status_matches_sources(self) -> 'ResolutionResult':
        """FOUND requires sources and NOT_FOUND forbids them."""
        if self.status == ResolutionStatus.FOUND and not self.sources:
            raise ValueError("A found result must carry at least one source")
        if self.status == ResolutionStatus.NOT_FOUND and self.sources:
            raise ValueError("A not-found result cannot carry sources")
        return self

    @classmethod
    def not_found(cls, attempts: Optional[List[VariantAttempt]] = None) -> "ResolutionResult":
        """Build the explicit not-found result."""
        return cls(status=ResolutionStatus.NOT_FOUND, attempts=list(attempts or []))

    @property
    def found(self) -> bool:
        return self.status == ResolutionStatus.FOUND

    def __str__(self) -> str:
        if not self.found:
            return f"not found after {len(self.attempts)} attempts"
        return f"{len(self.sources)} sources via '{self.variant}' ({self.provider})"


# Export all models and types
__all__ = [
    "TitleSource",
    "TitleVariant",
    "CanonicalTitles",
    "ProviderCandidate",
    "ProviderEpisode",
    "VideoSource",
    "ResolutionRequest",
    "VariantOutcome",
    "VariantAttempt",
    "ResolutionStatus",
    "ResolutionResult",
]
