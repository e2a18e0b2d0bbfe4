"""
Episode Resolver - Turns title variants and an episode number into sources.

The resolver walks title variants in order against one provider plugin:
search, pick a candidate, locate the episode, resolve its sources. The first
non-empty source set wins. Every per-variant miss (no candidate, episode not
listed, no sources, provider failure or timeout) is recorded and the next
variant is tried. Only invalid requests and cancellation reach the caller as
exceptions; running out of variants is an ordinary not-found result.
"""

import asyncio
import logging
from typing import Awaitable, List, Optional, Sequence, Tuple, TypeVar

from anisource.core.exceptions import (
    InvalidRequestError,
    ProviderUnavailableError,
    ResolutionCancelledError,
)
from anisource.core.models import (
    ProviderCandidate,
    ResolutionRequest,
    ResolutionResult,
    ResolutionStatus,
    TitleVariant,
    VariantAttempt,
    VariantOutcome,
    VideoSource,
)
from anisource.plugins.base import BasePlugin


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DUB_SUFFIX = "(Dub)"


class _VariantFailed(Exception):
    """Internal signal: the current variant produced no sources."""

    def __init__(self, attempt: VariantAttempt):
        super().__init__(attempt.outcome.value)
        self.attempt = attempt


class EpisodeResolver:
    """
    Resolves episode sources against a single provider plugin.

    The resolver holds no per-request state, so one instance may serve
    several concurrent ``resolve`` calls.
    """

    def __init__(
        self,
        plugin: BasePlugin,
        timeout: Optional[float] = None,
        dub_suffix: str = DEFAULT_DUB_SUFFIX,
    ):
        """
        Initialize the resolver.

        Args:
            plugin: Provider plugin to query
            timeout: Seconds allowed for each provider call (None for no limit)
            dub_suffix: Marker appended to search strings in dub mode
        """
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive")

        self.plugin = plugin
        self.timeout = timeout
        self.dub_suffix = dub_suffix

    @property
    def provider_name(self) -> str:
        return self.plugin.name

    def build_query(self, variant: TitleVariant, dubbed: bool) -> str:
        """Search string for a variant, with the dub marker in dub mode."""
        if dubbed:
            return f"{variant.text} {self.dub_suffix}"
        return variant.text

    @staticmethod
    def validate_request(request: ResolutionRequest) -> None:
        """
        Check the caller contract.

        Raises:
            InvalidRequestError: On an episode number below 1, a negative
                index in sub mode, or a blank title variant
        """
        if request.episode_number < 1:
            raise InvalidRequestError(
                f"Episode number must be at least 1, got {request.episode_number}",
                field_name="episode_number",
                invalid_value=request.episode_number,
            )
        # dub mode always takes the first result, so its index is never read
        if not request.dubbed and request.index < 0:
            raise InvalidRequestError(
                f"Result index cannot be negative, got {request.index}",
                field_name="index",
                invalid_value=request.index,
            )
        for position, variant in enumerate(request.title_variants):
            if not variant.text or not variant.text.strip():
                raise InvalidRequestError(
                    f"Title variant {position} is blank",
                    field_name="title_variants",
                    invalid_value=variant.text,
                )

    async def _call(self, awaitable: Awaitable[T]) -> T:
        if self.timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self.timeout)

    @staticmethod
    def _check_cancelled(cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise ResolutionCancelledError("Resolution cancelled by caller")

    async def resolve(
        self,
        request: ResolutionRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ResolutionResult:
        """
        Resolve playable sources for the requested episode.

        Args:
            request: Title variants, episode number, dub flag and index
            cancel_event: Optional event checked between provider calls

        Returns:
            FOUND result from the first variant that yields sources, or
            NOT_FOUND once every variant has been tried

        Raises:
            InvalidRequestError: If the request violates the contract
            ResolutionCancelledError: If ``cancel_event`` gets set
        """
        self.validate_request(request)

        if not request.title_variants:
            logger.info("No title variants to search, nothing to resolve")
            return ResolutionResult.not_found()

        logger.info(
            f"Episode {request.episode_number}, looking for {self.provider_name} source "
            f"({len(request.title_variants)} variants, {'dub' if request.dubbed else 'sub'})"
        )

        attempts: List[VariantAttempt] = []

        for variant in request.title_variants:
            self._check_cancelled(cancel_event)
            try:
                attempt, sources = await self._try_variant(variant, request, cancel_event)
            except _VariantFailed as failure:
                attempts.append(failure.attempt)
                logger.debug(f"{variant.text}: {failure.attempt.outcome}")
                continue

            attempts.append(attempt)
            logger.info(f"Resolved episode {request.episode_number} via '{variant.text}'")
            return ResolutionResult(
                status=ResolutionStatus.FOUND,
                sources=sources,
                variant=variant,
                candidate=attempt.candidate,
                episode_id=attempt.episode_id,
                provider=self.provider_name,
                attempts=attempts,
            )

        logger.info(
            f"No {self.provider_name} source for episode {request.episode_number} "
            f"after {len(attempts)} variants"
        )
        return ResolutionResult.not_found(attempts)

    async def _try_variant(
        self,
        variant: TitleVariant,
        request: ResolutionRequest,
        cancel_event: Optional[asyncio.Event],
    ) -> Tuple[VariantAttempt, List[VideoSource]]:
        """Run search, locate and resolve for one variant."""
        query = self.build_query(variant, request.dubbed)
        index = 0 if request.dubbed else request.index
        candidate: Optional[ProviderCandidate] = None
        episode_id: Optional[str] = None

        def failed(outcome: VariantOutcome, detail: Optional[str] = None) -> _VariantFailed:
            return _VariantFailed(VariantAttempt(
                variant=variant,
                query=query,
                outcome=outcome,
                provider=self.provider_name,
                candidate=candidate,
                episode_id=episode_id,
                detail=detail,
            ))

        try:
            candidates = await self._call(self.plugin.search(query))
            if index >= len(candidates):
                raise failed(
                    VariantOutcome.NO_CANDIDATE,
                    f"{len(candidates)} results, wanted index {index}",
                )
            candidate = candidates[index]

            self._check_cancelled(cancel_event)
            episode_id = await self._call(
                self.plugin.locate_episode(candidate.anime_id, request.episode_number)
            )
            if episode_id is None:
                raise failed(VariantOutcome.EPISODE_NOT_LOCATABLE, f"in {candidate.anime_id}")

            self._check_cancelled(cancel_event)
            sources = await self._call(self.plugin.resolve_sources(episode_id))
            if not sources:
                raise failed(VariantOutcome.EMPTY_SOURCE_SET, f"for {episode_id}")

        except ProviderUnavailableError as e:
            logger.warning(f"{self.provider_name} unavailable for '{query}': {e}")
            raise failed(VariantOutcome.PROVIDER_UNAVAILABLE, str(e))
        except asyncio.TimeoutError:
            logger.warning(f"{self.provider_name} timed out after {self.timeout}s for '{query}'")
            raise failed(VariantOutcome.PROVIDER_UNAVAILABLE, f"timed out after {self.timeout}s")

        attempt = VariantAttempt(
            variant=variant,
            query=query,
            outcome=VariantOutcome.RESOLVED,
            provider=self.provider_name,
            candidate=candidate,
            episode_id=episode_id,
        )
        return attempt, list(sources)

    async def resolve_many(
        self,
        requests: Sequence[ResolutionRequest],
        max_concurrent: int = 3,
    ) -> List[ResolutionResult]:
        """
        Resolve several independent requests concurrently.

        Each request still walks its own variants sequentially; only
        separate requests overlap. Results come back in request order.

        Raises:
            InvalidRequestError: If any request violates the contract
        """
        for request in requests:
            self.validate_request(request)

        semaphore = asyncio.Semaphore(max(1, max_concurrent))

        async def resolve_one(request: ResolutionRequest) -> ResolutionResult:
            async with semaphore:
                return await self.resolve(request)

        return list(await asyncio.gather(*(resolve_one(r) for r in requests)))


__all__ = ["EpisodeResolver", "DEFAULT_DUB_SUFFIX"]
