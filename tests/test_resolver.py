import asyncio
from unittest.mock import AsyncMock

import pytest

from anisource.core.exceptions import InvalidRequestError, ResolutionCancelledError
from anisource.core.models import (
    ResolutionRequest,
    ResolutionStatus,
    VariantOutcome,
    VideoSource,
)
from anisource.core.resolver import EpisodeResolver
from tests.conftest import FakePlugin


def resolve(plugin, request, **kwargs):
    return asyncio.run(EpisodeResolver(plugin, **kwargs).resolve(request))


def test_first_variant_success_stops_searching():
    plugin = FakePlugin(
        results={"Shingeki no Kyojin": ["snk"]},
        episodes={"snk": 25},
    )
    request = ResolutionRequest(
        title_variants=["Shingeki no Kyojin", "Attack on Titan", "AoT"],
        episode_number=5,
    )

    result = resolve(plugin, request)

    assert result.status == ResolutionStatus.FOUND
    assert result.sources[0].url == "https://cdn.fake.test/snk-ep-5.m3u8"
    assert result.variant.text == "Shingeki no Kyojin"
    assert result.episode_id == "snk-ep-5"
    assert result.provider == "fake"
    assert plugin.searches() == ["Shingeki no Kyojin"]


def test_falls_through_variants_until_one_resolves():
    plugin = FakePlugin(
        results={"Attack on Titan": ["aot-short"], "AoT": ["aot"]},
        episodes={"aot-short": 3, "aot": 25},
    )
    request = ResolutionRequest(
        title_variants=["Shingeki no Kyojin", "Attack on Titan", "AoT"],
        episode_number=5,
    )

    result = resolve(plugin, request)

    assert result.found
    assert result.variant.text == "AoT"
    assert result.episode_id == "aot-ep-5"
    assert plugin.searches() == ["Shingeki no Kyojin", "Attack on Titan", "AoT"]
    assert [a.outcome for a in result.attempts] == [
        VariantOutcome.NO_CANDIDATE,
        VariantOutcome.EPISODE_NOT_LOCATABLE,
        VariantOutcome.RESOLVED,
    ]


def test_all_variants_failing_returns_not_found_after_trying_each_in_order():
    plugin = FakePlugin(results={"B": ["b"]}, episodes={"b": 1}, sources={})
    request = ResolutionRequest(title_variants=["A", "B", "C"], episode_number=1)

    result = resolve(plugin, request)

    assert result.status == ResolutionStatus.NOT_FOUND
    assert result.sources == []
    assert plugin.searches() == ["A", "B", "C"]
    assert result.attempts[1].outcome == VariantOutcome.EMPTY_SOURCE_SET


def test_no_variants_makes_no_provider_calls():
    plugin = FakePlugin()

    result = resolve(plugin, ResolutionRequest(title_variants=[], episode_number=1))

    assert not result.found
    assert result.attempts == []
    assert plugin.calls == []


@pytest.mark.parametrize("episode", [0, -1])
def test_episode_below_one_is_rejected_before_any_call(episode):
    plugin = FakePlugin(results={"A": ["a"]}, episodes={"a": 10})

    with pytest.raises(InvalidRequestError) as exc_info:
        resolve(plugin, ResolutionRequest(title_variants=["A"], episode_number=episode))

    assert exc_info.value.field_name == "episode_number"
    assert plugin.calls == []


def test_negative_index_and_blank_variant_are_rejected():
    plugin = FakePlugin()

    with pytest.raises(InvalidRequestError):
        resolve(plugin, ResolutionRequest(title_variants=["A"], episode_number=1, index=-1))
    with pytest.raises(InvalidRequestError):
        resolve(plugin, ResolutionRequest(title_variants=["A", "  "], episode_number=1))

    assert plugin.calls == []


def test_negative_index_is_ignored_in_dub_mode():
    plugin = FakePlugin(results={"A (Dub)": ["a-dub"]}, episodes={"a-dub": 1})

    result = resolve(plugin, ResolutionRequest(title_variants=["A"], episode_number=1, dubbed=True, index=-1))

    assert result.found
    assert result.candidate.anime_id == "a-dub"


def test_dub_mode_appends_suffix_and_uses_first_result():
    plugin = FakePlugin(
        results={"Kimetsu no Yaiba (Dub)": ["kny-dub", "kny-dub-movie"]},
        episodes={"kny-dub": 26, "kny-dub-movie": 1},
    )
    request = ResolutionRequest(
        title_variants=["Kimetsu no Yaiba"], episode_number=2, dubbed=True, index=1,
    )

    result = resolve(plugin, request)

    assert plugin.searches() == ["Kimetsu no Yaiba (Dub)"]
    assert result.candidate.anime_id == "kny-dub"
    assert result.attempts[0].query == "Kimetsu no Yaiba (Dub)"


def test_custom_dub_suffix():
    plugin = FakePlugin()

    resolve(
        plugin,
        ResolutionRequest(title_variants=["One Piece"], episode_number=1, dubbed=True),
        dub_suffix="[English Dub]",
    )

    assert plugin.searches() == ["One Piece [English Dub]"]


def test_index_selects_candidate_when_not_dubbed():
    plugin = FakePlugin(
        results={"Naruto": ["naruto", "naruto-shippuden"]},
        episodes={"naruto": 220, "naruto-shippuden": 500},
    )

    result = resolve(plugin, ResolutionRequest(title_variants=["Naruto"], episode_number=300, index=1))

    assert result.candidate.anime_id == "naruto-shippuden"
    assert result.episode_id == "naruto-shippuden-ep-300"


def test_index_past_results_counts_as_no_candidate():
    plugin = FakePlugin(results={"Naruto": ["naruto"]}, episodes={"naruto": 220})

    result = resolve(plugin, ResolutionRequest(title_variants=["Naruto"], episode_number=1, index=3))

    assert not result.found
    assert result.attempts[0].outcome == VariantOutcome.NO_CANDIDATE
    assert ("episodes", "naruto") not in plugin.calls


def test_provider_failure_moves_on_to_next_variant():
    plugin = FakePlugin(
        results={"Attack on Titan": ["aot"]},
        episodes={"aot": 25},
        failing=["Shingeki no Kyojin"],
    )
    request = ResolutionRequest(title_variants=["Shingeki no Kyojin", "Attack on Titan"], episode_number=1)

    result = resolve(plugin, request)

    assert result.found
    assert result.attempts[0].outcome == VariantOutcome.PROVIDER_UNAVAILABLE
    assert "provider down" in result.attempts[0].detail


def test_timeout_is_recorded_as_provider_unavailable():
    plugin = FakePlugin(
        results={"Attack on Titan": ["aot"]},
        episodes={"aot": 25},
        slow=["Shingeki no Kyojin"],
        delay=5.0,
    )
    request = ResolutionRequest(title_variants=["Shingeki no Kyojin", "Attack on Titan"], episode_number=1)

    result = resolve(plugin, request, timeout=0.05)

    assert result.found
    assert result.variant.text == "Attack on Titan"
    assert result.attempts[0].outcome == VariantOutcome.PROVIDER_UNAVAILABLE
    assert "timed out" in result.attempts[0].detail


def test_invalid_timeout_rejected():
    with pytest.raises(ValueError):
        EpisodeResolver(FakePlugin(), timeout=0)


def test_cancellation_stops_before_next_call():
    plugin = FakePlugin()
    cancel_event = asyncio.Event()
    cancel_event.set()
    resolver = EpisodeResolver(plugin)

    with pytest.raises(ResolutionCancelledError):
        asyncio.run(resolver.resolve(
            ResolutionRequest(title_variants=["A", "B"], episode_number=1),
            cancel_event=cancel_event,
        ))

    assert plugin.calls == []


def test_search_is_called_once_per_variant_at_most():
    plugin = FakePlugin(results={"A": ["a"], "B": ["b"]}, episodes={"a": 1, "b": 1}, sources={})
    request = ResolutionRequest(title_variants=["A", "B", "C"], episode_number=1)

    resolve(plugin, request)

    searches = plugin.searches()
    episode_calls = [c for c in plugin.calls if c[0] == "episodes"]
    source_calls = [c for c in plugin.calls if c[0] == "sources"]
    assert len(searches) == 3
    assert len(episode_calls) <= len(searches)
    assert len(source_calls) <= len(episode_calls)


def test_works_with_async_mocked_plugin():
    plugin = FakePlugin()
    plugin.search = AsyncMock(return_value=[])
    plugin.locate_episode = AsyncMock()

    result = resolve(plugin, ResolutionRequest(title_variants=["A", "B"], episode_number=4))

    assert not result.found
    assert plugin.search.await_count == 2
    plugin.locate_episode.assert_not_awaited()


def test_sources_keep_provider_order():
    plugin = FakePlugin(
        results={"A": ["a"]},
        episodes={"a": 1},
        sources={"a-ep-1": ["https://x.test/720.mp4", "https://x.test/master.m3u8"]},
    )

    result = resolve(plugin, ResolutionRequest(title_variants=["A"], episode_number=1))

    assert result.sources == [
        VideoSource(url="https://x.test/720.mp4", is_playlist=False),
        VideoSource(url="https://x.test/master.m3u8", is_playlist=True),
    ]


def test_resolve_many_returns_results_in_request_order():
    plugin = FakePlugin(results={"A": ["a"]}, episodes={"a": 3})
    requests = [
        ResolutionRequest(title_variants=["A"], episode_number=n) for n in (1, 2, 3, 4)
    ]

    results = asyncio.run(EpisodeResolver(plugin).resolve_many(requests, max_concurrent=2))

    assert [r.episode_id for r in results] == ["a-ep-1", "a-ep-2", "a-ep-3", None]
    assert not results[3].found


def test_effort_is_exactly_failed_variant_plus_successful_variant():
    plugin = FakePlugin(results={"B": ["b"]}, episodes={"b": 1})

    resolve(plugin, ResolutionRequest(title_variants=["A", "B", "C"], episode_number=1))

    assert plugin.calls == [
        ("search", "A"),
        ("search", "B"),
        ("episodes", "b"),
        ("sources", "b-ep-1"),
    ]
