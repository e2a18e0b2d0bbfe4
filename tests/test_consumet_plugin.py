import asyncio
from unittest.mock import AsyncMock

import pytest

from anisource.core.exceptions import ProviderUnavailableError
from anisource.core.models import ResolutionRequest, VariantOutcome
from anisource.core.resolver import EpisodeResolver
from anisource.plugins.consumet import ConsumetConfig, ConsumetPlugin
from anisource.plugins.consumet.api import ConsumetAPI
from anisource.plugins.consumet.parser import ConsumetParser


SEARCH_PAYLOAD = {
    "currentPage": 1,
    "hasNextPage": False,
    "results": [
        {"id": "shingeki-no-kyojin", "title": "Shingeki no Kyojin", "url": "https://gogo.test/snk"},
        {"title": "missing id"},
        {"id": "shingeki-no-kyojin-dub", "title": {"romaji": "Shingeki no Kyojin", "english": "Attack on Titan (Dub)"}},
    ],
}

INFO_PAYLOAD = {
    "id": "shingeki-no-kyojin",
    "episodes": [
        {"id": "shingeki-no-kyojin-episode-1", "number": 1},
        {"id": "shingeki-no-kyojin-episode-2", "number": "2"},
        {"number": 3},
    ],
}

WATCH_PAYLOAD = {
    "sources": [
        {"url": "https://cdn.test/ep1/master.m3u8", "isM3U8": True, "quality": "default"},
        {"url": "https://cdn.test/ep1/720.m3u8", "quality": "720p"},
        {"url": "https://cdn.test/ep1/1080.mp4", "isM3U8": False, "quality": "1080p"},
    ],
}


@pytest.fixture
def parser():
    return ConsumetParser()


@pytest.fixture
def plugin():
    plugin = ConsumetPlugin({"api_base_url": "https://consumet.test/", "provider": "GogoAnime"})
    plugin.api = AsyncMock(spec=ConsumetAPI)
    return plugin


def test_parse_search_results_skips_malformed_entries(parser):
    candidates = parser.parse_search_results(SEARCH_PAYLOAD)

    assert [c.anime_id for c in candidates] == ["shingeki-no-kyojin", "shingeki-no-kyojin-dub"]
    assert [c.position for c in candidates] == [0, 1]
    assert candidates[1].title == "Attack on Titan (Dub)"


def test_parse_episodes_keeps_order(parser):
    episodes = parser.parse_episodes(INFO_PAYLOAD)

    assert [e.episode_id for e in episodes] == [
        "shingeki-no-kyojin-episode-1",
        "shingeki-no-kyojin-episode-2",
    ]
    assert episodes[1].number == 2.0


def test_parse_sources_detects_playlists(parser):
    sources = parser.parse_sources(WATCH_PAYLOAD)

    assert [s.is_playlist for s in sources] == [True, True, False]
    assert sources[2].quality == "1080p"


def test_parser_rejects_non_object_payload(parser):
    with pytest.raises(ValueError):
        parser.parse_sources(["not", "an", "object"])


def test_missing_lists_parse_as_empty(parser):
    assert parser.parse_search_results({}) == []
    assert parser.parse_episodes({"episodes": None}) == []


def test_config_normalises_values():
    config = ConsumetConfig(api_base_url="https://consumet.test/", provider=" Zoro ")

    assert config.api_base_url == "https://consumet.test"
    assert config.provider == "zoro"


def test_invalid_config_falls_back_to_defaults():
    plugin = ConsumetPlugin({"api_base_url": "ftp://nowhere", "timeout": 0})

    assert plugin.base_url == "https://api.consumet.org"
    assert plugin.name == "consumet/gogoanime"


def test_api_builds_routes():
    fetch_json = AsyncMock(return_value={})
    api = ConsumetAPI(fetch_json, "https://consumet.test", provider="gogoanime")

    asyncio.run(api.search("Attack on Titan (Dub)"))
    asyncio.run(api.anime_info("shingeki-no-kyojin"))
    asyncio.run(api.watch("shingeki-no-kyojin-episode-1", server="vidstreaming"))

    urls = [call.args[0] for call in fetch_json.await_args_list]
    assert urls == [
        "https://consumet.test/anime/gogoanime/Attack%20on%20Titan%20%28Dub%29",
        "https://consumet.test/anime/gogoanime/info/shingeki-no-kyojin",
        "https://consumet.test/anime/gogoanime/watch/shingeki-no-kyojin-episode-1",
    ]
    assert fetch_json.await_args_list[2].kwargs == {"params": {"server": "vidstreaming"}}


def test_plugin_search_and_resolution(plugin):
    plugin.api.search.return_value = SEARCH_PAYLOAD
    plugin.api.anime_info.return_value = INFO_PAYLOAD
    plugin.api.watch.return_value = WATCH_PAYLOAD

    candidates = asyncio.run(plugin.search("Shingeki no Kyojin"))
    episode_id = asyncio.run(plugin.locate_episode(candidates[0].anime_id, 2))
    sources = asyncio.run(plugin.resolve_sources(episode_id))

    assert plugin.name == "consumet/gogoanime"
    assert episode_id == "shingeki-no-kyojin-episode-2"
    assert len(sources) == 3
    plugin.api.watch.assert_awaited_once_with("shingeki-no-kyojin-episode-2", server=None)


def test_plugin_blank_search_makes_no_request(plugin):
    assert asyncio.run(plugin.search("   ")) == []
    plugin.api.search.assert_not_awaited()


def test_plugin_malformed_payload_is_provider_unavailable(plugin):
    plugin.api.anime_info.return_value = "<html>Cloudflare</html>"

    with pytest.raises(ProviderUnavailableError) as exc_info:
        asyncio.run(plugin.get_episodes("shingeki-no-kyojin"))

    assert exc_info.value.provider == "consumet/gogoanime"


@pytest.mark.parametrize("method, payload", [
    ("parse_search_results", {"results": 5}),
    ("parse_episodes", {"episodes": "shingeki-no-kyojin-episode-1"}),
    ("parse_sources", {"sources": {"url": "https://cdn.test/ep1.m3u8"}}),
])
def test_parser_rejects_non_list_entries(parser, method, payload):
    with pytest.raises(ValueError):
        getattr(parser, method)(payload)


def test_parser_skips_entries_with_invalid_field_types(parser):
    episodes = parser.parse_episodes({
        "episodes": [
            {"id": "e1", "title": "Ok"},
            {"id": "e2", "title": 2},
            {"id": "e3", "number": 3},
        ],
    })
    sources = parser.parse_sources({
        "sources": [
            {"url": "https://cdn.test/720.mp4", "quality": 720},
            {"url": "https://cdn.test/master.m3u8", "quality": "default"},
        ],
    })
    candidates = parser.parse_search_results({
        "results": [{"id": "snk", "url": ["https://gogo.test/snk"]}, {"id": "aot"}],
    })

    assert [e.episode_id for e in episodes] == ["e1", "e3"]
    assert [s.url for s in sources] == ["https://cdn.test/master.m3u8"]
    assert [c.anime_id for c in candidates] == ["aot"]
    assert candidates[0].position == 0


def test_non_list_results_move_resolution_on_to_next_variant(plugin):
    plugin.api.search.side_effect = [{"results": 5}, SEARCH_PAYLOAD]
    plugin.api.anime_info.return_value = INFO_PAYLOAD
    plugin.api.watch.return_value = WATCH_PAYLOAD
    request = ResolutionRequest(title_variants=["A", "B"], episode_number=1)

    result = asyncio.run(EpisodeResolver(plugin).resolve(request))

    assert result.found
    assert result.variant.text == "B"
    assert result.attempts[0].outcome == VariantOutcome.PROVIDER_UNAVAILABLE
    assert "Malformed search" in result.attempts[0].detail
