import json

import pytest
from typer.testing import CliRunner

from anisource import __version__
from anisource.cli.commands.config import parse_value
from anisource.cli.commands.resolve import EXIT_NOT_FOUND
from anisource.cli.main import app


runner = CliRunner()


@pytest.fixture
def invoke(tmp_path):
    config_dir = tmp_path / "config"

    def run(*args):
        return runner.invoke(app, ["--config-dir", str(config_dir), *args])

    return run


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_resolve_with_sample_source_as_json(invoke):
    assert invoke("sources", "enable", "sample").exit_code == 0
    assert invoke("sources", "disable", "consumet").exit_code == 0

    result = invoke(
        "resolve", "5",
        "--romaji", "Shingeki no Kyojin",
        "--english", "Attack on Titan",
        "--json",
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["status"] == "found"
    assert payload["provider"] == "sample"
    assert payload["episode_id"] == "shingeki-no-kyojin-episode-5"
    assert payload["sources"][0]["url"] == "https://example.com/stream/shingeki-no-kyojin-episode-5/master.m3u8"


def test_resolve_dub_table_output(invoke):
    result = invoke("resolve", "2", "--romaji", "Kimetsu no Yaiba", "--dub", "--source", "sample")

    assert result.exit_code == 0
    assert "Episode 2 via sample" in result.output
    assert "kimetsu-no-yaiba-dub" in result.output


def test_resolve_not_found_exit_code(invoke):
    result = invoke("resolve", "1", "--romaji", "No Such Show", "--source", "sample")

    assert result.exit_code == EXIT_NOT_FOUND
    assert "Not Found" in result.output


def test_resolve_episode_past_the_end_is_not_found(invoke):
    result = invoke("resolve", "26", "--romaji", "Shingeki no Kyojin", "--source", "sample", "--json")

    assert result.exit_code == EXIT_NOT_FOUND
    assert json.loads(result.stdout)["status"] == "not_found"


def test_resolve_invalid_episode_is_an_error(invoke):
    result = invoke("resolve", "0", "--romaji", "Shingeki no Kyojin", "--source", "sample")

    assert result.exit_code == 1
    assert "Invalid Request" in result.output


def test_resolve_from_media_file(invoke, tmp_path):
    media_file = tmp_path / "media.json"
    media_file.write_text(json.dumps({
        "data": {"Media": {
            "title": {"romaji": "One Piece", "english": None},
            "synonyms": [],
            "episodes": None,
        }}
    }), encoding="utf-8")

    result = invoke("resolve", "10", "--media", str(media_file), "--source", "sample", "--json")

    assert result.exit_code == 0
    assert json.loads(result.stdout)["episode_id"] == "one-piece-episode-10"


def test_variants_command(invoke):
    result = invoke(
        "variants",
        "--romaji", "Shingeki no Kyojin Season 2",
        "--english", "Attack on Titan",
        "--synonym", "AoT",
    )

    assert result.exit_code == 0
    assert "Attack on Titan" in result.output
    assert "Shingeki no Kyojin 2" in result.output
    assert "AoT" in result.output


def test_sources_list_and_unknown_source(invoke):
    listing = invoke("sources", "list")
    unknown = invoke("sources", "enable", "nope")

    assert listing.exit_code == 0
    assert "consumet" in listing.output
    assert "sample" in listing.output
    assert unknown.exit_code == 1


def test_sources_check_sample(invoke):
    result = invoke("sources", "check", "sample")

    assert result.exit_code == 0
    assert "reachable" in result.output


def test_config_set_and_show(invoke):
    assert invoke("config", "set", "resolver.index", "2").exit_code == 0

    shown = invoke("config", "show", "resolver")

    assert shown.exit_code == 0
    assert "resolver.index" in shown.output
    assert invoke("config", "set", "resolver.index", "99").exit_code == 1
    assert invoke("config", "show", "nothing").exit_code == 1


def test_config_reset(invoke):
    invoke("config", "set", "resolver.dubbed", "true")

    result = invoke("config", "reset", "--yes")

    assert result.exit_code == 0
    assert "reset" in result.output


def test_parse_value():
    assert parse_value("true") is True
    assert parse_value("3") == 3
    assert parse_value("dark") == "dark"
