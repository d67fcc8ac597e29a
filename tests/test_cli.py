"""
Tests for the click commands. Commands are invoked with a scripted
aggregator on the context so nothing touches the network.
"""
import json
import logging

import pytest
from click.testing import CliRunner

from anime_pulse.anime_pulse import logging as ap_logging
from anime_pulse.anime_pulse.cli.info import episodes, info
from anime_pulse.anime_pulse.cli.recent import recent
from anime_pulse.anime_pulse.cli.search import search
from anime_pulse.anime_pulse.cli.sources import sources
from anime_pulse.anime_pulse.cli.stream import stream
from anime_pulse.anime_pulse.cli.trending import trending
from anime_pulse.anime_pulse.config import manager
from anime_pulse.anime_pulse.main import cli

from conftest import make_aggregator


@pytest.fixture(autouse=True)
def quiet_root_logger():
    """Service warnings must not land in the captured command output."""
    root = logging.getLogger()
    saved = root.handlers[:]
    root.handlers = [logging.NullHandler()]
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers = saved


@pytest.fixture
def runner():
    return CliRunner()


def _json(result):
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


class TestSearch:

    def test_json_from_first_source(self, runner):
        aggregator, _ = make_aggregator({
            "http://alpha.test/search/naruto?page=1": {"results": [{"id": "naruto", "title": "Naruto", "rating": 8}]},
        })

        data = _json(runner.invoke(search, ["naruto", "--json"], obj=aggregator))

        assert data[0]["id"] == "naruto"
        assert data[0]["title"] == "Naruto"
        assert data[0]["rating"] == "8"
        assert data[0]["subOrDub"] == "SUB"

    def test_json_fallback_filters_mock_catalog(self, runner):
        aggregator, _ = make_aggregator({})

        data = _json(runner.invoke(search, ["slayer", "--json"], obj=aggregator))

        assert [d["id"] for d in data] == ["demon-slayer"]

    def test_text_fallback_flags_limited_availability(self, runner):
        aggregator, _ = make_aggregator({})

        result = runner.invoke(search, ["piece"], obj=aggregator)

        assert result.exit_code == 0
        assert "Limited availability" in result.output

    def test_text_no_matches(self, runner):
        aggregator, _ = make_aggregator({})

        result = runner.invoke(search, ["zzz"], obj=aggregator)

        assert result.exit_code == 0
        assert "No anime found matching 'zzz'" in result.output

    def test_page_must_be_positive(self, runner):
        aggregator, _ = make_aggregator({})

        result = runner.invoke(search, ["naruto", "--page", "0"], obj=aggregator)

        assert result.exit_code != 0


class TestListings:

    def test_trending_fallback(self, runner):
        aggregator, _ = make_aggregator({})

        data = _json(runner.invoke(trending, ["--json"], obj=aggregator))

        assert {d["id"] for d in data} == {"one-piece", "demon-slayer"}

    def test_recent_dub_feed(self, runner):
        aggregator, session = make_aggregator({
            "http://alpha.test/recent?page=2&type=2": {"results": [{"episodeId": "bleach-episode-3", "episodeNum": "3"}]},
        })

        data = _json(runner.invoke(recent, ["--page", "2", "--dub", "--json"], obj=aggregator))

        assert session.calls[0][0] == "http://alpha.test/recent?page=2&type=2"
        assert data[0]["id"] == "bleach-episode-3"
        assert data[0]["number"] == 3
        assert data[0]["subOrDub"] == "DUB"

    def test_recent_fallback_text(self, runner):
        aggregator, _ = make_aggregator({})

        result = runner.invoke(recent, [], obj=aggregator)

        assert result.exit_code == 0
        assert "Limited availability" in result.output


class TestInfo:

    def test_info_json(self, runner):
        aggregator, _ = make_aggregator({
            "http://alpha.test/info/bleach": {"id": "bleach", "title": "Bleach", "totalEpisodes": 366},
        })

        data = _json(runner.invoke(info, ["bleach", "--json"], obj=aggregator))

        assert data["title"] == "Bleach"
        assert data["totalEpisodes"] == 366

    def test_info_not_found_json(self, runner):
        aggregator, _ = make_aggregator({})

        assert _json(runner.invoke(info, ["nothing", "--json"], obj=aggregator)) is None

    def test_info_not_found_text(self, runner):
        aggregator, _ = make_aggregator({})

        result = runner.invoke(info, ["nothing"], obj=aggregator)

        assert result.exit_code == 0
        assert "No source has details for 'nothing'" in result.output

    def test_info_text(self, runner):
        aggregator, _ = make_aggregator({
            "http://alpha.test/info/bleach": {"id": "bleach", "title": "Bleach", "studio": "Pierrot"},
        })

        result = runner.invoke(info, ["bleach"], obj=aggregator)

        assert result.exit_code == 0
        assert "Bleach" in result.output
        assert "Pierrot" in result.output

    def test_episodes_embedded(self, runner):
        aggregator, _ = make_aggregator({
            "http://alpha.test/info/bleach": {
                "id": "bleach",
                "title": "Bleach",
                "episodes": [{"id": "bleach-episode-1", "number": 1}, {"id": "bleach-episode-2", "number": 2}],
            },
        })

        data = _json(runner.invoke(episodes, ["bleach", "--json"], obj=aggregator))

        assert [d["id"] for d in data] == ["bleach-episode-1", "bleach-episode-2"]
        assert {d["animeId"] for d in data} == {"bleach"}

    def test_episodes_fallback(self, runner):
        aggregator, _ = make_aggregator({})

        data = _json(runner.invoke(episodes, ["bleach", "--json"], obj=aggregator))

        assert len(data) == 1
        assert data[0]["id"] == "bleach-episode-1"
        assert data[0]["releaseDate"] == "2024-01-01"


class TestStream:

    def test_prints_best_url(self, runner):
        aggregator, _ = make_aggregator({
            "http://alpha.test/watch/ep-1": {"sources": [
                {"url": "https://cdn.test/360.m3u8", "quality": "360p"},
                {"url": "https://cdn.test/720.m3u8", "quality": "720p"},
            ]},
        })

        result = runner.invoke(stream, ["ep-1"], obj=aggregator)

        assert result.exit_code == 0
        assert result.output.strip() == "https://cdn.test/720.m3u8"

    def test_unavailable_text(self, runner):
        aggregator, _ = make_aggregator({})

        result = runner.invoke(stream, ["ep-1"], obj=aggregator)

        assert result.exit_code == 0
        assert "Stream unavailable for 'ep-1'" in result.output

    def test_unavailable_json(self, runner):
        aggregator, _ = make_aggregator({})

        data = _json(runner.invoke(stream, ["ep-1", "--json"], obj=aggregator))

        assert data == {"episodeId": "ep-1", "streamingUrl": None}


def test_sources_listing(runner):
    aggregator, _ = make_aggregator({})

    result = runner.invoke(sources, [], obj=aggregator)

    assert result.exit_code == 0
    for name in ("alpha", "beta", "gamma"):
        assert name in result.output


class TestGroup:

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("search", "trending", "recent", "info", "episodes", "stream", "sources"):
            assert command in result.output

    def test_group_keeps_injected_aggregator(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(ap_logging, "_logger_instance", None)
        monkeypatch.setattr(manager, "_config_instance", None)
        aggregator, _ = make_aggregator({
            "http://alpha.test/trending?page=1": {"results": [{"id": "frieren", "title": "Frieren"}]},
        })

        data = _json(runner.invoke(cli, ["trending", "--json"], obj=aggregator))

        assert [d["id"] for d in data] == ["frieren"]

    def test_bad_config_file_exits(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(manager, "_config_instance", None)
        path = tmp_path / "config.json"
        path.write_text("{broken", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(path), "sources"])

        assert result.exit_code == 1
        assert "Invalid configuration file" in result.output
