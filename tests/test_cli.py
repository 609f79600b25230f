# Copyright (c) 2025 knguyen1
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from filmfetch import cli
from filmfetch.core.errors import TransportError
from filmfetch.core.fetcher import MovieFetcher
from filmfetch.core.models import DiscoverPage

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from filmfetch.core.config import AppConfig

_ENV = (
    "FILMFETCH_API_OMDB",
    "FILMFETCH_API_TMDB",
    "FILMFETCH_API_IMDB",
    "FILMFETCH_RATE_LIMIT",
    "FILMFETCH_OUTPUT_DIR",
    "FILMFETCH_SOURCES",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)
    out_dir = tmp_path / "out"
    monkeypatch.setenv("FILMFETCH_OUTPUT_DIR", str(out_dir))
    # keep the runner's temporary streams out of the root logger
    monkeypatch.setattr(cli, "configure_logging", lambda verbose=False: None)
    return out_dir


@pytest.fixture
def use_sources(
    monkeypatch: pytest.MonkeyPatch, record_sleep
) -> Callable[..., list[AppConfig]]:
    """Make the CLI build its fetcher around the given fake sources."""
    configs: list[AppConfig] = []

    def _apply(*sources: object) -> list[AppConfig]:
        def _factory(config: AppConfig) -> MovieFetcher:
            configs.append(config)
            return MovieFetcher(config, sources=list(sources), sleep=record_sleep)

        monkeypatch.setattr(cli, "MovieFetcher", _factory)
        return configs

    return _apply


def test_search_exports_merged_movies(
    use_sources, make_source, isolated_env: Path
) -> None:
    a = make_source("A", titles={"Inception": {"title": "Inception", "imdb_id": "tt1"}})
    b = make_source("B", titles={"Inception": {"title": "Inception", "tmdb_id": 42}})
    use_sources(a, b)

    result = CliRunner().invoke(
        cli.main, ["search", "-t", "Inception", "--format", "json", "--format", "csv"]
    )

    assert result.exit_code == 0, result.output
    assert "Total movies exported: 1" in result.output
    json_files = list(isolated_env.glob("search_movies_*.json"))
    assert len(json_files) == 1
    assert len(list(isolated_env.glob("search_movies_*.csv"))) == 1
    assert len(list(isolated_env.glob("search_cast_*.csv"))) == 1
    doc = json.loads(json_files[0].read_text(encoding="utf-8"))
    assert doc["metadata"]["export_type"] == "search"
    assert doc["movies"][0]["sources"] == ["A", "B"]
    assert doc["movies"][0]["tmdb_id"] == 42


def test_search_reads_titles_file(use_sources, make_source, tmp_path: Path) -> None:
    src = make_source("A", titles={"One": {"title": "One"}, "Two": {"title": "Two"}})
    use_sources(src)
    titles = tmp_path / "titles.txt"
    titles.write_text("One\n\n  Two  \n", encoding="utf-8")
    out_dir = tmp_path / "custom"

    result = CliRunner().invoke(
        cli.main,
        ["search", "--file", str(titles), "--output-dir", str(out_dir)],
    )

    assert result.exit_code == 0, result.output
    assert "Searching 2 titles" in result.output
    (path,) = out_dir.glob("search_movies_*.json")
    doc = json.loads(path.read_text(encoding="utf-8"))
    assert [m["title"] for m in doc["movies"]] == ["One", "Two"]


def test_search_source_option_overrides_config(use_sources, make_source) -> None:
    configs = use_sources(make_source("A"))
    result = CliRunner().invoke(
        cli.main, ["search", "-t", "X", "--source", "IMDB", "--source", "tmdb"]
    )
    assert result.exit_code == 0, result.output
    assert configs[0].enabled_sources == ["imdb", "tmdb"]


def test_search_without_titles_fails() -> None:
    result = CliRunner().invoke(cli.main, ["search"])
    assert result.exit_code == 1
    assert "Provide titles" in result.output


def test_search_missing_keys_is_configuration_error() -> None:
    result = CliRunner().invoke(cli.main, ["search", "-t", "Inception"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output
    assert "OMDb API key is required" in result.output


def test_search_invalid_date_is_configuration_error(use_sources, make_source) -> None:
    use_sources(make_source("A"))
    result = CliRunner().invoke(
        cli.main, ["search", "-t", "X", "--start-date", "2020-02-30"]
    )
    assert result.exit_code == 1
    assert "Invalid start date" in result.output


def test_search_nothing_found_exports_nothing(
    use_sources, make_source, isolated_env: Path
) -> None:
    src = make_source("A", titles={"X": TransportError("A", "timeout")})
    use_sources(src)

    result = CliRunner().invoke(cli.main, ["search", "-t", "X"])

    assert result.exit_code == 0, result.output
    assert "No movies found" in result.output
    assert not isolated_env.exists()


def test_search_enrich(use_sources, make_source, isolated_env: Path) -> None:
    a = make_source("A", titles={"X": {"title": "X", "imdb_id": "tt9"}})
    b = make_source("B", details={"tt9": {"title": "X", "budget": 10.0}})
    use_sources(a, b)

    result = CliRunner().invoke(cli.main, ["search", "-t", "X", "--enrich"])

    assert result.exit_code == 0, result.output
    assert "Enriching with: A, B" in result.output
    (path,) = isolated_env.glob("search_movies_*.json")
    movie = json.loads(path.read_text(encoding="utf-8"))["movies"][0]
    assert movie["budget"] == 10.0
    assert movie["sources"] == ["A", "B"]


def test_discover_reports_progress(
    use_sources, make_source, isolated_env: Path
) -> None:
    src = make_source(
        "T",
        discovery=True,
        pages=[
            DiscoverPage(
                results=[{"title": "M1", "genre": "Drama"}],
                total_pages=1,
                total_results=1,
            )
        ],
    )
    configs = use_sources(src)

    result = CliRunner().invoke(
        cli.main,
        ["discover", "--genre", "drama", "--max-pages", "2", "--format", "sql"],
    )

    assert result.exit_code == 0, result.output
    assert "Page 1/1: 1 movies collected" in result.output
    assert "Discovered 1 movies" in result.output
    assert configs[0].enabled_sources == ["omdb", "tmdb"]
    assert len(list(isolated_env.glob("discover_movies_*.sql"))) == 1


def test_discover_rejects_too_many_pages() -> None:
    result = CliRunner().invoke(cli.main, ["discover", "--max-pages", "501"])
    assert result.exit_code == 2


def test_discover_without_discovery_source_warns(use_sources, make_source) -> None:
    use_sources(make_source("A"))
    result = CliRunner().invoke(cli.main, ["discover", "--source", "omdb"])
    assert result.exit_code == 0
    assert "Discovery needs TMDb" in result.output


@pytest.mark.parametrize(
    ("args", "listing"),
    [
        (["trending"], "trending-week"),
        (["trending", "--time-window", "day"], "trending-day"),
        (["top-rated"], "top-rated"),
    ],
)
def test_listing_commands(
    use_sources, make_source, args: list[str], listing: str
) -> None:
    src = make_source(
        "T",
        discovery=True,
        listings={listing: [DiscoverPage(results=[{"title": "Hit"}], total_pages=1)]},
    )
    use_sources(src)

    result = CliRunner().invoke(cli.main, [*args, "--max-pages", "2"])

    assert result.exit_code == 0, result.output
    assert f"Fetched 1 movies from {listing}" in result.output
    assert (listing, 1) in src.calls


def test_config_command(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FILMFETCH_API_TMDB", "t")
    monkeypatch.setenv("FILMFETCH_RATE_LIMIT", "2")

    result = CliRunner().invoke(cli.main, ["config"])

    assert result.exit_code == 0, result.output
    assert "OMDb API key: not set" in result.output
    assert "TMDb API key: set" in result.output
    assert "IMDb API key: optional" in result.output
    assert "Rate limit: 2 requests/second" in result.output
    assert "No API keys configured" not in result.output


def test_config_command_warns_without_keys() -> None:
    result = CliRunner().invoke(cli.main, ["config"])
    assert result.exit_code == 0
    assert "No API keys configured" in result.output


def test_key_value_formatter_appends_extras() -> None:
    import logging

    formatter = cli.KeyValueFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "event", None, None)
    record.title = "Inception"
    record.count = 2

    assert formatter.format(record) == "WARNING event title='Inception' count=2"


def test_listing_keeps_configured_sources_for_enrichment(
    monkeypatch: pytest.MonkeyPatch, use_sources, make_source, isolated_env: Path
) -> None:
    monkeypatch.setenv("FILMFETCH_SOURCES", "omdb")
    tmdb = make_source(
        "TMDB",
        discovery=True,
        listings={
            "trending-week": [
                DiscoverPage(
                    results=[{"title": "Hit", "imdb_id": "tt1"}], total_pages=1
                )
            ]
        },
    )
    omdb = make_source("OMDB", details={"tt1": {"title": "Hit", "imdb_rating": 8.1}})
    configs = use_sources(tmdb, omdb)

    result = CliRunner().invoke(cli.main, ["trending", "--enrich"])

    assert result.exit_code == 0, result.output
    assert configs[0].enabled_sources == ["omdb", "tmdb"]
    assert "Enriching with: TMDB, OMDB" in result.output
    (path,) = isolated_env.glob("trending_movies_*.json")
    movie = json.loads(path.read_text(encoding="utf-8"))["movies"][0]
    assert movie["imdb_rating"] == 8.1
    assert movie["sources"] == ["TMDB", "OMDB"]
