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

import pytest

from filmfetch.core.config import AppConfig, load_config_from_env, validate_config
from filmfetch.core.errors import ConfigurationError

_ENV = (
    "FILMFETCH_API_OMDB",
    "FILMFETCH_API_TMDB",
    "FILMFETCH_API_IMDB",
    "FILMFETCH_RATE_LIMIT",
    "FILMFETCH_OUTPUT_DIR",
    "FILMFETCH_SOURCES",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    cfg = load_config_from_env()
    assert cfg.enabled_sources == ["omdb", "tmdb"]
    assert cfg.omdb_api_key is None
    assert cfg.requests_per_second is None
    assert cfg.output_dir == "./output"


def test_reads_environment(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("FILMFETCH_API_OMDB", "o")
    clean_env.setenv("FILMFETCH_API_TMDB", "t")
    clean_env.setenv("FILMFETCH_API_IMDB", "i")
    clean_env.setenv("FILMFETCH_RATE_LIMIT", "2.5")
    clean_env.setenv("FILMFETCH_OUTPUT_DIR", "/tmp/out")
    clean_env.setenv("FILMFETCH_SOURCES", " TMDB, imdb ,")

    cfg = load_config_from_env()

    assert cfg.enabled_sources == ["tmdb", "imdb"]
    assert cfg.key_for("omdb") == "o"
    assert cfg.key_for("tmdb") == "t"
    assert cfg.key_for("imdb") == "i"
    assert cfg.requests_per_second == 2.5
    assert cfg.output_dir == "/tmp/out"


def test_bad_rate_limit(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("FILMFETCH_RATE_LIMIT", "fast")
    with pytest.raises(ConfigurationError, match="FILMFETCH_RATE_LIMIT"):
        load_config_from_env()


def test_validate_accepts_keyed_sources() -> None:
    validate_config(AppConfig(omdb_api_key="o", tmdb_api_key="t"))
    validate_config(AppConfig(enabled_sources=["imdb"]))


@pytest.mark.parametrize(
    ("cfg", "fragment"),
    [
        (AppConfig(enabled_sources=[]), "At least one source"),
        (AppConfig(enabled_sources=["netflix"]), "Unknown source(s): netflix"),
        (AppConfig(enabled_sources=["omdb"]), "OMDb API key is required"),
        (AppConfig(enabled_sources=["tmdb"]), "TMDb API key is required"),
        (
            AppConfig(enabled_sources=["imdb"], requests_per_second=0),
            "must be positive",
        ),
    ],
)
def test_validate_rejects(cfg: AppConfig, fragment: str) -> None:
    with pytest.raises(ConfigurationError) as info:
        validate_config(cfg)
    assert fragment in str(info.value)


def test_validate_reports_every_issue() -> None:
    with pytest.raises(ConfigurationError) as info:
        validate_config(AppConfig(enabled_sources=["omdb", "tmdb"]))
    assert len(str(info.value).splitlines()) == 2
