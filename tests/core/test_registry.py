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

from filmfetch.core.config import AppConfig
from filmfetch.core.providers.imdb import IMDbSource
from filmfetch.core.providers.omdb import OMDbSource
from filmfetch.core.providers.tmdb import TMDbSource
from filmfetch.core.registry import SourceRegistry, build_registry


def test_build_registry_minimal_config() -> None:
    reg = build_registry(AppConfig())

    assert isinstance(reg, SourceRegistry)
    # key-required sources are skipped without keys
    assert reg.get_sources() == []
    assert reg.get_discovery_source() is None


def test_build_registry_keeps_configured_order() -> None:
    cfg = AppConfig(
        enabled_sources=["tmdb", "imdb", "omdb"],
        omdb_api_key="o",
        tmdb_api_key="t",
    )
    reg = build_registry(cfg)

    types = [type(s) for s in reg.get_sources()]
    assert types == [TMDbSource, IMDbSource, OMDbSource]
    assert isinstance(reg.get_discovery_source(), TMDbSource)


def test_build_registry_rate_override() -> None:
    cfg = AppConfig(
        enabled_sources=["omdb", "imdb"], omdb_api_key="o", requests_per_second=2
    )
    omdb, imdb = build_registry(cfg).get_sources()
    assert omdb.requests_per_second == 2
    assert imdb.requests_per_second == 2
    assert omdb._limiter.interval == 0.5  # type: ignore[attr-defined]


def test_build_registry_default_rates() -> None:
    cfg = AppConfig(
        enabled_sources=["omdb", "tmdb", "imdb"], omdb_api_key="o", tmdb_api_key="t"
    )
    rates = [s.requests_per_second for s in build_registry(cfg).get_sources()]
    assert rates == [10.0, 4.0, 5.0]
