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

"""Core registry module."""

from dataclasses import dataclass, field

from filmfetch.core.config import AppConfig
from filmfetch.core.providers.base import MovieSource
from filmfetch.core.providers.imdb import IMDbSource
from filmfetch.core.providers.omdb import OMDbSource
from filmfetch.core.providers.tmdb import TMDbSource


@dataclass(slots=True)
class SourceRegistry:
    """Registry of configured source adapters.

    Parameters
    ----------
    sources:
        Enabled adapters in configuration order (the merge priority).
    """

    sources: list[MovieSource] = field(default_factory=list)

    def get_sources(self) -> list[MovieSource]:
        """Return configured sources in priority order."""
        return list(self.sources)

    def get_discovery_source(self) -> MovieSource | None:
        """Return the first discovery-capable source, if any is enabled."""
        for src in self.sources:
            if getattr(src, "supports_discovery", False):
                return src
        return None


def build_registry(config: AppConfig) -> SourceRegistry:
    """Instantiate one adapter per enabled source that can run.

    Key-required sources without a key are skipped; `validate_config` is
    expected to have rejected that case before a workflow runs.
    """
    rate = config.requests_per_second
    sources: list[MovieSource] = []

    for name in config.enabled_sources:
        if name == "omdb" and config.omdb_api_key:
            sources.append(
                OMDbSource(apikey=config.omdb_api_key, requests_per_second=rate or 10.0)
            )
        elif name == "tmdb" and config.tmdb_api_key:
            sources.append(
                TMDbSource(apikey=config.tmdb_api_key, requests_per_second=rate or 4.0)
            )
        elif name == "imdb":
            # imdbapi.dev works without a key; the token only lifts quotas
            sources.append(
                IMDbSource(apikey=config.imdb_api_key, requests_per_second=rate or 5.0)
            )

    return SourceRegistry(sources=sources)
