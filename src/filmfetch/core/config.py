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

"""Core config module."""

import os
from dataclasses import dataclass, field

from filmfetch.core.errors import ConfigurationError

# Source names accepted in `enabled_sources`
KNOWN_SOURCES: tuple[str, ...] = ("omdb", "tmdb", "imdb")
# Sources that refuse to run without an API key
KEY_REQUIRED_SOURCES: tuple[str, ...] = ("omdb", "tmdb")

_OMDB_KEY_URL = "https://www.omdbapi.com/apikey.aspx"
_TMDB_KEY_URL = "https://developer.themoviedb.org/reference/intro/getting-started"


@dataclass(slots=True)
class AppConfig:
    """Application configuration for the fetch pipeline.

    Built once at process start and handed to `MovieFetcher`; adapters never
    read the environment themselves.

    Parameters
    ----------
    enabled_sources:
        Ordered source names; the order is the merge priority.
    omdb_api_key:
        API key for OMDb if configured.
    tmdb_api_key:
        API key for TMDb (TheMovieDB) if configured.
    imdb_api_key:
        Optional bearer token for imdbapi.dev.
    requests_per_second:
        Global override of every adapter's rate limit; ``None`` keeps the
        per-source defaults.
    output_dir:
        Directory exporters write into.
    """

    enabled_sources: list[str] = field(default_factory=lambda: ["omdb", "tmdb"])
    omdb_api_key: str | None = None
    tmdb_api_key: str | None = None
    imdb_api_key: str | None = None
    requests_per_second: float | None = None
    output_dir: str = "./output"

    def key_for(self, source: str) -> str | None:
        """Return the configured key for a source name."""
        return {
            "omdb": self.omdb_api_key,
            "tmdb": self.tmdb_api_key,
            "imdb": self.imdb_api_key,
        }.get(source)


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables.

    Environment
    ----
    FILMFETCH_API_OMDB:
        API key for OMDb.
    FILMFETCH_API_TMDB:
        API key for TheMovieDB.
    FILMFETCH_API_IMDB:
        Optional bearer token for imdbapi.dev.
    FILMFETCH_RATE_LIMIT:
        Requests per second applied to every source.
    FILMFETCH_OUTPUT_DIR:
        Output directory for exports.
    FILMFETCH_SOURCES:
        Comma-separated enabled sources (default "omdb,tmdb").

    Returns
    -------
    AppConfig
        Loaded configuration object.
    """
    sources = os.getenv("FILMFETCH_SOURCES")
    rate = os.getenv("FILMFETCH_RATE_LIMIT")
    try:
        requests_per_second = float(rate) if rate else None
    except ValueError:
        raise ConfigurationError(
            f"FILMFETCH_RATE_LIMIT must be a number, got {rate!r}"
        ) from None
    return AppConfig(
        enabled_sources=_split_sources(sources) if sources else ["omdb", "tmdb"],
        omdb_api_key=os.getenv("FILMFETCH_API_OMDB") or None,
        tmdb_api_key=os.getenv("FILMFETCH_API_TMDB") or None,
        imdb_api_key=os.getenv("FILMFETCH_API_IMDB") or None,
        requests_per_second=requests_per_second,
        output_dir=os.getenv("FILMFETCH_OUTPUT_DIR") or "./output",
    )


def validate_config(config: AppConfig) -> None:
    """Check that the configuration can drive at least one source.

    Raises
    ------
    ConfigurationError
        With every detected issue, one per line.
    """
    issues: list[str] = []
    if not config.enabled_sources:
        issues.append(
            "At least one source must be enabled. Available: "
            + ", ".join(KNOWN_SOURCES)
        )
    unknown = [s for s in config.enabled_sources if s not in KNOWN_SOURCES]
    if unknown:
        issues.append(f"Unknown source(s): {', '.join(unknown)}")
    for name, label, url in (
        ("omdb", "OMDb", _OMDB_KEY_URL),
        ("tmdb", "TMDb", _TMDB_KEY_URL),
    ):
        if name in config.enabled_sources and not config.key_for(name):
            issues.append(
                f"{label} API key is required when {label} is enabled. "
                f"Get one at: {url}"
            )
    if config.requests_per_second is not None and config.requests_per_second <= 0:
        issues.append("Requests per second must be positive")
    if issues:
        raise ConfigurationError("\n".join(issues))


def _split_sources(value: str) -> list[str]:
    return [s.strip().lower() for s in value.split(",") if s.strip()]
