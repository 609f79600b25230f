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

"""Core business logic for filmfetch (sources, merge, filters, workflows).

Exposes the record model, configuration and `MovieFetcher`, which drives the
configured source adapters.
"""

from filmfetch.core.config import AppConfig, load_config_from_env, validate_config
from filmfetch.core.errors import (
    ConfigurationError,
    FilmFetchError,
    NotFoundError,
    SourceError,
    TransportError,
)
from filmfetch.core.fetcher import FetchSettings, MovieFetcher, ProgressListener
from filmfetch.core.filters import FilterSpec, matches
from filmfetch.core.merge import clean_record, merge_records
from filmfetch.core.models import (
    CastMember,
    DiscoveryProgress,
    MovieRecord,
    OtherTitle,
)
from filmfetch.core.providers.base import BaseMovieSource, MovieSource
from filmfetch.core.registry import SourceRegistry, build_registry

__all__ = [
    "AppConfig",
    "BaseMovieSource",
    "CastMember",
    "ConfigurationError",
    "DiscoveryProgress",
    "FetchSettings",
    "FilmFetchError",
    "FilterSpec",
    "MovieFetcher",
    "MovieRecord",
    "MovieSource",
    "NotFoundError",
    "OtherTitle",
    "ProgressListener",
    "SourceError",
    "SourceRegistry",
    "TransportError",
    "build_registry",
    "clean_record",
    "load_config_from_env",
    "matches",
    "merge_records",
    "validate_config",
]
