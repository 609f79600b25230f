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

"""imdbapi.dev source adapter.

Best-effort source: no free-text search, lookups by IMDb id only. A bearer
token is optional.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from filmfetch.core.errors import TransportError
from filmfetch.core.models import IMDB_IDENTIFIER, CastMember, MovieRecord
from filmfetch.core.providers.base import BaseMovieSource, RestClientMixin
from filmfetch.core.providers.utils import (
    clean_value,
    join_names,
    normalize_imdb_id,
    parse_float,
    parse_int,
)

_IMDB_BASE_URL = "https://api.imdbapi.dev/"

if TYPE_CHECKING:
    from cachetools import TTLCache

    from filmfetch.core.providers.utils import RateLimiter

_LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class IMDbSource(BaseMovieSource, RestClientMixin):
    """imdbapi.dev adapter; no API key required."""

    apikey: str | None = None
    requests_per_second: float = 5.0
    _cache_short: TTLCache = field(init=False, repr=False)
    _cache_long: TTLCache = field(init=False, repr=False)
    _limiter: RateLimiter = field(init=False, repr=False)
    _cache_lock: threading.Lock = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialize caches and rate limiter for the imdbapi.dev adapter."""
        self._init_rest(
            short_ttl=60 * 60,
            long_ttl=60 * 60,
            requests_per_second=self.requests_per_second,
        )

    @property
    def tag(self) -> str:
        """Return the IMDb provenance tag."""
        return IMDB_IDENTIFIER

    def search_by_title(self, title: str, year: int | None = None) -> list[dict]:
        """Return no hits; imdbapi.dev offers no free-text search.

        Callers rely on `get_details_by_id` during enrichment instead.
        """
        _LOG.warning("imdb_text_search_unavailable", extra={"title": title})
        return []

    def get_details_by_id(self, source_id: str | int) -> dict:
        """Fetch a title by IMDb id ("tt" prefix optional)."""
        imdb_id = normalize_imdb_id(source_id)
        if imdb_id is None:
            raise ValueError(f"Valid IMDb ID is required, got {source_id!r}")
        headers = {"Accept": "application/json"}
        if self.apikey:
            headers["Authorization"] = f"Bearer {self.apikey}"
        data = self._http_get_json(
            f"{_IMDB_BASE_URL}titles/{imdb_id}",
            headers=headers,
            timeout=15,
            long_ttl=True,
        )
        if not isinstance(data, dict):
            raise TransportError(self.tag, "unexpected response shape")
        return data

    def normalize(self, raw: dict | None) -> MovieRecord | None:
        """Translate an imdbapi.dev title payload into a `MovieRecord`."""
        if not isinstance(raw, dict):
            return None
        title = clean_value(raw.get("primaryTitle"))
        imdb_id = normalize_imdb_id(raw.get("id"))
        if title is None and imdb_id is None:
            return None

        stars = raw.get("stars") if isinstance(raw.get("stars"), list) else []
        cast = [
            CastMember(name=name, role=None)
            for name in (_person_name(s) for s in stars)
            if name
        ]
        runtime_seconds = parse_int(raw.get("runtimeSeconds"))
        genres = raw.get("genres")
        genre = None
        if isinstance(genres, list):
            genre = "/".join(str(g) for g in genres if g) or None
        rating = raw.get("rating") if isinstance(raw.get("rating"), dict) else {}
        metacritic = (
            raw.get("metacritic") if isinstance(raw.get("metacritic"), dict) else {}
        )
        image = (
            raw.get("primaryImage") if isinstance(raw.get("primaryImage"), dict) else {}
        )

        return MovieRecord(
            title=title,
            original_title=clean_value(raw.get("originalTitle")) or title,
            release_year=parse_int(raw.get("startYear")),
            country=join_names(raw.get("originCountries")),
            description=clean_value(raw.get("plot")),
            genre=genre,
            runtime_min=round(runtime_seconds / 60) if runtime_seconds else None,
            director=_people(raw.get("directors")),
            writer=_people(raw.get("writers")),
            cast=cast,
            other_titles=[],
            imdb_id=imdb_id,
            imdb_rating=parse_float(rating.get("aggregateRating")),
            imdb_vote_count=parse_int(rating.get("voteCount")),
            metacritic_score=parse_int(metacritic.get("score")),
            poster_url=clean_value(image.get("url")),
            source=self.tag,
        )


def _person_name(person: object) -> str | None:
    if not isinstance(person, dict):
        return None
    for key in ("displayName", "name", "primaryName"):
        value = clean_value(person.get(key))
        if value:
            return value
    return None


def _people(items: object) -> str | None:
    if not isinstance(items, list):
        return None
    names = [n for n in (_person_name(p) for p in items) if n]
    return ", ".join(names) if names else None
