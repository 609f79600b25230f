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

"""Core providers OMDb module."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from filmfetch.core.errors import NotFoundError, TransportError
from filmfetch.core.models import OMDB_IDENTIFIER, CastMember, MovieRecord
from filmfetch.core.providers.base import BaseMovieSource, RestClientMixin
from filmfetch.core.providers.utils import (
    clean_value,
    normalize_imdb_id,
    parse_date_parts,
    parse_float,
    parse_int,
)

_OMDB_BASE_URL = "https://www.omdbapi.com/"
_RELEASED_FORMATS = ("%d %b %Y", "%Y-%m-%d")

if TYPE_CHECKING:
    from cachetools import TTLCache

    from filmfetch.core.providers.utils import RateLimiter

_LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class OMDbSource(BaseMovieSource, RestClientMixin):
    """OMDb adapter.

    Parameters
    ----------
    apikey:
        OMDb API key.
    requests_per_second:
        Outbound rate limit.
    """

    apikey: str
    requests_per_second: float = 10.0
    _cache_short: TTLCache = field(init=False, repr=False)
    _cache_long: TTLCache = field(init=False, repr=False)
    _limiter: RateLimiter = field(init=False, repr=False)
    _cache_lock: threading.Lock = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialize caches and rate limiter for the OMDb adapter."""
        self._init_rest(
            short_ttl=60 * 60,
            long_ttl=60 * 60,
            requests_per_second=self.requests_per_second,
        )

    @property
    def tag(self) -> str:
        """Return the OMDb provenance tag."""
        return OMDB_IDENTIFIER

    def search_by_title(self, title: str, year: int | None = None) -> list[dict]:
        """Look a title up with OMDb's exact-title endpoint (`t=`).

        Returns
        -------
        list[dict]
            A single full payload.

        Raises
        ------
        NotFoundError
            When OMDb answers "Movie not found!".
        """
        if not title or not title.strip():
            raise ValueError("Valid movie title is required")
        params: dict[str, Any] = {"t": title.strip(), "plot": "full"}
        if year is not None:
            params["y"] = int(year)
        return [self._request(params)]

    def get_details_by_id(self, source_id: str | int) -> dict:
        """Fetch full details by IMDb id ("tt" prefix optional)."""
        imdb_id = normalize_imdb_id(source_id)
        if imdb_id is None:
            raise ValueError(f"Valid IMDb ID is required, got {source_id!r}")
        return self._request({"i": imdb_id, "plot": "full"})

    def fetch_title(self, title: str, year: int | None = None) -> dict | None:
        """Return the exact-title payload; OMDb's lookup is already complete."""
        hits = self.search_by_title(title, year)
        return hits[0] if hits else None

    def normalize(self, raw: dict | None) -> MovieRecord | None:
        """Translate an OMDb payload into a `MovieRecord`.

        Notes
        -----
        "N/A" marks absent values throughout OMDb responses.
        """
        if not isinstance(raw, dict) or raw.get("Response") == "False":
            return None
        title = clean_value(raw.get("Title"))
        imdb_id = normalize_imdb_id(clean_value(raw.get("imdbID")))
        if title is None and imdb_id is None:
            return None

        year, month, day = parse_date_parts(
            clean_value(raw.get("Released")), _RELEASED_FORMATS
        )
        if year is None:
            # "Year" may be a range such as "2003–2005"
            year_text = clean_value(raw.get("Year"))
            if isinstance(year_text, str) and year_text[:4].isdigit():
                year = int(year_text[:4])

        actors = clean_value(raw.get("Actors"))
        cast = [
            CastMember(name=name.strip(), role=None)
            for name in (actors.split(",") if isinstance(actors, str) else [])
            if name.strip()
        ]

        return MovieRecord(
            title=title,
            original_title=title,
            release_year=year,
            release_month=month,
            release_day=day,
            country=clean_value(raw.get("Country")),
            description=clean_value(raw.get("Plot")),
            genre=_slash_join(clean_value(raw.get("Genre"))),
            runtime_min=parse_int(clean_value(raw.get("Runtime"))),
            language=clean_value(raw.get("Language")),
            rated=clean_value(raw.get("Rated")),
            studio=clean_value(raw.get("Production")),
            director=clean_value(raw.get("Director")),
            writer=clean_value(raw.get("Writer")),
            awards=clean_value(raw.get("Awards")),
            homepage=clean_value(raw.get("Website")),
            cast=cast,
            other_titles=[],
            budget=parse_float(clean_value(raw.get("Budget"))),
            gross_worldwide_boxoffice=parse_float(clean_value(raw.get("BoxOffice"))),
            imdb_id=imdb_id,
            imdb_rating=parse_float(clean_value(raw.get("imdbRating"))),
            imdb_vote_count=parse_int(clean_value(raw.get("imdbVotes"))),
            metascore=parse_int(clean_value(raw.get("Metascore"))),
            poster_url=clean_value(raw.get("Poster")),
            source=self.tag,
        )

    def _request(self, params: dict[str, Any]) -> dict[str, Any]:
        """Issue an OMDb request and unwrap its `Response` envelope.

        Raises
        ------
        NotFoundError
            When OMDb reports the record does not exist.
        TransportError
            On transport failures or any other OMDb error message.
        """
        query = {"apikey": self.apikey, "r": "json", "v": "1", **params}
        url = _OMDB_BASE_URL + "?" + urlencode(query)
        data = self._http_get_json(url, timeout=15, long_ttl="i" in params)
        if not isinstance(data, dict):
            raise TransportError(self.tag, "unexpected response shape")
        if data.get("Response") == "False":
            message = data.get("Error") or "Unknown OMDb API error"
            _LOG.debug("omdb_error_response", extra={"error": message})
            if "not found" in message.lower():
                raise NotFoundError(self.tag, message)
            raise TransportError(self.tag, message)
        return data


def _slash_join(value: str | None) -> str | None:
    """Turn OMDb's "Action, Drama" genre list into "Action/Drama"."""
    if not value:
        return None
    parts = [p.strip() for p in value.split(",") if p.strip()]
    return "/".join(parts) or None
