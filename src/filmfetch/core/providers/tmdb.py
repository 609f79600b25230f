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

"""Core providers TMDB module."""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Final
from urllib.parse import urlencode

from filmfetch.core.errors import NotFoundError, SourceError, TransportError
from filmfetch.core.models import (
    TMDB_IDENTIFIER,
    CastMember,
    DiscoverPage,
    MovieRecord,
    OtherTitle,
)
from filmfetch.core.providers.base import BaseMovieSource, RestClientMixin
from filmfetch.core.providers.utils import (
    clean_value,
    join_names,
    normalize_imdb_id,
    parse_date_parts,
    parse_float,
    parse_int,
)

# TMDb API URLs
_TMDB_BASE_URL = "https://api.themoviedb.org/3/"
_TMDB_IMAGE_URL = "https://image.tmdb.org/t/p/"
_DETAIL_APPENDS = "credits,keywords,release_dates,alternative_titles,external_ids"
# TMDb body status code for "resource could not be found"
_NOT_FOUND_STATUS = 34
_MAX_CAST = 20
_WRITER_JOBS = frozenset({"Writer", "Screenplay", "Story"})

# Fixed page size of TMDb list endpoints
PAGE_SIZE: Final[int] = 20

LISTINGS: Final[dict[str, str]] = {
    "trending-day": "trending/movie/day",
    "trending-week": "trending/movie/week",
    "top-rated": "movie/top_rated",
    "popular": "movie/popular",
    "now-playing": "movie/now_playing",
    "upcoming": "movie/upcoming",
}

if TYPE_CHECKING:
    from cachetools import TTLCache

    from filmfetch.core.filters import FilterSpec
    from filmfetch.core.providers.utils import RateLimiter

_LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class TMDbSource(BaseMovieSource, RestClientMixin):
    """TMDb v3 adapter; the only discovery-capable source.

    Parameters
    ----------
    apikey:
        TMDb API key.
    requests_per_second:
        Outbound rate limit; TMDb allows 40 requests per 10 seconds.
    language:
        Value of the `language` query parameter.
    """

    supports_discovery: ClassVar[bool] = True

    apikey: str
    requests_per_second: float = 4.0
    language: str = "en-US"
    _cache_short: TTLCache = field(init=False, repr=False)
    _cache_long: TTLCache = field(init=False, repr=False)
    _limiter: RateLimiter = field(init=False, repr=False)
    _cache_lock: threading.Lock = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialize caches and rate limiter for the TMDb adapter."""
        self._init_rest(
            short_ttl=60 * 60,
            long_ttl=24 * 60 * 60,
            requests_per_second=self.requests_per_second,
        )

    @property
    def tag(self) -> str:
        """Return the TMDb provenance tag.

        Returns
        -------
        str
            The Movie Database tag.
        """
        return TMDB_IDENTIFIER

    # --- MovieSource ---
    def search_by_title(self, title: str, year: int | None = None) -> list[dict]:
        """Search movies by title via `search/movie`.

        Parameters
        ----------
        title:
            Free-form title, optionally ending in a 4-digit year.
        year:
            Explicit release year; overrides a year parsed from `title`.

        Returns
        -------
        list[dict]
            Raw search hits (no credits or alternative titles).
        """
        name, parsed_year = _split_name_and_year(title)
        params: dict[str, Any] = {"query": name, "page": 1, "include_adult": "false"}
        if year is not None or parsed_year is not None:
            params["year"] = year if year is not None else parsed_year
        data = self._request_json("search/movie", params)
        results = data.get("results") or []
        return [it for it in results if isinstance(it, dict)]

    def get_details_by_id(self, source_id: str | int) -> dict:
        """Fetch full details by TMDb id, or by IMDb id through `find/`.

        Raises
        ------
        NotFoundError
            When neither lookup resolves to a TMDb movie.
        """
        imdb_id = (
            normalize_imdb_id(source_id)
            if isinstance(source_id, str) and source_id.startswith("tt")
            else None
        )
        tmdb_id: int | None
        if imdb_id is not None:
            tmdb_id = self.find_tmdb_id(imdb_id)
            if tmdb_id is None:
                raise NotFoundError(self.tag, f"no TMDb movie for {imdb_id}")
        else:
            try:
                tmdb_id = int(source_id)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid TMDb id {source_id!r}") from None
        return self._request_json(
            f"movie/{tmdb_id}", {"append_to_response": _DETAIL_APPENDS}
        )

    def find_tmdb_id(self, imdb_id: str) -> int | None:
        """Resolve an IMDb id to a TMDb movie id."""
        data = self._request_json(f"find/{imdb_id}", {"external_source": "imdb_id"})
        matches = data.get("movie_results") or []
        if not matches:
            return None
        try:
            return int(matches[0]["id"])
        except (KeyError, ValueError, TypeError):
            return None

    def lookup_record(self, record: MovieRecord) -> dict | None:
        """Fetch details for a known record by TMDb id, IMDb id, then title."""
        if record.tmdb_id is not None:
            return self.get_details_by_id(record.tmdb_id)
        if record.imdb_id:
            try:
                return self.get_details_by_id(record.imdb_id)
            except NotFoundError:
                _LOG.debug("tmdb_find_miss", extra={"imdb_id": record.imdb_id})
        if record.title:
            return self.fetch_title(record.title, record.release_year)
        return None

    def discover(self, params: dict[str, Any], page: int) -> DiscoverPage:
        """Fetch one page of `discover/movie` results."""
        query = {
            "sort_by": "popularity.desc",
            "include_adult": "false",
            "include_video": "false",
            **params,
            "page": page,
        }
        data = self._request_json("discover/movie", query)
        return _to_page(data, page)

    def list_movies(self, listing: str, page: int = 1) -> DiscoverPage:
        """Fetch one page of a curated listing (see `LISTINGS`)."""
        try:
            path = LISTINGS[listing]
        except KeyError:
            raise ValueError(
                f"Unknown listing {listing!r}; expected one of {', '.join(LISTINGS)}"
            ) from None
        data = self._request_json(path, {"page": page})
        return _to_page(data, page)

    def genres(self) -> dict[str, int]:
        """Return the movie genre dictionary keyed by lowercase name."""
        data = self._request_json("genre/movie/list", {})
        out: dict[str, int] = {}
        for g in data.get("genres") or []:
            try:
                out[str(g["name"]).lower()] = int(g["id"])
            except (KeyError, TypeError, ValueError):
                continue
        return out

    def discover_params(self, spec: FilterSpec) -> dict[str, Any]:
        """Translate a filter spec into `discover/movie` query parameters.

        Notes
        -----
        An unknown genre name, or a failure to fetch the genre dictionary, is
        logged and the genre dimension is dropped.
        """
        params: dict[str, Any] = {}
        if spec.start_date is not None:
            params["primary_release_date.gte"] = spec.start_date.isoformat()
        if spec.end_date is not None:
            params["primary_release_date.lte"] = spec.end_date.isoformat()
        if spec.country:
            code = spec.country.strip().upper()
            params["with_origin_country"] = code
            params["region"] = code
        if spec.genre:
            try:
                genre_map = self.genres()
            except SourceError as exc:
                _LOG.warning("tmdb_genres_unavailable", extra={"error": str(exc)})
            else:
                genre_id = genre_map.get(spec.genre.strip().lower())
                if genre_id is None:
                    _LOG.warning(
                        "tmdb_genre_not_found",
                        extra={"genre": spec.genre, "available": sorted(genre_map)},
                    )
                else:
                    params["with_genres"] = genre_id
        return params

    def normalize(self, raw: dict | None) -> MovieRecord | None:
        """Translate a TMDb movie payload into a `MovieRecord`."""
        if not isinstance(raw, dict) or raw.get("success") is False:
            return None
        title = clean_value(raw.get("title"))
        original_title = clean_value(raw.get("original_title"))
        tmdb_id = parse_int(raw.get("id"))
        if title is None and original_title is None and tmdb_id is None:
            return None

        year, month, day = parse_date_parts(raw.get("release_date"))
        credits = raw.get("credits") if isinstance(raw.get("credits"), dict) else {}
        crew_block = credits.get("crew")
        crew = (
            [c for c in crew_block if isinstance(c, dict)]
            if isinstance(crew_block, list)
            else []
        )
        external_ids = raw.get("external_ids")
        if not isinstance(external_ids, dict):
            external_ids = {}
        keywords_block = raw.get("keywords")
        keywords = (
            join_names(keywords_block.get("keywords"))
            if isinstance(keywords_block, dict)
            else None
        )
        revenue = parse_float(raw.get("revenue"))
        budget = parse_float(raw.get("budget"))

        return MovieRecord(
            title=title,
            original_title=original_title,
            release_year=year,
            release_month=month,
            release_day=day,
            country=join_names(raw.get("production_countries")),
            description=clean_value(raw.get("overview")),
            tagline=clean_value(raw.get("tagline")),
            genre=join_names(raw.get("genres"), sep="/"),
            runtime_min=parse_int(raw.get("runtime")) or None,
            language=join_names(raw.get("spoken_languages"), key="english_name"),
            keywords=keywords,
            studio=join_names(raw.get("production_companies"), sep=" / "),
            director=_crew_names(crew, {"Director"}),
            writer=_crew_names(crew, _WRITER_JOBS),
            producer=_crew_names(crew, {"Producer"}),
            homepage=clean_value(raw.get("homepage")),
            status=clean_value(raw.get("status")),
            cast=_parse_cast(credits.get("cast")),
            other_titles=_parse_other_titles(raw.get("alternative_titles")),
            budget=budget if budget and budget > 0 else None,
            gross_worldwide_boxoffice=revenue if revenue and revenue > 0 else None,
            imdb_id=normalize_imdb_id(raw.get("imdb_id"))
            or normalize_imdb_id(external_ids.get("imdb_id")),
            tmdb_id=tmdb_id,
            tmdb_rating=parse_float(raw.get("vote_average")),
            tmdb_vote_count=parse_int(raw.get("vote_count")),
            popularity=parse_float(raw.get("popularity")),
            poster_url=_image_url(raw.get("poster_path"), "w500"),
            backdrop_url=_image_url(raw.get("backdrop_path"), "w1280"),
            source=self.tag,
        )

    # --- Internal helpers ---
    def _hit_id(self, hit: dict) -> str | int | None:
        return hit.get("id")

    def _request_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        """Issue a GET request to TMDb v3 and return parsed JSON.

        Parameters
        ----------
        path:
            API path segment after `/3/` (e.g., `search/movie`).
        params:
            Query parameters to include with the request.

        Returns
        -------
        dict[str, Any]
            Parsed JSON object.

        Raises
        ------
        NotFoundError
            On HTTP 404 or a body carrying TMDb status code 34.
        TransportError
            On other failures or an unsuccessful body.
        """
        query: dict[str, Any] = {"api_key": self.apikey}
        if self.language:
            query["language"] = self.language
        query.update(params)
        url = _TMDB_BASE_URL + path + "?" + urlencode(query)

        data = self._http_get_json(
            url,
            timeout=10,
            long_ttl=not path.startswith(("search/", "discover/", "trending/")),
            require_https=True,
        )
        if not isinstance(data, dict):
            raise TransportError(self.tag, "unexpected response shape")
        if data.get("success") is False:
            message = data.get("status_message") or "TMDb request failed"
            if data.get("status_code") == _NOT_FOUND_STATUS:
                raise NotFoundError(self.tag, message)
            raise TransportError(self.tag, message)
        return data


def _to_page(data: dict[str, Any], page: int) -> DiscoverPage:
    results = data.get("results")
    return DiscoverPage(
        results=[r for r in results if isinstance(r, dict)]
        if isinstance(results, list)
        else None,
        page=parse_int(data.get("page")) or page,
        total_pages=parse_int(data.get("total_pages")),
        total_results=parse_int(data.get("total_results")),
    )


def _parse_cast(items: Any) -> list[CastMember]:
    cast: list[CastMember] = []
    if not isinstance(items, list):
        return cast
    for index, actor in enumerate(items[:_MAX_CAST]):
        if not isinstance(actor, dict) or not actor.get("name"):
            continue
        order = actor.get("order")
        cast.append(
            CastMember(
                name=str(actor["name"]).strip(),
                role=clean_value(actor.get("character")),
                order=order if isinstance(order, int) else index,
            )
        )
    return cast


def _parse_other_titles(block: Any) -> list[OtherTitle]:
    if not isinstance(block, dict):
        return []
    titles = block.get("titles")
    if not isinstance(titles, list):
        return []
    out: list[OtherTitle] = []
    for alt in titles:
        if isinstance(alt, dict) and alt.get("title"):
            out.append(
                OtherTitle(title=str(alt["title"]), country=alt.get("iso_3166_1"))
            )
    return out


def _crew_names(crew: list[dict], jobs: set[str] | frozenset[str]) -> str | None:
    names = [
        str(c["name"])
        for c in crew
        if isinstance(c.get("job"), str) and c["job"] in jobs and c.get("name")
    ]
    return ", ".join(names) if names else None


def _image_url(path: Any, size: str) -> str | None:
    if not isinstance(path, str) or not path:
        return None
    return f"{_TMDB_IMAGE_URL}{size}{path}"


def _split_name_and_year(query: str) -> tuple[str, int | None]:
    """Split free-form movie query into name and year if present.

    Parameters
    ----------
    query:
        Input query, e.g., "Serenity (2005)". Only a parenthesized trailing
        year is split off, so "Blade Runner 2049" stays intact.

    Returns
    -------
    tuple[str, int | None]
        Name and optional year.
    """
    m = re.match(r"(.+?)\s*\(((?:19|20)\d{2})\)$", query.strip())
    if m:
        return m.group(1).strip(), int(m.group(2))
    return query.strip(), None
