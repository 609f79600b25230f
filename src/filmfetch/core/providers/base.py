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

"""Core providers base module."""

from __future__ import annotations

import contextlib
import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from cachetools import TTLCache

from filmfetch.core.errors import NotFoundError, TransportError
from filmfetch.core.models import DiscoverPage

if TYPE_CHECKING:
    from filmfetch.core.filters import FilterSpec
    from filmfetch.core.models import MovieRecord

USER_AGENT = "filmfetch/1.0.0"


@runtime_checkable
class MovieSource(Protocol):
    """Movie metadata source contract.

    Notes
    -----
    Pure typing protocol so the fetcher can drive fakes in tests and real
    adapters alike. Raw payloads stay source-specific until `normalize`.
    """

    supports_discovery: bool

    @property
    def tag(self) -> str:
        """Provenance tag written to normalized records (e.g., "TMDB")."""

    def search_by_title(self, title: str, year: int | None = None) -> list[dict]:
        """Return raw hits for a free-text title; empty when unsupported."""

    def get_details_by_id(self, source_id: str | int) -> dict:
        """Return the raw payload for an id; raise `NotFoundError` when absent."""

    def discover(self, params: dict[str, Any], page: int) -> DiscoverPage:
        """Return one page of raw discovery results."""

    def discover_params(self, spec: FilterSpec | None) -> dict[str, Any]:
        """Translate a filter spec into this source's discovery parameters."""

    def list_movies(self, listing: str, page: int = 1) -> DiscoverPage:
        """Return one page of a curated listing (trending, top rated, ...)."""

    def fetch_title(self, title: str, year: int | None = None) -> dict | None:
        """Return the best full payload for a free-text title, if any."""

    def lookup_record(self, record: MovieRecord) -> dict | None:
        """Return the best full payload for an already-known record, if any."""

    def normalize(self, raw: dict | None) -> MovieRecord | None:
        """Translate a raw payload into a `MovieRecord`; None if unusable."""


class BaseMovieSource(ABC):
    """Shared behavior for source adapters.

    Subclasses define `tag`, the raw fetch operations and `normalize`; the
    title and record lookups default to search-then-details and IMDb id
    lookups respectively.
    """

    supports_discovery: ClassVar[bool] = False

    @property
    @abstractmethod
    def tag(self) -> str:  # pragma: no cover - abstract contract
        """Unique provenance tag."""

    @property
    def name(self) -> str:
        """Human-readable source name.

        Returns
        -------
        str
            Defaults to `tag`.
        """
        return self.tag

    @abstractmethod
    def search_by_title(
        self, title: str, year: int | None = None
    ) -> list[dict]:  # pragma: no cover - abstract contract
        """Return raw hits for a free-text title."""

    @abstractmethod
    def get_details_by_id(
        self, source_id: str | int
    ) -> dict:  # pragma: no cover - abstract contract
        """Return the raw payload for an id."""

    @abstractmethod
    def normalize(
        self, raw: dict | None
    ) -> MovieRecord | None:  # pragma: no cover - abstract contract
        """Translate a raw payload into a `MovieRecord`."""

    def discover(self, params: dict[str, Any], page: int) -> DiscoverPage:
        """Return an empty page; only discovery-capable sources override this."""
        return DiscoverPage(results=[], page=page, total_pages=0, total_results=0)

    def discover_params(self, spec: FilterSpec | None) -> dict[str, Any]:
        """Translate a filter spec into discovery query parameters."""
        return {}

    def list_movies(self, listing: str, page: int = 1) -> DiscoverPage:
        """Return an empty page; only sources with curated listings override."""
        return DiscoverPage(results=[], page=page, total_pages=0, total_results=0)

    def fetch_title(self, title: str, year: int | None = None) -> dict | None:
        """Search by title and fetch full details of the first hit.

        Returns
        -------
        dict | None
            Full payload, the bare hit when it carries no id, or None when the
            search found nothing.
        """
        hits = self.search_by_title(title, year)
        if not hits:
            return None
        hit_id = self._hit_id(hits[0])
        if hit_id is None:
            return hits[0]
        return self.get_details_by_id(hit_id)

    def lookup_record(self, record: MovieRecord) -> dict | None:
        """Fetch details by the record's IMDb id; None when it has none."""
        if not record.imdb_id:
            return None
        return self.get_details_by_id(record.imdb_id)

    def _hit_id(self, hit: dict) -> str | int | None:
        """Return the id of a search hit usable with `get_details_by_id`."""
        return None


class RestClientMixin:
    """Shared REST client helper for JSON GET with caching and rate limiting.

    Attributes
    ----------
    _cache_short:
        Short-lived in-memory cache for search endpoints.
    _cache_long:
        Longer-lived in-memory cache for detail and dictionary endpoints.
    _limiter:
        Rate limiter owned by this adapter instance.

    Notes
    -----
    Caches live only as long as the adapter instance; nothing is persisted.
    """

    def _init_rest(
        self,
        *,
        short_ttl: int,
        long_ttl: int,
        requests_per_second: float,
        maxsize_short: int = 1024,
        maxsize_long: int = 1024,
    ) -> None:
        """Create the in-memory caches and the rate limiter.

        Parameters
        ----------
        short_ttl:
            TTL in seconds for the short-lived cache.
        long_ttl:
            TTL in seconds for the long-lived cache.
        requests_per_second:
            Minimum-interval rate for outbound calls.
        maxsize_short:
            Maximum entries in the short-lived cache.
        maxsize_long:
            Maximum entries in the long-lived cache.
        """
        from filmfetch.core.providers.utils import RateLimiter

        self._cache_short = TTLCache(maxsize=maxsize_short, ttl=short_ttl)
        self._cache_long = TTLCache(maxsize=maxsize_long, ttl=long_ttl)
        self._limiter = RateLimiter(requests_per_second)
        self._cache_lock = threading.Lock()

    def _http_get_json(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: int = 15,
        cache_key: str | None = None,
        long_ttl: bool = False,
        require_https: bool = True,
    ) -> Any:
        """Perform a GET request and return parsed JSON with cache / rate limit.

        Parameters
        ----------
        url:
            Full request URL.
        headers:
            Optional request headers; a default User-Agent is always sent.
        timeout:
            Timeout in seconds.
        cache_key:
            Optional key for caching; defaults to the URL string.
        long_ttl:
            Use the long-lived cache if True, else the short-lived cache.
        require_https:
            If True, only allow HTTPS URLs.

        Returns
        -------
        Any
            Parsed JSON document.

        Raises
        ------
        NotFoundError
            On HTTP 404.
        TransportError
            On any other HTTP error, network failure, timeout or bad JSON.
        """
        from filmfetch.core.providers.utils import is_https

        source = self._source_tag()
        if require_https and not is_https(url):
            raise TransportError(source, f"refusing non-HTTPS URL {url}")

        cache = getattr(self, "_cache_long" if long_ttl else "_cache_short", None)
        key = cache_key or url
        # TTLCache is not thread-safe; discovery batches share one adapter
        lock = getattr(self, "_cache_lock", None) or contextlib.nullcontext()
        if cache is not None:
            with lock:
                cached = cache.get(key)
            if cached is not None:
                return cached

        # Rate limit before network call
        limiter = getattr(self, "_limiter", None)
        if limiter is not None:
            limiter.acquire()

        req = Request(  # noqa: S310 - scheme validated above
            url, headers={"User-Agent": USER_AGENT, **(headers or {})}
        )
        try:
            with urlopen(req, timeout=timeout) as resp:  # noqa: S310
                data = json.loads(resp.read().decode("utf-8"))
        except HTTPError as exc:
            message = _error_message(exc)
            self._log_failure(url, require_https, long_ttl, status=exc.code)
            if exc.code == 404:
                raise NotFoundError(source, message) from exc
            raise TransportError(source, message, status=exc.code) from exc
        except (URLError, TimeoutError, OSError) as exc:
            self._log_failure(url, require_https, long_ttl)
            reason = getattr(exc, "reason", None) or str(exc) or type(exc).__name__
            raise TransportError(source, str(reason)) from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            self._log_failure(url, require_https, long_ttl)
            raise TransportError(source, "invalid JSON response") from exc

        if cache is not None:
            with lock:
                cache[key] = data
        return data

    def _source_tag(self) -> str:
        return getattr(self, "tag", None) or self.__class__.__name__

    def _log_failure(
        self,
        url: str,
        require_https: bool,
        long_ttl: bool,
        *,
        status: int | None = None,
    ) -> None:
        logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        ).warning(
            "http_json_request_failed",
            extra={
                "url": _redact(url),
                "status": status,
                "require_https": require_https,
                "long_ttl": long_ttl,
            },
            exc_info=True,
        )


def _error_message(exc: HTTPError) -> str:
    """Pull the source's own message out of an HTTP error body if possible."""
    try:
        body = json.loads(exc.read().decode("utf-8"))
    except (ValueError, OSError, AttributeError):
        body = None
    if isinstance(body, dict):
        for key in ("status_message", "message", "Error", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {exc.code}: {exc.reason}"


def _redact(url: str) -> str:
    """Hide query-string API keys before logging a URL."""
    head, sep, query = url.partition("?")
    if not sep:
        return url
    parts = []
    for pair in query.split("&"):
        name, _, _value = pair.partition("=")
        parts.append(f"{name}=***" if name in {"apikey", "api_key"} else pair)
    return head + "?" + "&".join(parts)
