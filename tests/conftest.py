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

"""Shared fixtures: an in-memory movie source and a recording sleep."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from filmfetch.core.config import AppConfig
from filmfetch.core.errors import NotFoundError
from filmfetch.core.models import DiscoverPage, MovieRecord
from filmfetch.core.providers.base import BaseMovieSource

if TYPE_CHECKING:
    from collections.abc import Callable

    from filmfetch.core.filters import FilterSpec


class FakeSource(BaseMovieSource):
    """Scriptable source; raw payloads are `MovieRecord` keyword dicts.

    Values in `titles`, `details`, `pages` and `listings` may be exceptions,
    which are raised when reached.
    """

    def __init__(
        self,
        tag: str,
        *,
        titles: dict[str, Any] | None = None,
        details: dict[Any, Any] | None = None,
        pages: list[Any] | None = None,
        listings: dict[str, list[Any]] | None = None,
        discovery: bool = False,
    ) -> None:
        self._tag = tag
        self.titles = titles or {}
        self.details = details or {}
        self.pages = list(pages or [])
        self.listings = listings or {}
        self.supports_discovery = discovery
        self.calls: list[tuple[str, Any]] = []
        self.last_params: dict[str, Any] | None = None

    @property
    def tag(self) -> str:
        return self._tag

    def search_by_title(self, title: str, year: int | None = None) -> list[dict]:
        self.calls.append(("search", title))
        value = _raise_or_return(self.titles.get(title))
        return [value] if value else []

    def get_details_by_id(self, source_id: str | int) -> dict:
        self.calls.append(("details", source_id))
        if source_id not in self.details:
            raise NotFoundError(self.tag, f"{source_id} not found")
        return _raise_or_return(self.details[source_id])

    def discover(self, params: dict[str, Any], page: int) -> DiscoverPage:
        self.calls.append(("discover", page))
        self.last_params = params
        if page > len(self.pages):
            return DiscoverPage(results=[], page=page)
        return _raise_or_return(self.pages[page - 1])

    def discover_params(self, spec: FilterSpec | None) -> dict[str, Any]:
        return {"country": spec.country} if spec and spec.country else {}

    def list_movies(self, listing: str, page: int = 1) -> DiscoverPage:
        self.calls.append((listing, page))
        pages = self.listings.get(listing, [])
        if page > len(pages):
            return DiscoverPage(results=[], page=page)
        return _raise_or_return(pages[page - 1])

    def normalize(self, raw: dict | None) -> MovieRecord | None:
        if not isinstance(raw, dict):
            return None
        fields = {k: v for k, v in raw.items() if k != "id"}
        return MovieRecord(**fields, source=self.tag)


def _raise_or_return(value: Any) -> Any:
    if isinstance(value, Exception):
        raise value
    return value


@pytest.fixture
def make_source() -> type[FakeSource]:
    """Return the `FakeSource` class for building scripted sources."""
    return FakeSource


@pytest.fixture
def sleeps() -> list[float]:
    """Collects the delays a workflow asked to sleep."""
    return []


@pytest.fixture
def record_sleep(sleeps: list[float]) -> Callable[[float], None]:
    """Sleep replacement that records instead of blocking."""
    return sleeps.append


@pytest.fixture
def config() -> AppConfig:
    """Configuration with both key-required sources enabled and keyed."""
    return AppConfig(
        enabled_sources=["omdb", "tmdb"],
        omdb_api_key="omdb-key",
        tmdb_api_key="tmdb-key",
    )
