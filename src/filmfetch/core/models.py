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

"""Core models module."""

from dataclasses import asdict, dataclass, field
from typing import Any, Final

# Provenance tags written to `MovieRecord.source`
OMDB_IDENTIFIER: Final[str] = "OMDB"
TMDB_IDENTIFIER: Final[str] = "TMDB"
IMDB_IDENTIFIER: Final[str] = "IMDB"


@dataclass(slots=True)
class CastMember:
    """One billed cast entry.

    Parameters
    ----------
    name:
        Performer name; the merge deduplicates cast by this value.
    role:
        Character name if the source provides it.
    order:
        Billing order hint for display.
    """

    name: str
    role: str | None = None
    order: int | None = None


@dataclass(slots=True)
class OtherTitle:
    """Alternative title descriptor.

    Parameters
    ----------
    title:
        Alternative title text.
    country:
        ISO 3166-1 code of the market using the title, if known.
    """

    title: str
    country: str | None = None


@dataclass(slots=True)
class MovieRecord:
    """Canonical movie record every source adapter normalizes into.

    Per-source records carry a single `source` tag; merged records carry the
    ordered `sources` list. Absent values are ``None``, never sentinels, and
    `cast` / `other_titles` are always lists.
    """

    title: str | None = None
    original_title: str | None = None
    release_year: int | None = None
    release_month: int | None = None
    release_day: int | None = None
    country: str | None = None
    description: str | None = None
    tagline: str | None = None
    genre: str | None = None
    runtime_min: int | None = None
    language: str | None = None
    rated: str | None = None
    keywords: str | None = None
    studio: str | None = None
    director: str | None = None
    writer: str | None = None
    producer: str | None = None
    awards: str | None = None
    homepage: str | None = None
    status: str | None = None
    cast: list[CastMember] = field(default_factory=list)
    other_titles: list[OtherTitle] = field(default_factory=list)
    budget: float | None = None
    gross_worldwide_boxoffice: float | None = None
    imdb_id: str | None = None
    tmdb_id: int | None = None
    imdb_rating: float | None = None
    imdb_vote_count: int | None = None
    tmdb_rating: float | None = None
    tmdb_vote_count: int | None = None
    metascore: int | None = None
    metacritic_score: int | None = None
    popularity: float | None = None
    poster_url: str | None = None
    backdrop_url: str | None = None
    source: str | None = None
    sources: list[str] = field(default_factory=list)

    def provenance(self) -> list[str]:
        """Return the tags this record already carries.

        Returns
        -------
        list[str]
            `sources` for merged records, else the single `source` tag.
        """
        if self.sources:
            return list(self.sources)
        return [self.source] if self.source else []

    def to_dict(self) -> dict[str, Any]:
        """Return a plain, JSON-friendly dict for exporters."""
        return asdict(self)


# Scalar fields merged with first-non-empty-wins precedence
SCALAR_FIELDS: Final[tuple[str, ...]] = (
    "title",
    "original_title",
    "release_year",
    "release_month",
    "release_day",
    "country",
    "description",
    "tagline",
    "genre",
    "runtime_min",
    "language",
    "rated",
    "keywords",
    "studio",
    "director",
    "writer",
    "producer",
    "awards",
    "homepage",
    "status",
    "budget",
    "gross_worldwide_boxoffice",
    "imdb_id",
    "tmdb_id",
    "imdb_rating",
    "imdb_vote_count",
    "tmdb_rating",
    "tmdb_vote_count",
    "metascore",
    "metacritic_score",
    "popularity",
    "poster_url",
    "backdrop_url",
)

# String fields trimmed by `clean_record`
TEXT_FIELDS: Final[tuple[str, ...]] = (
    "title",
    "original_title",
    "country",
    "description",
    "tagline",
    "genre",
    "studio",
    "director",
    "writer",
    "producer",
)


@dataclass(slots=True)
class DiscoverPage:
    """One page of raw discovery results.

    Parameters
    ----------
    results:
        Raw result payloads; ``None`` when the response carried no result list.
    page:
        Page index (1-based).
    total_pages:
        Total pages reported by the source, if any.
    total_results:
        Total matching results reported by the source, if any.
    """

    results: list[dict[str, Any]] | None
    page: int = 1
    total_pages: int | None = None
    total_results: int | None = None


@dataclass(slots=True, frozen=True)
class DiscoveryProgress:
    """Progress snapshot emitted after each discovery sub-batch."""

    page: int
    total_pages: int
    current_results: int
    total_results: int
