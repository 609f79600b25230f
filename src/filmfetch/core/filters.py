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

"""Client-side record filters.

`matches` is a pure predicate: all supplied dimensions must pass, omitted
dimensions are no-ops.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import TYPE_CHECKING, Final

from filmfetch.core.errors import ConfigurationError

if TYPE_CHECKING:
    from filmfetch.core.models import MovieRecord

# ISO 3166-1 alpha-2 code -> lowercase English / native name variants
COUNTRY_VARIANTS: Final[dict[str, tuple[str, ...]]] = {
    "pl": ("poland", "polska", "polish"),
    "us": ("united states", "usa", "america", "united states of america"),
    "gb": ("united kingdom", "uk", "great britain", "britain"),
    "de": ("germany", "deutschland", "german"),
    "fr": ("france", "french"),
    "it": ("italy", "italia", "italian"),
    "es": ("spain", "españa", "spanish"),
    "jp": ("japan", "japanese"),
    "kr": ("south korea", "korea", "korean"),
    "cn": ("china", "chinese"),
    "in": ("india", "indian"),
    "ca": ("canada", "canadian"),
    "au": ("australia", "australian"),
    "br": ("brazil", "brazilian"),
    "mx": ("mexico", "mexican"),
    "ar": ("argentina", "argentinian"),
    "ru": ("russia", "russian"),
    "se": ("sweden", "swedish"),
    "no": ("norway", "norwegian"),
    "dk": ("denmark", "danish"),
    "fi": ("finland", "finnish"),
    "nl": ("netherlands", "dutch"),
    "be": ("belgium", "belgian"),
    "ch": ("switzerland", "swiss"),
    "at": ("austria", "austrian"),
}


@dataclass(slots=True, frozen=True)
class FilterSpec:
    """Client-side filter specification.

    Parameters
    ----------
    start_date:
        Inclusive lower release-date bound.
    end_date:
        Inclusive upper release-date bound.
    country:
        Country name fragment or ISO alpha-2 code.
    genre:
        Genre name fragment.
    """

    start_date: date | None = None
    end_date: date | None = None
    country: str | None = None
    genre: str | None = None

    @classmethod
    def from_strings(
        cls,
        start_date: str | None = None,
        end_date: str | None = None,
        country: str | None = None,
        genre: str | None = None,
    ) -> FilterSpec:
        """Build a spec from raw CLI strings (dates as YYYY-MM-DD).

        Raises
        ------
        ConfigurationError
            If a date does not parse or the range is inverted.
        """
        start = _parse_date(start_date, "start date")
        end = _parse_date(end_date, "end date")
        if start and end and start > end:
            raise ConfigurationError(
                f"Start date {start.isoformat()} is after end date {end.isoformat()}"
            )
        return cls(
            start_date=start,
            end_date=end,
            country=country or None,
            genre=genre or None,
        )

    def is_empty(self) -> bool:
        """Return True when no dimension is set."""
        return not (self.start_date or self.end_date or self.country or self.genre)


def without_country(spec: FilterSpec) -> FilterSpec:
    """Return a copy of `spec` with the country dimension removed."""
    return replace(spec, country=None)


def matches(record: MovieRecord, spec: FilterSpec | None) -> bool:
    """Return True if `record` passes every dimension set on `spec`."""
    if spec is None:
        return True
    if (spec.start_date or spec.end_date) and not _date_matches(record, spec):
        return False
    if spec.country and not _country_matches(record.country, spec.country):
        return False
    return not (spec.genre and not _genre_matches(record.genre, spec.genre))


def _date_matches(record: MovieRecord, spec: FilterSpec) -> bool:
    """Compare at the precision the record actually has.

    Year-only records are compared by year, year+month records by (year,
    month); records without a year never satisfy a date filter.
    """
    if record.release_year is None:
        return False
    if record.release_month is None:
        key: tuple[int, ...] = (record.release_year,)
    elif record.release_day is None:
        key = (record.release_year, record.release_month)
    else:
        key = (record.release_year, record.release_month, record.release_day)

    width = len(key)
    if spec.start_date and key < _date_key(spec.start_date)[:width]:
        return False
    return not (spec.end_date and key > _date_key(spec.end_date)[:width])


def _date_key(value: date) -> tuple[int, int, int]:
    return value.year, value.month, value.day


def _country_matches(country: str | None, wanted: str) -> bool:
    haystack = (country or "").lower()
    needle = wanted.strip().lower()
    if needle in haystack:
        return True
    variants = COUNTRY_VARIANTS.get(needle)
    if variants is None:
        return False
    return any(variant in haystack for variant in variants)


def _genre_matches(genre: str | None, wanted: str) -> bool:
    return wanted.strip().lower() in (genre or "").lower()


def _parse_date(value: str | None, label: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ConfigurationError(
            f"Invalid {label} {value!r}; expected YYYY-MM-DD"
        ) from None
