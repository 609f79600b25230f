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

"""Shared exporter plumbing: output directory, filenames and flat rows."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Final

if TYPE_CHECKING:
    from collections.abc import Sequence

    from filmfetch.core.models import MovieRecord

TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d_%H-%M-%S"

# (record field, column header) for flat movie tables
MOVIE_COLUMNS: Final[tuple[tuple[str, str], ...]] = (
    ("title", "Title"),
    ("original_title", "Original Title"),
    ("release_year", "Release Year"),
    ("release_month", "Release Month"),
    ("release_day", "Release Day"),
    ("country", "Country"),
    ("description", "Description"),
    ("tagline", "Tagline"),
    ("cast_names", "Cast Names"),
    ("cast_roles", "Cast Roles"),
    ("genre", "Genre"),
    ("runtime_min", "Runtime (minutes)"),
    ("language", "Language"),
    ("rated", "Rated"),
    ("keywords", "Keywords"),
    ("gross_worldwide_boxoffice", "Worldwide Box Office"),
    ("budget", "Budget"),
    ("studio", "Studio"),
    ("other_titles", "Other Titles"),
    ("imdb_id", "IMDB ID"),
    ("imdb_rating", "IMDB Rating"),
    ("imdb_vote_count", "IMDB Votes"),
    ("tmdb_id", "TMDB ID"),
    ("tmdb_rating", "TMDB Rating"),
    ("tmdb_vote_count", "TMDB Votes"),
    ("metascore", "Metascore"),
    ("popularity", "Popularity"),
    ("director", "Director"),
    ("writer", "Writer"),
    ("producer", "Producer"),
    ("awards", "Awards"),
    ("homepage", "Homepage"),
    ("status", "Status"),
    ("poster_url", "Poster URL"),
    ("backdrop_url", "Backdrop URL"),
    ("sources", "Data Sources"),
)

CAST_COLUMNS: Final[tuple[tuple[str, str], ...]] = (
    ("movie_title", "Movie Title"),
    ("actor_name", "Actor Name"),
    ("character_role", "Character Role"),
    ("release_year", "Release Year"),
)

OTHER_TITLE_COLUMNS: Final[tuple[tuple[str, str], ...]] = (
    ("movie_title", "Original Title"),
    ("alt_title", "Alternative Title"),
    ("country", "Country"),
    ("release_year", "Release Year"),
)


def timestamped_filename(
    base_name: str, extension: str, now: datetime | None = None
) -> str:
    """Return ``<base_name>_<YYYY-MM-DD_HH-MM-SS>.<extension>``."""
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)  # noqa: DTZ005
    return f"{base_name}_{stamp}.{extension}"


def flatten_movie(movie: MovieRecord, sep: str = "; ") -> dict[str, Any]:
    """Flatten a record into one row keyed by `MOVIE_COLUMNS` fields.

    Cast names and roles become parallel `sep`-joined strings; other titles
    read "Title (CC)".
    """
    row: dict[str, Any] = {}
    for name, _header in MOVIE_COLUMNS:
        if hasattr(movie, name) and name not in {"other_titles", "sources"}:
            row[name] = getattr(movie, name)
    row["cast_names"] = sep.join(m.name for m in movie.cast)
    row["cast_roles"] = sep.join(m.role or "" for m in movie.cast)
    row["other_titles"] = sep.join(
        f"{t.title} ({t.country})" if t.country else t.title
        for t in movie.other_titles
    )
    row["sources"] = sep.join(movie.provenance())
    return row


def cast_rows(movies: Sequence[MovieRecord]) -> list[dict[str, Any]]:
    """One row per (movie, cast member)."""
    return [
        {
            "movie_title": movie.title,
            "actor_name": member.name,
            "character_role": member.role or "",
            "release_year": movie.release_year,
        }
        for movie in movies
        for member in movie.cast
    ]


def other_title_rows(movies: Sequence[MovieRecord]) -> list[dict[str, Any]]:
    """One row per (movie, alternative title)."""
    return [
        {
            "movie_title": movie.title,
            "alt_title": alt.title,
            "country": alt.country,
            "release_year": movie.release_year,
        }
        for movie in movies
        for alt in movie.other_titles
    ]


@dataclass(slots=True)
class BaseExporter(ABC):
    """Base class for file exporters.

    Parameters
    ----------
    output_dir:
        Directory the exported files are written into; created on demand.
    """

    format_name: ClassVar[str]
    extension: ClassVar[str]

    output_dir: Path = field(default_factory=lambda: Path("./output"))

    def __post_init__(self) -> None:
        """Coerce `output_dir` to a `Path`."""
        self.output_dir = Path(self.output_dir)

    def ensure_output_dir(self) -> Path:
        """Create the output directory if needed and return it."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    def target(self, base_name: str, now: datetime | None = None) -> Path:
        """Return a timestamped path inside the output directory."""
        return self.ensure_output_dir() / timestamped_filename(
            base_name, self.extension, now
        )

    @abstractmethod
    def export(
        self,
        movies: Sequence[MovieRecord],
        prefix: str,
        *,
        metadata: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> list[Path]:  # pragma: no cover - abstract contract
        """Write `movies` and return the created file paths.

        Parameters
        ----------
        movies:
            Records to export.
        prefix:
            Workflow name used in filenames (e.g., "search", "discover").
        metadata:
            Extra export metadata, for formats that carry it.
        now:
            Timestamp used in filenames; defaults to the current time.
        """

    def _log_written(self, path: Path, count: int) -> None:
        logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        ).info("export_written", extra={"path": str(path), "movies": count})
