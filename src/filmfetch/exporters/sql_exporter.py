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

"""SQL exporter producing a portable DDL + INSERT script."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Final

from filmfetch.core.models import SCALAR_FIELDS
from filmfetch.exporters.base import BaseExporter

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from filmfetch.core.models import MovieRecord

_INTEGER_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "release_year",
        "release_month",
        "release_day",
        "runtime_min",
        "tmdb_id",
        "imdb_vote_count",
        "tmdb_vote_count",
        "metascore",
        "metacritic_score",
    }
)
_REAL_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "budget",
        "gross_worldwide_boxoffice",
        "imdb_rating",
        "tmdb_rating",
        "popularity",
    }
)


@dataclass(slots=True)
class SQLExporter(BaseExporter):
    """Write `<prefix>_movies_<ts>.sql` for the `movies`, `movie_cast` and
    `movie_other_titles` tables.
    """

    format_name: ClassVar[str] = "sql"
    extension: ClassVar[str] = "sql"

    def export(
        self,
        movies: Sequence[MovieRecord],
        prefix: str,
        *,
        metadata: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> list[Path]:
        """Write the script and return its path."""
        stamp = now or datetime.now()  # noqa: DTZ005
        path = self.target(f"{prefix}_movies", stamp)
        path.write_text(render_script(movies, stamp), encoding="utf-8")
        self._log_written(path, len(movies))
        return [path]


def render_script(movies: Sequence[MovieRecord], now: datetime) -> str:
    """Render the full script; movie ids are 1-based export positions."""
    lines = [
        f"-- filmfetch export generated {now.isoformat(timespec='seconds')}",
        f"-- {len(movies)} movies",
        "",
        *schema_statements(),
        "",
    ]
    columns = ["id", *SCALAR_FIELDS, "sources"]
    for movie_id, movie in enumerate(movies, start=1):
        values = [
            movie_id,
            *(getattr(movie, name) for name in SCALAR_FIELDS),
            ", ".join(movie.provenance()),
        ]
        lines.append(_insert("movies", columns, values))
        for member in movie.cast:
            lines.append(
                _insert(
                    "movie_cast",
                    ["movie_id", "actor_name", "character_role", "cast_order"],
                    [movie_id, member.name, member.role, member.order],
                )
            )
        for alt in movie.other_titles:
            lines.append(
                _insert(
                    "movie_other_titles",
                    ["movie_id", "title", "country"],
                    [movie_id, alt.title, alt.country],
                )
            )
    return "\n".join(lines) + "\n"


def schema_statements() -> list[str]:
    """Return the CREATE TABLE statements."""
    movie_columns = ",\n".join(
        [
            "    id INTEGER PRIMARY KEY",
            *(f"    {name} {_column_type(name)}" for name in SCALAR_FIELDS),
            "    sources TEXT",
        ]
    )
    return [
        f"CREATE TABLE IF NOT EXISTS movies (\n{movie_columns}\n);",
        "CREATE TABLE IF NOT EXISTS movie_cast (\n"
        "    movie_id INTEGER NOT NULL REFERENCES movies(id),\n"
        "    actor_name TEXT NOT NULL,\n"
        "    character_role TEXT,\n"
        "    cast_order INTEGER\n"
        ");",
        "CREATE TABLE IF NOT EXISTS movie_other_titles (\n"
        "    movie_id INTEGER NOT NULL REFERENCES movies(id),\n"
        "    title TEXT NOT NULL,\n"
        "    country TEXT\n"
        ");",
    ]


def sql_literal(value: Any) -> str:
    """Render a Python value as a SQL literal.

    Examples
    --------
    >>> sql_literal(None)
    'NULL'
    >>> sql_literal("Schindler's List")
    "'Schindler''s List'"
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and not math.isfinite(value):
        return "NULL"
    if isinstance(value, (int, float)):
        return repr(value)
    return "'" + str(value).replace("'", "''") + "'"


def _column_type(name: str) -> str:
    if name in _INTEGER_FIELDS:
        return "INTEGER"
    if name in _REAL_FIELDS:
        return "REAL"
    return "TEXT"


def _insert(table: str, columns: Sequence[str], values: Sequence[Any]) -> str:
    return (
        f"INSERT INTO {table} ({', '.join(columns)}) "
        f"VALUES ({', '.join(sql_literal(v) for v in values)});"
    )
