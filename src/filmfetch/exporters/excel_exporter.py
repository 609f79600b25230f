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

"""Excel exporter built on pandas with the openpyxl engine.

The workbook holds four sheets: `Movies`, `Cast`, `Other Titles` and a
`Summary` of simple aggregates.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Final

import pandas as pd
from openpyxl.utils import get_column_letter

from filmfetch.exporters.base import (
    CAST_COLUMNS,
    MOVIE_COLUMNS,
    OTHER_TITLE_COLUMNS,
    BaseExporter,
    cast_rows,
    flatten_movie,
    other_title_rows,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from filmfetch.core.models import MovieRecord

_MAX_COLUMN_WIDTH: Final[int] = 50


@dataclass(slots=True)
class ExcelExporter(BaseExporter):
    """Write `<prefix>_movies_<ts>.xlsx`."""

    format_name: ClassVar[str] = "excel"
    extension: ClassVar[str] = "xlsx"

    def export(
        self,
        movies: Sequence[MovieRecord],
        prefix: str,
        *,
        metadata: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> list[Path]:
        """Write the workbook and return its path."""
        stamp = now or datetime.now()  # noqa: DTZ005
        sheets = {
            "Movies": _frame(MOVIE_COLUMNS, [flatten_movie(m) for m in movies]),
            "Cast": _frame(CAST_COLUMNS, cast_rows(movies)),
            "Other Titles": _frame(OTHER_TITLE_COLUMNS, other_title_rows(movies)),
            "Summary": summary_frame(movies, stamp),
        }
        path = self.target(f"{prefix}_movies", stamp)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for name, frame in sheets.items():
                frame.to_excel(writer, sheet_name=name, index=False)
                _fit_columns(writer.sheets[name], frame)
        self._log_written(path, len(movies))
        return [path]


def summary_frame(movies: Sequence[MovieRecord], now: datetime) -> pd.DataFrame:
    """Aggregate metrics for the `Summary` sheet.

    Returns
    -------
    pd.DataFrame
        Two columns, `Metric` and `Value`; averages and ranges read "N/A"
        when no record carries the underlying value.
    """
    ratings = pd.Series(
        [m.imdb_rating for m in movies if m.imdb_rating is not None], dtype=float
    )
    years = [m.release_year for m in movies if m.release_year is not None]
    genres = {m.genre for m in movies if m.genre}
    countries = {m.country for m in movies if m.country}
    rows = [
        ("Total Movies", len(movies)),
        (
            "Average IMDB Rating",
            f"{ratings.mean():.1f}" if not ratings.empty else "N/A",
        ),
        ("Year Range", f"{min(years)} - {max(years)}" if years else "N/A"),
        ("Unique Genres", len(genres)),
        ("Unique Countries", len(countries)),
        ("Export Date", now.date().isoformat()),
    ]
    return pd.DataFrame(rows, columns=["Metric", "Value"])


def _frame(
    columns: Sequence[tuple[str, str]], rows: Sequence[dict[str, Any]]
) -> pd.DataFrame:
    return pd.DataFrame(
        [[row.get(name) for name, _ in columns] for row in rows],
        columns=[header for _name, header in columns],
    )


def _fit_columns(sheet: Any, frame: pd.DataFrame) -> None:
    """Size each column to its longest cell, capped at a readable width."""
    for index, column in enumerate(frame.columns, start=1):
        values = frame[column].dropna().astype(str)
        longest = max([len(str(column)), *values.str.len().tolist()])
        sheet.column_dimensions[get_column_letter(index)].width = min(
            longest + 2, _MAX_COLUMN_WIDTH
        )
