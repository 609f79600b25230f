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

"""CSV exporter writing a flat movies file plus a separate cast file."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar

from filmfetch.exporters.base import (
    CAST_COLUMNS,
    MOVIE_COLUMNS,
    BaseExporter,
    cast_rows,
    flatten_movie,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from filmfetch.core.models import MovieRecord


@dataclass(slots=True)
class CSVExporter(BaseExporter):
    """Write `<prefix>_movies_<ts>.csv` and `<prefix>_cast_<ts>.csv`."""

    format_name: ClassVar[str] = "csv"
    extension: ClassVar[str] = "csv"

    def export(
        self,
        movies: Sequence[MovieRecord],
        prefix: str,
        *,
        metadata: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> list[Path]:
        """Write both CSV files and return their paths (movies first)."""
        stamp = now or datetime.now()  # noqa: DTZ005
        movies_path = self.target(f"{prefix}_movies", stamp)
        _write_rows(movies_path, MOVIE_COLUMNS, [flatten_movie(m) for m in movies])
        self._log_written(movies_path, len(movies))

        cast_path = self.target(f"{prefix}_cast", stamp)
        _write_rows(cast_path, CAST_COLUMNS, cast_rows(movies))
        return [movies_path, cast_path]


def _write_rows(
    path: Path,
    columns: Sequence[tuple[str, str]],
    rows: Sequence[dict[str, Any]],
) -> None:
    """Write rows under human-readable headers; ``None`` becomes empty."""
    with path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow([header for _name, header in columns])
        for row in rows:
            writer.writerow(
                ["" if row.get(name) is None else row.get(name) for name, _ in columns]
            )
