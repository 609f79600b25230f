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

"""JSON exporter: one document with export metadata and the full records."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar

from filmfetch.exporters.base import BaseExporter

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from filmfetch.core.models import MovieRecord


@dataclass(slots=True)
class JSONExporter(BaseExporter):
    """Write ``{"metadata": {...}, "movies": [...]}`` with 2-space indent."""

    format_name: ClassVar[str] = "json"
    extension: ClassVar[str] = "json"

    def export(
        self,
        movies: Sequence[MovieRecord],
        prefix: str,
        *,
        metadata: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> list[Path]:
        """Write the movies document and return its path."""
        stamp = now or datetime.now()  # noqa: DTZ005
        document = {
            "metadata": {
                "export_date": stamp.isoformat(),
                "total_movies": len(movies),
                "export_type": prefix,
                **(metadata or {}),
            },
            "movies": [movie.to_dict() for movie in movies],
        }
        path = self.target(f"{prefix}_movies", stamp)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(document, fh, indent=2, ensure_ascii=False)
        self._log_written(path, len(movies))
        return [path]
