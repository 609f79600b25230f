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

"""File exporters keyed by their CLI format name."""

from __future__ import annotations

from pathlib import Path

from filmfetch.exporters.base import BaseExporter, timestamped_filename
from filmfetch.exporters.csv_exporter import CSVExporter
from filmfetch.exporters.excel_exporter import ExcelExporter
from filmfetch.exporters.json_exporter import JSONExporter
from filmfetch.exporters.sql_exporter import SQLExporter

EXPORTERS: dict[str, type[BaseExporter]] = {
    JSONExporter.format_name: JSONExporter,
    CSVExporter.format_name: CSVExporter,
    ExcelExporter.format_name: ExcelExporter,
    SQLExporter.format_name: SQLExporter,
}


def get_exporter(format_name: str, output_dir: str | Path) -> BaseExporter:
    """Instantiate the exporter registered under `format_name`.

    Raises
    ------
    ValueError
        For an unknown format.
    """
    try:
        exporter_cls = EXPORTERS[format_name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown format {format_name!r}; expected one of {', '.join(EXPORTERS)}"
        ) from None
    return exporter_cls(output_dir=Path(output_dir))


__all__ = [
    "EXPORTERS",
    "BaseExporter",
    "CSVExporter",
    "ExcelExporter",
    "JSONExporter",
    "SQLExporter",
    "get_exporter",
    "timestamped_filename",
]
