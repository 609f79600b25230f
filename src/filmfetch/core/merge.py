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

"""Merge per-source records describing the same movie.

Precedence is positional: for scalar fields the first non-empty value wins,
so callers control trust by ordering their inputs.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from filmfetch.core.models import SCALAR_FIELDS, TEXT_FIELDS, MovieRecord

if TYPE_CHECKING:
    from collections.abc import Sequence


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def merge_records(records: Sequence[MovieRecord]) -> MovieRecord | None:
    """Merge an ordered sequence of records into one.

    Parameters
    ----------
    records:
        Normalized records for one movie, highest priority first.

    Returns
    -------
    MovieRecord | None
        Merged record whose `sources` is the ordered union of every input's
        provenance, or None for empty input.

    Notes
    -----
    - Cast: incoming members are appended unless their name is already present.
    - Other titles: concatenated without deduplication.
    - Every other field: adopted only while the merged value is empty.
    """
    if not records:
        return None

    base = records[0]
    merged = replace(
        base,
        cast=list(base.cast),
        other_titles=list(base.other_titles),
        sources=[],
    )
    for current in records[1:]:
        for name in SCALAR_FIELDS:
            incoming = getattr(current, name)
            if not _is_empty(incoming) and _is_empty(getattr(merged, name)):
                setattr(merged, name, incoming)

        known = {member.name for member in merged.cast}
        for member in current.cast:
            if member.name not in known:
                merged.cast.append(member)
                known.add(member.name)

        merged.other_titles.extend(current.other_titles)

    tags: list[str] = []
    for record in records:
        for tag in record.provenance():
            if tag not in tags:
                tags.append(tag)
    merged.sources = tags
    return merged


def clean_record(record: MovieRecord | None) -> MovieRecord | None:
    """Trim text fields and guarantee list fields on a record copy."""
    if record is None:
        return None
    cleaned = replace(
        record,
        cast=list(record.cast or []),
        other_titles=list(record.other_titles or []),
        sources=list(record.sources or []),
    )
    for name in TEXT_FIELDS:
        value = getattr(cleaned, name)
        if isinstance(value, str):
            setattr(cleaned, name, value.strip())
    return cleaned
