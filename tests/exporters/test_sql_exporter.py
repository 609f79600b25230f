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

from __future__ import annotations

import sqlite3

import pytest

from filmfetch.exporters import SQLExporter
from filmfetch.exporters.sql_exporter import sql_literal


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "NULL"),
        (True, "1"),
        (42, "42"),
        (7.5, "7.5"),
        (float("inf"), "NULL"),
        (float("nan"), "NULL"),
        ("Schindler's List", "'Schindler''s List'"),
    ],
)
def test_sql_literal(value: object, expected: str) -> None:
    assert sql_literal(value) == expected


def test_sql_script_loads_into_sqlite(tmp_path, movies, now) -> None:
    (path,) = SQLExporter(tmp_path).export(movies, "search", now=now)
    assert path.name == "search_movies_2024-05-06_07-08-09.sql"

    conn = sqlite3.connect(":memory:")
    try:
        conn.executescript(path.read_text(encoding="utf-8"))
        rows = conn.execute(
            "SELECT id, title, tmdb_id, budget, sources FROM movies ORDER BY id"
        ).fetchall()
        cast = conn.execute(
            "SELECT movie_id, actor_name, character_role FROM movie_cast"
        ).fetchall()
        alt = conn.execute("SELECT movie_id, title, country FROM movie_other_titles")
        alt_rows = alt.fetchall()
    finally:
        conn.close()

    assert rows == [
        (1, "Schindler's List", 424, 22000000.0, "OMDB, TMDB"),
        (2, "Sparse", None, None, "IMDB"),
    ]
    assert cast == [
        (1, "Liam Neeson", "Oskar Schindler"),
        (1, "Ben Kingsley", None),
    ]
    assert alt_rows == [(1, "La lista de Schindler", "ES")]
