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

"""Exporter fixtures."""

from __future__ import annotations

from datetime import datetime

import pytest

from filmfetch.core.models import CastMember, MovieRecord, OtherTitle


@pytest.fixture
def movies() -> list[MovieRecord]:
    """Two merged records, one rich and one sparse."""
    return [
        MovieRecord(
            title="Schindler's List",
            release_year=1993,
            release_month=11,
            release_day=30,
            country="United States",
            genre="Drama/History",
            imdb_id="tt0108052",
            tmdb_id=424,
            imdb_rating=9.0,
            budget=22000000.0,
            cast=[
                CastMember(name="Liam Neeson", role="Oskar Schindler", order=0),
                CastMember(name="Ben Kingsley"),
            ],
            other_titles=[OtherTitle("La lista de Schindler", "ES")],
            sources=["OMDB", "TMDB"],
        ),
        MovieRecord(title="Sparse", release_year=2001, source="IMDB", imdb_rating=7.0),
    ]


@pytest.fixture
def now() -> datetime:
    """Fixed export timestamp."""
    return datetime(2024, 5, 6, 7, 8, 9)
