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

"""Shared utilities for source adapter modules.

This module provides helpers for URL validation, payload parsing and a
minimum-interval rate limiter to protect external API calls.
"""

from __future__ import annotations

import math
import re
import threading
import time
from datetime import datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from collections.abc import Callable

_IMDB_ID_RE = re.compile(r"^(?:tt)?(\d+)$")


def is_https(url: str) -> bool:
    """Check if URL uses HTTPS scheme.

    Parameters
    ----------
    url : str
        URL to check.

    Returns
    -------
    bool
        True if URL uses HTTPS scheme, False otherwise.
    """
    parts = urlsplit(url)
    return parts.scheme == "https"


class RateLimiter:
    """Per-adapter rate limiter with a depth-1 bucket.

    Parameters
    ----------
    requests_per_second:
        Sustained request rate; consecutive calls are spaced at least
        ``1 / requests_per_second`` seconds apart.
    clock:
        Monotonic clock, injectable for tests.
    sleep:
        Sleep function, injectable for tests.

    Methods
    -------
    acquire:
        Blocks the caller for the remainder of the minimum interval.
    """

    def __init__(
        self,
        requests_per_second: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self._interval = 1.0 / float(requests_per_second)
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None
        self._lock = threading.Lock()

    @property
    def interval(self) -> float:
        """Minimum delay between two calls, in seconds."""
        return self._interval

    def acquire(self) -> None:
        """Acquire permission to proceed, sleeping if required.

        Notes
        -----
        The lock is held across the sleep, so concurrent callers queue up and
        each observes the full interval after its predecessor.
        """
        with self._lock:
            if self._last_call is not None:
                wait = self._last_call + self._interval - self._clock()
                if wait > 0:
                    self._sleep(wait)
            self._last_call = self._clock()


def clean_value(value: Any, *, missing: tuple[str, ...] = ("", "N/A")) -> Any:
    """Return ``None`` for empty or placeholder values, else the value.

    Strings are stripped before comparison against `missing`.
    """
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return None if stripped in missing else stripped
    return value


def parse_int(value: Any) -> int | None:
    """Parse an integer out of loosely formatted input ("1,234", "136 min")."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    digits = re.sub(r"[^\d-]", "", str(value))
    if not digits or digits == "-":
        return None
    try:
        return int(digits)
    except ValueError:
        return None


def parse_float(value: Any) -> float | None:
    """Parse a finite float out of currency / rating strings ("$1,234", "7.5")."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    cleaned = re.sub(r"[,$\s]", "", str(value))
    if not cleaned or cleaned == "N/A":
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_date_parts(
    value: Any, formats: tuple[str, ...] = ("%Y-%m-%d",)
) -> tuple[int | None, int | None, int | None]:
    """Split a date string into (year, month, day) using the first matching format.

    Returns
    -------
    tuple[int | None, int | None, int | None]
        All ``None`` when the input is empty or does not parse.
    """
    if not isinstance(value, str) or not value.strip():
        return None, None, None
    text = value.strip()
    for fmt in formats:
        try:
            parsed = datetime.strptime(text, fmt)  # noqa: DTZ007 - calendar date only
        except ValueError:
            continue
        return parsed.year, parsed.month, parsed.day
    return None, None, None


def normalize_imdb_id(value: Any) -> str | None:
    """Return an IMDb id in canonical "tt" + digits form, or None."""
    if value is None:
        return None
    m = _IMDB_ID_RE.match(str(value).strip())
    if not m:
        return None
    return f"tt{m.group(1)}"


def join_names(items: Any, key: str = "name", sep: str = ", ") -> str | None:
    """Join the `key` values of a list of dicts; None if nothing to join."""
    if not isinstance(items, list):
        return None
    names = [
        str(it.get(key)).strip()
        for it in items
        if isinstance(it, dict) and it.get(key)
    ]
    return sep.join(names) if names else None
