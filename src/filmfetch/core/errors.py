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

"""Core errors module.

Only `ConfigurationError` is fatal to a run; every `SourceError` is caught
per item by the fetch workflows and turned into a logged skip.
"""

from __future__ import annotations


class FilmFetchError(Exception):
    """Base class for all filmfetch errors."""


class ConfigurationError(FilmFetchError):
    """Invalid or incomplete configuration (no sources, missing key, bad date)."""


class SourceError(FilmFetchError):
    """Failure reported while talking to one external source.

    Parameters
    ----------
    source:
        Provenance tag of the failing source (e.g., "OMDB").
    message:
        Human-readable reason, usually the source's own message.
    """

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class TransportError(SourceError):
    """Network failure, timeout, non-2xx status or undecodable payload."""

    def __init__(
        self, source: str, message: str, *, status: int | None = None
    ) -> None:
        super().__init__(source, message)
        self.status = status


class NotFoundError(SourceError):
    """The source explicitly reported that the requested record does not exist."""
