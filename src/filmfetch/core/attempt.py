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

"""Per-item skip-and-continue policy shared by every fetch loop."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from filmfetch.core.errors import SourceError

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

_LOG = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Outcome(Generic[T]):
    """Result of one attempted item: a value, or the error that skipped it."""

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Whether the attempt completed without raising."""
        return self.error is None


def attempt(
    func: Callable[..., T],
    *args: Any,
    what: str,
    quiet: bool = False,
    logger: logging.Logger | None = None,
    **kwargs: Any,
) -> Outcome[T]:
    """Run `func` and convert any failure into a logged skip.

    Parameters
    ----------
    func:
        Callable performing one item of work.
    what:
        Short description of the item for the log line.
    quiet:
        Log source failures at DEBUG instead of WARNING.
    logger:
        Logger to report through; defaults to this module's logger.

    Returns
    -------
    Outcome[T]
        The value on success, otherwise the captured error.

    Notes
    -----
    `SourceError` is the expected failure and is logged without a traceback;
    anything else is unexpected and logged with one.
    """
    log = logger or _LOG
    try:
        return Outcome(value=func(*args, **kwargs))
    except SourceError as exc:
        log.log(
            logging.DEBUG if quiet else logging.WARNING,
            "item_skipped",
            extra={"item": what, "source": exc.source, "error": exc.message},
        )
        return Outcome(error=exc)
    except Exception as exc:  # noqa: BLE001 - one item must never abort a batch
        log.warning(
            "item_failed_unexpectedly",
            extra={"item": what, "error": str(exc)},
            exc_info=True,
        )
        return Outcome(error=exc)
