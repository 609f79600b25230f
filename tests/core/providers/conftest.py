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

"""Provider-scoped pytest fixtures.

These fixtures are only imported for provider tests under tests/core/providers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from filmfetch.core.providers.base import RestClientMixin

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def requested_urls() -> list[str]:
    """URLs seen by the `mock_http_json` fake, in call order."""
    return []


@pytest.fixture
def mock_http_json(
    monkeypatch: pytest.MonkeyPatch, requested_urls: list[str]
) -> Callable[[dict[str, object]], None]:
    """Factory to mock `RestClientMixin._http_get_json`.

    Parameters
    ----------
    mapping:
        Dict mapping substring match (typically path) to return value. An
        exception value is raised instead of returned.
    """

    def _apply(mapping: dict[str, object]) -> None:
        def _fake(self: RestClientMixin, url: str, **_: object) -> object:  # type: ignore[override]
            requested_urls.append(url)
            for key, value in mapping.items():
                if key in url:
                    if isinstance(value, Exception):
                        raise value
                    return value
            return {}

        monkeypatch.setattr(RestClientMixin, "_http_get_json", _fake, raising=True)

    return _apply
