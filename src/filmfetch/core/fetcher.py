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

"""Fetch workflows driving the configured movie sources.

`MovieFetcher` runs the three workflows (title lookup, filtered discovery and
enrichment) plus curated listings. Every loop skips failing items through
`attempt` and returns the best-effort result list.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from filmfetch.core.attempt import attempt
from filmfetch.core.config import validate_config
from filmfetch.core.filters import FilterSpec, matches, without_country
from filmfetch.core.merge import clean_record, merge_records
from filmfetch.core.models import DiscoveryProgress
from filmfetch.core.providers.tmdb import PAGE_SIZE
from filmfetch.core.registry import SourceRegistry, build_registry

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from filmfetch.core.config import AppConfig
    from filmfetch.core.models import MovieRecord
    from filmfetch.core.providers.base import MovieSource


class ProgressListener(Protocol):
    """Observer notified after each processed discovery sub-batch."""

    def on_progress(self, progress: DiscoveryProgress) -> None:
        """Receive a progress snapshot; the return value is ignored."""


@dataclass(slots=True)
class FetchSettings:
    """Pacing and pagination knobs of the fetch workflows.

    Parameters
    ----------
    title_delay:
        Seconds slept between two title lookups.
    batch_size:
        Discovery items processed concurrently per sub-batch.
    batch_delay:
        Seconds slept after each discovery sub-batch.
    enrich_delay:
        Seconds slept between two enriched records.
    max_pages_ceiling:
        Hard upper bound on discovery pages, whatever the caller asks for.
    page_size:
        Full page length; a shorter non-empty page is the last one.
    max_empty_pages:
        Consecutive empty or failed pages that end discovery.
    """

    title_delay: float = 0.5
    batch_size: int = 5
    batch_delay: float = 0.05
    enrich_delay: float = 0.1
    max_pages_ceiling: int = 500
    page_size: int = PAGE_SIZE
    max_empty_pages: int = 3


class MovieFetcher:
    """Orchestrate lookups across the enabled sources.

    Parameters
    ----------
    config:
        Application configuration; validated when `sources` is not given.
    sources:
        Explicit adapters in priority order; built from `config` when omitted.
    settings:
        Pacing overrides.
    sleep:
        Sleep function, injectable for tests.

    Raises
    ------
    ConfigurationError
        When adapters are built from an invalid configuration.
    """

    def __init__(
        self,
        config: AppConfig,
        sources: Sequence[MovieSource] | None = None,
        *,
        settings: FetchSettings | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        if sources is None:
            validate_config(config)
            self.registry = build_registry(config)
        else:
            self.registry = SourceRegistry(sources=list(sources))
        self.settings = settings or FetchSettings()
        self._sleep = sleep
        self._log = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def sources(self) -> list[MovieSource]:
        """Enabled adapters in priority order."""
        return self.registry.get_sources()

    # --- Title workflow ---
    def search_title(self, title: str) -> list[MovieRecord]:
        """Look one title up in every source.

        Returns
        -------
        list[MovieRecord]
            One normalized record per source that found the title, in source
            priority order.
        """
        records: list[MovieRecord] = []
        for source in self.sources:
            record = attempt(
                self._title_record,
                source,
                title,
                what=f"{source.tag} title {title!r}",
                logger=self._log,
            ).value
            if record is not None:
                records.append(record)
        return records

    def _title_record(self, source: MovieSource, title: str) -> MovieRecord | None:
        raw = source.fetch_title(title)
        return source.normalize(raw) if raw is not None else None

    def fetch_by_titles(
        self, titles: Iterable[str], filters: FilterSpec | None = None
    ) -> list[MovieRecord]:
        """Merge per-source results for each title and keep the matching ones.

        Parameters
        ----------
        titles:
            Free-text titles, processed in order.
        filters:
            Optional client-side filter applied to each merged record.

        Returns
        -------
        list[MovieRecord]
            Merged records in input order; titles that failed everywhere or
            did not match are absent.
        """
        wanted = [t.strip() for t in titles if t and t.strip()]
        results: list[MovieRecord] = []
        for index, title in enumerate(wanted):
            if index:
                self._sleep(self.settings.title_delay)
            merged = clean_record(merge_records(self.search_title(title)))
            if merged is None:
                self._log.info("title_not_found", extra={"title": title})
                continue
            if not matches(merged, filters):
                self._log.info("title_filtered_out", extra={"title": title})
                continue
            results.append(merged)
        self._log.info(
            "titles_processed",
            extra={"titles": len(wanted), "matched": len(results)},
        )
        return results

    # --- Discovery workflow ---
    def discover(
        self,
        filters: FilterSpec | None = None,
        max_pages: int = 50,
        listener: ProgressListener | None = None,
    ) -> list[MovieRecord]:
        """Page through the discovery source and collect matching records.

        Parameters
        ----------
        filters:
            Filter spec; translated to source parameters and re-applied to
            every detailed record, minus the country dimension.
        max_pages:
            Page limit, capped at `FetchSettings.max_pages_ceiling`.
        listener:
            Optional observer notified after every sub-batch.

        Returns
        -------
        list[MovieRecord]
            Records in page order, then in-page order.

        Notes
        -----
        Stops at the first of: a page without a result list, too many
        consecutive empty or failed pages, a short non-empty page, the last
        reported page, or the page limit.
        """
        source = self.registry.get_discovery_source()
        if source is None:
            self._log.warning(
                "discovery_unavailable",
                extra={"sources": [s.tag for s in self.sources]},
            )
            return []

        spec = filters or FilterSpec()
        params = source.discover_params(spec)
        refilter = without_country(spec)
        limit = max(0, min(max_pages, self.settings.max_pages_ceiling))
        self._log.info(
            "discovery_started", extra={"params": params, "max_pages": limit}
        )

        results: list[MovieRecord] = []
        empty_streak = 0
        stop_reason = "max_pages"
        page = 1
        with ThreadPoolExecutor(max_workers=self.settings.batch_size) as pool:
            while page <= limit:
                outcome = attempt(
                    source.discover,
                    params,
                    page,
                    what=f"{source.tag} discover page {page}",
                    logger=self._log,
                )
                data = outcome.value
                if data is not None and data.results is None:
                    stop_reason = "no_results"
                    break
                if data is None or not data.results:
                    empty_streak += 1
                    if empty_streak >= self.settings.max_empty_pages:
                        stop_reason = "empty_streak"
                        break
                    page += 1
                    continue

                empty_streak = 0
                hits = data.results
                total_pages = min(data.total_pages or limit, limit)
                total_results = data.total_results or 0
                for start in range(0, len(hits), self.settings.batch_size):
                    batch = hits[start : start + self.settings.batch_size]
                    for record in pool.map(
                        lambda hit: self._discover_item(source, hit, refilter),
                        batch,
                    ):
                        if record is not None:
                            results.append(record)
                    self._notify(
                        listener,
                        DiscoveryProgress(
                            page=page,
                            total_pages=total_pages,
                            current_results=len(results),
                            total_results=total_results,
                        ),
                    )
                    self._sleep(self.settings.batch_delay)

                if len(hits) < self.settings.page_size:
                    stop_reason = "partial_page"
                    break
                if data.total_pages is not None and page >= data.total_pages:
                    stop_reason = "last_page"
                    break
                page += 1

        self._log.info(
            "discovery_finished",
            extra={"reason": stop_reason, "pages": page, "results": len(results)},
        )
        return results

    def _discover_item(
        self, source: MovieSource, hit: dict[str, Any], spec: FilterSpec
    ) -> MovieRecord | None:
        outcome = attempt(
            self._detail_record,
            source,
            hit,
            what=f"{source.tag} movie {hit.get('id')!r}",
            logger=self._log,
        )
        record = outcome.value
        if record is None or not matches(record, spec):
            return None
        return record

    def _detail_record(
        self, source: MovieSource, hit: dict[str, Any]
    ) -> MovieRecord | None:
        """Normalize the full payload behind a list hit, or the hit itself."""
        hit_id = hit.get("id")
        raw = source.get_details_by_id(hit_id) if hit_id is not None else hit
        return source.normalize(raw)

    def _notify(
        self, listener: ProgressListener | None, progress: DiscoveryProgress
    ) -> None:
        if listener is None:
            return
        attempt(
            listener.on_progress,
            progress,
            what="progress listener",
            quiet=True,
            logger=self._log,
        )

    # --- Listings ---
    def browse(self, listing: str, max_pages: int = 5) -> list[MovieRecord]:
        """Collect detailed records from a curated listing (trending, ...).

        Raises
        ------
        ValueError
            If the discovery source does not know `listing`.
        """
        source = self.registry.get_discovery_source()
        if source is None:
            self._log.warning("listing_unavailable", extra={"listing": listing})
            return []

        results: list[MovieRecord] = []
        for page in range(1, max(0, max_pages) + 1):
            outcome = attempt(
                source.list_movies,
                listing,
                page,
                what=f"{source.tag} {listing} page {page}",
                logger=self._log,
            )
            if not outcome.ok:
                continue
            data = outcome.value
            if data is None or not data.results:
                break
            for hit in data.results:
                record = attempt(
                    self._detail_record,
                    source,
                    hit,
                    what=f"{source.tag} movie {hit.get('id')!r}",
                    logger=self._log,
                ).value
                if record is not None:
                    results.append(record)
            if data.total_pages is not None and page >= data.total_pages:
                break
        return results

    # --- Enrichment workflow ---
    def enrich_all(self, records: Sequence[MovieRecord]) -> list[MovieRecord]:
        """Enrich every record from the sources it does not carry yet.

        Returns
        -------
        list[MovieRecord]
            One record per input, in input order; a record whose enrichment
            failed unexpectedly is returned unchanged.
        """
        enriched: list[MovieRecord] = []
        for index, record in enumerate(records):
            if index:
                self._sleep(self.settings.enrich_delay)
            outcome = attempt(
                self.enrich_record,
                record,
                what=f"enrich {record.title!r}",
                logger=self._log,
            )
            enriched.append(outcome.value if outcome.value is not None else record)
        return enriched

    def enrich_record(self, record: MovieRecord) -> MovieRecord | None:
        """Merge `record` with whatever the missing sources know about it.

        Notes
        -----
        The record keeps top priority; per-source failures are logged at
        DEBUG and skipped.
        """
        present = set(record.provenance())
        collected = [record]
        for source in self.sources:
            if source.tag in present:
                continue
            outcome = attempt(
                source.lookup_record,
                record,
                what=f"{source.tag} enrich {record.title!r}",
                quiet=True,
                logger=self._log,
            )
            if outcome.value is None:
                continue
            extra = source.normalize(outcome.value)
            if extra is not None:
                collected.append(extra)
        return clean_record(merge_records(collected))
