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

"""Command-line entrypoint for filmfetch."""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

import click

from filmfetch.core.config import KNOWN_SOURCES, AppConfig, load_config_from_env
from filmfetch.core.errors import ConfigurationError
from filmfetch.core.fetcher import MovieFetcher
from filmfetch.core.filters import FilterSpec
from filmfetch.exporters import EXPORTERS, get_exporter

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from filmfetch.core.models import DiscoveryProgress, MovieRecord

_LOG = logging.getLogger(__name__)

_LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s %(message)s"
# Attributes every LogRecord carries; anything else came in through `extra=`
_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

# Listing-based commands only work against the discovery source
_DISCOVERY_SOURCES: Final[tuple[str, ...]] = ("tmdb",)


class KeyValueFormatter(logging.Formatter):
    """Append `extra=` context to the event name as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, then the extras in insertion order."""
        line = super().format(record)
        extras = [
            f"{key}={value!r}"
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        ]
        if not extras:
            return line
        head, sep, trace = line.partition("\n")
        return f"{head} {' '.join(extras)}{sep}{trace}"


def configure_logging(verbose: bool = False) -> None:
    """Install a stderr handler; DEBUG when `verbose`, else WARNING."""
    handler = logging.StreamHandler()
    handler.setFormatter(KeyValueFormatter(_LOG_FORMAT))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        handlers=[handler],
        force=True,
    )


def warn(message: str) -> None:
    """Print a user-facing warning in yellow."""
    click.secho(f"Warning: {message}", fg="yellow", err=True)


def fail(message: str) -> None:
    """Print a fatal error in red and exit with status 1."""
    click.secho(f"Error: {message}", fg="red", err=True)
    raise SystemExit(1)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn configuration errors raised by a command into a red exit 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ConfigurationError as exc:
            fail(f"Configuration error: {exc}")
        return None

    return wrapper


class EchoProgress:
    """Progress listener printing one line per discovery sub-batch."""

    def on_progress(self, progress: DiscoveryProgress) -> None:
        """Report page position and collected record count."""
        click.echo(
            f"Page {progress.page}/{progress.total_pages}: "
            f"{progress.current_results} movies collected "
            f"({progress.total_results} matches reported)",
            err=True,
        )


def source_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the repeatable ``--source`` option."""
    return click.option(
        "--source",
        "sources",
        multiple=True,
        type=click.Choice(KNOWN_SOURCES, case_sensitive=False),
        help="Source to query, in priority order (repeatable).",
    )(func)


def export_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the shared output options."""
    options = [
        click.option(
            "--format",
            "formats",
            multiple=True,
            default=("json",),
            show_default=True,
            type=click.Choice(sorted(EXPORTERS), case_sensitive=False),
            help="Export format (repeatable).",
        ),
        click.option(
            "--output-dir",
            type=click.Path(file_okay=False, path_type=Path),
            default=None,
            help="Output directory (default: FILMFETCH_OUTPUT_DIR or ./output).",
        ),
        click.option(
            "--enrich",
            is_flag=True,
            help="Fill gaps from every enabled source not yet represented.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def filter_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the client-side filter options."""
    options = [
        click.option("--start-date", help="Earliest release date (YYYY-MM-DD)."),
        click.option("--end-date", help="Latest release date (YYYY-MM-DD)."),
        click.option("--country", help="Country name or ISO code (e.g., US, PL)."),
        click.option("--genre", help="Genre name (e.g., Drama)."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(package_name="filmfetch", prog_name="filmfetch")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Fetch movie metadata from OMDb, TMDb and imdbapi.dev and export it."""
    configure_logging(verbose)


@main.command()
@click.option(
    "--title", "-t", "titles", multiple=True, help="Movie title (repeatable)."
)
@click.option(
    "--file",
    "-f",
    "titles_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File with one movie title per line.",
)
@filter_options
@source_option
@export_options
@handle_errors
def search(
    titles: tuple[str, ...],
    titles_file: Path | None,
    start_date: str | None,
    end_date: str | None,
    country: str | None,
    genre: str | None,
    sources: tuple[str, ...],
    formats: tuple[str, ...],
    output_dir: Path | None,
    enrich: bool,
) -> None:
    """Search movies by title and merge every source's answer."""
    wanted = list(titles)
    if titles_file is not None:
        lines = titles_file.read_text(encoding="utf-8").splitlines()
        wanted.extend(line.strip() for line in lines if line.strip())
    if not wanted:
        fail("Provide titles with --title or --file")

    spec = FilterSpec.from_strings(start_date, end_date, country, genre)
    config = _config(sources)
    fetcher = MovieFetcher(config)
    click.secho(
        f"Searching {len(wanted)} titles using: {', '.join(config.enabled_sources)}",
        fg="blue",
    )
    movies = fetcher.fetch_by_titles(wanted, spec)
    click.echo(f"Found {len(movies)} matching movies out of {len(wanted)} titles")
    _finish(fetcher, movies, "search", formats, output_dir, enrich, spec)


@main.command()
@filter_options
@click.option(
    "--max-pages",
    type=click.IntRange(min=1, max=500),
    default=50,
    show_default=True,
    help="Maximum discovery pages to fetch.",
)
@source_option
@export_options
@handle_errors
def discover(
    start_date: str | None,
    end_date: str | None,
    country: str | None,
    genre: str | None,
    max_pages: int,
    sources: tuple[str, ...],
    formats: tuple[str, ...],
    output_dir: Path | None,
    enrich: bool,
) -> None:
    """Discover movies matching the filters through TMDb."""
    spec = FilterSpec.from_strings(start_date, end_date, country, genre)
    config = _config(sources, required=_DISCOVERY_SOURCES)
    fetcher = MovieFetcher(config)
    if fetcher.registry.get_discovery_source() is None:
        warn("Discovery needs TMDb; enable it with --source tmdb")
        return
    movies = fetcher.discover(spec, max_pages=max_pages, listener=EchoProgress())
    click.echo(f"Discovered {len(movies)} movies")
    _finish(fetcher, movies, "discover", formats, output_dir, enrich, spec)


@main.command()
@click.option(
    "--time-window",
    type=click.Choice(("day", "week")),
    default="week",
    show_default=True,
)
@click.option("--max-pages", type=click.IntRange(min=1), default=5, show_default=True)
@source_option
@export_options
@handle_errors
def trending(
    time_window: str,
    max_pages: int,
    sources: tuple[str, ...],
    formats: tuple[str, ...],
    output_dir: Path | None,
    enrich: bool,
) -> None:
    """Fetch TMDb's trending movies."""
    _listing_command(
        f"trending-{time_window}",
        "trending",
        max_pages,
        sources,
        formats,
        output_dir,
        enrich,
    )


@main.command("top-rated")
@click.option("--max-pages", type=click.IntRange(min=1), default=5, show_default=True)
@source_option
@export_options
@handle_errors
def top_rated(
    max_pages: int,
    sources: tuple[str, ...],
    formats: tuple[str, ...],
    output_dir: Path | None,
    enrich: bool,
) -> None:
    """Fetch TMDb's top rated movies."""
    _listing_command(
        "top-rated", "top_rated", max_pages, sources, formats, output_dir, enrich
    )


@main.command("config")
@handle_errors
def show_config() -> None:
    """Show configuration status."""
    config = load_config_from_env()
    click.secho("Configuration status:", fg="blue")
    for label, key, required in (
        ("OMDb API key", config.omdb_api_key, True),
        ("TMDb API key", config.tmdb_api_key, True),
        ("IMDb API key", config.imdb_api_key, False),
    ):
        if key:
            status = click.style("set", fg="green")
        elif required:
            status = click.style("not set", fg="red")
        else:
            status = click.style("optional", fg="yellow")
        click.echo(f"  {label}: {status}")
    click.echo(f"  Enabled sources: {', '.join(config.enabled_sources)}")
    click.echo(f"  Output directory: {config.output_dir}")
    rate = config.requests_per_second
    click.echo(
        "  Rate limit: "
        + (f"{rate:g} requests/second" if rate else "per-source defaults")
    )
    if not config.omdb_api_key and not config.tmdb_api_key:
        warn(
            "No API keys configured; set FILMFETCH_API_OMDB and/or "
            "FILMFETCH_API_TMDB."
        )


def _config(
    sources: Sequence[str], required: Sequence[str] = ()
) -> AppConfig:
    """Load the environment configuration with command-line source overrides.

    Without `--source`, the configured sources are kept and any `required`
    source missing from them is appended.
    """
    config = load_config_from_env()
    if sources:
        config.enabled_sources = [s.lower() for s in sources]
        return config
    for name in required:
        if name not in config.enabled_sources:
            config.enabled_sources.append(name)
    return config


def _listing_command(
    listing: str,
    prefix: str,
    max_pages: int,
    sources: Sequence[str],
    formats: Sequence[str],
    output_dir: Path | None,
    enrich: bool,
) -> None:
    fetcher = MovieFetcher(_config(sources, required=_DISCOVERY_SOURCES))
    if fetcher.registry.get_discovery_source() is None:
        warn("Listings need TMDb; enable it with --source tmdb")
        return
    movies = fetcher.browse(listing, max_pages=max_pages)
    click.echo(f"Fetched {len(movies)} movies from {listing}")
    _finish(fetcher, movies, prefix, formats, output_dir, enrich)


def _finish(
    fetcher: MovieFetcher,
    movies: list[MovieRecord],
    prefix: str,
    formats: Sequence[str],
    output_dir: Path | None,
    enrich: bool,
    spec: FilterSpec | None = None,
) -> None:
    """Optionally enrich, then export with every requested format."""
    if enrich and movies:
        click.secho(
            "Enriching with: " + ", ".join(s.tag for s in fetcher.sources), fg="blue"
        )
        movies = fetcher.enrich_all(movies)
    if not movies:
        warn("No movies found; nothing to export")
        return

    target = output_dir or Path(fetcher.config.output_dir)
    metadata: dict[str, Any] = {"sources": list(fetcher.config.enabled_sources)}
    if spec is not None and not spec.is_empty():
        metadata["filters"] = {
            "start_date": spec.start_date.isoformat() if spec.start_date else None,
            "end_date": spec.end_date.isoformat() if spec.end_date else None,
            "country": spec.country,
            "genre": spec.genre,
        }

    written: list[Path] = []
    for format_name in dict.fromkeys(f.lower() for f in formats):
        exporter = get_exporter(format_name, target)
        written.extend(exporter.export(movies, prefix, metadata=metadata))

    click.secho("Exported files:", fg="green")
    for path in written:
        click.secho(f"  {path}", fg="cyan")
    click.echo(f"Total movies exported: {len(movies)}")


if __name__ == "__main__":  # pragma: no cover - manual launch convenience
    main()
