"""Click CLI for cached_marker: fetch and cache marker images."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from cached_marker.cache.manager import CacheManager
from cached_marker.config.hierarchy import load_config_hierarchy
from cached_marker.errors.exceptions import CachedMarkerError

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def _open_cache_manager() -> CacheManager:
    config = load_config_hierarchy()
    db_path = config.get("cache_db_path")
    return CacheManager(
        memory_max_mb=config["cache_memory_mb"],
        disk_max_mb=config["cache_disk_mb"],
        disk_path=Path(db_path).expanduser() if db_path else None,
    )


@click.group()
@click.version_option(package_name="cached-marker")
def cli() -> None:
    """cached-marker: cached network images for map markers."""


@cli.command()
@click.argument("urls", nargs=-1, required=True)
@click.option("-W", "--width", type=click.IntRange(min=1), default=None, help="Marker width in pixels.")
@click.option("-H", "--height", type=click.IntRange(min=1), default=None, help="Marker height in pixels.")
@click.option("-o", "--output", type=click.Path(), help="Write the PNG here (single URL only).")
@click.option("--no-cache", is_flag=True, default=False, help="Disable caching.")
@click.option("--retries", type=int, default=None, help="Retry transient fetch errors this many times.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def fetch(
    urls: tuple[str, ...],
    width: int | None,
    height: int | None,
    output: str | None,
    no_cache: bool,
    retries: int | None,
    verbose: int,
) -> None:
    """Resolve marker image(s) through the cache, downloading on a miss."""
    _setup_logging(verbose)

    if output and len(urls) > 1:
        error_console.print("[red]Error:[/red] --output only works with a single URL.")
        sys.exit(2)

    from cached_marker.core import CachedMarker

    marker = CachedMarker(cache_disabled=no_cache or None, fetch_retries=retries)

    async def _run() -> bool:
        async with marker:
            if output:
                descriptor = await marker.from_network(urls[0], width=width, height=height)
                Path(output).parent.mkdir(parents=True, exist_ok=True)
                Path(output).write_bytes(descriptor.data)
                console.print(f"[green]Saved:[/green] {output}")
                return True

            results = await marker.prefetch(list(urls), width=width, height=height)
            table = Table(title="Fetched Markers", show_header=True)
            table.add_column("URL", style="cyan")
            table.add_column("Bytes", justify="right")
            table.add_column("Status")
            for r in results:
                table.add_row(
                    r.url,
                    f"{r.size_bytes:,}" if r.ok else "-",
                    "[green]ok[/green]" if r.ok else f"[red]{escape(r.error or '')}[/red]",
                )
            console.print(table)
            return all(r.ok for r in results)

    try:
        ok = asyncio.run(_run())
    except CachedMarkerError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)
    if not ok:
        sys.exit(1)


@cli.group()
def cache() -> None:
    """Cache management commands."""


@cache.command("stats")
def cache_stats() -> None:
    """Show cache statistics."""
    mgr = _open_cache_manager()

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    stats = mgr.stats()
    table.add_row("Entries", str(stats.entries))
    table.add_row("Size (MB)", f"{stats.size_mb:.1f}")
    table.add_row("Hits", str(stats.hits))
    table.add_row("Misses", str(stats.misses))
    table.add_row("Hit rate", f"{stats.hit_rate:.1%}")

    console.print(table)
    mgr.close()


@cache.command("clear")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
def cache_clear() -> None:
    """Clear all cached images."""
    mgr = _open_cache_manager()
    mgr.empty_all()
    mgr.close()
    console.print("[green]Cache cleared.[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
