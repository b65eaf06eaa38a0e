"""CLI for loading, inspecting and clearing cached learning content."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from nihongopedia.lib.config_manager import config
from nihongopedia.lib.defaults import CONFIG_CATEGORIES
from nihongopedia.lib.logging_config import setup_logging
from nihongopedia.services.content import (
    ContentError,
    ContentLoader,
    LoadSource,
    create_cache_from_config,
    create_content_loader,
)
from nihongopedia.services.content.config import TransportConfig
from nihongopedia.services.content.transport import HttpxTransport

app = typer.Typer(help="Nihongopedia content cache and loader")
console = Console()

# Set by the callback, read by commands
_options: dict[str, Optional[str]] = {"origin": None, "cache_db": None}

SOURCE_STYLES = {
    LoadSource.CACHE: "green",
    LoadSource.NETWORK: "cyan",
    LoadSource.STALE_CACHE: "yellow",
    LoadSource.DEFAULTS: "magenta",
}


@app.callback()
def main(
    origin: Optional[str] = typer.Option(None, help="Content origin (overrides CONTENT_ORIGIN)"),
    cache_db: Optional[Path] = typer.Option(None, help="SQLite cache file (overrides CACHE_DB_PATH)"),
    log_level: Optional[str] = typer.Option(None, help="Log level (overrides LOG_LEVEL)"),
):
    """Load learning content through the local cache."""
    setup_logging(
        "cli",
        level=log_level or config.get("LOG_LEVEL"),
        log_format=config.get("LOG_FORMAT"),
    )
    _options["origin"] = origin
    _options["cache_db"] = str(cache_db) if cache_db else None


def build_loader() -> ContentLoader:
    """Create a loader honouring command line overrides."""
    cache = create_cache_from_config(db_path=_options["cache_db"])

    transport = None
    if _options["origin"]:
        transport = HttpxTransport(
            TransportConfig(
                origin=_options["origin"],
                timeout=config.get("HTTP_TIMEOUT"),
                max_retries=config.get("HTTP_MAX_RETRIES"),
            )
        )
    return create_content_loader(cache=cache, transport=transport)


def _source_label(source: LoadSource) -> str:
    style = SOURCE_STYLES[source]
    return f"[{style}]{source.value}[/{style}]"


@app.command()
def categories():
    """List content categories (never fails)."""
    asyncio.run(_categories())


async def _categories():
    loader = build_loader()
    result = await loader.resolve_categories()

    table = Table(title=f"Categories ({_source_label(result.source)})")
    table.add_column("Slug", style="cyan")
    table.add_column("Title")
    table.add_column("Level")
    table.add_column("Items", justify="right")

    for category in result.data:
        table.add_row(
            category.slug,
            category.title,
            category.level or "-",
            str(category.item_count) if category.item_count is not None else "-",
        )
    console.print(table)


@app.command()
def show(
    slug: str = typer.Argument(..., help="Category slug"),
    as_json: bool = typer.Option(False, "--json", help="Print the sanitized bundle as JSON"),
):
    """Show the items of one category."""
    asyncio.run(_show(slug, as_json))


async def _show(slug: str, as_json: bool):
    loader = build_loader()
    try:
        result = await loader.resolve_category_data(slug)
    except ContentError as e:
        console.print(f"[bold red]Content not found:[/bold red] {slug} ({e})")
        raise typer.Exit(1)

    bundle = result.data
    if as_json:
        console.print_json(json.dumps(bundle.to_payload(), ensure_ascii=False))
        return

    table = Table(
        title=f"{bundle.category_slug} v{bundle.content_version} ({_source_label(result.source)})"
    )
    table.add_column("ID", style="dim")
    table.add_column("Expression", style="bold")
    table.add_column("Reading")
    table.add_column("Meaning")
    table.add_column("Examples", justify="right")

    for item in bundle.items:
        table.add_row(
            str(item.id),
            str(item.expression),
            str(item.reading),
            str(item.meaning),
            str(len(item.example_list)),
        )
    console.print(table)


@app.command()
def preload(slugs: list[str] = typer.Argument(..., help="Category slugs to preload")):
    """Load several categories concurrently into the cache."""
    results = asyncio.run(build_loader().preload(slugs))
    for slug, ok in results.items():
        mark = "[green]ok[/green]" if ok else "[red]failed[/red]"
        console.print(f"{slug}: {mark}")
    if not all(results.values()):
        raise typer.Exit(1)


@app.command()
def clear(slug: Optional[str] = typer.Argument(None, help="Category slug (omit to clear everything)")):
    """Clear one category, or the whole cache."""
    if build_loader().clear_cache(slug):
        console.print(f"[green]Cleared {slug or 'all cached content'}[/green]")
    else:
        console.print("[bold red]Cache could not be cleared[/bold red]")
        raise typer.Exit(1)


@app.command("check-version")
def check_version(slug: str = typer.Argument(..., help="Category slug")):
    """Check whether the origin has a newer version of a category."""
    changed = asyncio.run(build_loader().check_version(slug))
    if changed:
        console.print(f"[yellow]{slug}: new version available[/yellow]")
    else:
        console.print(f"{slug}: unchanged")


@app.command("cache-info")
def cache_info():
    """List cached entries with their age and freshness."""
    loader = build_loader()
    cache = loader.cache

    table = Table(title=f"Cache {cache.config.key_prefix}*")
    table.add_column("Key", style="cyan")
    table.add_column("Cached at")
    table.add_column("Fresh")

    for key in cache.keys():
        entry = cache.get_entry(key)
        if entry is None:
            continue
        fresh = not cache.is_expired(key, loader.config.cache_ttl)
        table.add_row(
            key,
            entry.cached_at.isoformat(timespec="seconds"),
            "[green]yes[/green]" if fresh else "[yellow]stale[/yellow]",
        )
    console.print(table)


@app.command("config")
def show_config():
    """Show resolved settings, grouped by area."""
    resolved = config.get_all()

    table = Table(title="Settings")
    table.add_column("Area", style="dim")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for area, keys in CONFIG_CATEGORIES.items():
        for key in keys:
            value = resolved.get(key)
            table.add_row(area, key, "-" if value in (None, "") else str(value))
    console.print(table)


if __name__ == "__main__":
    app()
