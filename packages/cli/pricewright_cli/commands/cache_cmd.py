"""Inspect and clear the local pricing cache."""

from __future__ import annotations

import json

import typer
from pricewright.fetcher import CATALOG_KEY
from pricewright.store import ContentStore
from rich.console import Console
from rich.table import Table

from pricewright_cli.utils import config_from_ctx, ctx_options, handle_error

console = Console()

cache_app = typer.Typer(
    name="cache",
    help="Inspect or clear the local pricing cache.",
    no_args_is_help=True,
)


def _store(ctx: typer.Context) -> ContentStore:
    config = config_from_ctx(ctx)
    return ContentStore(config.cache_dir, max_age=config.max_age)


def _fmt_age(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.0f}s"
    if seconds < 3600:
        return f"{seconds / 60:.0f}m"
    return f"{seconds / 3600:.1f}h"


@cache_app.command("info")
def cache_info(ctx: typer.Context) -> None:
    """List cached entries with their size, age and freshness."""
    try:
        store = _store(ctx)
        entries = []
        for key in store.keys():
            age = store.age(key)
            if age is None:
                continue
            entries.append(
                {
                    "key": key,
                    "kind": "catalog" if key == CATALOG_KEY else "price",
                    "size": store.path_for(key).stat().st_size,
                    "age_seconds": round(age, 1),
                    "fresh": age < store.max_age,
                }
            )
    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
        return

    if ctx_options(ctx).get("json"):
        print(json.dumps({"directory": str(store.directory), "max_age": store.max_age, "entries": entries}))
        return

    console.print(f"Cache directory: [cyan]{store.directory}[/cyan] (max age {store.max_age:g}s)")
    if not entries:
        console.print("[yellow]Cache is empty.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Key", style="cyan")
    table.add_column("Kind")
    table.add_column("Size", justify="right")
    table.add_column("Age", justify="right")
    table.add_column("Fresh")
    for entry in entries:
        table.add_row(
            entry["key"],
            entry["kind"],
            f"{entry['size']:,}",
            _fmt_age(entry["age_seconds"]),
            "[green]yes[/green]" if entry["fresh"] else "[red]no[/red]",
        )
    console.print(table)


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Delete every cached catalog and price entry."""
    try:
        store = _store(ctx)
        removed = store.clear()
    except typer.Exit:
        raise
    except Exception as e:
        handle_error(ctx, e)
        return

    if ctx_options(ctx).get("json"):
        print(json.dumps({"directory": str(store.directory), "removed": removed}))
        return
    console.print(f"[green]Removed {removed} cached entr{'y' if removed == 1 else 'ies'}[/green] from {store.directory}")
