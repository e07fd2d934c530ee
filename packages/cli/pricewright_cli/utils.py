from __future__ import annotations

import json
import logging

import typer
from pricewright.config import PricingConfig, load_config
from pricewright.errors import ConfigError, PricewrightError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

_err_console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    """Route library logging to stderr; DEBUG with --verbose, warnings otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


def ctx_options(ctx: typer.Context) -> dict:
    """Resolve ctx.obj through the parent chain when invoked via a sub-app."""
    obj = ctx.obj
    parent = ctx.parent
    while obj is None and parent is not None:
        obj = parent.obj
        parent = parent.parent
    return obj or {}


def config_from_ctx(ctx: typer.Context, **overrides) -> PricingConfig:
    return load_config(ctx_options(ctx).get("config"), **overrides)


def handle_error(ctx: typer.Context, e: Exception) -> None:
    """Print a clean error message and exit 1."""
    opts = ctx_options(ctx)
    verbose = opts.get("verbose", False)
    json_mode = opts.get("json", False)

    if isinstance(e, ConfigError):
        msg = str(e)
    elif isinstance(e, PricewrightError):
        msg = f"{type(e).__name__}: {e}"
    elif isinstance(e, ValueError):
        msg = str(e)
    else:
        msg = f"Unexpected error: {e}"

    if json_mode:
        print(json.dumps({"error": msg}))
    else:
        _err_console.print(f"[red]Error:[/red] {escape(msg)}", highlight=False)

    if verbose:
        _err_console.print_exception()

    raise typer.Exit(1)
