from pathlib import Path

import typer

from pricewright_cli import __version__
from pricewright_cli.commands.cache_cmd import cache_app
from pricewright_cli.commands.price_cmd import price
from pricewright_cli.utils import setup_logging


def _version_callback(value: bool) -> None:
    if value:
        print(f"pricewright {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="pricewright",
    help="Cached EC2 on-demand price lookups from the AWS pricing catalog",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version", callback=_version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    config: Path = typer.Option(None, "--config", "-c", help="Path to a pricewright config YAML"),
) -> None:
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["json"] = json_output
    ctx.obj["config"] = config
    setup_logging(verbose)


app.command()(price)
app.add_typer(cache_app, name="cache")
