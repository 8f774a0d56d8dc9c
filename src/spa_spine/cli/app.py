"""
Root Typer application for the spa-spine CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from spa_spine import __version__
from spa_spine.cli.page import page
from spa_spine.cli.serve import serve

app = Typer(
    name="spa-spine",
    help="spa-spine — page-data API for single page applications.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"spa-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """spa-spine CLI — serve page data or resolve a single page."""


app.command("serve")(serve)
app.command("page")(page)


if __name__ == "__main__":
    app()
