"""
CLI: ``spa-spine page`` — run the pipeline once and print the result.

Useful for checking a site file without starting the server::

    spa-spine page /about --site-file site.json --host example.com --parts content
"""

from __future__ import annotations

from pathlib import Path

import typer

from spa_spine.cli.utils import err_console, print_response
from spa_spine.collaborators.memory import InMemorySite
from spa_spine.core.errors import SpaError
from spa_spine.core.logging import configure_logging
from spa_spine.core.settings import SpaSettings, TrailingSlashPolicy
from spa_spine.pipeline.builder import create_pipeline
from spa_spine.pipeline.context import SpaApiPart, SpaRequest
from spa_spine.pipeline.services import SpaServices


def page(
    url: str = typer.Argument(..., help="Page URL, absolute or relative"),
    site_file: Path = typer.Option(..., "--site-file", "-s", exists=True, dir_okay=False, help="JSON site definition"),
    parts: str | None = typer.Option(None, "--parts", help="Comma-separated parts: site, navigation, content"),
    preview: bool = typer.Option(False, "--preview", help="Preview mode"),
    host: str = typer.Option("localhost", "--host", help="Host the page is requested on"),
    scheme: str = typer.Option("https", "--scheme", help="Scheme the page is requested on"),
    trailing_slash: TrailingSlashPolicy = typer.Option(TrailingSlashPolicy.NONE, "--trailing-slash"),
    log_level: str = typer.Option("WARNING", "--log-level"),
) -> None:
    """Resolve URL into page data and print the status and body."""
    configure_logging(log_level, json_format=False)
    settings = SpaSettings(site_file=site_file, trailing_slash=trailing_slash, cache_enabled=False)

    try:
        services = SpaServices.from_site(InMemorySite.from_file(site_file))
        request = SpaRequest(
            url=url,
            is_preview=preview,
            parts=SpaApiPart.parse(parts),
            host=host.lower(),
            scheme=scheme,
        )
        response = create_pipeline(settings, services).run(request)
    except SpaError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1) from e

    print_response(response)
