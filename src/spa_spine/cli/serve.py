"""
CLI: ``spa-spine serve`` — start the page-data API server.
"""

from __future__ import annotations

import typer

from spa_spine.cli.utils import console


def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of workers"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the page-data API (site file from SPA_SITE_FILE)."""
    import uvicorn

    console.print(f"[bold green]Starting spa-spine API[/bold green] on {host}:{port}")
    uvicorn.run(
        "spa_spine.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )
