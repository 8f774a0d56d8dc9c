"""
CLI output helpers.
"""

from __future__ import annotations

import json

from rich.console import Console

from spa_spine.pipeline.responses import ResponseKind, SpaResponse

console = Console()
err_console = Console(stderr=True)

_KIND_STYLES = {
    ResponseKind.OK: "green",
    ResponseKind.REDIRECT: "cyan",
    ResponseKind.NOT_FOUND: "yellow",
    ResponseKind.ERROR: "red",
    ResponseKind.DIAGNOSTIC: "red",
}


def print_response(response: SpaResponse) -> None:
    """Render a pipeline response: a status line, then the body."""
    style = _KIND_STYLES.get(response.kind, "white")
    line = f"[bold {style}]{response.status_code}[/bold {style}] {response.kind.value}"
    if response.location:
        line += f" → {response.location}"
    console.print(line)

    if response.media_type == "text/html":
        console.print(response.body, markup=False, highlight=False)
    else:
        console.print_json(json.dumps(response.body, default=str))
