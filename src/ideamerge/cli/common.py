"""Helpers shared by CLI command groups."""

import json
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import typer
from rich.console import Console

from ideamerge.core.exceptions import IdeaMergeError
from ideamerge.merging.service import MergeService, create_service


console = Console()
err_console = Console(stderr=True)


@contextmanager
def open_service(ctx: typer.Context) -> Generator[MergeService, None, None]:
    """Open a service for the base path chosen on the root command.

    Library errors are reported in red and end the command with exit code 1.
    """
    base_path = (ctx.obj or {}).get("base_path")

    try:
        service = create_service(base_path)
    except IdeaMergeError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    try:
        yield service
    except IdeaMergeError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        service.store.close()


def echo_json(data: Any) -> None:
    """Print data as indented JSON."""
    typer.echo(json.dumps(data, indent=2))


def short(text: str, width: int = 60) -> str:
    """Truncate text for table cells."""
    return text if len(text) <= width else text[: width - 3] + "..."
