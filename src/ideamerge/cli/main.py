"""Main CLI entrypoint for IdeaMerge."""

import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from ideamerge import __version__
from ideamerge.cli.common import console, echo_json, err_console, open_service
from ideamerge.cli.conflicts import app as conflicts_app
from ideamerge.cli.merge import app as merge_app
from ideamerge.cli.suggestions import app as suggestion_app


app = typer.Typer(
    name="ideamerge",
    help="IdeaMerge - detect conflicts between suggestions and merge them",
    no_args_is_help=True,
)

points_app = typer.Typer(
    name="points",
    help="Contributor points.",
    no_args_is_help=True,
)

app.add_typer(suggestion_app, name="suggestion")
app.add_typer(merge_app, name="merge")
app.add_typer(conflicts_app, name="conflicts")
app.add_typer(points_app, name="points")

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ideamerge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    base_path: Annotated[
        Optional[Path],
        typer.Option("--base-path", help="Project directory holding .ideamerge (default: cwd)"),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help="Log level: DEBUG, INFO, WARNING, ERROR"),
    ] = "WARNING",
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version"),
    ] = None,
) -> None:
    """Configure logging and the project location."""
    log_level_upper = log_level.upper()
    if log_level_upper not in VALID_LOG_LEVELS:
        err_console.print(f"[red]Error: Invalid log level '{log_level}'[/red]")
        err_console.print(f"Valid levels: {', '.join(VALID_LOG_LEVELS)}")
        raise typer.Exit(1)

    logging.basicConfig(
        level=getattr(logging, log_level_upper),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.obj = {"base_path": base_path}


@points_app.command("show")
def show_points(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="User ID"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show a user's total points."""
    with open_service(ctx) as service:
        total = service.points.total_points(user_id)

    if output_json:
        echo_json({"user_id": user_id, "points": total})
    else:
        console.print(f"{user_id}: [bold]{total}[/bold] points")


@points_app.command("leaderboard")
def points_leaderboard(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-n", help="Number of users to show"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the users with the most points."""
    with open_service(ctx) as service:
        leaders = service.points.leaderboard(limit)

    if output_json:
        echo_json([{"user_id": u, "points": p} for u, p in leaders])
        return

    if not leaders:
        console.print("[yellow]No points awarded yet[/yellow]")
        return

    table = Table(title="Leaderboard")
    table.add_column("#", justify="right")
    table.add_column("User", style="cyan")
    table.add_column("Points", justify="right")
    for rank, (user_id, points) in enumerate(leaders, 1):
        table.add_row(str(rank), user_id, str(points))

    console.print(table)


if __name__ == "__main__":
    app()
