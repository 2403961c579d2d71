"""CLI commands for suggestions."""

from typing import Optional

import typer
from rich.table import Table

from ideamerge.cli.common import console, echo_json, err_console, open_service, short
from ideamerge.models.suggestion import SuggestionType


app = typer.Typer(
    name="suggestion",
    help="Add, list and decide suggestions.",
    no_args_is_help=True,
)


@app.command("add")
def add_suggestion(
    ctx: typer.Context,
    idea_id: str = typer.Argument(..., help="Idea ID"),
    author_id: str = typer.Argument(..., help="Author user ID"),
    content: str = typer.Argument(..., help="Suggestion text"),
    suggestion_type: str = typer.Option(
        "general", "--type", "-t", help="Type: improvement|question|concern|support|general"
    ),
    parent_id: Optional[str] = typer.Option(None, "--parent", help="Parent suggestion ID"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Add a pending suggestion to an idea."""
    try:
        type_enum = SuggestionType(suggestion_type)
    except ValueError:
        err_console.print(f"[red]Error:[/red] Invalid suggestion type: {suggestion_type}")
        raise typer.Exit(1)

    with open_service(ctx) as service:
        suggestion = service.add_suggestion(
            idea_id,
            author_id,
            content,
            suggestion_type=type_enum,
            parent_id=parent_id,
        )

    if output_json:
        echo_json(suggestion.to_dict())
    else:
        console.print(f"[green]Added suggestion[/green] {suggestion.id}")


@app.command("list")
def list_suggestions(
    ctx: typer.Context,
    idea_id: str = typer.Argument(..., help="Idea ID"),
    pending: bool = typer.Option(False, "--pending", help="Only pending suggestions"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List the suggestions on an idea."""
    with open_service(ctx) as service:
        suggestions = service.list_suggestions(idea_id, pending_only=pending)

    if output_json:
        echo_json([s.to_dict() for s in suggestions])
        return

    if not suggestions:
        console.print("[yellow]No suggestions found[/yellow]")
        return

    table = Table(title=f"Suggestions on {idea_id}")
    table.add_column("ID", style="cyan")
    table.add_column("Author")
    table.add_column("State")
    table.add_column("Content")

    state_colors = {"pending": "yellow", "accepted": "green", "rejected": "red"}
    for s in suggestions:
        color = state_colors[s.state.value]
        table.add_row(s.id, s.author_id, f"[{color}]{s.state.value}[/{color}]", short(s.content))

    console.print(table)


@app.command("accept")
def accept_suggestion(
    ctx: typer.Context,
    suggestion_id: str = typer.Argument(..., help="Suggestion ID"),
    actor: str = typer.Option(..., "--actor", help="User accepting the suggestion"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Accept a pending suggestion."""
    with open_service(ctx) as service:
        suggestion = service.accept_suggestion(suggestion_id, actor)

    if output_json:
        echo_json(suggestion.to_dict())
    else:
        console.print(f"[green]Accepted[/green] {suggestion.id}")


@app.command("reject")
def reject_suggestion(
    ctx: typer.Context,
    suggestion_id: str = typer.Argument(..., help="Suggestion ID"),
    actor: str = typer.Option(..., "--actor", help="User rejecting the suggestion"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Reject a pending suggestion."""
    with open_service(ctx) as service:
        suggestion = service.reject_suggestion(suggestion_id, actor)

    if output_json:
        echo_json(suggestion.to_dict())
    else:
        console.print(f"[red]Rejected[/red] {suggestion.id}")
