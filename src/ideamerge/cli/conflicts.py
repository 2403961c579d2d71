"""CLI commands for recorded conflicts."""

from typing import Optional

import typer
from rich.table import Table

from ideamerge.cli.common import console, echo_json, open_service


app = typer.Typer(
    name="conflicts",
    help="Inspect and resolve recorded conflicts.",
    no_args_is_help=True,
)


@app.command("list")
def list_conflicts(
    ctx: typer.Context,
    idea_id: str = typer.Argument(..., help="Idea ID"),
    show_all: bool = typer.Option(False, "--all", help="Include resolved and ignored"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List conflicts on an idea (unresolved by default)."""
    with open_service(ctx) as service:
        if show_all:
            conflicts = service.list_conflicts(idea_id)
        else:
            conflicts = service.list_unresolved_conflicts(idea_id)
        stats = service.conflict_stats(idea_id)

    if output_json:
        echo_json([c.to_dict() for c in conflicts])
        return

    if not conflicts:
        console.print("[green]No conflicts found[/green]")
        return

    table = Table(title=f"Conflicts on {idea_id}")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Suggestions")
    table.add_column("Similarity")
    table.add_column("Status")

    for c in conflicts:
        score = c.conflicting_values.get("similarity")
        table.add_row(
            c.id,
            c.conflict_type.value,
            f"{c.suggestion_1_id}\n{c.suggestion_2_id}",
            f"{score:.2f}" if score is not None else "-",
            c.resolution_status.value,
        )

    console.print(table)
    console.print(
        f"Unresolved: {stats.unresolved} | "
        f"Resolved: {stats.resolved} | "
        f"Ignored: {stats.ignored}"
    )


@app.command("resolve")
def resolve_conflict(
    ctx: typer.Context,
    conflict_id: str = typer.Argument(..., help="Conflict ID"),
    actor: str = typer.Option(..., "--actor", help="User resolving the conflict"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Resolution notes"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Mark a conflict as resolved."""
    with open_service(ctx) as service:
        conflict = service.resolve_conflict(conflict_id, actor, notes)

    if output_json:
        echo_json(conflict.to_dict())
    else:
        console.print(f"[green]Resolved[/green] {conflict.id}")


@app.command("ignore")
def ignore_conflict(
    ctx: typer.Context,
    conflict_id: str = typer.Argument(..., help="Conflict ID"),
    actor: str = typer.Option(..., "--actor", help="User ignoring the conflict"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Reason for ignoring"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Mark a conflict as ignored."""
    with open_service(ctx) as service:
        conflict = service.ignore_conflict(conflict_id, actor, notes)

    if output_json:
        echo_json(conflict.to_dict())
    else:
        console.print(f"[yellow]Ignored[/yellow] {conflict.id}")


@app.command("stats")
def conflict_stats(
    ctx: typer.Context,
    idea_id: str = typer.Argument(..., help="Idea ID"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show conflict counts for an idea."""
    with open_service(ctx) as service:
        stats = service.conflict_stats(idea_id)

    if output_json:
        echo_json(stats.to_dict())
        return

    console.print(f"[bold]Conflicts on {idea_id}[/bold]")
    console.print("-" * 30)
    console.print(f"Total:       {stats.total}")
    console.print(f"Unresolved:  {stats.unresolved}")
    console.print(f"Resolved:    {stats.resolved}")
    console.print(f"Ignored:     {stats.ignored}")
    if stats.by_type:
        console.print("")
        console.print("By type:")
        for conflict_type, count in sorted(stats.by_type.items()):
            console.print(f"  {conflict_type}: {count}")
