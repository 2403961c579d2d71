"""CLI commands for analyzing and performing merges."""

import json
from typing import List, Optional

import typer
from rich.panel import Panel
from rich.table import Table

from ideamerge.cli.common import console, echo_json, err_console, open_service, short


app = typer.Typer(
    name="merge",
    help="Analyze, perform and inspect suggestion merges.",
    no_args_is_help=True,
)


@app.command("analyze")
def analyze_merge(
    ctx: typer.Context,
    idea_id: str = typer.Argument(..., help="Idea ID"),
    suggestion_ids: Optional[List[str]] = typer.Argument(
        None, help="Suggestion IDs (default: all pending)"
    ),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Preview conflicts among pending suggestions."""
    with open_service(ctx) as service:
        result = service.analyze(idea_id, suggestion_ids or None)

    if output_json:
        echo_json(result.to_dict())
        return

    console.print(f"Suggestions analyzed: {result.suggestions_count}")
    if result.can_merge:
        console.print("[green]No conflicts, ready to merge[/green]")
        return

    if not result.conflicts:
        console.print("[yellow]Nothing to merge[/yellow]")
        return

    console.print(f"[yellow]{len(result.conflicts)} conflict(s) found[/yellow]")
    for conflict in result.conflicts:
        if conflict.is_pairwise:
            first, second = conflict.suggestion_ids
            console.print(
                f"  [cyan]{conflict.kind.value}[/cyan] {first} <-> {second} "
                f"(similarity {conflict.similarity:.2f})"
            )
        else:
            console.print(
                f"  [cyan]{conflict.kind.value}[/cyan] "
                f"{conflict.positive_count} positive / {conflict.negative_count} negative"
            )
        console.print(f"    {conflict.description}")


@app.command("run")
def run_merge(
    ctx: typer.Context,
    idea_id: str = typer.Argument(..., help="Idea ID"),
    suggestion_ids: Optional[List[str]] = typer.Argument(
        None, help="Suggestion IDs (default: all pending)"
    ),
    actor: str = typer.Option(..., "--actor", help="User performing the merge"),
    strategy: Optional[str] = typer.Option(
        None, "--strategy", "-s", help="Strategy: consensus|priority|latest"
    ),
    auto: bool = typer.Option(False, "--auto", help="Record as an automatic merge"),
    resolution: Optional[str] = typer.Option(
        None, "--resolution", help="Conflict resolution notes as a JSON object"
    ),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Merge pending suggestions into consolidated changes."""
    conflict_resolution = None
    if resolution:
        try:
            conflict_resolution = json.loads(resolution)
        except json.JSONDecodeError as e:
            err_console.print(f"[red]Error:[/red] Invalid --resolution JSON: {e}")
            raise typer.Exit(1)
        if not isinstance(conflict_resolution, dict):
            err_console.print("[red]Error:[/red] --resolution must be a JSON object")
            raise typer.Exit(1)

    with open_service(ctx) as service:
        merge = service.merge(
            idea_id,
            suggestion_ids or None,
            actor,
            strategy=strategy,
            auto_merge=auto,
            conflict_resolution=conflict_resolution,
        )

    if output_json:
        echo_json(merge.to_dict())
        return

    console.print(Panel(
        f"[bold]{merge.merge_summary}[/bold]\n"
        f"Strategy: {merge.strategy.value} | Type: {merge.merge_type.value} | "
        f"Conflicts: {'yes' if merge.has_conflicts else 'no'}",
        title=f"Merge {merge.id}",
        border_style="green",
    ))
    for change in merge.changes_applied:
        console.print(f"  [cyan]{change.kind.value}[/cyan] {short(change.content)}")


@app.command("history")
def merge_history(
    ctx: typer.Context,
    idea_id: str = typer.Argument(..., help="Idea ID"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List merges performed on an idea, newest first."""
    with open_service(ctx) as service:
        merges = service.list_merge_history(idea_id)

    if output_json:
        echo_json([m.to_dict() for m in merges])
        return

    if not merges:
        console.print("[yellow]No merges found[/yellow]")
        return

    table = Table(title=f"Merge history for {idea_id}")
    table.add_column("ID", style="cyan")
    table.add_column("By")
    table.add_column("Strategy")
    table.add_column("Summary")
    table.add_column("Created")

    for m in merges:
        table.add_row(
            m.id,
            m.merged_by,
            m.strategy.value,
            m.merge_summary,
            m.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@app.command("recommend")
def recommend_merges(
    ctx: typer.Context,
    idea_id: str = typer.Argument(..., help="Idea ID"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Recommend merges for the pending suggestions on an idea."""
    with open_service(ctx) as service:
        recommendations = service.recommend(idea_id)

    if output_json:
        echo_json([r.to_dict() for r in recommendations])
        return

    if not recommendations:
        console.print("[yellow]Need at least 2 suggestions for merge analysis[/yellow]")
        return

    priority_colors = {"high": "red", "medium": "yellow", "low": "green"}
    for r in recommendations:
        color = priority_colors.get(r.priority, "white")
        console.print(f"[{color}][{r.priority.upper()}][/{color}] [bold]{r.title}[/bold]")
        console.print(f"  {r.description}")
        if r.suggestion_ids:
            console.print(f"  Suggestions: {', '.join(r.suggestion_ids)}")


@app.command("show")
def show_merge(
    ctx: typer.Context,
    merge_id: str = typer.Argument(..., help="Merge ID"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show a merge and the suggestions it consumed."""
    with open_service(ctx) as service:
        merge = service.get_merge(merge_id)
        suggestions = service.merged_suggestions(merge_id)

    if output_json:
        data = merge.to_dict()
        data["suggestions"] = [s.to_dict() for s in suggestions]
        echo_json(data)
        return

    console.print(f"[bold]Merge {merge.id}[/bold]")
    console.print("-" * 50)
    console.print(f"Idea:        {merge.idea_id}")
    console.print(f"Merged by:   {merge.merged_by}")
    console.print(f"Strategy:    {merge.strategy.value}")
    console.print(f"Type:        {merge.merge_type.value}")
    console.print(f"Summary:     {merge.merge_summary}")
    console.print(f"Created:     {merge.created_at.isoformat()}")
    console.print("")
    console.print("Changes:")
    for i, change in enumerate(merge.changes_applied, 1):
        console.print(f"  {i}. [cyan]{change.kind.value}[/cyan] {change.content}")
    console.print("")
    console.print("Suggestions:")
    for s in suggestions:
        console.print(f"  - {s.id} by {s.author_id}: {short(s.content)}")
