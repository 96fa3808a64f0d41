"""Review cycle CLI commands.

Maintenance and inspection commands for document review cycles, meant to
be run by administrators or from a scheduler.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Annotated, Optional, TypeVar
from uuid import UUID

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from docman.database.identifiers import to_uuid
from docman.review.completion import CompletionTransition
from docman.review.cycle import ReviewCycleService
from docman.review.errors import NotFoundError

app = typer.Typer(help="Review cycle commands")
console = Console()

T = TypeVar("T")


def _parse_uuid(value: str, label: str) -> UUID:
    try:
        return to_uuid(value)
    except ValueError:
        console.print(f"[red]Invalid {label} UUID:[/red] {value}")
        raise typer.Exit(code=1)


def _run(operation: Callable[[ReviewCycleService], Awaitable[T]]) -> T:
    """Run a service operation, then release connections.

    Missing records and unexpected failures exit with code 1.
    """
    from docman.main import get_app_context

    ctx = get_app_context()

    async def _runner() -> T:
        try:
            return await operation(ctx.review_service)
        finally:
            if ctx.notifier is not None:
                await ctx.notifier.close()
            await ctx.engine.dispose()

    try:
        return asyncio.run(_runner())
    except NotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


def _optional_uuid(value: str | None, label: str) -> UUID | None:
    return _parse_uuid(value, label) if value else None


@app.command()
def evaluate(
    document_id: Annotated[str, typer.Argument(help="Document UUID")],
) -> None:
    """Re-evaluate a document's completion flag."""
    document_uuid = _parse_uuid(document_id, "document")
    decision = _run(lambda service: service.evaluate_completion(document_uuid))

    color = {
        CompletionTransition.completed: "green",
        CompletionTransition.reopened: "yellow",
        CompletionTransition.unchanged: "dim",
    }[decision.transition]
    lines = [
        f"[bold]Transition:[/bold] [{color}]{decision.transition.value}[/{color}]",
        f"[bold]Completed:[/bold] {decision.completed}/{decision.total}",
    ]
    if decision.schedule is not None:
        lines.append(f"[bold]Opens for review:[/bold] {decision.schedule.opens_for_review or 'not scheduled'}")
        lines.append(f"[bold]Next review due:[/bold] {decision.schedule.review_due or 'not scheduled'}")
    console.print(Panel("\n".join(lines), title="Completion Evaluation", border_style=color))


@app.command()
def summary(
    document_id: Annotated[str, typer.Argument(help="Document UUID")],
) -> None:
    """Show the review state and progress of a document."""
    document_uuid = _parse_uuid(document_id, "document")
    state = _run(lambda service: service.get_review_state(document_uuid))
    document = state.document

    table = Table(title=f"Review: {document.title}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Completed", "yes" if document.review_completed else "no")
    table.add_row(
        "Progress",
        f"{state.summary.completed}/{state.summary.total} ({state.summary.percentage}%)",
    )
    table.add_row("Review due", str(document.review_due_date or "-"))
    table.add_row("Last reviewed", str(document.last_reviewed_on or "-"))
    table.add_row("Opens for review", str(document.opens_for_review or "-"))
    table.add_row("Next review due", str(document.next_review_due_on or "-"))
    table.add_row(
        "Interval",
        document.review_interval.value if document.review_interval else "-",
    )
    table.add_row("Period", document.review_period.value if document.review_period else "-")
    console.print(table)


@app.command("purge-orphans")
def purge_orphans(
    document_id: Annotated[
        Optional[str],
        typer.Option("--document", "-d", help="Restrict to one document UUID"),
    ] = None,
) -> None:
    """Delete assignments whose reviewer no longer exists."""
    document_uuid = _optional_uuid(document_id, "document")
    deleted = _run(lambda service: service.purge_orphaned(document_uuid))
    console.print(f"[green]Deleted {deleted} orphaned assignment(s)[/green]")


@app.command("purge-duplicates")
def purge_duplicates(
    document_id: Annotated[
        Optional[str],
        typer.Option("--document", "-d", help="Restrict to one document UUID"),
    ] = None,
) -> None:
    """Delete every assignment that is not its reviewer's latest."""
    document_uuid = _optional_uuid(document_id, "document")
    deleted = _run(lambda service: service.purge_duplicates(document_uuid))
    console.print(f"[green]Deleted {deleted} stale assignment(s)[/green]")


@app.command("force-complete")
def force_complete(
    document_id: Annotated[str, typer.Argument(help="Document UUID")],
    completed_by: Annotated[
        Optional[str],
        typer.Option("--by", "-b", help="UUID of the user recorded as completer"),
    ] = None,
    evaluate_after: Annotated[
        bool,
        typer.Option("--evaluate", "-e", help="Re-evaluate completion afterwards"),
    ] = False,
) -> None:
    """Mark every reviewer's latest assignment completed."""
    document_uuid = _parse_uuid(document_id, "document")
    user_uuid = _optional_uuid(completed_by, "user")

    async def _force(service: ReviewCycleService) -> tuple[int, CompletionTransition | None]:
        completed = await service.force_complete(document_uuid, completed_by=user_uuid)
        if not evaluate_after:
            return completed, None
        decision = await service.evaluate_completion(document_uuid, actor_id=user_uuid)
        return completed, decision.transition

    completed, transition = _run(_force)
    console.print(f"[green]Completed {completed} assignment(s)[/green]")
    if transition is not None:
        console.print(f"[dim]Completion:[/dim] {transition.value}")


@app.command("reset-cycle")
def reset_cycle(
    document_id: Annotated[str, typer.Argument(help="Document UUID")],
) -> None:
    """Put every assignment of a document back to pending."""
    document_uuid = _parse_uuid(document_id, "document")
    reset = _run(lambda service: service.reset_cycle(document_uuid))
    console.print(f"[green]Reset {reset} assignment(s)[/green]")


@app.command("mark-overdue")
def mark_overdue() -> None:
    """Flag open assignments past their due date as overdue."""
    marked = _run(lambda service: service.mark_overdue())
    console.print(f"[green]Marked {marked} assignment(s) overdue[/green]")


@app.command("open-due-cycles")
def open_due_cycles() -> None:
    """Start the next cycle of completed documents whose opening date passed."""
    opened = _run(lambda service: service.open_due_cycles())
    console.print(f"[green]Opened {opened} review cycle(s)[/green]")


@app.command("send-due-notifications")
def send_due_notifications() -> None:
    """Notify authors and reviewers of documents about to open for review."""
    sent = _run(lambda service: service.send_due_notifications())
    console.print(f"[green]Sent {sent} notification(s)[/green]")
