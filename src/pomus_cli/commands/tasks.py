"""Task list commands."""

from datetime import date, datetime
from typing import Optional

import typer

from pomus_cli.services.session_service import get_task_service
from pomus_cli.services.task_service import AmbiguousTaskError, TaskNotFoundError, TaskService
from pomus_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from pomus_cli.utils.typer_helpers import SuggestingGroup
from pomus_cli.utils.ui.console import get_console
from pomus_cli.utils.ui.formatters import format_info, format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Task list commands")
console = get_console()


def _parse_due(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise AppError(f"Invalid due date '{value}', expected YYYY-MM-DD", ERROR_INVALID_ARGS) from e


def _resolve(service: TaskService, ref: str):
    try:
        return service.find(ref)
    except TaskNotFoundError as e:
        raise AppError(f"Task not found: {ref}", ERROR_NOT_FOUND) from e
    except AmbiguousTaskError as e:
        raise AppError(f"Task ID '{ref}' is ambiguous, use more characters", ERROR_INVALID_ARGS) from e


@app.command("add")
@command_wrapper
def add_task(
    text: str = typer.Argument(..., help="Task description"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date (YYYY-MM-DD)"),
) -> None:
    """Add a task to the pending list."""
    if not text.strip():
        raise AppError("Task text cannot be empty", ERROR_INVALID_ARGS)
    task = get_task_service().add_task(text.strip(), _parse_due(due))
    format_success(f"Task added: {task.text} (#{task.short_id})")


@app.command("list")
@command_wrapper
def list_tasks(
    status: str = typer.Option("pending", "--status", "-s", help="pending, completed or all"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List tasks."""
    service = get_task_service()
    try:
        tasks = service.list_tasks(status)
    except ValueError as e:
        raise AppError(str(e), ERROR_INVALID_ARGS) from e

    if output != "table":
        format_output([t.model_dump(mode="json") for t in tasks], output)
        return

    if not tasks:
        format_info("No tasks")
        return

    rows = [
        {
            "id": t.short_id,
            "text": t.text,
            "due": t.due_date.isoformat() if t.due_date else None,
            "done": t.is_completed,
        }
        for t in tasks
    ]
    format_output(rows, output)
    console.print(f"[dim]{service.total_completed} tasks completed in total[/dim]")


@app.command("edit")
@command_wrapper
def edit_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="New description"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="New due date (YYYY-MM-DD)"),
) -> None:
    """Edit a task's text or due date."""
    if text is None and due is None:
        raise AppError("Nothing to change, pass --text and/or --due", ERROR_INVALID_ARGS)
    service = get_task_service()
    task = _resolve(service, task_id)
    service.update_task(task.id, text=text, due_date=_parse_due(due))
    format_success(f"Task updated: #{task.short_id}")


@app.command("done")
@command_wrapper
def toggle_done(task_id: str = typer.Argument(..., help="Task ID or prefix")) -> None:
    """Mark a task done, or reopen a completed one."""
    service = get_task_service()
    task = service.toggle_completion(_resolve(service, task_id).id)
    if task.is_completed:
        format_success(f"Completed: {task.text}")
    else:
        format_info(f"Reopened: {task.text}")


@app.command("delete")
@command_wrapper
def delete_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    service = get_task_service()
    task = _resolve(service, task_id)
    if not yes and not typer.confirm(f"Delete '{task.text}'?"):
        format_info("Cancelled")
        return
    service.delete_task(task.id)
    format_success(f"Task deleted: #{task.short_id}")


@app.command("move")
@command_wrapper
def move_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    position: int = typer.Argument(..., help="New 1-based position in the pending list"),
) -> None:
    """Reorder a pending task."""
    service = get_task_service()
    task = _resolve(service, task_id)
    try:
        service.move_pending_task(task.id, position)
    except ValueError as e:
        raise AppError(str(e), ERROR_INVALID_ARGS) from e
    format_success(f"Moved #{task.short_id} to position {position}")


@app.command("clear")
@command_wrapper
def clear_completed() -> None:
    """Remove all completed tasks."""
    removed = get_task_service().clear_completed()
    format_success(f"Cleared {removed} completed tasks")
