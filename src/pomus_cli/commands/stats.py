"""Focus statistics commands."""

from datetime import date, datetime

import typer

from pomus_cli.services.session_service import get_statistics_recorder, get_task_service
from pomus_cli.utils.ui.console import get_console
from pomus_cli.utils.ui.formatters import format_duration, format_output, format_success

from .decorators import command_wrapper

console = get_console()
app = typer.Typer(help="Focus statistics")


def render_progress_bar(value: float, max_value: float, width: int = 10) -> str:
    """Render a progress bar using block characters."""
    if max_value == 0:
        ratio = 0
    else:
        ratio = min(value / max_value, 1.0)
    filled = int(ratio * width)
    return "█" * filled + "░" * (width - filled)


@app.command("today")
@command_wrapper
def show_today(
    output: str = typer.Option(None, "--output", "-o", help="Output format (json)"),
):
    """Show today's focus summary."""
    summary = get_statistics_recorder().get_daily_summary(date.today())

    if output == "json":
        console.print_json(data=summary)
        return

    date_str = datetime.fromisoformat(summary["date"]).strftime("%B %d, %Y")
    console.print(f"\n[bold cyan]🍅 Focus Summary - {date_str}[/bold cyan]\n")
    console.print(f"Sessions Completed: [bold]{summary['pomodoros']}[/bold] pomodoros")
    console.print(f"Total Focus Time: [bold]{format_duration(summary['focus_seconds'])}[/bold]")
    console.print(f"Breaks Taken: {summary['breaks']}")
    console.print()


@app.command("week")
@command_wrapper
def show_week(
    output: str = typer.Option(None, "--output", "-o", help="Output format (json)"),
):
    """Show focus time for the last 7 days."""
    stats = get_statistics_recorder().weekly_focus_stats(date.today())

    if output == "json":
        console.print_json(
            data=[{"day": s.day, "date": s.iso_date, "focus_seconds": s.duration} for s in stats]
        )
        return

    console.print("\n[bold cyan]🍅 Weekly Focus Report[/bold cyan]\n")
    max_seconds = max((s.duration for s in stats), default=0)
    for stat in stats:
        bar = render_progress_bar(stat.duration, max_seconds, width=20)
        console.print(f"  {stat.day} {stat.iso_date[5:]}  {bar} {format_duration(stat.duration)}")

    total = sum(s.duration for s in stats)
    console.print(f"\nTotal: [bold]{format_duration(total)}[/bold]")
    console.print(f"Daily Average: {format_duration(total / len(stats))}")
    console.print()


@app.command("summary")
@command_wrapper
def show_summary(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
):
    """Show all-time totals."""
    totals = get_statistics_recorder().get_totals()
    data = {
        "total_pomodoros": totals["total_pomodoros"],
        "total_breaks": totals["total_breaks"],
        "total_focus_time": format_duration(totals["total_focus_seconds"]),
        "total_tasks_completed": get_task_service().total_completed,
    }
    format_output(data, output)


@app.command("prune")
@command_wrapper
def prune_history(
    days: int = typer.Option(365, "--days", help="Keep this many days of history"),
):
    """Delete statistics older than N days."""
    deleted = get_statistics_recorder().delete_old_events(days)
    format_success(f"Deleted {deleted} old records")
