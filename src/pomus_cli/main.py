"""Main entry point for Pomus CLI."""

import typer

from pomus_cli import __version__
from pomus_cli.commands import config, stats, surface, tasks, timer
from pomus_cli.utils.typer_helpers import SuggestingGroup
from pomus_cli.utils.ui.console import get_console

# Create main app with custom group class
app = typer.Typer(
    name="pomus",
    cls=SuggestingGroup,
    help="A pomodoro timer for the terminal that keeps time while closed",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(timer.app, name="timer", help="Pomodoro timer for focus sessions")
app.add_typer(surface.app, name="surface", help="Widget and status line views")
app.add_typer(tasks.app, name="tasks", help="Task list commands")
app.add_typer(stats.app, name="stats", help="Focus statistics")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Pomus CLI[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
