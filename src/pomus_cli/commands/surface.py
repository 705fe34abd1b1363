"""Read-only presentation surfaces.

These commands never build a controller. They load the published state file
and evaluate progress against their own clock, the way a home-screen widget
would.
"""

import time

import typer
from rich.live import Live

from pomus_cli.models.focus.state import now_local
from pomus_cli.models.focus.ui import render_statusline, render_widget
from pomus_cli.services.config_service import get_config_service
from pomus_cli.services.session_service import get_publication_sink
from pomus_cli.utils.exit_codes import ERROR_NO_STATE
from pomus_cli.utils.ui.console import get_console

from .decorators import command_wrapper

console = get_console()
app = typer.Typer(help="Read-only views of the timer for widgets and status bars")


@app.command("widget")
@command_wrapper
def show_widget():
    """Render the timer widget once."""
    console.print(render_widget(get_publication_sink().read(), now_local()))


@app.command("statusline")
@command_wrapper
def show_statusline():
    """Print one compact line for shell prompts and status bars."""
    published = get_publication_sink().read()
    if published is None:
        raise typer.Exit(code=ERROR_NO_STATE)
    icons = get_config_service().config.output.icons
    # Plain print: status bars read raw text, not rich markup
    print(render_statusline(published, now_local(), icons=icons))


@app.command("watch")
@command_wrapper
def watch(
    interval: float = typer.Option(1.0, "--interval", "-i", help="Seconds between redraws"),
):
    """Live widget that reloads the shared state only when it changes."""
    sink = get_publication_sink()
    published = sink.read()
    revision = published.revision if published else 0

    try:
        with Live(render_widget(published), console=console, refresh_per_second=4) as live:
            while True:
                time.sleep(interval)
                on_disk = sink.revision_on_disk()
                if on_disk != revision:
                    published = sink.read()
                    revision = on_disk
                live.update(render_widget(published, now_local()))
    except KeyboardInterrupt:
        pass
