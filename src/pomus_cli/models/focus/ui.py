"""Rich renderings of the timer: full-screen view, widget panel, status line."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from pomus_cli.utils.ui.formatters import format_clock

from .cycling import progress_dots
from .keyboard import action_for_key
from .publication import PublishedState
from .state import TimerState, now_local

_ICONS = {"focus": "🍅", "break": "☕", "paused": "⏸", "idle": "○"}


def progress_bar(fraction: float, width: int = 40) -> str:
    filled = int(width * fraction)
    return "▓" * filled + "░" * (width - filled)


def status_color(state: TimerState) -> str:
    if state.status == "paused":
        return "yellow"
    if state.status == "idle":
        return "dim"
    return state.mode_color_name


class TimerDisplay:
    """Manages the fullscreen timer display."""

    def __init__(
        self,
        console: Console | None = None,
        clock: Callable[[], datetime] = now_local,
        bell: bool = True,
    ):
        self.console = console or Console()
        self._clock = clock
        self._bell = bell
        self.message: str | None = None

    def notify(self, title: str, body: str) -> None:
        """Alert delivery target for the in-process notification scheduler."""
        self.message = f"{title} {body}"
        if self._bell:
            self.console.bell()

    def create_layout(self, state: TimerState, remaining: float, at: datetime) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        if state.status == "paused":
            title = f"{_ICONS['paused']}  PAUSED"
        elif state.status == "idle":
            title = f"Ready: {state.mode_name}"
        else:
            title = f"{_ICONS[state.status]}  {state.mode_name}"

        header_text = Text(title, style=f"bold {status_color(state)}", justify="center")
        layout["header"].update(Align.center(header_text, vertical="middle"))
        layout["body"].update(
            Align.center(self._create_body_content(state, remaining, at), vertical="middle")
        )
        layout["footer"].update(
            Align.center(self._create_footer_text(state.status), vertical="middle")
        )
        return layout

    def _create_body_content(self, state: TimerState, remaining: float, at: datetime) -> Group:
        """Create the main body content."""
        color = status_color(state)
        if state.is_running and remaining < 60:
            color = "red"

        components = [
            Text(format_clock(remaining), style=f"bold {color}", justify="center"),
            Text(""),
        ]

        fraction = state.fraction_completed(at)
        components.append(
            Text(f"{progress_bar(fraction)}  {int(fraction * 100)}%", style="dim", justify="center")
        )
        components.append(Text(""))
        components.append(
            Text(
                progress_dots(state.session_count, state.total_sessions, state.status == "focus"),
                justify="center",
            )
        )

        if self.message:
            components.append(Text(""))
            components.append(Text(self.message, style="bold green", justify="center"))

        return Group(*components)

    def _create_footer_text(self, status: str) -> Text:
        """Create footer with keyboard hints."""
        if status == "paused":
            hints = "'r' resume  •  'k' skip  •  's' stop  •  'q' leave"
        elif status == "idle":
            hints = "'r' start  •  'k' skip  •  'q' leave"
        else:
            hints = "'p' pause  •  'k' skip  •  's' stop  •  'q' leave"
        return Text(hints, style="dim", justify="center")

    def run(self, controller, keyboard, sleep: Callable[[float], None] = time.sleep) -> str:
        """
        Drive the controller from the keyboard until the user leaves.

        Returns 'left' (the session keeps going and is recovered on the next
        launch), 'stopped' or 'interrupted'.
        """
        try:
            now = self._clock()
            with Live(
                self.create_layout(controller.timer_state, controller.display_remaining(now), now),
                console=self.console,
                refresh_per_second=4,
                screen=True,
            ) as live:
                while True:
                    # Another process may have paused or reset the timer.
                    controller.resync()
                    action = action_for_key(keyboard.get_key())

                    if action == "pause":
                        controller.pause()
                    elif action == "resume":
                        if controller.timer_state.status == "idle":
                            controller.start_current()
                        else:
                            controller.resume()
                    elif action == "skip":
                        controller.skip()
                    elif action == "stop":
                        controller.stop()
                        return "stopped"
                    elif action == "leave":
                        return "left"

                    if action is not None:
                        self.message = None
                    if controller.pop_cycle_complete():
                        self.message = "Cycle complete! Take a moment before the next round."

                    now = self._clock()
                    live.update(
                        self.create_layout(
                            controller.timer_state, controller.display_remaining(now), now
                        )
                    )
                    sleep(0.25)

        except KeyboardInterrupt:
            return "interrupted"
        finally:
            keyboard.stop()


def render_widget(published: PublishedState | None, at: datetime | None = None) -> Panel:
    """Snapshot panel built only from the published state."""
    if published is None:
        return Panel("[dim]No timer has run yet[/dim]", title="pomus", border_style="dim")

    state = published.state
    at = at or now_local()
    color = status_color(state)

    if state.status == "idle":
        headline = f"[bold]Up next: {state.mode_name}[/bold]"
    else:
        label = "Paused" if state.status == "paused" else state.mode_name
        headline = f"[bold {color}]{label}  {format_clock(state.remaining_time(at))}[/bold {color}]"

    fraction = state.fraction_completed(at)
    lines = [
        headline,
        f"[dim]{progress_bar(fraction, width=24)}  {int(fraction * 100)}%[/dim]",
        progress_dots(state.session_count, state.total_sessions, state.status == "focus"),
    ]
    if published.refresh_after is not None:
        lines.append(f"[dim]Ends at {published.refresh_after.strftime('%H:%M')}[/dim]")

    return Panel("\n".join(lines), title="pomus", border_style=color, padding=(0, 2))


def render_statusline(
    published: PublishedState | None, at: datetime | None = None, icons: bool = True
) -> str:
    """One compact line for shell prompts and status bars."""
    if published is None:
        return "idle"

    state = published.state
    icon = f"{_ICONS[state.status]} " if icons else ""
    dots = progress_dots(state.session_count, state.total_sessions, state.status == "focus")
    dots = dots.replace(" ", "")

    if state.status == "idle":
        return f"{icon}{state.mode_name} next {dots}".strip()
    remaining = format_clock(state.remaining_time(at or now_local()))
    return f"{icon}{state.mode_name} {remaining} {dots}".strip()


def show_completion_message(finished_mode: str, console: Console | None = None):
    """Show the message for an interval that ended while nobody watched."""
    console = console or Console()

    if finished_mode == "focus":
        text = "[bold green]Focus session complete![/bold green]\nTime for a well-deserved break."
    else:
        text = "[bold green]Break is over.[/bold green]\nTime to focus!"

    console.print(Panel(text, border_style="green", padding=(1, 2)))


def show_cycle_complete_message(console: Console | None = None):
    """Show the message for a finished pomodoro cycle."""
    console = console or Console()
    console.print(
        Panel(
            "[bold green]Cycle complete![/bold green]\n"
            "All sessions of this cycle are done. Take a longer rest.",
            border_style="green",
            padding=(1, 2),
        )
    )
