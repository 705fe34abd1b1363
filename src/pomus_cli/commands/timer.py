"""Pomodoro timer commands for Pomus CLI."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

import typer

from pomus_cli.models.focus.controller import SessionController
from pomus_cli.models.focus.cycling import progress_dots
from pomus_cli.models.focus.keyboard import create_keyboard_handler
from pomus_cli.models.focus.ui import (
    TimerDisplay,
    show_completion_message,
    show_cycle_complete_message,
)
from pomus_cli.services.config_service import get_config_service
from pomus_cli.services.session_service import create_session_controller
from pomus_cli.utils.typer_helpers import SuggestingGroup
from pomus_cli.utils.ui.console import get_console
from pomus_cli.utils.ui.formatters import (
    format_clock,
    format_info,
    format_output,
    format_warning,
)

from .decorators import command_wrapper

console = get_console()
app = typer.Typer(cls=SuggestingGroup, help="Pomodoro timer for focus sessions")


@contextmanager
def open_session(**kwargs) -> Iterator[SessionController]:
    """Recover the last session, hand out the controller, then suspend it."""
    controller, result = create_session_controller(**kwargs)
    if result.outcome == "finished" and result.mode is not None:
        show_completion_message(result.mode, console)
    if controller.pop_cycle_complete():
        show_cycle_complete_message(console)
    try:
        yield controller
    finally:
        controller.suspend()


def _ends_at(controller: SessionController) -> str:
    completion = controller.timer_state.expected_completion
    if completion is None:
        return ""
    return f", ends at {completion.strftime('%H:%M')}"


def _print_started(controller: SessionController) -> None:
    state = controller.timer_state
    console.print(
        f"[bold {state.mode_color_name}]{state.mode_name} started[/bold {state.mode_color_name}]"
        f": {format_clock(controller.display_remaining())}{_ends_at(controller)}"
    )


def status_data(controller: SessionController, at: datetime | None = None) -> dict:
    """Machine-readable view of the controller."""
    state = controller.timer_state
    completion = state.expected_completion if state.is_running else None
    remaining = controller.display_remaining(at)
    return {
        "status": state.status,
        "mode": controller.current_mode,
        "mode_name": state.mode_name,
        "remaining_seconds": round(remaining, 1),
        "remaining": format_clock(remaining),
        "progress": round(state.fraction_completed(at), 3),
        "session_count": controller.session_count,
        "total_sessions": controller.settings.sessions_before_long_break,
        "expected_completion": completion.isoformat() if completion else None,
    }


@app.command("start")
@command_wrapper
def start_focus():
    """Start a focus session (restarts any running interval)."""
    with open_session() as controller:
        controller.start_focus()
        _print_started(controller)


@app.command("break")
@command_wrapper
def start_break(
    long: bool = typer.Option(False, "--long", "-l", help="Start a long break"),
):
    """Start a short (or long) break."""
    with open_session() as controller:
        controller.start_break(long=long)
        _print_started(controller)


@app.command("pause")
@command_wrapper
def pause_timer():
    """Pause the running session."""
    with open_session() as controller:
        if not controller.is_running:
            format_warning("No running session to pause")
            return
        controller.pause()
        console.print(
            f"[yellow]Paused[/yellow] with {format_clock(controller.display_remaining())} left"
        )


@app.command("resume")
@command_wrapper
def resume_timer():
    """Resume a paused session."""
    with open_session() as controller:
        if controller.timer_state.status != "paused":
            format_warning("No paused session to resume")
            return
        controller.resume()
        _print_started(controller)


@app.command("toggle")
@command_wrapper
def toggle_timer():
    """Start, pause or resume depending on the current state."""
    with open_session() as controller:
        controller.toggle()
        if controller.timer_state.status == "paused":
            console.print(
                f"[yellow]Paused[/yellow] with {format_clock(controller.display_remaining())} left"
            )
        else:
            _print_started(controller)


@app.command("stop")
@command_wrapper
def stop_timer():
    """Stop the current session without counting it."""
    with open_session() as controller:
        if controller.timer_state.status == "idle":
            format_warning("Timer is not running")
            return
        controller.stop()
        format_info(f"Stopped. Up next: {controller.timer_state.mode_name}")


@app.command("skip")
@command_wrapper
def skip_session():
    """Skip to the next mode; the new interval starts paused."""
    with open_session() as controller:
        controller.skip()
        format_info(
            f"Skipped to {controller.timer_state.mode_name} "
            f"({format_clock(controller.display_remaining())}), "
            "run 'pomus timer resume' to start it"
        )


@app.command("reset-cycle")
@command_wrapper
def reset_cycle():
    """Reset the completed-session count of the current cycle."""
    with open_session() as controller:
        controller.reset_cycle()
        format_info("Pomodoro cycle reset")


@app.command("status")
@command_wrapper
def show_status(
    output: str = typer.Option("table", "--output", "-o", help="Output format (table, json, yaml)"),
):
    """Show the current timer state."""
    with open_session() as controller:
        data = status_data(controller)
        if output != "table":
            format_output(data, output)
            return

        state = controller.timer_state
        color = "yellow" if state.status == "paused" else state.mode_color_name
        label = "Paused" if state.status == "paused" else state.mode_name
        if state.status == "idle":
            label = f"Idle, up next: {state.mode_name}"
        ends = _ends_at(controller) if state.is_running else ""
        console.print(f"[bold {color}]{label}[/bold {color}]  {data['remaining']}{ends}")
        console.print(
            progress_dots(controller.session_count, data["total_sessions"], state.status == "focus")
        )


@app.command("run")
@command_wrapper
def run_timer(
    start: bool = typer.Option(False, "--start", help="Start the next mode if idle"),
):
    """Open the full-screen timer (p pause, r resume, k skip, s stop, q leave)."""
    config = get_config_service().config
    display = TimerDisplay(console, bell=config.notifications.bell)

    with open_session(interactive=True, deliver=display.notify) as controller:
        if start and controller.timer_state.status == "idle":
            controller.start_current()
        outcome = display.run(controller, create_keyboard_handler())

        if outcome == "left" and controller.timer_state.status != "idle":
            format_info("Timer keeps going. Run 'pomus timer run' to come back.")
        elif outcome == "stopped":
            format_info("Session stopped")
