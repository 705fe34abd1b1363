"""Pomodoro cycle rules: which mode comes next and how modes are labelled."""

from pomus_cli.models.config_models import Mode

from .state import TimerStatus

FOCUS_COLOR = "red"
BREAK_COLOR = "green"

_MODE_NAMES: dict[str, str] = {
    "focus": "Focus",
    "short_break": "Break",
    "long_break": "Long Break",
}


def mode_name(mode: Mode) -> str:
    """Display name of *mode*."""
    return _MODE_NAMES[mode]


def mode_color(mode: Mode) -> str:
    """Rich color used to render *mode*."""
    return FOCUS_COLOR if mode == "focus" else BREAK_COLOR


def status_for_mode(mode: Mode) -> TimerStatus:
    """Running status of an interval in *mode*."""
    return "focus" if mode == "focus" else "break"


def mode_from_name(name: str) -> Mode:
    """Reverse of :func:`mode_name`; unknown names fall back to focus."""
    for mode, label in _MODE_NAMES.items():
        if label == name:
            return mode  # type: ignore[return-value]
    return "focus"


def break_after_focus(completed_sessions: int, sessions_before_long_break: int) -> Mode:
    """Break that follows the *completed_sessions*-th focus session.

    Every ``sessions_before_long_break``-th completed session earns a long
    break; all others a short one.
    """
    if completed_sessions > 0 and completed_sessions % sessions_before_long_break == 0:
        return "long_break"
    return "short_break"


def next_mode(
    current: Mode, session_count: int, sessions_before_long_break: int
) -> Mode:
    """Mode reached by skipping *current* without completing it.

    Skipping a focus session routes as if it were the ``session_count + 1``-th
    completion, without counting it.
    """
    if current == "focus":
        return break_after_focus(session_count + 1, sessions_before_long_break)
    return "focus"


def progress_dots(session_count: int, total_sessions: int, in_focus: bool = False) -> str:
    """Dots showing the position in the cycle."""
    dots = []
    for i in range(1, total_sessions + 1):
        if i <= session_count:
            dots.append("●")  # Completed
        elif i == session_count + 1 and in_focus:
            dots.append("◉")  # Current
        else:
            dots.append("○")  # Upcoming

    return " ".join(dots)
