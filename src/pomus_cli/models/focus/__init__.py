"""Focus mode - Pomodoro timer engine for Pomus CLI."""

from .controller import SessionController
from .history import FocusStat, StatisticsRecorder
from .notifications import (
    LoggingNotificationScheduler,
    NotificationError,
    ThreadedNotificationScheduler,
)
from .publication import PublicationSink, PublishedState, read_published_state
from .recovery import RecoveryEngine, RecoveryResult
from .state import LastKnownState, SnapshotStore, TimerState
from .ui import (
    TimerDisplay,
    render_statusline,
    render_widget,
    show_completion_message,
    show_cycle_complete_message,
)

__all__ = [
    "TimerState",
    "LastKnownState",
    "SnapshotStore",
    "SessionController",
    "RecoveryEngine",
    "RecoveryResult",
    "PublicationSink",
    "PublishedState",
    "read_published_state",
    "StatisticsRecorder",
    "FocusStat",
    "LoggingNotificationScheduler",
    "ThreadedNotificationScheduler",
    "NotificationError",
    "TimerDisplay",
    "render_widget",
    "render_statusline",
    "show_completion_message",
    "show_cycle_complete_message",
]
