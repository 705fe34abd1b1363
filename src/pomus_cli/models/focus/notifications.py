"""Completion alerts: "tell the user at time T", with cancel.

The controller only hands over a target time and cancels before every
reschedule. A scheduler that cannot deliver raises ``NotificationError``; the
timer keeps going regardless.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from pomus_cli.models.config_models import Mode

from .state import now_local

ALERT_TITLE = "Time's up!"


class NotificationError(Exception):
    """Raised when an alert cannot be scheduled."""


class NotificationScheduler(Protocol):
    def schedule(self, at: datetime, title: str, body: str) -> None: ...

    def cancel(self) -> None: ...


def alert_body(mode: Mode) -> str:
    """Alert text for the end of an interval in *mode*."""
    if mode == "focus":
        return "Great work! Time for a well-deserved break."
    return "Break is over. Time to focus!"


class LoggingNotificationScheduler:
    """Scheduler for short-lived commands: records the alert target in the log.

    A one-shot CLI command exits long before the alert is due, so the only
    honest thing it can do is note when the alert would fire.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("pomus_cli.notifications")
        self.pending: datetime | None = None

    def schedule(self, at: datetime, title: str, body: str) -> None:
        self.pending = at
        self._logger.info("Alert due at %s: %s %s", at.isoformat(), title, body)

    def cancel(self) -> None:
        if self.pending is not None:
            self._logger.debug("Alert due at %s cancelled", self.pending.isoformat())
        self.pending = None


class ThreadedNotificationScheduler:
    """In-process scheduler backed by ``threading.Timer``.

    Used by the foreground timer view; *deliver* receives the title and body
    when the target time arrives.
    """

    def __init__(
        self,
        deliver: Callable[[str, str], None],
        clock: Callable[[], datetime] = now_local,
        logger: logging.Logger | None = None,
    ):
        self._deliver = deliver
        self._clock = clock
        self._logger = logger or logging.getLogger("pomus_cli.notifications")
        self._timer: threading.Timer | None = None

    @property
    def is_pending(self) -> bool:
        return self._timer is not None and self._timer.is_alive()

    def schedule(self, at: datetime, title: str, body: str) -> None:
        self.cancel()
        delay = max(0.0, (at - self._clock()).total_seconds())
        timer = threading.Timer(delay, self._deliver, args=(title, body))
        timer.daemon = True
        try:
            timer.start()
        except RuntimeError as e:
            raise NotificationError(f"Could not start alert timer: {e}") from e
        self._timer = timer
        self._logger.debug("Alert scheduled in %.1fs", delay)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
