"""Cancellable one-second ticker driving the session controller."""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime

from .state import now_local

TickCallback = Callable[[datetime], None]


class Ticker:
    """Calls *callback* with the current time every *interval* seconds.

    Runs on a daemon thread. ``cancel`` only sets an event, so it is safe to
    call from inside the callback itself; ``join`` waits for the thread.
    """

    def __init__(
        self,
        callback: TickCallback,
        interval: float = 1.0,
        clock: Callable[[], datetime] = now_local,
    ):
        self._callback = callback
        self._interval = interval
        self._clock = clock
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name="pomus-ticker", daemon=True)

    @property
    def is_active(self) -> bool:
        return self._thread.is_alive() and not self._stopped.is_set()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stopped.set()

    def join(self, timeout: float | None = 1.0) -> None:
        """Wait for the thread to exit. A no-op from the ticker thread itself."""
        if threading.current_thread() is self._thread or not self._thread.is_alive():
            return
        self._thread.join(timeout)

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            self._callback(self._clock())


def start_ticker(callback: TickCallback) -> Ticker:
    """Default ticker factory used by the session controller."""
    ticker = Ticker(callback)
    ticker.start()
    return ticker
