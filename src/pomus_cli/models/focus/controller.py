"""Pomodoro session state machine.

One ``SessionController`` owns the one ``TimerState``. Transitions replace the
state object instead of mutating it, so a surface holding a reference always
sees a consistent value. Illegal transitions (``resume`` while idle, ``pause``
while paused ...) are silent no-ops.

Every transition cancels the outstanding tick and completion alert before
scheduling new ones, then writes the recovery snapshot and publishes the new
state. Those writes are best effort: a failure is logged and the in-memory
state stays authoritative.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta

from pomus_cli.models.config_models import Mode, TimerSettings

from .cycling import break_after_focus, mode_color, mode_name, next_mode, status_for_mode
from .history import StatisticsRecorder
from .notifications import (
    ALERT_TITLE,
    NotificationError,
    NotificationScheduler,
    alert_body,
)
from .publication import PublicationSink
from .state import LastKnownState, SnapshotStore, TimerState, now_local
from .ticker import TickCallback, Ticker, start_ticker

TickerFactory = Callable[[TickCallback], Ticker]


class SessionController:
    """Owns the timer state and applies the legal transitions to it."""

    def __init__(
        self,
        settings: TimerSettings,
        *,
        snapshot_store: SnapshotStore | None = None,
        publisher: PublicationSink | None = None,
        notifier: NotificationScheduler | None = None,
        statistics: StatisticsRecorder | None = None,
        ticker_factory: TickerFactory | None = start_ticker,
        clock: Callable[[], datetime] = now_local,
        logger: logging.Logger | None = None,
        reload: Callable[[SessionController], object] | None = None,
    ):
        """Build an idle controller.

        Args:
            reload: Rebuilds this controller from the snapshot on disk. When
                given, another process that wrote the snapshot since this one
                last did wins over the in-memory state.
        """
        self.settings = settings
        self._snapshot_store = snapshot_store
        self._publisher = publisher
        self._notifier = notifier
        self._statistics = statistics
        self._ticker_factory = ticker_factory
        self._clock = clock
        self._logger = logger or logging.getLogger("pomus_cli.timer")
        self._reload = reload
        self._lock = threading.RLock()

        self.current_mode: Mode = "focus"
        self.session_count = 0
        self._cycle_complete = False
        self._ticker: Ticker | None = None
        self._retired_tickers: list[Ticker] = []
        self._synced: LastKnownState | None = None
        self._tick_generation = 0
        self.timer_state = self._idle_state()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.timer_state.is_running

    @property
    def is_ticking(self) -> bool:
        return self._ticker is not None

    def display_remaining(self, at: datetime | None = None) -> float:
        """Seconds to show: the next mode's full length while idle."""
        if self.timer_state.status == "idle":
            return self.settings.duration_for(self.current_mode)
        return self.timer_state.remaining_time(at or self._clock())

    def last_known_state(self, at: datetime | None = None) -> LastKnownState:
        at = at or self._clock()
        return LastKnownState(
            status=self.timer_state.status,
            remaining=self.display_remaining(at),
            mode=self.current_mode,
            timestamp=at,
            session_count=self.session_count,
            duration=self.timer_state.total_duration or None,
        )

    def pop_cycle_complete(self) -> bool:
        """Return the one-shot "cycle complete" signal and clear it."""
        with self._lock:
            raised, self._cycle_complete = self._cycle_complete, False
            return raised

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def toggle(self) -> None:
        """Start when idle, pause when running, resume when paused."""
        with self._lock:
            status = self.timer_state.status
            if status == "idle":
                self.start_current()
            elif status == "paused":
                self.resume()
            else:
                self.pause()

    def start_current(self) -> None:
        """Start a fresh interval of the mode that is up next."""
        if self.current_mode == "focus":
            self.start_focus()
        else:
            self.start_break(long=self.current_mode == "long_break")

    def start_focus(self) -> None:
        self._start_session("focus")

    def start_break(self, long: bool = False) -> None:
        self._start_session("long_break" if long else "short_break")

    def pause(self) -> None:
        with self._lock:
            if not self.timer_state.is_running:
                return
            self._cancel_tick()
            self._cancel_notification()
            now = self._clock()
            self.timer_state = replace(self.timer_state, status="paused", pause_date=now)
            self._persist_and_publish("pause", now)
            self._logger.debug("Timer paused")

    def resume(self) -> None:
        with self._lock:
            if self.timer_state.status != "paused":
                return
            now = self._clock()
            accumulated = self.timer_state.accumulated_pause
            if self.timer_state.pause_date is not None:
                accumulated += max(0.0, (now - self.timer_state.pause_date).total_seconds())
            self.timer_state = replace(
                self.timer_state,
                status=status_for_mode(self.current_mode),
                pause_date=None,
                accumulated_pause=accumulated,
            )
            self._schedule_notification()
            self._persist_and_publish("resume", now)
            self._start_tick()
            self._logger.debug("Timer resumed")

    def stop(self) -> None:
        """Drop the current interval and go idle; the cycle position is kept."""
        with self._lock:
            self._cancel_tick()
            self._cancel_notification()
            self.timer_state = self._idle_state()
            self._persist_and_publish("stop", self._clock())
            self._logger.debug("Timer stopped")

    def reset_current_session(self) -> None:
        self.stop()

    def skip(self) -> None:
        """Move to the next mode as a fresh, paused interval."""
        with self._lock:
            self._cancel_tick()
            self._cancel_notification()
            self.current_mode = next_mode(
                self.current_mode,
                self.session_count,
                self.settings.sessions_before_long_break,
            )
            now = self._clock()
            self.timer_state = self._interval_state(
                status="paused",
                start=now,
                duration=self.settings.duration_for(self.current_mode),
                pause_date=now,
            )
            self._persist_and_publish("skip", now)
            self._logger.debug("Skipped to %s", self.current_mode)

    def reset_cycle(self) -> None:
        with self._lock:
            self.session_count = 0
            self.timer_state = replace(self.timer_state, session_count=0)
            self._persist_and_publish("reset_cycle", self._clock())

    def update_settings(self, settings: TimerSettings) -> None:
        """Apply new settings; the running interval keeps its schedule."""
        with self._lock:
            self.settings = settings

    def tick(self, now: datetime | None = None) -> float:
        """Re-evaluate the running interval and finish it at zero."""
        with self._lock:
            if not self.timer_state.is_running:
                return self.display_remaining(now)
            now = now or self._clock()
            remaining = self.timer_state.remaining_time(now)
            if remaining <= 0:
                self._finish(now)
            return remaining

    def finish_session(self, now: datetime | None = None) -> None:
        """Run the finish transition as if the tick had reached zero."""
        with self._lock:
            self._finish(now or self._clock())

    def suspend(self) -> None:
        """Stop ticking and write the snapshot before the process goes away."""
        with self._lock:
            self.resync()
            self._cancel_tick()
            self.save_last_state()
        # Outside the lock: a ticker thread may be waiting for it.
        self._join_retired_tickers()

    def is_stale(self) -> bool:
        """Whether another process wrote the snapshot since this one did."""
        if self._snapshot_store is None:
            return False
        return self._snapshot_store.load() != self._synced

    def resync(self) -> bool:
        """Reload from the snapshot on disk if it changed behind our back.

        Returns True when the in-memory state was replaced.
        """
        with self._lock:
            if self._reload is None or not self.is_stale():
                return False
            self._logger.info("Timer snapshot changed on disk, reloading")
            self._cancel_tick()
            self._cancel_notification()
            self._reload(self)
            return True

    # ------------------------------------------------------------------
    # Recovery hooks
    # ------------------------------------------------------------------

    def restore_cycle(self, mode: Mode, session_count: int) -> None:
        with self._lock:
            self.current_mode = mode
            self.session_count = session_count
            self.timer_state = self._idle_state()

    def mark_synced(self, snapshot: LastKnownState | None) -> None:
        """Record *snapshot* as the on-disk state this controller was built from."""
        with self._lock:
            self._synced = snapshot

    def restore_running(
        self, remaining: float, now: datetime, duration: float | None = None
    ) -> None:
        """Rebuild a running interval that has *remaining* seconds left at *now*.

        *duration* is the interval's scheduled length; the configured length
        of the mode is used only when it is unknown.
        """
        with self._lock:
            duration = self._restored_duration(duration)
            remaining = min(remaining, duration)
            self.timer_state = self._interval_state(
                status=status_for_mode(self.current_mode),
                start=now - timedelta(seconds=duration - remaining),
                duration=duration,
            )
            self._schedule_notification()
            self._persist_and_publish("recover", now)
            self._start_tick()

    def restore_paused(
        self, remaining: float, now: datetime, duration: float | None = None
    ) -> None:
        """Rebuild a paused interval frozen at *remaining* seconds."""
        with self._lock:
            duration = self._restored_duration(duration)
            remaining = min(remaining, duration)
            self.timer_state = self._interval_state(
                status="paused",
                start=now - timedelta(seconds=duration - remaining),
                duration=duration,
                pause_date=now,
            )
            self._persist_and_publish("recover", now)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _restored_duration(self, duration: float | None) -> float:
        if duration is None or duration <= 0:
            return self.settings.duration_for(self.current_mode)
        return duration

    def _start_session(self, mode: Mode) -> None:
        with self._lock:
            self._cancel_tick()
            self._cancel_notification()
            now = self._clock()
            self.current_mode = mode
            self.timer_state = self._interval_state(
                status=status_for_mode(mode),
                start=now,
                duration=self.settings.duration_for(mode),
            )
            self._logger.debug("Session started: %s", self.timer_state.mode_name)
            self._schedule_notification()
            self._persist_and_publish("start", now)
            self._start_tick()

    def _finish(self, now: datetime) -> None:
        self._cancel_tick()
        self._cancel_notification()
        completed = self.current_mode
        threshold = self.settings.sessions_before_long_break

        if completed == "focus":
            duration = self.timer_state.total_duration or self.settings.duration_for("focus")
            self._record_statistics(
                lambda stats: stats.record_focus_completion(duration, now.date())
            )
            self.session_count += 1
            self.current_mode = break_after_focus(self.session_count, threshold)
        else:
            self._record_statistics(lambda stats: stats.record_break_taken(now.date()))
            if self.session_count >= threshold:
                self.session_count = 0
                self._cycle_complete = True
            self.current_mode = "focus"

        self.timer_state = self._idle_state()
        self._logger.info("Session finished: %s, next %s", completed, self.current_mode)
        self._persist_and_publish("finished", now)

        if self.settings.continuous_mode:
            self.start_current()

    def _idle_state(self) -> TimerState:
        return TimerState(
            status="idle",
            session_count=self.session_count,
            total_sessions=self.settings.sessions_before_long_break,
            mode_name=mode_name(self.current_mode),
            mode_color_name=mode_color(self.current_mode),
        )

    def _interval_state(
        self,
        *,
        status,
        start: datetime,
        duration: float,
        pause_date: datetime | None = None,
    ) -> TimerState:
        return TimerState(
            status=status,
            start_date=start,
            end_date=start + timedelta(seconds=duration),
            pause_date=pause_date,
            accumulated_pause=0.0,
            session_count=self.session_count,
            total_sessions=self.settings.sessions_before_long_break,
            mode_name=mode_name(self.current_mode),
            mode_color_name=mode_color(self.current_mode),
        )

    def _on_tick(self, generation: int, now: datetime) -> None:
        with self._lock:
            # A tick that was already waiting for the lock when its ticker
            # was cancelled belongs to an older interval.
            if generation != self._tick_generation:
                return
            if self.resync():
                return
            self.tick(now)

    def _start_tick(self) -> None:
        self._cancel_tick()
        if self._ticker_factory is None:
            return
        generation = self._tick_generation
        self._ticker = self._ticker_factory(lambda now: self._on_tick(generation, now))

    def _cancel_tick(self) -> None:
        self._tick_generation += 1
        if self._ticker is not None:
            self._ticker.cancel()
            self._retired_tickers.append(self._ticker)
            self._ticker = None

    def _join_retired_tickers(self, timeout: float = 1.0) -> None:
        while self._retired_tickers:
            self._retired_tickers.pop().join(timeout)

    def _schedule_notification(self) -> None:
        if self._notifier is None:
            return
        at = self.timer_state.expected_completion
        if at is None:
            return
        try:
            self._notifier.cancel()
            self._notifier.schedule(at, ALERT_TITLE, alert_body(self.current_mode))
        except NotificationError as e:
            self._logger.warning("Could not schedule completion alert: %s", e)

    def _cancel_notification(self) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.cancel()
        except NotificationError as e:
            self._logger.warning("Could not cancel completion alert: %s", e)

    def _record_statistics(self, record: Callable[[StatisticsRecorder], None]) -> None:
        if self._statistics is None:
            return
        try:
            record(self._statistics)
        except (OSError, sqlite3.Error) as e:
            self._logger.warning("Could not record statistics: %s", e)

    def save_last_state(self, at: datetime | None = None) -> None:
        """Write the recovery snapshot; failures are logged, not raised."""
        if self._snapshot_store is None:
            return
        try:
            snapshot = self.last_known_state(at)
            self._snapshot_store.save(snapshot)
        except OSError as e:
            self._logger.warning("Could not save timer snapshot: %s", e)
        else:
            self._synced = snapshot

    def _persist_and_publish(self, reason: str, now: datetime) -> None:
        self.save_last_state(now)
        if self._publisher is None:
            return
        try:
            self._publisher.publish(self.timer_state, reason)
        except OSError as e:
            self._logger.warning("Could not publish timer state (%s): %s", reason, e)
