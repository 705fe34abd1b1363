"""Rebuilds the running timer from the last snapshot after a relaunch.

The snapshot says how long the interval was, how much of it was left and
when that was true. The engine subtracts the wall-clock gap since then and
either resumes the interval, finishes it, or restores a paused or idle timer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pomus_cli.models.config_models import Mode

from .controller import SessionController
from .state import SnapshotStore, now_local

RecoveryOutcome = Literal["fresh", "resumed", "finished", "paused", "idle"]


@dataclass(frozen=True)
class RecoveryResult:
    """What recovery did, for logging and for the caller's first render."""

    outcome: RecoveryOutcome
    remaining: float = 0.0  # seconds left after recovery
    gap: float = 0.0  # seconds between the snapshot and the relaunch
    mode: Mode | None = None  # mode of the recovered snapshot


class RecoveryEngine:
    """Applies the last known state to a freshly built controller."""

    def __init__(
        self,
        store: SnapshotStore,
        clock: Callable[[], datetime] = now_local,
        logger: logging.Logger | None = None,
    ):
        self._store = store
        self._clock = clock
        self._logger = logger or logging.getLogger("pomus_cli.recovery")

    def recover(self, controller: SessionController) -> RecoveryResult:
        snapshot = self._store.load()
        controller.mark_synced(snapshot)
        if snapshot is None:
            self._logger.debug("No timer snapshot, starting fresh")
            controller.restore_cycle("focus", 0)
            return RecoveryResult("fresh", controller.display_remaining())

        now = self._clock()
        # Clock skew can put the snapshot in the future.
        gap = max(0.0, (now - snapshot.timestamp).total_seconds())
        controller.restore_cycle(snapshot.mode, snapshot.session_count)

        if snapshot.status == "paused":
            controller.restore_paused(snapshot.remaining, now, snapshot.duration)
            self._logger.info("Recovered paused %s", snapshot.mode)
            return RecoveryResult("paused", controller.display_remaining(now), gap, snapshot.mode)

        if not snapshot.is_running:
            return RecoveryResult("idle", controller.display_remaining(now), gap, snapshot.mode)

        recovered = snapshot.remaining - gap
        if recovered > 0:
            controller.restore_running(recovered, now, snapshot.duration)
            self._logger.info(
                "Recovered running %s with %.0fs left (gap %.0fs)",
                snapshot.mode,
                recovered,
                gap,
            )
            return RecoveryResult("resumed", controller.display_remaining(now), gap, snapshot.mode)

        # However long the gap, at most one interval is completed.
        controller.finish_session(now)
        self._logger.info(
            "Recovered %s ended %.0fs ago, finished it", snapshot.mode, -recovered
        )
        return RecoveryResult("finished", controller.display_remaining(now), gap, snapshot.mode)
