"""Publishes timer state to presentation surfaces outside the controller.

The sink writes the full ``TimerState`` to a JSON file that any process can
read, then signals in-process listeners. Surfaces never call back into the
controller: they load the file and run the same pure progress functions
against their own clock.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from .state import TimerState, now_local

PUBLISHED_STATE_FILE = "timer_state.json"


@dataclass(frozen=True)
class PublishedState:
    """One published revision of the timer state."""

    state: TimerState
    revision: int
    reason: str
    published_at: datetime

    @property
    def refresh_after(self) -> datetime | None:
        """When a surface next needs to reload; None while paused or idle."""
        return refresh_after(self.state)

    def to_dict(self) -> dict[str, Any]:
        refresh = self.refresh_after
        return {
            "revision": self.revision,
            "reason": self.reason,
            "published_at": self.published_at.isoformat(),
            "refresh_after": refresh.isoformat() if refresh else None,
            "state": self.state.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PublishedState:
        return cls(
            state=TimerState.from_dict(data["state"]),
            revision=int(data["revision"]),
            reason=data.get("reason", ""),
            published_at=datetime.fromisoformat(data["published_at"]),
        )


def refresh_after(state: TimerState) -> datetime | None:
    if not state.is_running:
        return None
    return state.expected_completion


Listener = Callable[[PublishedState], None]


class PublicationSink:
    """Writes the shared state file and notifies listeners."""

    def __init__(
        self,
        shared_dir: Path | None = None,
        clock: Callable[[], datetime] = now_local,
        logger: logging.Logger | None = None,
    ):
        if shared_dir is None:
            from platformdirs import user_data_dir

            shared_dir = Path(user_data_dir("pomus_cli")) / "shared"

        self.shared_dir = shared_dir
        self.state_file = self.shared_dir / PUBLISHED_STATE_FILE
        self._clock = clock
        self._logger = logger or logging.getLogger("pomus_cli.publication")
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, state: TimerState, reason: str) -> PublishedState:
        """Write *state* as the next revision and signal listeners.

        Raises:
            OSError: If the shared file cannot be written. Listeners are not
                signalled in that case.
        """
        previous = self.read()
        published = PublishedState(
            state=state.copy(),
            revision=(previous.revision + 1) if previous else 1,
            reason=reason,
            published_at=self._clock(),
        )

        self.shared_dir.mkdir(parents=True, exist_ok=True)
        tmp_file = self.state_file.with_suffix(".json.tmp")
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(published.to_dict(), f, indent=2)
        os.replace(tmp_file, self.state_file)
        self._logger.info("Shared state sync: %s (revision %d)", reason, published.revision)

        for listener in list(self._listeners):
            try:
                listener(published)
            except Exception:
                self._logger.exception("Publication listener failed")
        return published

    def read(self) -> PublishedState | None:
        """Load the last published revision, or None if there is none."""
        return read_published_state(self.state_file)

    def revision_on_disk(self) -> int:
        """Revision of the shared file; 0 when nothing was published yet."""
        published = self.read()
        return published.revision if published else 0


def read_published_state(path: Path) -> PublishedState | None:
    """Read a shared state file; missing or corrupt files read as None."""
    if not path.exists():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            return PublishedState.from_dict(json.load(f))
    except (json.JSONDecodeError, KeyError, TypeError, ValueError):
        return None
