"""Timer state value and its durable recovery snapshot.

``TimerState`` is the single source of truth for what is happening right now.
Progress is never counted down: ``fraction_completed`` and ``remaining_time``
are recomputed from absolute timestamps and a caller-supplied clock reading, so
every process that reads the same fields at the same instant agrees.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Literal, get_args

from pomus_cli.models.config_models import Mode

TimerStatus = Literal["idle", "focus", "break", "paused"]

RUNNING_STATUSES: frozenset[str] = frozenset({"focus", "break"})


def now_local() -> datetime:
    """Current wall-clock time as an aware datetime."""
    return datetime.now().astimezone()


def _parse(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _format(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass
class TimerState:
    """Represents the current timed interval."""

    status: TimerStatus = "idle"
    start_date: datetime | None = None
    end_date: datetime | None = None
    pause_date: datetime | None = None  # set only while paused
    accumulated_pause: float = 0.0  # seconds
    session_count: int = 0
    total_sessions: int = 0
    mode_name: str = ""
    mode_color_name: str = "red"

    @property
    def is_running(self) -> bool:
        return self.status in RUNNING_STATUSES

    @property
    def total_duration(self) -> float:
        """Scheduled length of the interval in seconds (0 when idle)."""
        if self.start_date is None or self.end_date is None:
            return 0.0
        return (self.end_date - self.start_date).total_seconds()

    @property
    def expected_completion(self) -> datetime | None:
        """Instant a running interval reaches zero, pauses included."""
        if self.end_date is None:
            return None
        return self.end_date + timedelta(seconds=self.accumulated_pause)

    def fraction_completed(self, at: datetime | None = None) -> float:
        """Fraction of the interval elapsed at *at*, clamped to [0, 1].

        While paused the answer is frozen at ``pause_date`` whatever *at* is.
        """
        if self.start_date is None or self.end_date is None:
            return 0.0
        total = self.total_duration
        if total <= 0:
            return 1.0
        if at is None:
            at = now_local()
        effective_now = (self.pause_date or at) if self.status == "paused" else at
        elapsed = (
            effective_now - self.start_date
        ).total_seconds() - self.accumulated_pause
        return min(max(elapsed / total, 0.0), 1.0)

    def remaining_time(self, at: datetime | None = None) -> float:
        """Seconds left at *at*, never negative."""
        if self.start_date is None or self.end_date is None:
            return 0.0
        return max(0.0, self.total_duration * (1 - self.fraction_completed(at)))

    def copy(self) -> TimerState:
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            "status": self.status,
            "start_date": _format(self.start_date),
            "end_date": _format(self.end_date),
            "pause_date": _format(self.pause_date),
            "accumulated_pause": self.accumulated_pause,
            "session_count": self.session_count,
            "total_sessions": self.total_sessions,
            "mode_name": self.mode_name,
            "mode_color_name": self.mode_color_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimerState:
        """Create from dictionary."""
        return cls(
            status=data.get("status", "idle"),
            start_date=_parse(data.get("start_date")),
            end_date=_parse(data.get("end_date")),
            pause_date=_parse(data.get("pause_date")),
            accumulated_pause=float(data.get("accumulated_pause", 0.0)),
            session_count=int(data.get("session_count", 0)),
            total_sessions=int(data.get("total_sessions", 0)),
            mode_name=data.get("mode_name", ""),
            mode_color_name=data.get("mode_color_name", "red"),
        )


@dataclass(frozen=True)
class LastKnownState:
    """Durable point-in-time record used to rebuild the timer after a relaunch."""

    status: TimerStatus
    remaining: float  # seconds left when the snapshot was taken
    mode: Mode
    timestamp: datetime
    session_count: int = 0
    duration: float | None = None  # scheduled length of the interval, None when idle

    @property
    def is_running(self) -> bool:
        return self.status in RUNNING_STATUSES

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "is_running": self.is_running,
            "remaining": self.remaining,
            "mode": self.mode,
            "timestamp": self.timestamp.isoformat(),
            "session_count": self.session_count,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LastKnownState:
        """Create from dictionary.

        Raises:
            KeyError: If a required field is missing
            ValueError: If the status or mode is not one Pomus knows
        """
        if data["status"] not in get_args(TimerStatus):
            raise ValueError(f"Unknown timer status: {data['status']!r}")
        if data["mode"] not in get_args(Mode):
            raise ValueError(f"Unknown timer mode: {data['mode']!r}")
        duration = data.get("duration")
        return cls(
            status=data["status"],
            remaining=float(data["remaining"]),
            mode=data["mode"],
            timestamp=datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00")),
            session_count=int(data.get("session_count", 0)),
            duration=float(duration) if duration is not None else None,
        )


class SnapshotStore:
    """Manages the recovery snapshot file."""

    def __init__(self, state_dir: Path | None = None):
        """Initialize the store; defaults to the user data dir."""
        if state_dir is None:
            from platformdirs import user_data_dir

            state_dir = Path(user_data_dir("pomus_cli")) / "state"

        self.state_dir = state_dir
        self.state_file = self.state_dir / "last_state.json"

    def save(self, snapshot: LastKnownState) -> None:
        """Write the snapshot atomically. Raises OSError on failure."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        tmp_file = self.state_file.with_suffix(".json.tmp")
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(snapshot.to_dict(), f, indent=2)
        os.replace(tmp_file, self.state_file)

    def load(self) -> LastKnownState | None:
        """Load the snapshot. Returns None if the file is missing or invalid."""
        if not self.state_file.exists():
            return None

        try:
            with open(self.state_file, encoding="utf-8") as f:
                data = json.load(f)
            return LastKnownState.from_dict(data)
        except (json.JSONDecodeError, TypeError, KeyError, ValueError):
            return None

    def delete(self) -> None:
        """Delete the snapshot file."""
        if self.state_file.exists():
            self.state_file.unlink()
