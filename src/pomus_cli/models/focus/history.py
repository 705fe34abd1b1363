"""Focus statistics with SQLite storage.

Counters are append-only rows keyed by calendar day; every report is an
aggregate query over them.
"""

import sqlite3
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

EVENT_FOCUS = "focus"
EVENT_BREAK = "break"


@dataclass(frozen=True)
class FocusStat:
    """One bar of the weekly chart."""

    day: str  # weekday abbreviation, e.g. "Mon"
    iso_date: str  # YYYY-MM-DD
    duration: float  # focus seconds


class StatisticsRecorder:
    """Records completed focus sessions and breaks taken."""

    def __init__(self, db_path: Path | None = None):
        """Initialize the recorder, creating the schema if needed."""
        if db_path is None:
            from platformdirs import user_data_dir

            db_path = Path(user_data_dir("pomus_cli")) / "focus_history.db"

        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS focus_events (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    kind TEXT NOT NULL,
                    day TEXT NOT NULL,
                    duration_seconds REAL NOT NULL DEFAULT 0,
                    recorded_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_events_day
                ON focus_events(day)
                """
            )
            conn.commit()

    def _insert(self, kind: str, day: date, duration: float) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO focus_events (kind, day, duration_seconds, recorded_at)
                VALUES (?, ?, ?, ?)
                """,
                (kind, day.isoformat(), float(duration), datetime.now().isoformat()),
            )
            conn.commit()

    def record_focus_completion(self, duration: float, day: date | None = None) -> None:
        """
        Record one completed focus session.

        Args:
            duration: Scheduled length of the session in seconds
            day: Calendar day to credit, defaults to today
        """
        self._insert(EVENT_FOCUS, day or date.today(), duration)

    def record_break_taken(self, day: date | None = None) -> None:
        """Record one completed break."""
        self._insert(EVENT_BREAK, day or date.today(), 0.0)

    def focus_time_by_day(self) -> dict[str, float]:
        """Total focus seconds per day, keyed by YYYY-MM-DD."""
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                """
                SELECT day, SUM(duration_seconds) FROM focus_events
                WHERE kind = ?
                GROUP BY day
                """,
                (EVENT_FOCUS,),
            ).fetchall()
        return {day: total for day, total in rows}

    def weekly_focus_stats(self, today: date | None = None) -> list[FocusStat]:
        """Focus time for the last 7 days, oldest first, today last."""
        today = today or date.today()
        by_day = self.focus_time_by_day()
        stats = []
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            key = day.isoformat()
            stats.append(
                FocusStat(
                    day=day.strftime("%a"), iso_date=key, duration=by_day.get(key, 0.0)
                )
            )
        return stats

    def get_totals(self) -> dict[str, Any]:
        """All-time counters."""
        with sqlite3.connect(self.db_path) as conn:
            pomodoros, focus_seconds = conn.execute(
                """
                SELECT COUNT(*), COALESCE(SUM(duration_seconds), 0)
                FROM focus_events WHERE kind = ?
                """,
                (EVENT_FOCUS,),
            ).fetchone()
            breaks = conn.execute(
                "SELECT COUNT(*) FROM focus_events WHERE kind = ?",
                (EVENT_BREAK,),
            ).fetchone()[0]

        return {
            "total_pomodoros": pomodoros,
            "total_breaks": breaks,
            "total_focus_seconds": focus_seconds,
        }

    def get_daily_summary(self, day: date | None = None) -> dict[str, Any]:
        """
        Get summary for a specific day.

        Args:
            day: Day to summarise, defaults to today

        Returns:
            Daily summary statistics
        """
        key = (day or date.today()).isoformat()

        with sqlite3.connect(self.db_path) as conn:
            pomodoros, focus_seconds = conn.execute(
                """
                SELECT COUNT(*), COALESCE(SUM(duration_seconds), 0)
                FROM focus_events WHERE day = ? AND kind = ?
                """,
                (key, EVENT_FOCUS),
            ).fetchone()
            breaks = conn.execute(
                "SELECT COUNT(*) FROM focus_events WHERE day = ? AND kind = ?",
                (key, EVENT_BREAK),
            ).fetchone()[0]

        return {
            "date": key,
            "pomodoros": pomodoros,
            "breaks": breaks,
            "focus_seconds": focus_seconds,
        }

    def delete_old_events(self, days: int = 365, today: date | None = None) -> int:
        """
        Delete rows older than N days.

        Returns:
            Number of rows deleted
        """
        cutoff = ((today or date.today()) - timedelta(days=days)).isoformat()

        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM focus_events WHERE day < ?", (cutoff,))
            conn.commit()
            return cursor.rowcount
