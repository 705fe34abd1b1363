"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real platform directories and
from the wall clock: time is a ``FakeClock`` advanced by hand, and tickers
are recorded instead of running on a thread.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from pomus_cli.models.config_models import TimerSettings
from pomus_cli.models.focus.controller import SessionController
from pomus_cli.models.focus.history import StatisticsRecorder
from pomus_cli.models.focus.publication import PublicationSink
from pomus_cli.models.focus.state import SnapshotStore

T0 = datetime(2025, 3, 10, 9, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


class FakeTicker:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False
        self.joined = False

    @property
    def is_active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        self.cancelled = True

    def join(self, timeout=None) -> None:
        self.joined = True

    def fire(self, now: datetime) -> None:
        """Deliver one tick the way the ticker thread would."""
        self.callback(now)


class RecordingTickerFactory:
    def __init__(self):
        self.tickers: list[FakeTicker] = []

    def __call__(self, callback) -> FakeTicker:
        ticker = FakeTicker(callback)
        self.tickers.append(ticker)
        return ticker

    @property
    def active(self) -> list[FakeTicker]:
        return [t for t in self.tickers if t.is_active]


class RecordingNotifier:
    def __init__(self):
        self.scheduled: list[tuple[datetime, str, str]] = []
        self.cancel_count = 0
        self.pending: tuple[datetime, str, str] | None = None

    def schedule(self, at, title, body) -> None:
        self.scheduled.append((at, title, body))
        self.pending = (at, title, body)

    def cancel(self) -> None:
        self.cancel_count += 1
        self.pending = None


# ---------------------------------------------------------------------------
# Timer engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def tickers() -> RecordingTickerFactory:
    return RecordingTickerFactory()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def settings() -> TimerSettings:
    return TimerSettings()


@pytest.fixture()
def snapshot_store(tmp_path) -> SnapshotStore:
    return SnapshotStore(tmp_path / "state")


@pytest.fixture()
def publisher(tmp_path, clock) -> PublicationSink:
    return PublicationSink(tmp_path / "shared", clock=clock)


@pytest.fixture()
def statistics(tmp_path) -> StatisticsRecorder:
    return StatisticsRecorder(tmp_path / "focus_history.db")


@pytest.fixture()
def make_controller(settings, snapshot_store, publisher, notifier, statistics, tickers, clock):
    """Factory building controllers that share the same stores and clock.

    Two controllers built from it behave like two launches of the app.
    """

    def _make(timer_settings: TimerSettings = settings, **overrides) -> SessionController:
        kwargs = dict(
            snapshot_store=snapshot_store,
            publisher=publisher,
            notifier=notifier,
            statistics=statistics,
            ticker_factory=tickers,
            clock=clock,
        )
        kwargs.update(overrides)
        return SessionController(timer_settings, **kwargs)

    return _make


@pytest.fixture()
def controller(make_controller) -> SessionController:
    return make_controller()


# ---------------------------------------------------------------------------
# Config isolation helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance,
    and every command sees the same service.
    """
    from pomus_cli.services.config_service import ConfigService, get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("pomus_cli.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("pomus_cli.services.config_service.user_data_dir", return_value=tmpdir):
            svc = get_config_service()
            assert isinstance(svc, ConfigService)
            yield svc
    get_config_service.cache_clear()


def _reset_app_logger(logger_mod) -> None:
    app_logger = logging.getLogger("pomus_cli")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    logger_mod._logger = None


@pytest.fixture(autouse=True)
def isolate_log_dir(tmp_path, monkeypatch):
    """Keep the rotating log file out of the real user log dir.

    Every test starts and ends without an application logger, so a handler
    opened on one test's tmp dir never receives another test's records.
    """
    import pomus_cli.utils.logger as logger_mod

    monkeypatch.setattr(logger_mod, "user_log_dir", lambda app_name: str(tmp_path / "logs"))
    _reset_app_logger(logger_mod)
    yield
    _reset_app_logger(logger_mod)
