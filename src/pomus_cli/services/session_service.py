"""Session service - wires the timer engine to the user's files.

Every CLI invocation is a fresh process, so each one builds its own controller
here and runs recovery before touching the timer. Nothing is kept in a
module-level singleton.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from pomus_cli.models.focus.controller import SessionController
from pomus_cli.models.focus.history import StatisticsRecorder
from pomus_cli.models.focus.notifications import (
    LoggingNotificationScheduler,
    NotificationScheduler,
    ThreadedNotificationScheduler,
)
from pomus_cli.models.focus.publication import PublicationSink
from pomus_cli.models.focus.recovery import RecoveryEngine, RecoveryResult
from pomus_cli.models.focus.state import SnapshotStore, now_local
from pomus_cli.models.focus.ticker import start_ticker
from pomus_cli.services.config_service import ConfigService, get_config_service
from pomus_cli.services.task_service import TaskService
from pomus_cli.utils.logger import get_component_logger


def get_snapshot_store(config_service: ConfigService | None = None) -> SnapshotStore:
    config_service = config_service or get_config_service()
    return SnapshotStore(config_service.state_dir)


def get_publication_sink(
    config_service: ConfigService | None = None,
    clock: Callable[[], datetime] = now_local,
) -> PublicationSink:
    config_service = config_service or get_config_service()
    return PublicationSink(
        config_service.shared_dir,
        clock=clock,
        logger=get_component_logger("publication"),
    )


def get_statistics_recorder(config_service: ConfigService | None = None) -> StatisticsRecorder:
    config_service = config_service or get_config_service()
    return StatisticsRecorder(config_service.history_db_path)


def get_task_service(config_service: ConfigService | None = None) -> TaskService:
    config_service = config_service or get_config_service()
    return TaskService(config_service.tasks_path)


def create_notifier(
    config_service: ConfigService,
    deliver: Callable[[str, str], None] | None = None,
    clock: Callable[[], datetime] = now_local,
) -> NotificationScheduler | None:
    """In-process alerts when someone is watching, a log line otherwise."""
    if not config_service.config.notifications.enabled:
        return None
    logger = get_component_logger("notifications")
    if deliver is not None:
        return ThreadedNotificationScheduler(deliver, clock=clock, logger=logger)
    return LoggingNotificationScheduler(logger)


def create_session_controller(
    *,
    config_service: ConfigService | None = None,
    deliver: Callable[[str, str], None] | None = None,
    interactive: bool = False,
    clock: Callable[[], datetime] = now_local,
) -> tuple[SessionController, RecoveryResult]:
    """Build a controller for this process and recover the last session.

    Args:
        config_service: Source of settings and file locations
        deliver: Receives (title, body) of completion alerts in-process
        interactive: Start the one-second tick; one-shot commands leave it off
            because the next launch recovers the session anyway
        clock: Wall clock, injectable for tests

    Returns:
        The controller and what recovery did
    """
    config_service = config_service or get_config_service()
    store = get_snapshot_store(config_service)
    engine = RecoveryEngine(store, clock=clock, logger=get_component_logger("recovery"))

    controller = SessionController(
        config_service.timer_settings,
        snapshot_store=store,
        publisher=get_publication_sink(config_service, clock=clock),
        notifier=create_notifier(config_service, deliver, clock=clock),
        statistics=get_statistics_recorder(config_service),
        ticker_factory=start_ticker if interactive else None,
        clock=clock,
        logger=get_component_logger("timer"),
        reload=engine.recover if interactive else None,
    )
    result = engine.recover(controller)
    return controller, result
