"""Services module for Pomus CLI - configuration, tasks and session wiring."""

from .config_service import ConfigService, get_config_service
from .session_service import create_session_controller
from .task_service import AmbiguousTaskError, TaskNotFoundError, TaskService

__all__ = [
    "ConfigService",
    "get_config_service",
    "create_session_controller",
    "TaskService",
    "TaskNotFoundError",
    "AmbiguousTaskError",
]
