"""Pomus CLI domain models.

Pydantic models for configuration and tasks; the timer engine lives in the
``focus`` subpackage.
"""

from .config_models import AppConfig, Mode, NotificationConfig, OutputConfig, TimerSettings
from .task import PomodoroTask

__all__ = [
    "AppConfig",
    "Mode",
    "NotificationConfig",
    "OutputConfig",
    "TimerSettings",
    "PomodoroTask",
]
