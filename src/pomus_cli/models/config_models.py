"""Configuration models for Pomus CLI.

Settings are read by the session controller but not owned by it: a change only
affects sessions started after it.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Mode = Literal["focus", "short_break", "long_break"]


class TimerSettings(BaseModel):
    """Durations and cycle rules for the pomodoro timer."""

    focus_minutes: int = Field(default=25, ge=5, le=240)
    short_break_minutes: int = Field(default=5, ge=1, le=30)
    long_break_minutes: int = Field(default=15, ge=10, le=45)
    sessions_before_long_break: int = Field(default=4, ge=2, le=8)
    continuous_mode: bool = Field(
        default=False, description="Start the next session as soon as one ends"
    )

    def duration_for(self, mode: Mode) -> float:
        """Configured duration of *mode* in seconds."""
        if mode == "focus":
            return self.focus_minutes * 60.0
        if mode == "short_break":
            return self.short_break_minutes * 60.0
        return self.long_break_minutes * 60.0


class NotificationConfig(BaseModel):
    """Completion alert configuration."""

    enabled: bool = Field(default=True)
    bell: bool = Field(default=True, description="Ring the terminal bell")


class OutputConfig(BaseModel):
    """Output configuration."""

    color: bool = Field(default=True)
    icons: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main Pomus configuration."""

    timer: TimerSettings = Field(default_factory=TimerSettings)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
