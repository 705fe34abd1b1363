"""Pomus - a terminal pomodoro timer that survives being closed."""

__version__ = "0.3.0"
