"""Task service - Business logic for the pomodoro task list.

Tasks live in one JSON file split into a pending list (user ordered) and a
completed list (most recently completed first), plus an all-time counter of
completed tasks.
"""

from __future__ import annotations

import json
import os
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from pomus_cli.models.task import PomodoroTask


class TaskNotFoundError(LookupError):
    """Raised when a task reference matches no task."""


class AmbiguousTaskError(LookupError):
    """Raised when a task ID prefix matches more than one task."""


class TaskService:
    """Service for task business logic."""

    def __init__(self, tasks_path: Path):
        """Initialize the task service.

        Args:
            tasks_path: JSON file holding the task list
        """
        self.tasks_path = tasks_path
        self.pending: list[PomodoroTask] = []
        self.completed: list[PomodoroTask] = []
        self.total_completed = 0
        self._load()

    def _load(self) -> None:
        if not self.tasks_path.exists():
            return
        try:
            with open(self.tasks_path, encoding="utf-8") as f:
                data = json.load(f)
            self.pending = [PomodoroTask.model_validate(t) for t in data.get("pending", [])]
            self.completed = [PomodoroTask.model_validate(t) for t in data.get("completed", [])]
            self.total_completed = int(data.get("total_completed", 0))
        except (json.JSONDecodeError, ValidationError, TypeError, ValueError) as e:
            raise RuntimeError(f"Failed to load tasks: {e}") from e

    def _save(self) -> None:
        self.tasks_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "pending": [t.model_dump(mode="json") for t in self.pending],
            "completed": [t.model_dump(mode="json") for t in self.completed],
            "total_completed": self.total_completed,
        }
        tmp_file = self.tasks_path.with_suffix(".json.tmp")
        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_file, self.tasks_path)

    def find(self, ref: str) -> PomodoroTask:
        """Find a task by full ID or unique ID prefix.

        Raises:
            TaskNotFoundError: No task matches
            AmbiguousTaskError: The prefix matches several tasks
        """
        matches = [t for t in self.pending + self.completed if t.id.startswith(ref)]
        if not matches:
            raise TaskNotFoundError(ref)
        exact = [t for t in matches if t.id == ref]
        if exact:
            return exact[0]
        if len(matches) > 1:
            raise AmbiguousTaskError(ref)
        return matches[0]

    def add_task(self, text: str, due_date: date | None = None) -> PomodoroTask:
        task = PomodoroTask(text=text, due_date=due_date)
        self.pending.append(task)
        self._save()
        return task

    def update_task(
        self, ref: str, text: str | None = None, due_date: date | None = None
    ) -> PomodoroTask:
        """Change the text and/or due date of a pending or completed task."""
        task = self.find(ref)
        if text is not None:
            task.text = text
        if due_date is not None:
            task.due_date = due_date
        self._save()
        return task

    def toggle_completion(self, ref: str) -> PomodoroTask:
        """Check a pending task off, or move a completed one back to pending.

        Newly completed tasks go to the top of the completed list; reopened
        tasks go to the bottom of the pending list.
        """
        task = self.find(ref)
        if task.is_completed:
            self.completed.remove(task)
            task.is_completed = False
            self.pending.append(task)
            self.total_completed = max(0, self.total_completed - 1)
        else:
            self.pending.remove(task)
            task.is_completed = True
            self.completed.insert(0, task)
            self.total_completed += 1
        self._save()
        return task

    def delete_task(self, ref: str) -> PomodoroTask:
        task = self.find(ref)
        if task.is_completed:
            self.completed.remove(task)
            self.total_completed = max(0, self.total_completed - 1)
        else:
            self.pending.remove(task)
        self._save()
        return task

    def move_pending_task(self, ref: str, position: int) -> PomodoroTask:
        """Move a pending task to 1-based *position* (clamped to the list)."""
        task = self.find(ref)
        if task.is_completed:
            raise ValueError("Only pending tasks can be reordered")
        self.pending.remove(task)
        index = min(max(position - 1, 0), len(self.pending))
        self.pending.insert(index, task)
        self._save()
        return task

    def clear_completed(self) -> int:
        """Drop the completed list; the all-time counter is kept."""
        removed = len(self.completed)
        self.completed = []
        self._save()
        return removed

    def list_tasks(self, status: str = "pending") -> list[PomodoroTask]:
        """List tasks: ``pending``, ``completed`` or ``all``."""
        if status == "pending":
            return list(self.pending)
        if status == "completed":
            return list(self.completed)
        if status == "all":
            return self.pending + self.completed
        raise ValueError(f"Unknown status: {status}")
