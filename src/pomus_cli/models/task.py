"""Task data models."""

from datetime import date
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class PomodoroTask(BaseModel):
    """A single entry of the to-do list worked through with the timer.

    Attributes:
        id: Unique identifier (hex UUID)
        text: What the task is about
        due_date: Optional due day
        is_completed: Whether the task has been checked off
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    text: str = Field(min_length=1)
    due_date: Optional[date] = None
    is_completed: bool = False

    @property
    def short_id(self) -> str:
        return self.id[:8]
