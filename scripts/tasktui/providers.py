"""
Task entities and the storage protocol consumed by the TUI.

Protocols define the interface; implementations can be swapped
for testing or alternative data sources.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Protocol


class TaskStatus(IntEnum):
    TODO = 1
    DOING = 2
    DONE = 3


class TaskPriority(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3


TASK_STATUS_TO_STRING: dict[int, str] = {
    TaskStatus.TODO: "todo",
    TaskStatus.DOING: "doing",
    TaskStatus.DONE: "done",
}

TASK_PRIORITY_TO_STRING: dict[int, str] = {
    TaskPriority.LOW: "low",
    TaskPriority.MEDIUM: "medium",
    TaskPriority.HIGH: "high",
}


class StorageError(Exception):
    """Raised when the task store cannot be opened or read."""


@dataclass(frozen=True)
class Task:
    """Immutable snapshot of a stored task.

    status and priority are kept as plain ints so a record holding a value
    outside the known enums can still be loaded and displayed.
    """

    id: int
    title: str
    status: int
    priority: int
    created_at: datetime
    due: datetime | None = None
    notes: tuple[str, ...] = ()


@dataclass(frozen=True)
class TaskFilters:
    """Listing filter. None means no restriction."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None


class TaskRepository(Protocol):
    """Protocol for reading tasks."""

    def list_tasks_with_filters(self, filters: TaskFilters) -> list[Task]:
        """List tasks ordered by id. Raises StorageError on failure."""
        ...
