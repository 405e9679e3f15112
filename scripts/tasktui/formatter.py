"""Turn Task records into display rows."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Any

from tasktui.providers import TASK_PRIORITY_TO_STRING, TASK_STATUS_TO_STRING, Task

COLUMN_ID = "id"
COLUMN_TITLE = "title"
COLUMN_STATUS = "status"
COLUMN_PRIORITY = "priority"
COLUMN_CREATED = "created"
COLUMN_DUE_DATE = "due_date"
COLUMN_NOTES = "notes"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
NOTE_SEPARATOR = "\n"
UNKNOWN_LABEL = "unknown"
RELATIVE_CUTOFF = timedelta(hours=24)


@dataclass(frozen=True)
class Cell:
    """One rendered value.

    danger marks the cell for the emphasis color; sort_value is the typed
    value used for column-aware sorting.
    """

    text: str
    danger: bool = False
    sort_value: Any = None


DisplayRow = Mapping[str, Cell]


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_relative(then: datetime, now: datetime) -> str:
    """Format the distance between two timestamps as 'in 3 hours' / '2 days ago'."""
    delta = then - now
    future = delta > timedelta(0)
    total_seconds = abs(int(delta.total_seconds()))

    if total_seconds < 60:
        return "in less than a minute" if future else "just now"
    if total_seconds < 3600:
        phrase = _plural(total_seconds // 60, "minute")
    elif total_seconds < 86400:
        phrase = _plural(total_seconds // 3600, "hour")
    elif total_seconds < 30 * 86400:
        phrase = _plural(total_seconds // 86400, "day")
    elif total_seconds < 365 * 86400:
        phrase = _plural(total_seconds // (30 * 86400), "month")
    else:
        phrase = _plural(total_seconds // (365 * 86400), "year")

    return f"in {phrase}" if future else f"{phrase} ago"


def format_due(due: datetime | None, now: datetime) -> Cell:
    """Render a due timestamp. Anything at or before now is overdue."""
    if due is None:
        return Cell("")

    if due > now:
        if due - now < RELATIVE_CUTOFF:
            return Cell(format_relative(due, now), sort_value=due)
        return Cell(due.strftime(TIMESTAMP_FORMAT), sort_value=due)

    return Cell(format_relative(due, now), danger=True, sort_value=due)


def format_task(task: Task, now: datetime) -> DisplayRow:
    """Build the display row for a task as of ``now``."""
    return MappingProxyType({
        COLUMN_ID: Cell(str(task.id), sort_value=task.id),
        COLUMN_TITLE: Cell(task.title),
        COLUMN_STATUS: Cell(TASK_STATUS_TO_STRING.get(task.status, UNKNOWN_LABEL)),
        COLUMN_PRIORITY: Cell(TASK_PRIORITY_TO_STRING.get(task.priority, UNKNOWN_LABEL)),
        COLUMN_CREATED: Cell(
            task.created_at.strftime(TIMESTAMP_FORMAT), sort_value=task.created_at
        ),
        COLUMN_DUE_DATE: format_due(task.due, now),
        COLUMN_NOTES: Cell(NOTE_SEPARATOR.join(task.notes)),
    })


def format_tasks(tasks: Iterable[Task], now: datetime) -> list[DisplayRow]:
    return [format_task(task, now) for task in tasks]
