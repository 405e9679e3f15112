"""
Application controller: loads the task snapshot once and applies key events.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from enum import Enum

from rich.text import Text

from tasktui.formatter import format_tasks
from tasktui.keys import Action, resolve
from tasktui.providers import StorageError, TaskFilters, TaskRepository
from tasktui.table import DEFAULT_STYLE, TASK_COLUMNS, Column, TableStyle, TableView

logger = logging.getLogger(__name__)


class StartupError(Exception):
    """The initial task snapshot could not be loaded."""


class ControllerState(Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


class TaskListController:
    """Owns the table view and the storage handle.

    Construction performs the startup fetch; a controller only exists in
    RUNNING or TERMINATED state. The snapshot is never refreshed; the
    repository handle is held for the session but not read again.
    """

    def __init__(
        self,
        repository: TaskRepository,
        *,
        columns: Sequence[Column] = TASK_COLUMNS,
        style: TableStyle = DEFAULT_STYLE,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._repository = repository

        try:
            tasks = repository.list_tasks_with_filters(TaskFilters())
        except StorageError as e:
            raise StartupError(f"failed to list tasks: {e}") from e

        rows = format_tasks(tasks, clock())
        self.table = TableView(columns, rows, style=style)
        self.state = ControllerState.RUNNING
        logger.info("Loaded %d task(s)", len(rows))

    @property
    def terminated(self) -> bool:
        return self.state is ControllerState.TERMINATED

    def dispatch(self, key: str) -> Action:
        """Apply one key event and return the action it maps to."""
        if self.terminated:
            return Action.UNHANDLED

        self.table.handle_key(key)

        action = resolve(key)
        if action is Action.QUIT:
            logger.debug("Quit requested via %r", key)
            self.state = ControllerState.TERMINATED
        elif action is Action.TOGGLE_HEADER:
            self.table.toggle_header_visibility()
        return action

    def render(self) -> Text:
        return self.table.render()
