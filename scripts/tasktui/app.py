"""
tsk TUI Application.

Textual host for the task table. Every key in the key map is routed to the
controller; the frame is redrawn after each event.
"""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from tasktui.controller import TaskListController
from tasktui.keys import KEYMAP

logger = logging.getLogger(__name__)


class TaskTableApp(App[int]):
    """Main tsk TUI application."""

    TITLE = "tsk"

    CSS = """
    Screen {
        background: $surface;
    }

    #task-table {
        width: auto;
        height: auto;
    }
    """

    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding(key, f"dispatch({key!r})", show=False, priority=True)
        for key in KEYMAP
    ]

    def __init__(self, controller: TaskListController, **kwargs) -> None:
        super().__init__(**kwargs)
        self._controller = controller

    def compose(self) -> ComposeResult:
        yield Static(self._controller.render(), id="task-table")

    def action_dispatch(self, key: str) -> None:
        """Feed one key to the controller and redraw."""
        self._controller.dispatch(key)
        if self._controller.terminated:
            self.exit(0)
            return
        self.query_one("#task-table", Static).update(self._controller.render())


def run(controller: TaskListController) -> int:
    """Run the TUI application until the user quits."""
    app = TaskTableApp(controller)
    app.run()
    logger.info("TUI exited")
    return app.return_code or 0
