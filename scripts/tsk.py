#!/usr/bin/env python3
"""
tsk - interactive task table

Reads tasks from the local task database and shows them as a sortable table.

Usage:
    tsk.py                      Launch interactive TUI
    tsk.py --once               Print the table once and exit (no TUI)
    tsk.py --json               Print the rows as JSON and exit
    tsk.py --sort due_date      Initial sort column (add --desc to reverse)

Keys:
    j / down / s    next row
    k / up / w      previous row
    h               toggle header
    q / ctrl+c      quit

Requirements:
    pip install textual
"""

import argparse
import json
import logging
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from rich.console import Console  # noqa: E402

from tasktui.config import Settings, parse_log_level  # noqa: E402
from tasktui.controller import StartupError, TaskListController  # noqa: E402
from tasktui.logging_setup import setup_logging  # noqa: E402
from tasktui.providers import StorageError  # noqa: E402
from tasktui.table import TASK_COLUMNS  # noqa: E402
from tasktui.task_store import TaskStore  # noqa: E402

logger = logging.getLogger("tsk")


def print_table_once(controller: TaskListController) -> int:
    """Print the rendered table and exit."""
    console = Console(highlight=False)
    console.print(controller.render(), soft_wrap=True)
    return 0


def print_rows_json(controller: TaskListController) -> int:
    """Print the displayed rows as JSON and exit."""
    output = [
        {
            **{key: cell.text for key, cell in row.items()},
            "overdue": row["due_date"].danger,
        }
        for row in controller.table.rows
    ]
    print(json.dumps(output, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="tsk task table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db",
        type=Path,
        help="Path to the task database (default: $TSK_DB_PATH or ~/.tsk/tsk.sqlite3)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--once",
        action="store_true",
        help="Print the table once and exit (no TUI)",
    )
    mode.add_argument(
        "--json",
        action="store_true",
        help="Print the rows as JSON and exit",
    )
    parser.add_argument(
        "--sort",
        choices=[column.key for column in TASK_COLUMNS],
        help="Initial sort column (default: id)",
    )
    parser.add_argument(
        "--desc",
        action="store_true",
        help="Sort descending",
    )
    parser.add_argument(
        "--log-level",
        help="Console log level (default: $TSK_LOG_LEVEL or WARNING)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    console_level = parse_log_level(args.log_level) if args.log_level else settings.log_level
    try:
        setup_logging(log_dir=settings.log_dir, console_level=console_level)
    except OSError as e:
        print(f"tsk: cannot write logs to {settings.log_dir}: {e}", file=sys.stderr)
        return 1

    store = TaskStore(args.db or settings.db_path)
    try:
        try:
            store.open()
        except StorageError as e:
            logger.critical("failed to connect to task database: %s", e)
            return 1

        try:
            controller = TaskListController(store)
        except StartupError as e:
            logger.critical("%s", e)
            return 1

        if args.sort or args.desc:
            controller.table.set_sort(args.sort or "id", ascending=not args.desc)

        if args.json:
            return print_rows_json(controller)

        if args.once:
            return print_table_once(controller)

        from tasktui.app import run

        return run(controller)
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
