"""
SQLite implementation of the task repository.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from tasktui.providers import StorageError, Task, TaskFilters, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    title       TEXT    NOT NULL,
    status      INTEGER NOT NULL,
    priority    INTEGER NOT NULL,
    created_at  TEXT    NOT NULL,
    due         TEXT,
    notes       TEXT    NOT NULL DEFAULT '[]'
)
"""


def _parse_datetime(s: str | None) -> datetime | None:
    """Parse a stored ISO timestamp into naive local time."""
    if not s:
        return None
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def _task_from_row(row: sqlite3.Row) -> Task:
    try:
        notes = json.loads(row["notes"] or "[]")
        created_at = _parse_datetime(row["created_at"])
        if created_at is None:
            raise ValueError("missing created_at")
        return Task(
            id=int(row["id"]),
            title=row["title"],
            status=int(row["status"]),
            priority=int(row["priority"]),
            created_at=created_at,
            due=_parse_datetime(row["due"]),
            notes=tuple(str(note) for note in notes),
        )
    except (ValueError, TypeError) as e:
        raise StorageError(f"malformed task row id={row['id']}: {e}") from e


class TaskStore:
    """Task repository backed by one SQLite file.

    The connection is opened explicitly with open() and released with
    close(); the store also works as a context manager.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def open(self) -> TaskStore:
        if self._conn is not None:
            return self
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self._db_path))
            conn.row_factory = sqlite3.Row
            conn.execute(_SCHEMA)
            conn.commit()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"failed to open task database {self._db_path}: {e}") from e
        self._conn = conn
        logger.info("TaskStore ready db=%s", self._db_path)
        return self

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug("TaskStore closed db=%s", self._db_path)

    def __enter__(self) -> TaskStore:
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError("task store is not open")
        return self._conn

    # ---- reads ----

    def list_tasks_with_filters(self, filters: TaskFilters) -> list[Task]:
        conn = self._require_conn()

        clauses: list[str] = []
        params: list[Any] = []
        if filters.status is not None:
            clauses.append("status = ?")
            params.append(int(filters.status))
        if filters.priority is not None:
            clauses.append("priority = ?")
            params.append(int(filters.priority))

        sql = "SELECT * FROM tasks"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY id"

        try:
            rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"failed to list tasks: {e}") from e

        tasks = [_task_from_row(row) for row in rows]
        logger.debug("Listed %d task(s) filters=%s", len(tasks), filters)
        return tasks

    # ---- writes ----

    def create_task(
        self,
        title: str,
        *,
        status: TaskStatus = TaskStatus.TODO,
        priority: TaskPriority = TaskPriority.LOW,
        due: datetime | None = None,
        notes: tuple[str, ...] | list[str] = (),
        created_at: datetime | None = None,
    ) -> Task:
        """Insert a task and return it as stored."""
        conn = self._require_conn()
        created_at = created_at or datetime.now()
        try:
            with conn:
                cur = conn.execute(
                    "INSERT INTO tasks (title, status, priority, created_at, due, notes) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        title,
                        int(status),
                        int(priority),
                        created_at.isoformat(),
                        due.isoformat() if due else None,
                        json.dumps(list(notes)),
                    ),
                )
        except sqlite3.Error as e:
            raise StorageError(f"failed to create task: {e}") from e

        return Task(
            id=int(cur.lastrowid),
            title=title,
            status=int(status),
            priority=int(priority),
            created_at=created_at,
            due=due,
            notes=tuple(notes),
        )
