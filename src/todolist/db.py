from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, List, Optional

from .models import Task
from .repositories import Repository, SortOrder, TaskQuery, _require_unsaved

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class TaskTable:
    """
    Storage schema for Task rows: table name and column names.

    `id` is the auto-generated primary key; the other columns map one-to-one
    onto the stored Task fields. The derived formatted date has no column.
    """
    table: str = "task_table"
    id: str = "id"
    name: str = "name"
    important: str = "important"
    completed: str = "completed"
    created: str = "created"

    def create_sql(self) -> str:
        return f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                {self.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                {self.name} TEXT NOT NULL,
                {self.important} INTEGER NOT NULL DEFAULT 0,
                {self.completed} INTEGER NOT NULL DEFAULT 0,
                {self.created} INTEGER NOT NULL
            )
            """


_COLS = TaskTable()


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()
        logger.info("SQLite task store ready db=%s", db_path)

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(_COLS.create_sql())
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_completed ON {_COLS.table}({_COLS.completed})"
            )

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        return Task(
            name=str(row[_COLS.name]),
            important=bool(row[_COLS.important]),
            completed=bool(row[_COLS.completed]),
            created=int(row[_COLS.created]),
            id=int(row[_COLS.id]),
        )

    def _select_one(self, conn: sqlite3.Connection, task_id: int) -> Optional[Task]:
        row = conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,)).fetchone()
        return self._row_to_task(row) if row else None

    def insert(self, task: Task) -> Task:
        _require_unsaved(task)
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.name}, {_COLS.important}, {_COLS.completed}, {_COLS.created})
                VALUES (?, ?, ?, ?)
                """,
                (task.name, 1 if task.important else 0, 1 if task.completed else 0, task.created),
            )
            stored = self._select_one(conn, cur.lastrowid)
            assert stored is not None
        logger.info("Inserted task id=%s", stored.id)
        return stored

    def get(self, task_id: int) -> Optional[Task]:
        with self._conn() as conn:
            return self._select_one(conn, task_id)

    def update(self, task: Task) -> Optional[Task]:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.name} = ?, {_COLS.important} = ?, {_COLS.completed} = ?
                WHERE {_COLS.id} = ?
                """,
                (task.name, 1 if task.important else 0, 1 if task.completed else 0, task.id),
            )
            if cur.rowcount == 0:
                return None
            stored = self._select_one(conn, task.id)
        logger.info("Updated task id=%s", task.id)
        return stored

    def delete(self, task_id: int) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,))
            removed = cur.rowcount > 0
        if removed:
            logger.info("Deleted task id=%s", task_id)
        return removed

    def list(self, query: Optional[TaskQuery] = None) -> List[Task]:
        q = query or TaskQuery()
        clauses = []
        params: list = []

        if q.hide_completed:
            clauses.append(f"{_COLS.completed} = 0")

        if q.search:
            clauses.append(f"casefold({_COLS.name}) LIKE ? ESCAPE '\\'")
            escaped = q.search.casefold().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            params.append(f"%{escaped}%")

        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        secondary = _COLS.name if q.sort_order == SortOrder.BY_NAME else _COLS.created
        order_sql = f"ORDER BY {_COLS.important} DESC, {secondary} ASC, {_COLS.id} ASC"

        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} {where_sql} {order_sql}", params
            ).fetchall()
        result = [self._row_to_task(r) for r in rows]
        logger.debug("Listed %d tasks for %r", len(result), q)
        return result

    def delete_completed(self) -> int:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.completed} = 1")
            count = cur.rowcount
        logger.info("Deleted %d completed tasks", count)
        return count
