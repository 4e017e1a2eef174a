from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from threading import RLock
from typing import Dict, Iterable, List, Optional

from .models import Task
from .settings import get_settings

logger = logging.getLogger(__name__)


class SortOrder(str, Enum):
    """Secondary ordering of task lists; important tasks always come first."""

    BY_NAME = "by_name"
    BY_DATE_CREATED = "by_date_created"


@dataclass(frozen=True)
class TaskQuery:
    """
    Query parameters for listing tasks.
    """
    search: str = ""
    sort_order: SortOrder = SortOrder.BY_DATE_CREATED
    hide_completed: bool = False


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for task storage backends."""

    @abstractmethod
    def insert(self, task: Task) -> Task:
        """
        Persist an unsaved task and return it with its assigned id.
        Raises ValueError if the task already has an id.
        """

    @abstractmethod
    def get(self, task_id: int) -> Optional[Task]:
        """Return a Task by id, or None if not found."""

    @abstractmethod
    def update(self, task: Task) -> Optional[Task]:
        """
        Replace name/important/completed of the stored task with the same id.
        The stored creation time is kept. Return the stored value or None if not found.
        """

    @abstractmethod
    def delete(self, task_id: int) -> bool:
        """Delete a Task by id. Return True if deleted, False if not found."""

    @abstractmethod
    def list(self, query: Optional[TaskQuery] = None) -> List[Task]:
        """
        Return tasks matching the query:
        - Case-insensitive substring search on name
        - Optionally drop completed tasks
        - Important tasks first, then by name or creation time, ties by id
        """

    @abstractmethod
    def delete_completed(self) -> int:
        """Delete every completed task and return how many were removed."""


def _require_unsaved(task: Task) -> None:
    if task.is_persisted:
        raise ValueError(f"task already has id {task.id}; use update() instead")


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[int, Task] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def insert(self, task: Task) -> Task:
        _require_unsaved(task)
        with self._lock:
            stored = Task(
                name=task.name,
                important=task.important,
                completed=task.completed,
                created=task.created,
                id=self._allocate_id(),
            )
            self._items[stored.id] = stored
        logger.info("Inserted task id=%s", stored.id)
        return stored

    def get(self, task_id: int) -> Optional[Task]:
        with self._lock:
            return self._items.get(task_id)

    def update(self, task: Task) -> Optional[Task]:
        with self._lock:
            existing = self._items.get(task.id)
            if existing is None:
                return None
            updated = existing.with_changes(
                name=task.name,
                important=task.important,
                completed=task.completed,
            )
            self._items[task.id] = updated
        logger.info("Updated task id=%s", task.id)
        return updated

    def delete(self, task_id: int) -> bool:
        with self._lock:
            removed = self._items.pop(task_id, None) is not None
        if removed:
            logger.info("Deleted task id=%s", task_id)
        return removed

    def list(self, query: Optional[TaskQuery] = None) -> List[Task]:
        q = query or TaskQuery()
        with self._lock:
            items: Iterable[Task] = list(self._items.values())

        if q.hide_completed:
            items = [t for t in items if not t.completed]

        if q.search:
            s = q.search.casefold()
            items = [t for t in items if s in t.name.casefold()]

        if q.sort_order == SortOrder.BY_NAME:
            result = sorted(items, key=lambda t: (not t.important, t.name, t.id))
        else:
            result = sorted(items, key=lambda t: (not t.important, t.created, t.id))
        logger.debug("Listed %d tasks for %r", len(result), q)
        return result

    def delete_completed(self) -> int:
        with self._lock:
            done = [tid for tid, t in self._items.items() if t.completed]
            for tid in done:
                del self._items[tid]
        logger.info("Deleted %d completed tasks", len(done))
        return len(done)


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the configured repository, built once per process.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository at SQLITE_DB_PATH
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        return SQLiteRepository(settings.sqlite_db_path)
    return InMemoryRepository()
