from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from threading import RLock
from typing import Any, Dict, List

from fastapi import Request

from .errors import TaskNotFoundError
from .models import TaskEntity, seed_tasks
from .schemas import TaskCreate, TaskUpdate
from .settings import Settings
from .utils import compute_stats

logger = logging.getLogger(__name__)


def _next_id(tasks: List[TaskEntity]) -> int:
    return max((t["id"] for t in tasks), default=0) + 1


def _index_of(tasks: List[TaskEntity], task_id: int) -> int:
    for i, t in enumerate(tasks):
        if t["id"] == task_id:
            return i
    raise TaskNotFoundError(task_id)


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Task store contract.

    Every operation runs one read -> mutate -> write cycle under the
    repository lock, so a mutation is committed only once _write_all returns.
    Backends supply _read_all/_write_all; _read_all must return fresh copies.
    """

    def __init__(self) -> None:
        self._lock = RLock()

    @abstractmethod
    def _read_all(self) -> List[TaskEntity]:
        """Return the full persisted collection, oldest first."""

    @abstractmethod
    def _write_all(self, tasks: List[TaskEntity]) -> None:
        """Persist the full collection, replacing what was stored."""

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def list(self) -> List[TaskEntity]:
        """Return every task in insertion order."""
        with self._lock:
            return self._read_all()

    def get(self, task_id: int) -> TaskEntity:
        """Return one task; raise TaskNotFoundError if absent."""
        with self._lock:
            tasks = self._read_all()
            return tasks[_index_of(tasks, task_id)]

    def create(self, data: TaskCreate) -> TaskEntity:
        """Append a new pending task with the next free id and return it."""
        with self._lock:
            tasks = self._read_all()
            entity: TaskEntity = {
                "id": _next_id(tasks),
                "title": data.title,
                "category": data.category,
                "priority": data.priority,
                "due_date": data.due_date,
                "completed": False,
                "created_at": self._now(),
            }
            tasks.append(entity)
            self._write_all(tasks)
        logger.info("Created task id=%s", entity["id"])
        return entity.copy()

    def update(self, task_id: int, data: TaskUpdate) -> TaskEntity:
        """Merge the provided patch fields over a task and return the result."""
        with self._lock:
            tasks = self._read_all()
            i = _index_of(tasks, task_id)

            # Update only provided fields
            updated = tasks[i].copy()
            changes: Dict[str, Any] = data.model_dump(exclude_unset=True)
            for name in ("title", "category", "priority", "completed"):
                if changes.get(name) is not None:
                    updated[name] = changes[name]  # type: ignore[literal-required]
            if "due_date" in changes:
                # Respect explicit nulling of dueDate
                updated["due_date"] = changes["due_date"]

            tasks[i] = updated
            self._write_all(tasks)
        logger.info("Updated task id=%s fields=%s", task_id, sorted(changes))
        return updated.copy()

    def delete(self, task_id: int) -> None:
        """Remove a task permanently; raise TaskNotFoundError if absent."""
        with self._lock:
            tasks = self._read_all()
            del tasks[_index_of(tasks, task_id)]
            self._write_all(tasks)
        logger.info("Deleted task id=%s", task_id)

    def stats(self) -> Dict[str, Any]:
        """Derive completion statistics from the current collection."""
        return compute_stats(self.list())


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing.
    """

    def __init__(self, seed: bool = False) -> None:
        super().__init__()
        self._items: List[TaskEntity] = seed_tasks(self._now()) if seed else []

    def _read_all(self) -> List[TaskEntity]:
        return [t.copy() for t in self._items]

    def _write_all(self, tasks: List[TaskEntity]) -> None:
        self._items = [t.copy() for t in tasks]


# PUBLIC_INTERFACE
def build_repository(settings: Settings) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - json: JsonFileRepository over settings.tasks_file_path
    - memory: InMemoryRepository holding the seed collection
    """
    if settings.persistence_backend == "memory":
        return InMemoryRepository(seed=True)

    from .json_store import JsonFileRepository

    return JsonFileRepository(settings.tasks_file_path)


# PUBLIC_INTERFACE
def get_repository(request: Request) -> Repository:
    """FastAPI dependency returning the repository built by create_app."""
    return request.app.state.repository
