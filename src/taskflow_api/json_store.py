from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from .errors import StorageError
from .models import TaskEntity, seed_tasks
from .repositories import Repository
from .schemas import TaskOut

logger = logging.getLogger(__name__)


class CorruptFileError(ValueError):
    """The file exists but does not hold a JSON array of valid records."""


# PUBLIC_INTERFACE
def read_json_array(path: Path) -> Optional[List[Any]]:
    """
    Read a JSON array from path.

    Returns None when the file does not exist. Raises CorruptFileError when the
    content is not a JSON array and StorageError when the file cannot be read.
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageError(f"Could not read {path}") from e

    try:
        data = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise CorruptFileError(f"{path} is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise CorruptFileError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise CorruptFileError(f"{path} does not contain a JSON array")
    return data


# PUBLIC_INTERFACE
def write_json_array(path: Path, rows: List[Any]) -> None:
    """
    Atomically replace path with rows serialized as a pretty-printed JSON array.

    The data is written to a temporary file in the same directory and moved
    into place with os.replace, so readers never observe a partial file.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise StorageError(f"Could not prepare {path} for writing") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError) as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise StorageError(f"Could not write {path}") from e


def _to_entity(record: Any) -> TaskEntity:
    try:
        task = TaskOut.model_validate(record)
    except ValidationError as e:
        raise CorruptFileError(f"Invalid task record: {e.error_count()} error(s)") from e
    return task.model_dump()  # type: ignore[return-value]


def _to_record(entity: TaskEntity) -> Any:
    return TaskOut.model_validate(entity).model_dump(mode="json", by_alias=True)


class JsonFileRepository(Repository):
    """
    Repository persisting the task collection as a JSON array on disk.

    The file is the source of truth and is re-read on every operation, so
    edits made to it while the service runs are picked up. A missing file is
    created with the seed collection; a corrupt one is served as the seed
    collection until the next successful write replaces it.
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self._path = Path(path)
        # stamped once so the fallback collection keeps a stable createdAt
        self._seed = seed_tasks(self._now())
        with self._lock:
            if not self._path.exists():
                self._write_all(self._seed_copy())
                logger.info("Initialized task file with seed data path=%s", self._path)
            else:
                logger.info("Task store ready path=%s", self._path)

    def _seed_copy(self) -> List[TaskEntity]:
        return [t.copy() for t in self._seed]

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> List[TaskEntity]:
        try:
            data = read_json_array(self._path)
            if data is None:
                return self._seed_copy()
            tasks = [_to_entity(r) for r in data]
        except CorruptFileError as e:
            logger.warning("Task file is corrupt, serving seed data: %s", e)
            return self._seed_copy()

        ids = [t["id"] for t in tasks]
        if len(ids) != len(set(ids)):
            logger.warning("Task file has duplicate ids, serving seed data path=%s", self._path)
            return self._seed_copy()
        return tasks

    def _write_all(self, tasks: List[TaskEntity]) -> None:
        write_json_array(self._path, [_to_record(t) for t in tasks])
