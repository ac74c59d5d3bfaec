from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..repositories import Repository, get_repository
from ..schemas import DeleteResult, TaskCreate, TaskOut, TaskUpdate

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)

_NOT_FOUND = {404: {"description": "Task not found"}}
_STORAGE = {500: {"description": "Task storage unavailable"}}


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="Return every task in insertion order (oldest first).",
    responses={200: {"description": "Tasks retrieved successfully"}, **_STORAGE},
)
def list_tasks(repo: Repository = Depends(get_repository)) -> List[TaskOut]:
    return [TaskOut(**t) for t in repo.list()]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new pending task. The server assigns id and createdAt.",
    responses={201: {"description": "Task created successfully"}, **_STORAGE},
)
def create_task(payload: TaskCreate, repo: Repository = Depends(get_repository)) -> TaskOut:
    return TaskOut(**repo.create(payload))


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a single task by ID.",
    responses={200: {"description": "Task found"}, **_NOT_FOUND, **_STORAGE},
)
def get_task(task_id: int, repo: Repository = Depends(get_repository)) -> TaskOut:
    return TaskOut(**repo.get(task_id))


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description=(
        "Partially update a task. Only the fields present in the body change; "
        "dueDate may be set to null. id and createdAt are rejected."
    ),
    responses={200: {"description": "Task updated"}, **_NOT_FOUND, **_STORAGE},
)
def update_task(task_id: int, payload: TaskUpdate, repo: Repository = Depends(get_repository)) -> TaskOut:
    return TaskOut(**repo.update(task_id, payload))


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    response_model=DeleteResult,
    summary="Delete Task",
    description="Delete a task by ID.",
    responses={200: {"description": "Task deleted"}, **_NOT_FOUND, **_STORAGE},
)
def delete_task(task_id: int, repo: Repository = Depends(get_repository)) -> DeleteResult:
    repo.delete(task_id)
    return DeleteResult(message="Task deleted successfully")
