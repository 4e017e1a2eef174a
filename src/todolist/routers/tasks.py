from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..models import Clock, Task, system_clock
from ..repositories import Repository, SortOrder, TaskQuery, get_repository
from ..schemas import DeletedCount, TaskCreate, TaskOut, TaskUpdate

router = APIRouter(
    prefix="/api/v1/tasks",
    tags=["tasks"],
)


def _get_repo(repo: Repository = Depends(get_repository)) -> Repository:
    """
    Dependency wrapper for repository to keep signatures clean.
    """
    return repo


# PUBLIC_INTERFACE
def get_clock() -> Clock:
    """Time source used to stamp new tasks; override in tests for fixed times."""
    return system_clock


def _get_or_404(repo: Repository, task_id: int) -> Task:
    task = repo.get(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


def _save_or_404(repo: Repository, task: Task) -> TaskOut:
    saved = repo.update(task)
    if saved is None:
        # Deleted between read and write
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return TaskOut.from_task(saved)


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task stamped with the current time and return it with its assigned id.",
    responses={
        201: {"description": "Task created successfully"},
        422: {"description": "Validation error"},
    },
)
def create_task(
    payload: TaskCreate,
    repo: Repository = Depends(_get_repo),
    clock: Clock = Depends(get_clock),
) -> TaskOut:
    """
    Create a new task.
    """
    task = Task.new(payload.name, payload.important, payload.completed, clock=clock)
    return TaskOut.from_task(repo.insert(task))


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[TaskOut],
    summary="List Tasks",
    description=(
        "List tasks, important ones first.\n\n"
        "Query parameters:\n"
        "- search: case-insensitive substring of the task name\n"
        "- sort_order: by_date_created (default) or by_name\n"
        "- hide_completed: drop completed tasks"
    ),
)
def list_tasks(
    search: str = Query("", description="Search text for the task name"),
    sort_order: SortOrder = Query(SortOrder.BY_DATE_CREATED, description="Secondary sort order"),
    hide_completed: bool = Query(False, description="Exclude completed tasks"),
    repo: Repository = Depends(_get_repo),
) -> List[TaskOut]:
    """
    List tasks with search, ordering and completed-task filtering.
    """
    query = TaskQuery(search=search.strip(), sort_order=sort_order, hide_completed=hide_completed)
    return [TaskOut.from_task(t) for t in repo.list(query)]


# PUBLIC_INTERFACE
@router.delete(
    "/completed",
    response_model=DeletedCount,
    summary="Delete Completed Tasks",
    description="Delete every completed task and report how many were removed.",
)
def delete_completed_tasks(repo: Repository = Depends(_get_repo)) -> DeletedCount:
    return DeletedCount(deleted=repo.delete_completed())


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a single task by ID.",
    responses={
        200: {"description": "Task found"},
        404: {"description": "Task not found"},
    },
)
def get_task(task_id: int, repo: Repository = Depends(_get_repo)) -> TaskOut:
    """
    Retrieve a single task by its ID.
    """
    return TaskOut.from_task(_get_or_404(repo, task_id))


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Replace Task",
    description=(
        "Replace the name and flags of an existing task. Omitted flags fall back to false. "
        "The id and creation time are kept."
    ),
    responses={
        200: {"description": "Task updated"},
        404: {"description": "Task not found"},
    },
)
def put_task(task_id: int, payload: TaskCreate, repo: Repository = Depends(_get_repo)) -> TaskOut:
    """
    Full replacement of the editable fields.
    """
    current = _get_or_404(repo, task_id)
    replacement = current.with_changes(
        name=payload.name,
        important=payload.important,
        completed=payload.completed,
    )
    return _save_or_404(repo, replacement)


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description="Partially update fields of a task, e.g. toggle completed or important.",
    responses={
        200: {"description": "Task updated"},
        404: {"description": "Task not found"},
    },
)
def patch_task(task_id: int, payload: TaskUpdate, repo: Repository = Depends(_get_repo)) -> TaskOut:
    """
    Partial update of a task.
    """
    current = _get_or_404(repo, task_id)
    return _save_or_404(repo, current.with_changes(**payload.changes()))


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description="Delete a task by ID.",
    responses={
        204: {"description": "Task deleted"},
        404: {"description": "Task not found"},
    },
)
def delete_task(task_id: int, repo: Repository = Depends(_get_repo)) -> None:
    """
    Delete a task. Returns 204 on success, 404 if not found.
    """
    if not repo.delete(task_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return None
