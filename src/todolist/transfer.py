"""
Transfer codec for Task values.

A task crosses component boundaries as one bundle holding all five stored
fields, never as separate scalars. The bundle is validated by pydantic on the
way back in, so a truncated or foreign payload raises ValidationError instead
of producing a half-filled Task.
"""
from __future__ import annotations

from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field

from .models import Task

# Storage keeps created and id in signed 64-bit INTEGER columns.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class TaskBundle(BaseModel):
    """Wire shape of a Task; every field is required."""

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    name: str = Field(..., description="Text of the task")
    important: bool = Field(..., description="Priority flag")
    completed: bool = Field(..., description="Done flag")
    created: int = Field(..., description="Creation time, ms since epoch", ge=INT64_MIN, le=INT64_MAX)
    id: int = Field(..., description="Primary key (0 when unsaved)", ge=0, le=INT64_MAX)

    @classmethod
    def from_task(cls, task: Task) -> "TaskBundle":
        return cls(
            name=task.name,
            important=task.important,
            completed=task.completed,
            created=task.created,
            id=task.id,
        )

    def to_task(self) -> Task:
        return Task(
            name=self.name,
            important=self.important,
            completed=self.completed,
            created=self.created,
            id=self.id,
        )


# PUBLIC_INTERFACE
def task_to_bundle(task: Task) -> Dict[str, Any]:
    """Return the task as a plain dict bundle."""
    return TaskBundle.from_task(task).model_dump()


# PUBLIC_INTERFACE
def task_from_bundle(bundle: Dict[str, Any]) -> Task:
    """Rebuild a task from a dict bundle produced by task_to_bundle."""
    return TaskBundle.model_validate(bundle).to_task()


# PUBLIC_INTERFACE
def encode_task(task: Task) -> bytes:
    """Serialize a task to a JSON bundle."""
    return TaskBundle.from_task(task).model_dump_json().encode("utf-8")


# PUBLIC_INTERFACE
def decode_task(data: Union[bytes, str]) -> Task:
    """Deserialize a JSON bundle produced by encode_task."""
    return TaskBundle.model_validate_json(data).to_task()
