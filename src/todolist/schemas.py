from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Task


def _clean_name(v: str) -> str:
    s = v.strip()
    if not s:
        raise ValueError("name cannot be empty")
    return s


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new task. The id and creation time are assigned by the server.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Buy milk",
                "important": True,
                "completed": False,
            }
        }
    )

    name: str = Field(..., description="Text of the task", min_length=1)
    important: bool = Field(default=False, description="Priority flag")
    completed: bool = Field(default=False, description="Completion status flag")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """
        Strip whitespace and reject blank names.
        """
        return _clean_name(v)


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for partially updating an existing task.
    Only provided fields are changed; id and creation time never are.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "completed": True,
            }
        }
    )

    name: Optional[str] = Field(default=None, description="Text of the task", min_length=1)
    important: Optional[bool] = Field(default=None, description="Priority flag")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")

    @field_validator("name", "important", "completed")
    @classmethod
    def reject_null(cls, v):
        """
        Omitted fields stay None; an explicit null is an error.
        """
        if v is None:
            raise ValueError("field may be omitted but not null")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)

    def changes(self) -> dict:
        """Fields present in the request body."""
        return self.model_dump(exclude_unset=True)


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 7,
                "name": "Buy milk",
                "important": True,
                "completed": False,
                "created": 1760878800000,
                "created_date_formatted": "Sun Oct 19 13:00:00 2025",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task")
    name: str = Field(..., description="Text of the task")
    important: bool = Field(..., description="Priority flag")
    completed: bool = Field(..., description="Completion status flag")
    created: int = Field(..., description="Creation time in milliseconds since the epoch")
    created_date_formatted: str = Field(..., description="Human-readable creation time (server locale)")

    @classmethod
    def from_task(cls, task: Task) -> "TaskOut":
        return cls(
            id=task.id,
            name=task.name,
            important=task.important,
            completed=task.completed,
            created=task.created,
            created_date_formatted=task.created_date_formatted,
        )


class DeletedCount(BaseModel):
    deleted: int = Field(..., description="Number of tasks removed")
