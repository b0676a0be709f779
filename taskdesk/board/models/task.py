"""Task domain record and request/response models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from .common import CamelModel, CamelRequest
from .enums import TaskStatus


@dataclass
class Task:
    id: str
    title: str
    owner_id: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TaskCreateRequest(CamelRequest):
    title: str = Field(..., min_length=1, description="Task title, unique across all tasks")
    description: Optional[str] = Field(None, description="Free-form details")


class TaskUpdateRequest(CamelRequest):
    """Partial task update. Only the fields the client sends are applied."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    status: Optional[TaskStatus] = None

    def changes(self) -> Dict[str, Any]:
        """Fields set by the client. An explicit null clears ``description``; it is ignored for the others."""
        data = self.model_dump(exclude_unset=True)
        return {key: value for key, value in data.items() if value is not None or key == "description"}


class TaskOwner(CamelModel):
    id: str
    name: str
    email: str


class TaskResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    owner_id: str
    owner: Optional[TaskOwner] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_task(cls, task: Task, owner: Optional[TaskOwner] = None) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            owner_id=task.owner_id,
            owner=owner,
            completed_at=task.completed_at,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
