"""Beanie documents backing the task board collections."""

from datetime import UTC, datetime
from typing import Optional

from beanie import Indexed, Insert, PydanticObjectId, Replace, Save, SaveChanges, before_event
from pydantic import Field

from taskdesk.database import TaskdeskDocument

from .enums import TaskStatus, UserRole


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UserDocument(TaskdeskDocument):
    name: str
    email: Indexed(str, unique=True)  # store lowercased
    password_hash: str
    role: UserRole = UserRole.USER

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @before_event(Insert)
    def set_creation_timestamps(self):
        self.email = self.email.strip().lower()
        now = _utcnow()
        self.created_at = now
        self.updated_at = now

    @before_event([Replace, Save, SaveChanges])
    def update_timestamp(self):
        self.email = self.email.strip().lower()
        self.updated_at = _utcnow()

    class Settings:
        name = "users"
        use_cache = False


class TaskDocument(TaskdeskDocument):
    # Unique across every owner, not per owner
    title: Indexed(str, unique=True)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    owner_id: PydanticObjectId
    completed_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @before_event(Insert)
    def set_creation_timestamps(self):
        now = _utcnow()
        self.created_at = now
        self.updated_at = now

    @before_event([Replace, Save, SaveChanges])
    def update_timestamp(self):
        self.updated_at = _utcnow()

    class Settings:
        name = "tasks"
        use_cache = False
