"""User domain record and request/response models.

The persisted entity is ``UserDocument`` in models/documents.py; repositories hand out ``User`` records instead.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from .common import CamelModel, CamelRequest
from .enums import UserRole


@dataclass
class User:
    id: str
    name: str
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserUpdateRequest(CamelRequest):
    """Partial profile update. Only the fields the client sends are applied."""

    name: Optional[str] = Field(None, min_length=1, description="Updated display name")
    email: Optional[EmailStr] = Field(None, description="Updated email address")
    password: Optional[str] = Field(None, min_length=6, description="New password, re-hashed before storing")


class UserResponse(CamelModel):
    """A user as returned by the API. Never carries the password hash."""

    id: str
    name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
