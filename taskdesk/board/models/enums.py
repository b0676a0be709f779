"""Enums for the task board."""

from enum import Enum


class UserRole(str, Enum):
    """User role enumeration for access control."""

    USER = "USER"
    ADMIN = "ADMIN"


class TaskStatus(str, Enum):
    """Task lifecycle states. ``DONE`` is terminal and stamps ``completed_at``."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
