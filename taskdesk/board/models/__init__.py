from .analytics import TaskAnalyticsResponse
from .auth import LoginPayload, RegisterPayload, RegisterResponse, TokenResponse
from .common import CamelModel, CamelRequest, MessageResponse
from .enums import TaskStatus, UserRole
from .task import Task, TaskCreateRequest, TaskOwner, TaskResponse, TaskUpdateRequest
from .user import User, UserResponse, UserUpdateRequest

__all__ = [
    "CamelModel",
    "CamelRequest",
    "LoginPayload",
    "MessageResponse",
    "RegisterPayload",
    "RegisterResponse",
    "Task",
    "TaskAnalyticsResponse",
    "TaskCreateRequest",
    "TaskOwner",
    "TaskResponse",
    "TaskStatus",
    "TaskUpdateRequest",
    "TokenResponse",
    "User",
    "UserResponse",
    "UserRole",
    "UserUpdateRequest",
]
