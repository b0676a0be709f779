from .auth import LoginSchema, RegisterSchema
from .task import (
    CreateTaskSchema,
    DeleteTaskSchema,
    GetTaskSchema,
    ListTasksSchema,
    TaskAnalyticsSchema,
    UpdateTaskSchema,
)
from .user import DeleteUserSchema, GetMeSchema, GetUserSchema, ListUsersSchema, UpdateMeSchema

__all__ = [
    "CreateTaskSchema",
    "DeleteTaskSchema",
    "DeleteUserSchema",
    "GetMeSchema",
    "GetTaskSchema",
    "GetUserSchema",
    "ListTasksSchema",
    "ListUsersSchema",
    "LoginSchema",
    "RegisterSchema",
    "TaskAnalyticsSchema",
    "UpdateMeSchema",
    "UpdateTaskSchema",
]
