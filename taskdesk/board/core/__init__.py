from .exceptions import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    TaskBoardError,
    UnauthorizedError,
)
from .settings import TaskBoardSettings, get_taskboard_config, reset_taskboard_config

__all__ = [
    "ConflictError",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "TaskBoardError",
    "UnauthorizedError",
    "TaskBoardSettings",
    "get_taskboard_config",
    "reset_taskboard_config",
]
