from .auth_service import AuthService
from .task_service import TaskService
from .user_service import UserService

__all__ = ["AuthService", "TaskService", "UserService"]
