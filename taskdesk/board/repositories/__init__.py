from .task_repository import TaskRepository
from .user_repository import UserRepository

__all__ = ["TaskRepository", "UserRepository"]
