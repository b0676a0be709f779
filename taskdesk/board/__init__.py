"""Task board: task-management backend built on taskdesk.services.

Exposes TaskBoardService and its configuration helpers.
"""

from .board import TaskBoardService
from .core.settings import TaskBoardSettings, get_taskboard_config, reset_taskboard_config

__all__ = [
    "TaskBoardService",
    "TaskBoardSettings",
    "get_taskboard_config",
    "reset_taskboard_config",
]
