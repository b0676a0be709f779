"""TaskSchemas for task-related operations on the task board."""

from typing import List

from taskdesk.board.models import (
    MessageResponse,
    TaskAnalyticsResponse,
    TaskResponse,
)
from taskdesk.core import TaskSchema

CreateTaskSchema = TaskSchema(
    name="taskboard_create_task",
    output_schema=TaskResponse,
)

ListTasksSchema = TaskSchema(
    name="taskboard_list_tasks",
    output_schema=List[TaskResponse],
)

GetTaskSchema = TaskSchema(
    name="taskboard_get_task",
    output_schema=TaskResponse,
)

UpdateTaskSchema = TaskSchema(
    name="taskboard_update_task",
    output_schema=TaskResponse,
)

DeleteTaskSchema = TaskSchema(
    name="taskboard_delete_task",
    output_schema=MessageResponse,
)

TaskAnalyticsSchema = TaskSchema(
    name="taskboard_task_analytics",
    output_schema=TaskAnalyticsResponse,
)

__all__ = [
    "CreateTaskSchema",
    "DeleteTaskSchema",
    "GetTaskSchema",
    "ListTasksSchema",
    "TaskAnalyticsSchema",
    "UpdateTaskSchema",
]
