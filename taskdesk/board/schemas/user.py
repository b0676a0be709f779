"""TaskSchemas for user management on the task board."""

from typing import List

from taskdesk.board.models import MessageResponse, UserResponse
from taskdesk.core import TaskSchema

ListUsersSchema = TaskSchema(
    name="taskboard_list_users",
    output_schema=List[UserResponse],
)

GetUserSchema = TaskSchema(
    name="taskboard_get_user",
    output_schema=UserResponse,
)

GetMeSchema = TaskSchema(
    name="taskboard_get_me",
    output_schema=UserResponse,
)

UpdateMeSchema = TaskSchema(
    name="taskboard_update_me",
    output_schema=UserResponse,
)

DeleteUserSchema = TaskSchema(
    name="taskboard_delete_user",
    output_schema=MessageResponse,
)

__all__ = [
    "DeleteUserSchema",
    "GetMeSchema",
    "GetUserSchema",
    "ListUsersSchema",
    "UpdateMeSchema",
]
