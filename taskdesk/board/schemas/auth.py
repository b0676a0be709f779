"""Auth TaskSchemas for the task board."""

from taskdesk.board.models import RegisterResponse, TokenResponse
from taskdesk.core import TaskSchema

LoginSchema = TaskSchema(
    name="taskboard_login",
    output_schema=TokenResponse,
)

RegisterSchema = TaskSchema(
    name="taskboard_register",
    output_schema=RegisterResponse,
)

__all__ = [
    "LoginSchema",
    "RegisterSchema",
]
