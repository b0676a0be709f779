"""Domain errors for the task board.

Each error is an ``HTTPException`` carrying its status, so it propagates unchanged through the domain services
and is rendered by the error envelope handlers.
"""

from fastapi import HTTPException, status


class TaskBoardError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, headers: dict | None = None):
        super().__init__(status_code=type(self).status_code, detail=message or self.default_message, headers=headers)


class ConflictError(TaskBoardError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UnauthorizedError(TaskBoardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: str | None = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(TaskBoardError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(TaskBoardError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalError(TaskBoardError):
    pass
