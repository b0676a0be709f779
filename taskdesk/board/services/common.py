from functools import wraps
from typing import Awaitable, Callable, TypeVar

from fastapi import HTTPException

from taskdesk.board.core.exceptions import InternalError

R = TypeVar("R")


def internal_error_on_failure(message: str) -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R]]]:
    """Decorator for domain-service methods.

    ``HTTPException`` (the board's Conflict, Unauthorized, Forbidden and NotFound errors included) propagates
    unchanged. Anything else is logged with its traceback on the instance logger and replaced by an ``InternalError``
    carrying ``message``, so raw error details never reach the caller.
    """

    def decorator(function: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
        @wraps(function)
        async def wrapper(self, *args, **kwargs) -> R:
            try:
                return await function(self, *args, **kwargs)
            except HTTPException:
                raise
            except Exception as e:
                self.logger.exception(message, method=function.__name__, error=str(e))
                raise InternalError(message) from e

        return wrapper

    return decorator
