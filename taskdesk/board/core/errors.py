"""Uniform error envelope for every failed request.

All failures render as ``{success, statusCode, message, path, timestamp}``.
"""

from datetime import datetime, timezone
from typing import Any, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException


def error_envelope(request: Request, status_code: int, message: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "statusCode": status_code,
            "message": message,
            "path": request.url.path,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def _validation_messages(exc: RequestValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return messages


def register_exception_handlers(app: FastAPI, logger) -> None:
    """Install the envelope handlers on ``app``."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        response = error_envelope(request, exc.status_code, exc.detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_envelope(request, status.HTTP_400_BAD_REQUEST, _validation_messages(exc))

    @app.exception_handler(PyMongoError)
    async def database_exception_handler(request: Request, exc: PyMongoError) -> JSONResponse:
        logger.error("Database error", path=request.url.path, error=str(exc))
        return error_envelope(request, status.HTTP_503_SERVICE_UNAVAILABLE, "Database connection failed")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", path=request.url.path)
        return error_envelope(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
