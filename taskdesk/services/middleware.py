import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one structured record per request and tags responses with a request id.

    Example:
        service.app.add_middleware(
            RequestLoggingMiddleware,
            service_name=service.name,
            log_metrics=True,
            add_request_id_header=True,
            logger=service.logger,
        )
    """

    def __init__(
        self,
        app,
        service_name: str,
        log_metrics: bool = True,
        add_request_id_header: bool = True,
        logger=None,
    ):
        super().__init__(app)
        self.service_name = service_name
        self.log_metrics = log_metrics
        self.add_request_id_header = add_request_id_header
        self.logger = logger or structlog.get_logger(service_name)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self.logger.exception(
                "Request failed",
                service=self.service_name,
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise

        if self.log_metrics:
            self.logger.info(
                "Request completed",
                service=self.service_name,
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
        if self.add_request_id_header:
            response.headers["X-Request-ID"] = request_id
        return response
