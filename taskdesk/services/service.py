from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, Iterable, List, Optional

import uvicorn
from fastapi import FastAPI
from pydantic import BaseModel
from urllib3.util.url import Url, parse_url

from taskdesk.core import TaskdeskBase, TaskSchema, ifnone
from taskdesk.services.auth import Scope, get_auth_dependencies


class StatusOutput(BaseModel):
    status: str


class EndpointsOutput(BaseModel):
    endpoints: List[str]


StatusSchema = TaskSchema(name="status", output_schema=StatusOutput)
EndpointsSchema = TaskSchema(name="endpoints", output_schema=EndpointsOutput)


class Service(TaskdeskBase):
    """Base class for Taskdesk HTTP services.

    Owns a FastAPI app, registers endpoints with their access rules, and ties the app lifespan to
    ``startup_initialize`` / ``shutdown_cleanup`` so subclasses can open and release resources.

    Example:
        .. code-block:: python

            class EchoService(Service):
                def __init__(self, **kwargs):
                    super().__init__(**kwargs)
                    self.add_endpoint("/echo", self.echo, schema=EchoSchema, methods=["POST"])

                def echo(self, payload: EchoInput) -> EchoOutput:
                    return EchoOutput(echoed=payload.message)

            EchoService.launch(url="http://localhost:8080")
    """

    def __init__(
        self,
        *,
        url: str | Url | None = None,
        summary: Optional[str] = None,
        description: Optional[str] = None,
        version: str = "0.1.0",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._url = self.build_url(url)
        self._endpoints: List[str] = []
        self._tasks: Dict[str, TaskSchema] = {}

        self.app = FastAPI(
            title=self.name,
            summary=summary,
            description=ifnone(description, ""),
            version=version,
            lifespan=self._lifespan,
        )

        self.add_endpoint("/status", self.status, schema=StatusSchema, methods=["GET"])
        self.add_endpoint("/endpoints", self.list_endpoints, schema=EndpointsSchema, methods=["GET"])

    @property
    def url(self) -> Url:
        return self._url

    @property
    def endpoints(self) -> List[str]:
        return list(self._endpoints)

    @property
    def tasks(self) -> Dict[str, TaskSchema]:
        return self._tasks

    @classmethod
    def default_url(cls) -> Url:
        return parse_url("http://localhost:8000")

    @classmethod
    def build_url(cls, url: str | Url | None = None) -> Url:
        if url is None:
            return cls.default_url()
        return url if isinstance(url, Url) else parse_url(str(url))

    def add_endpoint(
        self,
        path: str,
        func: Callable[..., Any],
        schema: Optional[TaskSchema] = None,
        methods: Optional[List[str]] = None,
        scope: Scope = Scope.PUBLIC,
        roles: Optional[Iterable[Any]] = None,
        status_code: Optional[int] = None,
        api_route_kwargs: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Register a new endpoint.

        Args:
            path: Route path, e.g. ``/tasks/{id}``.
            func: Handler. FastAPI resolves its parameters (path params, body models, dependencies).
            schema: Optional TaskSchema; its ``output_schema`` becomes the route's response model.
            methods: HTTP methods, defaults to ``["POST"]``.
            scope: ``Scope.AUTHENTICATED`` requires a valid Bearer token.
            roles: Roles allowed to call the endpoint; implies an authenticated scope.
            status_code: Success status code, FastAPI's default (200) when omitted.
            api_route_kwargs: Extra keyword arguments for ``FastAPI.add_api_route``.
        """
        path = "/" + path.removeprefix("/")
        methods = ifnone(methods, ["POST"])
        route_kwargs = dict(ifnone(api_route_kwargs, {}))
        if schema is not None:
            route_kwargs.setdefault("response_model", schema.output_schema)
            route_kwargs.setdefault("name", schema.name)
            self._tasks[schema.name] = schema
        if status_code is not None:
            route_kwargs["status_code"] = status_code

        self.app.add_api_route(
            path,
            endpoint=func,
            methods=methods,
            dependencies=get_auth_dependencies(scope, roles),
            **route_kwargs,
        )
        self._endpoints.extend(f"{method} {path}" for method in methods)

    def status(self) -> StatusOutput:
        return StatusOutput(status="Available")

    def list_endpoints(self) -> EndpointsOutput:
        return EndpointsOutput(endpoints=self.endpoints)

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        await self.startup_initialize()
        try:
            yield
        finally:
            await self.shutdown_cleanup()

    async def startup_initialize(self) -> None:
        """Hook run once when the app starts serving."""
        self.logger.info(f"{self.name} starting at {self.url}")

    async def shutdown_cleanup(self) -> None:
        """Hook run once when the app stops serving."""
        self.logger.info(f"{self.name} shutting down")

    @classmethod
    def launch(cls, url: str | Url | None = None, **kwargs) -> None:
        """Build the service and serve it with uvicorn until interrupted."""
        service = cls(url=url, **kwargs)
        uvicorn.run(service.app, host=service.url.host, port=service.url.port or 80)
