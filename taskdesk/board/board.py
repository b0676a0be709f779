"""TaskBoardService: task-management REST backend with JWT auth and role-based access control."""

from typing import List, Optional

from fastapi import Depends, status
from urllib3.util.url import Url, parse_url

from taskdesk.board.core.errors import register_exception_handlers
from taskdesk.board.core.security import AuthenticatedUser, authenticate_token, get_current_user
from taskdesk.board.core.settings import get_taskboard_config
from taskdesk.board.db import close_db, initialize_db
from taskdesk.board.models import (
    LoginPayload,
    MessageResponse,
    RegisterPayload,
    RegisterResponse,
    TaskAnalyticsResponse,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
    TokenResponse,
    UserResponse,
    UserRole,
    UserUpdateRequest,
)
from taskdesk.board.repositories import TaskRepository, UserRepository
from taskdesk.board.schemas import (
    CreateTaskSchema,
    DeleteTaskSchema,
    DeleteUserSchema,
    GetMeSchema,
    GetTaskSchema,
    GetUserSchema,
    ListTasksSchema,
    ListUsersSchema,
    LoginSchema,
    RegisterSchema,
    TaskAnalyticsSchema,
    UpdateMeSchema,
    UpdateTaskSchema,
)
from taskdesk.board.services import AuthService, TaskService, UserService
from taskdesk.services import RequestLoggingMiddleware, Scope, Service, set_token_verifier


class TaskBoardService(Service):
    """Task board service: auth, task CRUD with ownership checks, analytics and user management."""

    def __init__(
        self,
        *,
        url: str | Url | None = None,
        enable_db: bool = True,
        **kwargs,
    ):
        self._config = get_taskboard_config()
        cfg = self._config.TASKBOARD

        if url is None:
            url = cfg.URL

        kwargs.setdefault("use_structlog", True)
        kwargs.setdefault("logger_level", cfg.LOG_LEVEL)

        super().__init__(
            url=url,
            summary="Task Board Backend Service",
            description="Task management API with JWT auth, role-based access control and task analytics",
            **kwargs,
        )

        # Repos use get_db() internally; with the DB disabled the lifespan hooks leave the store alone
        self.db_enabled = enable_db

        # Repositories
        self._user_repo: Optional[UserRepository] = None
        self._task_repo: Optional[TaskRepository] = None

        set_token_verifier(authenticate_token)

        # Middleware and error envelope
        self.app.add_middleware(
            RequestLoggingMiddleware,
            service_name=self.name,
            log_metrics=True,
            add_request_id_header=True,
            logger=self.logger,
        )
        register_exception_handlers(self.app, self.logger)

        # Register endpoints
        self._register_auth_endpoints()
        self._register_task_endpoints()
        self._register_user_endpoints()

    # -------------------------------------------------------------------------
    # Lazy repo and domain-service accessors (created inside the live loop)
    # -------------------------------------------------------------------------

    @property
    def user_repo(self) -> UserRepository:
        if self._user_repo is None:
            self._user_repo = UserRepository()
        return self._user_repo

    @property
    def task_repo(self) -> TaskRepository:
        if self._task_repo is None:
            self._task_repo = TaskRepository()
        return self._task_repo

    @property
    def auth_service(self) -> AuthService:
        return AuthService(self.user_repo)

    @property
    def task_service(self) -> TaskService:
        return TaskService(self.task_repo, self.user_repo)

    @property
    def user_service(self) -> UserService:
        return UserService(self.user_repo)

    # -------------------------------------------------------------------------
    # Endpoint registration
    # -------------------------------------------------------------------------

    def _register_auth_endpoints(self) -> None:
        self.add_endpoint(
            "/auth/register",
            self.register,
            schema=RegisterSchema,
            methods=["POST"],
            status_code=status.HTTP_201_CREATED,
        )
        self.add_endpoint("/auth/login", self.login, schema=LoginSchema, methods=["POST"])

    def _register_task_endpoints(self) -> None:
        self.add_endpoint(
            "/tasks",
            self.create_task,
            schema=CreateTaskSchema,
            methods=["POST"],
            scope=Scope.AUTHENTICATED,
            status_code=status.HTTP_201_CREATED,
        )
        self.add_endpoint("/tasks", self.list_tasks, schema=ListTasksSchema, methods=["GET"], scope=Scope.AUTHENTICATED)
        # Static paths before /tasks/{task_id}
        self.add_endpoint(
            "/tasks/analytics/tasks",
            self.task_analytics,
            schema=TaskAnalyticsSchema,
            methods=["GET"],
            roles=[UserRole.ADMIN],
        )
        self.add_endpoint(
            "/tasks/{task_id}", self.get_task, schema=GetTaskSchema, methods=["GET"], scope=Scope.AUTHENTICATED
        )
        self.add_endpoint(
            "/tasks/{task_id}", self.update_task, schema=UpdateTaskSchema, methods=["PUT"], scope=Scope.AUTHENTICATED
        )
        self.add_endpoint(
            "/tasks/{task_id}",
            self.delete_task,
            schema=DeleteTaskSchema,
            methods=["DELETE"],
            scope=Scope.AUTHENTICATED,
        )

    def _register_user_endpoints(self) -> None:
        # Static paths before /users/{user_id}
        self.add_endpoint(
            "/users/getAllUsers", self.list_users, schema=ListUsersSchema, methods=["GET"], roles=[UserRole.ADMIN]
        )
        self.add_endpoint("/users/me", self.get_me, schema=GetMeSchema, methods=["GET"], scope=Scope.AUTHENTICATED)
        self.add_endpoint("/users/me", self.update_me, schema=UpdateMeSchema, methods=["PUT"], scope=Scope.AUTHENTICATED)
        self.add_endpoint(
            "/users/{user_id}", self.get_user, schema=GetUserSchema, methods=["GET"], roles=[UserRole.ADMIN]
        )
        self.add_endpoint(
            "/users/{user_id}", self.delete_user, schema=DeleteUserSchema, methods=["DELETE"], roles=[UserRole.ADMIN]
        )

    # -------------------------------------------------------------------------
    # Auth handlers
    # -------------------------------------------------------------------------

    async def register(self, payload: RegisterPayload) -> RegisterResponse:
        """Register a new user."""
        return await self.auth_service.register(payload)

    async def login(self, payload: LoginPayload) -> TokenResponse:
        """Login an existing user and return an access token."""
        return await self.auth_service.login(payload)

    # -------------------------------------------------------------------------
    # Task handlers
    # -------------------------------------------------------------------------

    async def create_task(
        self, payload: TaskCreateRequest, user: AuthenticatedUser = Depends(get_current_user)
    ) -> TaskResponse:
        return await self.task_service.create(payload, owner_id=user.id)

    async def list_tasks(self, user: AuthenticatedUser = Depends(get_current_user)) -> List[TaskResponse]:
        return await self.task_service.list_tasks(user)

    async def task_analytics(self) -> TaskAnalyticsResponse:
        return await self.task_service.get_analytics()

    async def get_task(self, task_id: str, user: AuthenticatedUser = Depends(get_current_user)) -> TaskResponse:
        return await self.task_service.find_by_id(task_id, user)

    async def update_task(
        self, task_id: str, payload: TaskUpdateRequest, user: AuthenticatedUser = Depends(get_current_user)
    ) -> TaskResponse:
        return await self.task_service.update(task_id, payload, user)

    async def delete_task(self, task_id: str, user: AuthenticatedUser = Depends(get_current_user)) -> MessageResponse:
        return await self.task_service.delete(task_id, user)

    # -------------------------------------------------------------------------
    # User handlers
    # -------------------------------------------------------------------------

    async def list_users(self) -> List[UserResponse]:
        return await self.user_service.list_all()

    async def get_me(self, user: AuthenticatedUser = Depends(get_current_user)) -> UserResponse:
        return await self.user_service.get_by_id(user.id)

    async def update_me(
        self, payload: UserUpdateRequest, user: AuthenticatedUser = Depends(get_current_user)
    ) -> UserResponse:
        return await self.user_service.update_profile(user.id, payload)

    async def get_user(self, user_id: str) -> UserResponse:
        return await self.user_service.get_by_id(user_id)

    async def delete_user(self, user_id: str) -> MessageResponse:
        return await self.user_service.delete_by_id(user_id)

    # -------------------------------------------------------------------------
    # Lifecycle hooks
    # -------------------------------------------------------------------------

    async def startup_initialize(self) -> None:
        """Connect to MongoDB and create indexes before serving."""
        await super().startup_initialize()
        if self.db_enabled:
            await initialize_db()

    async def shutdown_cleanup(self) -> None:
        """Release the MongoDB client on shutdown."""
        await super().shutdown_cleanup()
        if self.db_enabled:
            await close_db()

    @classmethod
    def default_url(cls) -> Url:
        """Return default URL from TASKBOARD__URL config."""
        return parse_url(get_taskboard_config().TASKBOARD.URL)
