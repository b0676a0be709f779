from datetime import UTC, datetime
from typing import Dict, List, Optional

from taskdesk.board.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from taskdesk.board.core.security import AuthenticatedUser
from taskdesk.board.models import (
    MessageResponse,
    Task,
    TaskAnalyticsResponse,
    TaskCreateRequest,
    TaskOwner,
    TaskResponse,
    TaskStatus,
    TaskUpdateRequest,
)
from taskdesk.board.repositories import TaskRepository, UserRepository
from taskdesk.board.services.common import internal_error_on_failure
from taskdesk.core import TaskdeskBase
from taskdesk.database import DuplicateInsertError

MS_PER_HOUR = 1000 * 60 * 60


class TaskService(TaskdeskBase):
    """Task CRUD with ownership checks, plus the analytics aggregation.

    Owners and ADMINs may read, update and delete a task; everyone else gets Forbidden. Setting the status to DONE
    stamps ``completed_at`` with the current time on every such update.
    """

    def __init__(self, task_repo: TaskRepository, user_repo: UserRepository, **kwargs):
        super().__init__(**kwargs)
        self.task_repo = task_repo
        self.user_repo = user_repo

    @staticmethod
    def _ensure_can_modify(task: Task, user: AuthenticatedUser, action: str) -> None:
        if not user.is_admin and task.owner_id != user.id:
            raise ForbiddenError(f"You are not allowed to {action} this task")

    async def _get_or_404(self, task_id: str) -> Task:
        task = await self.task_repo.get_by_id(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    @internal_error_on_failure("Failed to create task")
    async def create(self, payload: TaskCreateRequest, owner_id: str) -> TaskResponse:
        if await self.task_repo.get_by_title(payload.title):
            raise ConflictError("Task title must be unique")

        try:
            task = await self.task_repo.create(title=payload.title, owner_id=owner_id, description=payload.description)
        except DuplicateInsertError:
            raise ConflictError("Task title must be unique")

        self.logger.info("Task created", task_id=task.id, owner_id=owner_id)
        return TaskResponse.from_task(task)

    @internal_error_on_failure("Failed to fetch tasks")
    async def list_tasks(self, user: AuthenticatedUser) -> List[TaskResponse]:
        """ADMINs see every task with its owner resolved; users see only their own."""
        if not user.is_admin:
            return [TaskResponse.from_task(task) for task in await self.task_repo.list(owner_id=user.id)]

        tasks = await self.task_repo.list()
        owners: Dict[str, Optional[TaskOwner]] = {}
        for owner_id in {task.owner_id for task in tasks}:
            owner = await self.user_repo.get_by_id(owner_id)
            owners[owner_id] = TaskOwner(id=owner.id, name=owner.name, email=owner.email) if owner else None
        return [TaskResponse.from_task(task, owner=owners.get(task.owner_id)) for task in tasks]

    @internal_error_on_failure("Failed to fetch task")
    async def find_by_id(self, task_id: str, user: Optional[AuthenticatedUser] = None) -> TaskResponse:
        task = await self._get_or_404(task_id)
        if user is not None:
            self._ensure_can_modify(task, user, "view")
        return TaskResponse.from_task(task)

    @internal_error_on_failure("Failed to update task")
    async def update(self, task_id: str, payload: TaskUpdateRequest, user: AuthenticatedUser) -> TaskResponse:
        task = await self._get_or_404(task_id)
        self._ensure_can_modify(task, user, "update")

        changes = payload.changes()
        if "title" in changes and changes["title"] != task.title:
            existing = await self.task_repo.get_by_title(changes["title"])
            if existing and existing.id != task.id:
                raise ConflictError("Task title must be unique")
        if changes.get("status") == TaskStatus.DONE:
            changes["completed_at"] = datetime.now(UTC)

        try:
            updated = await self.task_repo.update(task_id, changes)
        except DuplicateInsertError:
            raise ConflictError("Task title must be unique")
        if updated is None:
            raise NotFoundError("Task not found")

        self.logger.info("Task updated", task_id=task_id, fields=sorted(changes))
        return TaskResponse.from_task(updated)

    @internal_error_on_failure("Failed to delete task")
    async def delete(self, task_id: str, user: AuthenticatedUser) -> MessageResponse:
        task = await self._get_or_404(task_id)
        self._ensure_can_modify(task, user, "delete")

        if not await self.task_repo.delete(task_id):
            raise NotFoundError("Task not found")

        self.logger.info("Task deleted", task_id=task_id)
        return MessageResponse(message="Task deleted successfully")

    @internal_error_on_failure("Failed to fetch analytics")
    async def get_analytics(self) -> TaskAnalyticsResponse:
        status_counts = await self.task_repo.count_by_status()
        avg_ms = await self.task_repo.average_completion_ms()
        per_user_counts = await self.task_repo.count_by_owner()

        avg_hours = (avg_ms or 0.0) / MS_PER_HOUR
        return TaskAnalyticsResponse(
            status_counts=status_counts,
            avg_completion_time_hours=f"{avg_hours:.2f}",
            per_user_counts=per_user_counts,
        )
