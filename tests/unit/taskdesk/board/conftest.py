"""Pytest fixtures for task board unit tests: in-memory repositories and a DB-less service."""

from dataclasses import replace
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from bson import ObjectId
from fastapi.testclient import TestClient

from taskdesk.board import TaskBoardService
from taskdesk.board.core.security import hash_password
from taskdesk.board.core.settings import reset_taskboard_config
from taskdesk.board.db import reset_db
from taskdesk.board.models import Task, TaskStatus, User, UserRole
from taskdesk.database import DuplicateInsertError


@pytest.fixture(autouse=True)
def reset_config():
    """Reset task board config and DB handle before each test to ensure clean state."""
    reset_taskboard_config()
    reset_db()
    yield
    reset_taskboard_config()
    reset_db()


# ---------------------------------------------------------------------------
# Fake repositories (pure in-memory, no Mongo)
# ---------------------------------------------------------------------------


class FakeUserRepository:
    """In-memory fake user repository with the unique-email behaviour of the real index."""

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}

    async def get_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        return next((u for u in self._users.values() if u.email == email), None)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def list(self) -> List[User]:
        return list(self._users.values())

    async def create(self, name: str, email: str, password_hash: str, role: UserRole = UserRole.USER) -> User:
        if await self.get_by_email(email):
            raise DuplicateInsertError("Duplicate key error: email")
        now = datetime.now(UTC)
        user = User(
            id=str(ObjectId()),
            name=name,
            email=email.strip().lower(),
            password_hash=password_hash,
            role=UserRole(role),
            created_at=now,
            updated_at=now,
        )
        self._users[user.id] = user
        return user

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        user = self._users.get(user_id)
        if user is None:
            return None
        if "email" in fields:
            fields = {**fields, "email": fields["email"].strip().lower()}
        updated = replace(user, **fields, updated_at=datetime.now(UTC))
        self._users[user_id] = updated
        return updated

    async def delete(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None


class FakeTaskRepository:
    """In-memory fake task repository, including the analytics aggregations."""

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}

    async def get_by_id(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    async def get_by_title(self, title: str) -> Optional[Task]:
        return next((t for t in self._tasks.values() if t.title == title), None)

    async def list(self, owner_id: Optional[str] = None) -> List[Task]:
        return [t for t in self._tasks.values() if owner_id is None or t.owner_id == owner_id]

    async def create(self, title: str, owner_id: str, description: Optional[str] = None) -> Task:
        if await self.get_by_title(title):
            raise DuplicateInsertError("Duplicate key error: title")
        now = datetime.now(UTC)
        task = Task(
            id=str(ObjectId()),
            title=title,
            owner_id=owner_id,
            description=description,
            status=TaskStatus.TODO,
            created_at=now,
            updated_at=now,
        )
        self._tasks[task.id] = task
        return task

    async def update(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        updated = replace(task, **fields, updated_at=datetime.now(UTC))
        self._tasks[task_id] = updated
        return updated

    async def delete(self, task_id: str) -> bool:
        return self._tasks.pop(task_id, None) is not None

    async def count_by_status(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for task in self._tasks.values():
            counts[task.status.value] = counts.get(task.status.value, 0) + 1
        return counts

    async def count_by_owner(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for task in self._tasks.values():
            counts[task.owner_id] = counts.get(task.owner_id, 0) + 1
        return counts

    async def average_completion_ms(self) -> Optional[float]:
        durations = [
            (t.completed_at - t.created_at).total_seconds() * 1000
            for t in self._tasks.values()
            if t.completed_at and t.created_at
        ]
        return sum(durations) / len(durations) if durations else None


# ---------------------------------------------------------------------------
# Service and identity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def task_repo() -> FakeTaskRepository:
    return FakeTaskRepository()


@pytest.fixture
def service(user_repo, task_repo) -> TaskBoardService:
    """A TaskBoardService wired to fake repositories. We don't care about DB wiring here."""
    svc = TaskBoardService(enable_db=False)
    svc._user_repo = user_repo
    svc._task_repo = task_repo
    return svc


@pytest.fixture
def client(service) -> TestClient:
    return TestClient(service.app)


async def _seed_user(repo: FakeUserRepository, name: str, email: str, role: UserRole) -> User:
    return await repo.create(name=name, email=email, password_hash=hash_password("secret123"), role=role)


@pytest_asyncio.fixture
async def alice(user_repo) -> User:
    return await _seed_user(user_repo, "Alice", "alice@example.com", UserRole.USER)


@pytest_asyncio.fixture
async def bob(user_repo) -> User:
    return await _seed_user(user_repo, "Bob", "bob@example.com", UserRole.USER)


@pytest_asyncio.fixture
async def admin(user_repo) -> User:
    return await _seed_user(user_repo, "Root", "admin@example.com", UserRole.ADMIN)

