from typing import Any, Dict, List, Optional

from beanie import PydanticObjectId
from bson import ObjectId

from taskdesk.board.db import get_db
from taskdesk.board.models import Task, TaskStatus
from taskdesk.database import DocumentNotFoundError, MongoODMBackend

STATUS_COUNTS_PIPELINE = [{"$group": {"_id": "$status", "count": {"$sum": 1}}}]

OWNER_COUNTS_PIPELINE = [{"$group": {"_id": "$owner_id", "count": {"$sum": 1}}}]

# Date subtraction in Mongo yields milliseconds
AVG_COMPLETION_PIPELINE = [
    {"$match": {"completed_at": {"$ne": None}, "created_at": {"$ne": None}}},
    {"$group": {"_id": None, "avg_ms": {"$avg": {"$subtract": ["$completed_at", "$created_at"]}}}},
]


class TaskRepository:
    """Task store, including the aggregation queries behind the analytics endpoint."""

    def _backend(self) -> MongoODMBackend:
        return get_db().task

    @staticmethod
    def _to_model(doc: Any) -> Task:
        return Task(
            id=str(doc.id),
            title=doc.title,
            owner_id=str(doc.owner_id),
            description=doc.description,
            status=TaskStatus(doc.status),
            completed_at=doc.completed_at,
            created_at=getattr(doc, "created_at", None),
            updated_at=getattr(doc, "updated_at", None),
        )

    async def get_by_id(self, task_id: str) -> Optional[Task]:
        try:
            doc = await self._backend().get(task_id)
        except DocumentNotFoundError:
            return None
        return self._to_model(doc)

    async def get_by_title(self, title: str) -> Optional[Task]:
        doc = await self._backend().find_one({"title": title})
        if not doc:
            return None
        return self._to_model(doc)

    async def list(self, owner_id: Optional[str] = None) -> List[Task]:
        """All tasks, or only those owned by ``owner_id``."""
        backend = self._backend()
        if owner_id is None:
            docs = await backend.all()
        elif not ObjectId.is_valid(owner_id):
            return []
        else:
            docs = await backend.find({"owner_id": PydanticObjectId(owner_id)})
        return [self._to_model(doc) for doc in docs]

    async def create(self, title: str, owner_id: str, description: Optional[str] = None) -> Task:
        """Insert a task in the TODO state.

        Raises:
            DuplicateInsertError: If another task already has this title.
        """
        doc = await self._backend().insert(
            {
                "title": title,
                "description": description,
                "status": TaskStatus.TODO,
                "owner_id": PydanticObjectId(owner_id),
            }
        )
        return self._to_model(doc)

    async def update(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        """Apply ``fields`` to the stored task. Returns None if there is no such task.

        Raises:
            DuplicateInsertError: If the new title belongs to another task.
        """
        backend = self._backend()
        try:
            doc = await backend.get(task_id)
        except DocumentNotFoundError:
            return None

        for key, value in fields.items():
            setattr(doc, key, value)

        doc = await backend.update(doc)
        return self._to_model(doc)

    async def delete(self, task_id: str) -> bool:
        try:
            await self._backend().delete(task_id)
        except DocumentNotFoundError:
            return False
        return True

    async def count_by_status(self) -> Dict[str, int]:
        rows = await self._backend().aggregate(STATUS_COUNTS_PIPELINE)
        return {str(getattr(row["_id"], "value", row["_id"])): row["count"] for row in rows}

    async def count_by_owner(self) -> Dict[str, int]:
        rows = await self._backend().aggregate(OWNER_COUNTS_PIPELINE)
        return {str(row["_id"]): row["count"] for row in rows}

    async def average_completion_ms(self) -> Optional[float]:
        """Mean of ``completed_at - created_at`` in milliseconds, or None when no task has completed."""
        rows = await self._backend().aggregate(AVG_COMPLETION_PIPELINE)
        if not rows or rows[0].get("avg_ms") is None:
            return None
        return float(rows[0]["avg_ms"])
