from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from beanie import Document, PydanticObjectId, init_beanie
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import BaseModel
from pymongo.errors import DuplicateKeyError

from taskdesk.database.exceptions import DocumentNotFoundError, DuplicateInsertError


class TaskdeskDocument(Document):
    """Base document class for MongoDB collections in Taskdesk.

    Example:
        .. code-block:: python

            from taskdesk.database import TaskdeskDocument

            class UserDocument(TaskdeskDocument):
                name: str
                email: Indexed(str, unique=True)

                class Settings:
                    name = "users"
    """

    class Settings:
        use_cache = False


T = TypeVar("T", bound=TaskdeskDocument)


class MongoODMBackend(Generic[T]):
    """Async CRUD operations for a single document model.

    Instances are handed out by ``MongoODM`` (``db.user``, ``db.task``) and share its Motor client. Every operation
    makes sure Beanie has been initialized first, so callers never need to sequence ``initialize()`` themselves.

    Args:
        model_cls: The Beanie document class to operate on.
        odm: The owning ``MongoODM``.
    """

    def __init__(self, model_cls: Type[T], odm: "MongoODM"):
        self.model_cls: Type[T] = model_cls
        self._odm = odm

    @staticmethod
    def _parse_id(id: str | PydanticObjectId) -> PydanticObjectId:
        if isinstance(id, ObjectId):
            return PydanticObjectId(id)
        if not ObjectId.is_valid(str(id)):
            raise DocumentNotFoundError(f"Object with id {id} not found")
        return PydanticObjectId(str(id))

    async def insert(self, obj: BaseModel | Dict[str, Any]) -> T:
        """Insert a new document.

        Raises:
            DuplicateInsertError: If the document violates a unique index.
        """
        await self._odm.initialize()
        data = obj.model_dump() if isinstance(obj, BaseModel) else dict(obj)
        doc = self.model_cls(**data)
        try:
            return await doc.insert()
        except DuplicateKeyError as e:
            raise DuplicateInsertError(f"Duplicate key error: {str(e)}") from e

    async def get(self, id: str | PydanticObjectId) -> T:
        """Retrieve a document by id.

        Raises:
            DocumentNotFoundError: If the id is malformed or no document has it.
        """
        await self._odm.initialize()
        doc = await self.model_cls.get(self._parse_id(id))
        if not doc:
            raise DocumentNotFoundError(f"Object with id {id} not found")
        return doc

    async def find(self, *args, **kwargs) -> List[T]:
        """Find documents matching Beanie expressions or raw Mongo filters."""
        await self._odm.initialize()
        return await self.model_cls.find(*args, **kwargs).to_list()

    async def find_one(self, *args, **kwargs) -> Optional[T]:
        await self._odm.initialize()
        return await self.model_cls.find_one(*args, **kwargs)

    async def all(self) -> List[T]:
        await self._odm.initialize()
        return await self.model_cls.find_all().to_list()

    async def update(self, doc: T) -> T:
        """Persist changes made to a fetched document.

        Raises:
            DuplicateInsertError: If the new values violate a unique index.
        """
        await self._odm.initialize()
        try:
            await doc.save()
        except DuplicateKeyError as e:
            raise DuplicateInsertError(f"Duplicate key error: {str(e)}") from e
        return doc

    async def delete(self, id: str | PydanticObjectId) -> None:
        """Delete a document by id.

        Raises:
            DocumentNotFoundError: If the id is malformed or no document has it.
        """
        doc = await self.get(id)
        await doc.delete()

    async def aggregate(self, pipeline: list) -> List[Dict[str, Any]]:
        """Execute a MongoDB aggregation pipeline against the model's collection.

        Example:
            .. code-block:: python

                pipeline = [{"$group": {"_id": "$status", "count": {"$sum": 1}}}]
                results = await db.task.aggregate(pipeline)
        """
        await self._odm.initialize()
        return await self.model_cls.get_motor_collection().aggregate(pipeline).to_list(None)


class MongoODM:
    """Multi-model MongoDB ODM built on Beanie and Motor.

    Registers several document models against one database and exposes a ``MongoODMBackend`` per model through
    attribute access.

    Example:
        .. code-block:: python

            db = MongoODM(
                models={"user": UserDocument, "task": TaskDocument},
                db_uri="mongodb://localhost:27017",
                db_name="taskboard",
            )
            await db.initialize()
            user = await db.user.get("507f1f77bcf86cd799439011")
    """

    def __init__(self, models: Dict[str, Type[TaskdeskDocument]], db_uri: str, db_name: str):
        self.models = dict(models)
        self.client = AsyncIOMotorClient(db_uri, tz_aware=True)
        self.db_name = db_name
        self._is_initialized = False
        self._backends: Dict[str, MongoODMBackend] = {
            name: MongoODMBackend(model_cls, self) for name, model_cls in self.models.items()
        }

    async def initialize(self) -> None:
        """Initialize Beanie for all registered models and create their indexes. Safe to call repeatedly."""
        if not self._is_initialized:
            await init_beanie(database=self.client[self.db_name], document_models=list(self.models.values()))
            self._is_initialized = True

    def close(self) -> None:
        self.client.close()
        self._is_initialized = False

    def __getattr__(self, name: str) -> MongoODMBackend:
        backends = self.__dict__.get("_backends", {})
        if name in backends:
            return backends[name]
        raise AttributeError(f"No model registered under '{name}'")
