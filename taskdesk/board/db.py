"""Database module for the task board using taskdesk.database.MongoODM.

Holds the one piece of process-wide state: a lazily created multi-model ODM for the ``users`` and ``tasks``
collections. It is initialized at service startup and closed at shutdown.
"""

from typing import Optional

from taskdesk.board.core.settings import get_taskboard_config
from taskdesk.board.models.documents import TaskDocument, UserDocument
from taskdesk.database import MongoODM

_db: Optional[MongoODM] = None


def get_db() -> MongoODM:
    """Get the global MongoODM instance.

    Creates the instance on first call but does NOT initialize Beanie. Initialization happens via
    ``initialize_db()`` during application startup (or lazily on first query).

    Returns:
        MongoODM: The global ODM. Access collections via ``db.user`` and ``db.task``.
    """
    global _db
    if _db is None:
        cfg = get_taskboard_config().TASKBOARD
        _db = MongoODM(
            models={"user": UserDocument, "task": TaskDocument},
            db_uri=cfg.MONGO_URI,
            db_name=cfg.MONGO_DB,
        )
    return _db


async def initialize_db() -> None:
    """Connect, initialize Beanie and create the unique indexes on ``users.email`` and ``tasks.title``."""
    await get_db().initialize()


async def close_db() -> None:
    """Close the database connection. Should be called during application shutdown."""
    global _db
    if _db is not None:
        _db.close()
        _db = None


def reset_db() -> None:
    """Reset the global ODM instance without closing it (useful in tests)."""
    global _db
    _db = None
