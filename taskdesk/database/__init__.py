from taskdesk.database.exceptions import DocumentNotFoundError, DuplicateInsertError
from taskdesk.database.mongo_odm import MongoODM, MongoODMBackend, TaskdeskDocument

__all__ = [
    "DocumentNotFoundError",
    "DuplicateInsertError",
    "MongoODM",
    "MongoODMBackend",
    "TaskdeskDocument",
]
