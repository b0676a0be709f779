from taskdesk.core.utils import ifnone
from taskdesk.core.config import Config, CoreSettings, SettingsLike
from taskdesk.core.logger import get_logger, setup_logger
from taskdesk.core.base import TaskdeskBase, TaskdeskMeta
from taskdesk.core.types import TaskSchema

__all__ = [
    "Config",
    "CoreSettings",
    "get_logger",
    "ifnone",
    "SettingsLike",
    "setup_logger",
    "TaskdeskBase",
    "TaskdeskMeta",
    "TaskSchema",
]
