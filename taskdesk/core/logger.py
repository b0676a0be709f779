import logging
import os
from collections import OrderedDict
from logging import Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import structlog

from taskdesk.core.config import CoreSettings
from taskdesk.core.utils import ifnone


def default_formatter(fmt: Optional[str] = None) -> logging.Formatter:
    """Returns a logging formatter with a default format if none is specified."""
    default_fmt = "[%(asctime)s] %(levelname)s: %(name)s: %(message)s"
    return logging.Formatter(fmt or default_fmt)


def setup_logger(
    name: str = "taskdesk",
    *,
    log_dir: Optional[Path] = None,
    logger_level: int = logging.DEBUG,
    stream_level: int = logging.ERROR,
    add_stream_handler: bool = True,
    file_level: int = logging.DEBUG,
    file_mode: str = "a",
    add_file_handler: Optional[bool] = None,
    propagate: bool = False,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    use_structlog: Optional[bool] = None,
    structlog_json: bool = True,
) -> Logger | structlog.stdlib.BoundLogger:
    """Configure and initialize logging for Taskdesk components.

    Sets up a rotating file handler and a console handler on the given logger. The log file defaults to
    ``~/.cache/taskdesk/logs/{name}.log`` (``modules/{name}.log`` for child loggers).

    Args:
        name: Logger name, defaults to "taskdesk".
        log_dir: Custom directory for log file.
        logger_level: Overall logger level.
        stream_level: StreamHandler level (e.g., ERROR).
        add_stream_handler: Whether to add a stream handler.
        file_level: FileHandler level (e.g., DEBUG).
        file_mode: Mode for file handler, default is 'a' (append).
        add_file_handler: Whether to add a file handler. Defaults to ``TASKDESK_LOGGER.FILE_LOGGING``.
        propagate: Whether the logger should propagate messages to ancestor loggers.
        max_bytes: Maximum size in bytes before rotating log file.
        backup_count: Number of backup files to retain.
        use_structlog: If True, configure and return a structlog BoundLogger. Defaults to
            ``TASKDESK_LOGGER.USE_STRUCTLOG``.
        structlog_json: If True, render JSON; otherwise use the console/dev renderer.

    Returns:
        Logger | structlog.stdlib.BoundLogger: Configured logger instance.
    """
    settings = CoreSettings().TASKDESK_LOGGER
    use_structlog = ifnone(use_structlog, settings.USE_STRUCTLOG)
    add_file_handler = ifnone(add_file_handler, settings.FILE_LOGGING)

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(logger_level)
    logger.propagate = propagate

    formatter = logging.Formatter("%(message)s") if use_structlog else default_formatter()

    if add_stream_handler:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(stream_level)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if add_file_handler:
        child_log_path = f"{name}.log" if name == "taskdesk" else os.path.join("modules", f"{name}.log")
        log_file_path = Path(ifnone(log_dir, settings.LOG_DIR)).expanduser() / child_log_path
        os.makedirs(log_file_path.parent, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_file_path), maxBytes=max_bytes, backupCount=backup_count, mode=file_mode
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not use_structlog:
        return logger

    renderer = structlog.processors.JSONRenderer() if structlog_json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _enforce_key_order_processor(["timestamp", "event", "service", "duration_ms", "level", "logger"]),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger(name)


def _enforce_key_order_processor(key_order: list[str]):
    def _processor(_logger, _method_name, event_dict):
        ordered = OrderedDict()
        for key in key_order:
            if key in event_dict:
                ordered[key] = event_dict.pop(key)
        for k in sorted(event_dict.keys()):
            ordered[k] = event_dict[k]
        return ordered

    return _processor


def get_logger(name: str | None = "taskdesk", **kwargs) -> Logger | structlog.stdlib.BoundLogger:
    """Create or retrieve a named logger instance.

    Names are namespaced under ``taskdesk.``; child loggers propagate to their parents by default so a single
    handler configuration on ``taskdesk`` is enough to capture everything.

    Example:
        .. code-block:: python

            from taskdesk.core.logger import get_logger

            logger = get_logger("board.tasks")
            logger.info("Task created", task_id="...")
    """
    if not name:
        name = "taskdesk"

    full_name = name if name.startswith("taskdesk") else f"taskdesk.{name}"
    kwargs.setdefault("propagate", True)
    if kwargs["propagate"]:
        # Parent handlers receive the record; avoid emitting it twice on the console
        kwargs.setdefault("add_stream_handler", False)
    return setup_logger(full_name, **kwargs)
