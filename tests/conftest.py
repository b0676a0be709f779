import logging
import os

import pytest


@pytest.fixture(scope="session", autouse=True)
def isolated_log_dir(tmp_path_factory):
    """Keep log files written during the test run out of the user's cache directory."""
    log_dir = tmp_path_factory.mktemp("logs")
    previous = os.environ.get("TASKDESK_LOGGER__LOG_DIR")
    os.environ["TASKDESK_LOGGER__LOG_DIR"] = str(log_dir)
    yield log_dir
    if previous is None:
        os.environ.pop("TASKDESK_LOGGER__LOG_DIR", None)
    else:
        os.environ["TASKDESK_LOGGER__LOG_DIR"] = previous


@pytest.fixture(autouse=True)
def configure_logging_for_tests(caplog):
    """Configure logging to work properly with caplog fixture.

    This fixture ensures that all Taskdesk loggers propagate their messages to the root logger so that caplog can
    capture them properly.
    """
    caplog.set_level(logging.DEBUG)

    root_logger = logging.getLogger()
    original_level = root_logger.level
    root_logger.setLevel(logging.DEBUG)

    taskdesk_logger = logging.getLogger("taskdesk")
    original_propagate = taskdesk_logger.propagate
    taskdesk_logger.propagate = True

    yield

    root_logger.setLevel(original_level)
    taskdesk_logger.propagate = original_propagate
