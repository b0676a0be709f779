"""Fixtures for task board tests against a real MongoDB.

The server is taken from ``TASKDESK_TEST_MONGO_URI`` (default ``mongodb://localhost:27018``). Every test gets its own
database, dropped afterwards. The whole directory is skipped when no server answers.
"""

import logging
import os
import uuid

import pytest
import pytest_asyncio
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from taskdesk.board.core.settings import reset_taskboard_config
from taskdesk.board.db import close_db, initialize_db, get_db, reset_db

MONGO_URL = os.environ.get("TASKDESK_TEST_MONGO_URI", "mongodb://localhost:27018")


@pytest.fixture(scope="session")
def mongo_sync_client():
    """Synchronous client used for the reachability check and for dropping test databases."""
    client = MongoClient(MONGO_URL, serverSelectionTimeoutMS=1000)
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        pytest.skip(f"MongoDB not reachable at {MONGO_URL}: {e}")
    yield client
    client.close()


@pytest.fixture(autouse=True, scope="session")
def suppress_pymongo_logs():
    """Keep PyMongo's background monitor threads out of the captured logs."""
    loggers = ["pymongo", "pymongo.topology", "pymongo.connection", "pymongo.serverSelection"]
    original_levels = {name: logging.getLogger(name).level for name in loggers}
    for name in loggers:
        logging.getLogger(name).setLevel(logging.CRITICAL)
    yield
    for name, level in original_levels.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def board_env(mongo_sync_client, monkeypatch):
    """Point the task board config at a fresh database on the test server."""
    db_name = f"taskboard_test_{uuid.uuid4().hex[:12]}"
    monkeypatch.setenv("TASKBOARD__MONGO_URI", MONGO_URL)
    monkeypatch.setenv("TASKBOARD__MONGO_DB", db_name)
    reset_taskboard_config()
    reset_db()
    yield db_name
    reset_taskboard_config()
    reset_db()
    mongo_sync_client.drop_database(db_name)


@pytest_asyncio.fixture
async def board_db(board_env):
    """The initialized global ODM, with Beanie bound to the test database and its unique indexes created."""
    await initialize_db()
    try:
        yield get_db()
    finally:
        await close_db()
