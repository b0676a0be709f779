"""Configuration for the task board service.

Uses taskdesk.core.Config for environment variable override support.
Environment variables use the TASKBOARD__ prefix (e.g., TASKBOARD__MONGO_URI=mongodb://mongo:27017).
"""

from typing import Optional

from pydantic import BaseModel, SecretStr

from taskdesk.core import Config


class TaskBoardSettings(BaseModel):
    """Task board service configuration settings."""

    # Service URL
    URL: str = "http://localhost:8080"

    # Database
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "taskboard"

    # Auth / JWT
    JWT_SECRET: SecretStr = SecretStr("dev-secret-key")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_IN: int = 60 * 60  # seconds

    # Misc
    LOG_LEVEL: str = "INFO"


_config: Optional[Config] = None


def get_taskboard_config() -> Config:
    """Load cached Config with TASKBOARD__ env override support.

    Examples:
        ```bash
        export TASKBOARD__JWT_EXPIRES_IN=7200
        ```

        ```python
        config = get_taskboard_config()
        print(config.TASKBOARD.URL)  # http://localhost:8080
        secret = config.get_secret("TASKBOARD", "JWT_SECRET")
        ```
    """
    global _config
    if _config is None:
        _config = Config.load(defaults={"TASKBOARD": TaskBoardSettings()})
    return _config


def reset_taskboard_config() -> None:
    """Reset config cache (useful in tests)."""
    global _config
    _config = None
