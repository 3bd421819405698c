import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from debug_runtime.config.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_HISTORY_SIZE,
    LOG_LEVEL_ENV,
    MAX_HISTORY_SIZE_ENV,
)

logger = logging.getLogger(__name__)


class EngineSettings(BaseModel):
    """Runtime configuration for the command execution engine"""

    max_history_size: int = Field(
        DEFAULT_MAX_HISTORY_SIZE,
        gt=0,
        description="Number of executions kept in the rolling history",
    )
    log_level: str = Field(
        DEFAULT_LOG_LEVEL, description="Log level for the debug_runtime loggers"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level: {value}")
        return level

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "EngineSettings":
        """
        Build settings from environment variables.

        Variables from `env_file` (when it exists) are loaded first without
        overriding anything already set in the process environment.

        Args:
            env_file: Optional path to a .env file

        Returns:
            EngineSettings populated from the environment, falling back to defaults

        Raises:
            pydantic.ValidationError: When a variable holds an invalid value
        """
        if env_file and os.path.exists(env_file):
            load_dotenv(env_file)
            logger.info(f"Loaded environment from {env_file}")
        elif env_file:
            logger.debug(f"No .env file found at {env_file}, using system environment")

        values = {}
        max_history = os.environ.get(MAX_HISTORY_SIZE_ENV)
        if max_history:
            values["max_history_size"] = max_history
        log_level = os.environ.get(LOG_LEVEL_ENV)
        if log_level:
            values["log_level"] = log_level

        return cls(**values)
