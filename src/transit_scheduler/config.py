"""
Configuration module for the Transit Scheduler.

This module handles loading environment variables and provides
centralized configuration for storage backends and schedule defaults.
The operator's preferred schedule form values can be persisted to a
JSON file and restored on the next run.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from src.transit_scheduler.exceptions import InvalidConfigurationError
from src.transit_scheduler.schemas.schedule import ScheduleConfig

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class Config:
    """
    Application configuration class.

    Attributes:
        DATA_STORE: Backend to use: "sqlite", "supabase" or "memory".
        DB_PATH: SQLite database path.
        SUPABASE_URL: Hosted project URL.
        SUPABASE_KEY: Hosted project API key.
        SCHEDULE_CONFIG_PATH: JSON file with saved schedule form values.
        LOG_LEVEL: Root log level for entry points.
    """

    DATA_STORE: str = os.getenv("TRANSIT_DATA_STORE", "sqlite").strip().lower()
    DB_PATH: str = os.getenv("TRANSIT_DB_PATH", "data/transit.db")
    SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL")
    SUPABASE_KEY: Optional[str] = os.getenv("SUPABASE_KEY")
    SCHEDULE_CONFIG_PATH: str = os.getenv(
        "SCHEDULE_CONFIG_PATH", "data/schedule_config.json"
    )
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def get_config_dict(cls) -> dict:
        """Return configuration as dictionary (for debugging)."""
        return {
            "DATA_STORE": cls.DATA_STORE,
            "DB_PATH": cls.DB_PATH,
            "SUPABASE_URL": cls.SUPABASE_URL,
            "SUPABASE_KEY": "***" if cls.SUPABASE_KEY else None,
            "SCHEDULE_CONFIG_PATH": cls.SCHEDULE_CONFIG_PATH,
            "LOG_LEVEL": cls.LOG_LEVEL,
        }


def load_schedule_config(path: Union[str, Path, None] = None) -> ScheduleConfig:
    """
    Load saved schedule form values, falling back to defaults.

    A missing file yields the default configuration and keys absent
    from the file take their default values.

    Args:
        path: JSON file. Defaults to Config.SCHEDULE_CONFIG_PATH.

    Returns:
        Validated ScheduleConfig.

    Raises:
        InvalidConfigurationError: If the file is not valid JSON or a
            stored value is invalid.
    """
    path = Path(path or Config.SCHEDULE_CONFIG_PATH)
    if not path.exists():
        logger.debug("No saved schedule config at %s, using defaults", path)
        return ScheduleConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfigurationError(
            "schedule_config", f"{path} is not valid JSON: {e}"
        ) from e

    if not isinstance(data, dict):
        raise InvalidConfigurationError(
            "schedule_config", f"{path} must contain a JSON object"
        )

    config = ScheduleConfig.from_dict(data)
    logger.info("Loaded schedule config from %s", path)
    return config


def save_schedule_config(
    config: ScheduleConfig,
    path: Union[str, Path, None] = None,
) -> Path:
    """
    Persist schedule form values as JSON.

    Returns:
        Path written.
    """
    path = Path(path or Config.SCHEDULE_CONFIG_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.debug("Saved schedule config to %s", path)
    return path
