"""Configuration, paths and logging setup for MealLab."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# App directories
APP_NAME = "meallab"
CONFIG_DIR = Path(os.getenv("MEALLAB_DATA_DIR") or Path.home() / f".{APP_NAME}").expanduser()

# API Configuration
API_BASE_URL = os.getenv("MEALLAB_API_URL", "https://www.themealdb.com/api/json/v1/1").rstrip("/")
CONNECT_TIMEOUT = 8.0


def get_timeout(default: float = 12.0) -> float:
    """Get the configured read timeout in seconds, falling back to the default."""
    try:
        timeout = float(os.getenv("MEALLAB_TIMEOUT", default))
    except ValueError:
        return default
    return timeout if timeout > 0 else default


READ_TIMEOUT = get_timeout()

# How many search results the front ends show by default
DEFAULT_RESULT_LIMIT = 10

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_level(default: str = "WARNING") -> str:
    """Get the configured log level name, falling back to the default."""
    level = os.getenv("MEALLAB_LOG_LEVEL", default).upper()
    if not isinstance(logging.getLevelName(level), int):
        return default
    return level


def setup_logging(level: str | None = None) -> None:
    """Set up logging for the command line front end."""
    logging.basicConfig(
        level=getattr(logging, level.upper() if level else get_log_level()),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
