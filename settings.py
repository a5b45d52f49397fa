"""Central configuration for the health CLI."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

# Load environment variables from .env file
load_dotenv(BASE_DIR / ".env")


def env_number(name: str, default, cast=int):
    """Read a numeric environment variable, keeping the default when it does not parse."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a valid %s, using %s", name, raw, cast.__name__, default)
        return default


CLI_NAME = "health"
CLI_VERSION = "1.0.0"

# Day window accepted by hrv/sleep
MIN_DAYS = 1
MAX_DAYS = 90
DEFAULT_DAYS = env_number("HEALTH_DEFAULT_DAYS", 7)

# Import limits
MAX_IMPORT_SIZE_MB = env_number("HEALTH_MAX_IMPORT_MB", 100.0, cast=float)

LOG_LEVEL = os.getenv("HEALTH_LOG_LEVEL", "WARNING").upper()
