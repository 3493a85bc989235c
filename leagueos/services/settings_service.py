"""
Settings service for runtime configuration.

Values come from environment variables (optionally loaded from a .env file)
and are read once at import time, except where a getter re-reads them.
"""

import os
import logging
from typing import Dict, Optional
from dotenv import load_dotenv

from leagueos.services.session_service import SessionSelectionPolicy

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_bool_env(key: str, default: bool = True) -> bool:
    """
    Parse a boolean environment variable from a string value.

    Args:
        key: Environment variable name
        default: Default value if the variable is not set

    Returns:
        bool: Parsed boolean value
    """
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


def get_int_env(key: str, default: int) -> int:
    """Parse an integer environment variable, falling back to default on bad input."""
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key}: {value!r}, using {default}")
        return default


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_CLUB_ID = get_int_env("LEAGUEOS_DEFAULT_CLUB_ID", 1)
RECENT_LIMIT = get_int_env("LEAGUEOS_RECENT_LIMIT", 5)
TIMEZONE: Optional[str] = os.getenv("LEAGUEOS_TIMEZONE") or None
SOFT_DUPLICATE_CHECK = get_bool_env("LEAGUEOS_SOFT_DUPLICATE_CHECK", default=True)

# Display names used when a club is not in the caller's club list
CLUB_NAME_FALLBACK: Dict[int, str] = {
    1: "Fraser Valley Badminton Club",
    2: "BC Panthers Badminton Club",
    3: "SuperGiants Badminton Club",
    4: "Redhawks Badminton Club",
}


def configure_logging(level: Optional[str] = None) -> None:
    """
    Set up root logging.

    Args:
        level: Level name such as "DEBUG"; defaults to LOG_LEVEL
    """
    level_name = (level or LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric_level)
    logger.info(f"Log level set to {logging.getLevelName(numeric_level)}")


def get_session_policy() -> SessionSelectionPolicy:
    """
    Session selection policy configured for game recording.

    Reads LEAGUEOS_SESSION_POLICY on every call ("STRICT" or
    "LATEST_OPEN_OR_CLOSED"). Unknown values fall back to STRICT.
    """
    raw = os.getenv("LEAGUEOS_SESSION_POLICY", SessionSelectionPolicy.STRICT.value)
    try:
        return SessionSelectionPolicy(raw.strip().upper())
    except ValueError:
        logger.warning(f"Unknown session policy {raw!r}, using STRICT")
        return SessionSelectionPolicy.STRICT
