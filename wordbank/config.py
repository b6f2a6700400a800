"""
Configuration for the word library.

Values come from the environment (optionally a .env file).
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

# Load environment
load_dotenv()

# Fixed limits
MAX_CSV_BYTES = 10 * 1024 * 1024  # 10 MB
PROGRESS_ID = "progress"  # UserProgress singleton key

DEFAULT_DATABASE_URL = "sqlite:///wordbank.db"
TEST_DATABASE_URL = "sqlite:///test_wordbank.db"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_database_url() -> str:
    """
    Get the database URL from environment variables.

    TEST_MODE=true switches to a separate test database unless
    WORDBANK_DATABASE_URL is set explicitly.

    Returns:
        SQLAlchemy connection string
    """
    url = os.getenv("WORDBANK_DATABASE_URL")
    if url:
        return url
    if is_test_mode():
        return TEST_DATABASE_URL
    return DEFAULT_DATABASE_URL


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def get_max_words_per_import() -> int:
    """Maximum number of CSV rows accepted by a single import."""
    return _int_env("WORDBANK_MAX_WORDS_PER_IMPORT", 1000)


def get_max_review_words_per_session() -> int:
    """Maximum number of due words handed to one review session."""
    return _int_env("WORDBANK_MAX_REVIEW_WORDS_PER_SESSION", 50)


def get_log_level() -> str:
    return os.getenv("WORDBANK_LOG_LEVEL", "INFO").upper()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Install a single stderr sink at the given level.

    Args:
        level: Log level name (defaults to WORDBANK_LOG_LEVEL)
    """
    logger.remove()
    logger.add(sys.stderr, level=level or get_log_level())
