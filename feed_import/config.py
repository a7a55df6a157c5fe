"""
feed_import/config.py

Environment-driven settings for import runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from db.config import env_bool, env_int

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000

# One batch is one INSERT statement. PostgreSQL accepts at most 65535 bind
# parameters per statement, which 5000 rows stay under for up to 13 columns.
MAX_BATCH_SIZE = 5000

DEFAULT_MAX_RECORDED_ERRORS = 10_000


def clamp_batch_size(value: int) -> int:
    """
    Bring ``value`` into 1..MAX_BATCH_SIZE, logging when it had to move.
    """

    clamped = min(max(1, value), MAX_BATCH_SIZE)
    if clamped != value:
        logger.warning("Batch size %s out of range; using %s", value, clamped)
    return clamped


@dataclass(frozen=True)
class ImportSettings:
    batch_size: int = DEFAULT_BATCH_SIZE
    max_recorded_errors: int = DEFAULT_MAX_RECORDED_ERRORS
    log_row_errors: bool = True


@lru_cache(maxsize=1)
def get_import_settings() -> ImportSettings:
    """
    Cached settings from FEED_IMPORT_* environment variables.
    """

    return ImportSettings(
        batch_size=clamp_batch_size(env_int("FEED_IMPORT_BATCH_SIZE", DEFAULT_BATCH_SIZE)),
        max_recorded_errors=max(
            1, env_int("FEED_IMPORT_MAX_RECORDED_ERRORS", DEFAULT_MAX_RECORDED_ERRORS)
        ),
        log_row_errors=env_bool("FEED_IMPORT_LOG_ROW_ERRORS", True),
    )
