"""
db/config.py

Destination database settings for feed imports.

The importer writes through one upsert dialect per engine, so the URL is
checked up front against the dialects the batch writer can target.
Environment values may come from the process or from `.env` / `.env.local`
in the project root; the process always wins.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

UPSERT_DIALECTS: tuple[str, ...] = ("postgresql", "sqlite")
DATABASE_URL_ENV_VARS: tuple[str, ...] = ("FEED_IMPORT_DATABASE_URL", "DATABASE_URL")

_PROJECT_ROOT = Path(__file__).resolve().parents[1]


@lru_cache(maxsize=1)
def load_env_files() -> None:
    """
    Copy KEY=VALUE pairs from project `.env` files into os.environ, once.
    """

    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
        if not env_path.is_file():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = (part.strip() for part in line.split("=", 1))
            if key:
                os.environ.setdefault(key, value.strip("\"'"))


def env_bool(name: str, default: bool) -> bool:
    load_env_files()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    """
    Integer environment value; unparsable values fall back to ``default``.
    """

    load_env_files()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def normalize_database_url(url: str) -> str:
    """
    Point bare postgres URLs at the psycopg 3 driver.
    """

    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def url_dialect(url: str) -> str:
    """Dialect name of a SQLAlchemy URL, e.g. ``postgresql`` for ``postgresql+psycopg://``."""
    return url.split("://", 1)[0].split("+", 1)[0]


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Connection settings for the import destination.

    Pool settings only apply to server databases; SQLite engines ignore them.
    """

    url: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle: int = 1800

    @property
    def dialect(self) -> str:
        return url_dialect(self.url)

    @property
    def is_sqlite(self) -> bool:
        return self.dialect == "sqlite"


def resolve_database_url() -> str:
    """
    First configured URL from FEED_IMPORT_DATABASE_URL, then DATABASE_URL.

    Raises RuntimeError when none is set or the dialect has no upsert support.
    """

    load_env_files()
    for name in DATABASE_URL_ENV_VARS:
        raw_url = (os.getenv(name) or "").strip()
        if not raw_url:
            continue
        url = normalize_database_url(raw_url)
        if url_dialect(url) not in UPSERT_DIALECTS:
            raise RuntimeError(
                f"{name} uses dialect '{url_dialect(url)}'; feed imports support "
                f"{', '.join(UPSERT_DIALECTS)}."
            )
        return url

    raise RuntimeError(
        f"No import destination configured. Set {' or '.join(DATABASE_URL_ENV_VARS)}."
    )


def get_database_settings() -> DatabaseSettings:
    return DatabaseSettings(
        url=resolve_database_url(),
        echo=env_bool("SQL_ECHO", False),
        pool_size=env_int("DB_POOL_SIZE", 5),
        max_overflow=env_int("DB_MAX_OVERFLOW", 10),
        pool_recycle=env_int("DB_POOL_RECYCLE", 1800),
    )
