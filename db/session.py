"""
db/session.py

Engine and session plumbing for import runs.

Batch writers commit per batch, so sessions are created with autoflush off
and keep loaded attributes after commit.
"""

from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from db.config import DatabaseSettings, get_database_settings

_IN_MEMORY_SQLITE_URLS = {"sqlite://", "sqlite:///:memory:"}


def create_db_engine(settings: DatabaseSettings | None = None) -> Engine:
    settings = settings or get_database_settings()

    if settings.is_sqlite:
        # The HTTP API runs sync endpoints on a worker thread.
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if settings.url in _IN_MEMORY_SQLITE_URLS:
            kwargs["poolclass"] = StaticPool
        return create_engine(settings.url, echo=settings.echo, **kwargs)

    return create_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_recycle=settings.pool_recycle,
    )


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Process-wide engine, created on first use."""
    return create_db_engine()


@lru_cache(maxsize=1)
def _session_factory() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def SessionLocal() -> Session:
    return _session_factory()()


def dispose_engine() -> None:
    """
    Close pooled connections and forget the cached engine.
    """

    if get_engine.cache_info().currsize:
        get_engine().dispose()
    _session_factory.cache_clear()
    get_engine.cache_clear()


def get_db() -> Generator[Session, None, None]:
    with SessionLocal() as db:
        yield db
