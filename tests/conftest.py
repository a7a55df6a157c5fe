"""
Shared fixtures: in-memory SQLite destination and feed file builders.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import db.models  # noqa: F401  registers Product on Base.metadata
from db.base import Base
from feed_import.config import ImportSettings
from feed_import.errors import BatchWriteError
from feed_import.orchestrator import ImportOrchestrator
from products.fields import gtin_check_digit

PRODUCT_HEADER = ("gtin", "title", "description", "brand", "price", "currency", "stock", "is_active")


def make_gtin(seed: int) -> str:
    """Valid GTIN-13 derived from ``seed``."""
    body = f"{seed:012d}"
    return body + str(gtin_check_digit(body))


def product_line(seed: int, *, price: str = "19.99", title: str | None = None) -> str:
    return ",".join(
        (
            make_gtin(seed),
            title or f"Product {seed}",
            "",
            "Acme",
            price,
            "eur",
            str(seed % 50),
            "yes",
        )
    )


def fail_on_batch(orchestrator: ImportOrchestrator, call_number: int, target: str = "product") -> ImportOrchestrator:
    """
    Make the target's writer raise BatchWriteError on its ``call_number``-th batch.
    """

    writer = orchestrator._targets.resolve(target).writer
    save_batch = writer.save_batch
    calls = []

    def _save_batch(rows):
        calls.append(len(rows))
        if len(calls) == call_number:
            raise BatchWriteError("connection lost during upsert")
        return save_batch(rows)

    writer.save_batch = _save_batch
    return orchestrator


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def session(session_factory: sessionmaker) -> Iterator[Session]:
    with session_factory() as db:
        yield db


@pytest.fixture()
def quiet_settings() -> ImportSettings:
    return ImportSettings(batch_size=1000, max_recorded_errors=10_000, log_row_errors=False)


@pytest.fixture()
def write_feed(tmp_path: Path) -> Callable[..., Path]:
    """Write header + lines to a feed file and return its path."""

    def _write(
        lines: Sequence[str],
        *,
        header: Sequence[str] | str = PRODUCT_HEADER,
        name: str = "feed.csv",
        encoding: str = "utf-8",
    ) -> Path:
        header_line = header if isinstance(header, str) else ",".join(header)
        path = tmp_path / name
        path.write_text("\n".join([header_line, *lines]) + "\n", encoding=encoding)
        return path

    return _write
