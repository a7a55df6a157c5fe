"""
feed_import/contracts.py

Abstract stage interfaces the orchestrator drives.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from pathlib import Path

from feed_import.types import CanonicalRow, RawRow, ValidationOutcome


class RowSource(ABC):
    """
    Streams raw rows out of one feed format.
    """

    @property
    @abstractmethod
    def format(self) -> str:
        """
        Format identifier this source is registered under, e.g. ``csv``.
        """

    @abstractmethod
    def read(self, path: str | Path) -> Iterator[RawRow]:
        """
        Open ``path`` and return a lazy iterator of raw rows.

        Must raise FileAccessError immediately when the file cannot be
        opened, before any row is requested.
        """


class RowValidator(ABC):
    """
    Target-specific rule check for one raw row.
    """

    @abstractmethod
    def validate(self, row: RawRow) -> ValidationOutcome:
        """
        Return the verdict and every violated rule for ``row``.
        """


class RowMapper(ABC):
    """
    Converts a validated raw row into the storage shape.
    """

    @abstractmethod
    def map(self, row: RawRow) -> CanonicalRow:
        """
        Coerce ``row`` into a canonical row, raising MappingError on failure.
        """


class BatchWriter(ABC):
    """
    Idempotent batch persistence for canonical rows.
    """

    @abstractmethod
    def save_batch(self, rows: Sequence[CanonicalRow]) -> int:
        """
        Upsert ``rows`` atomically and return the number of rows sent.
        """
