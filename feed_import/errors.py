"""
feed_import/errors.py

Exception taxonomy for the feed import pipeline.

Fatal errors (resolution, file access, batch write) propagate to the caller.
Row-level errors (validation, mapping) are collected into the ImportResult
and never escape the orchestrator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from feed_import.types import ImportResult


class FeedImportError(Exception):
    """Base exception for feed import failures."""


class DuplicateRegistrationError(FeedImportError, ValueError):
    """Raised when a resolver table is built with a repeated key."""


class UnsupportedFormatError(FeedImportError, LookupError):
    """Raised when no row source is registered for a feed format."""

    def __init__(self, fmt: str, allowed: list[str]) -> None:
        allowed_csv = ", ".join(allowed) or "<none>"
        super().__init__(f"Unsupported feed format '{fmt}'. Allowed formats: {allowed_csv}.")
        self.format = fmt
        self.allowed = tuple(allowed)


class UnsupportedTargetError(FeedImportError, LookupError):
    """Raised when no pipeline is registered for an import target."""

    def __init__(self, target: str, allowed: list[str]) -> None:
        allowed_csv = ", ".join(allowed) or "<none>"
        super().__init__(f"Unsupported import target '{target}'. Allowed targets: {allowed_csv}.")
        self.target = target
        self.allowed = tuple(allowed)


class FileAccessError(FeedImportError, OSError):
    """Raised when a feed file is missing or cannot be opened."""


class RowValidationError(FeedImportError, ValueError):
    """
    One row failed target validation.

    The orchestrator builds these from a ValidationOutcome for logging and
    accounting; they are recorded, never raised to the caller.
    """

    def __init__(self, row_number: int, violations: list[str]) -> None:
        super().__init__("; ".join(violations))
        self.row_number = row_number
        self.violations = tuple(violations)


class MappingError(FeedImportError, ValueError):
    """Raised by a row mapper when a validated value cannot be coerced."""

    def __init__(self, message: str, *, column: str | None = None) -> None:
        super().__init__(message)
        self.column = column


class BatchWriteError(FeedImportError, RuntimeError):
    """
    Raised when a batch cannot be persisted.

    ``result`` holds the ImportResult accumulated up to the failure; its
    ``processed`` count only includes rows from batches already committed.
    """

    def __init__(self, message: str, *, result: ImportResult | None = None) -> None:
        super().__init__(message)
        self.result = result
