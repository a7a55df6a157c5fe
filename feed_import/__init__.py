"""
Streaming feed import engine.

Row sources, validators, mappers, and batch writers are plugged in through
the resolvers in ``feed_import.registry``; ``ImportOrchestrator`` drives a run.
"""

from feed_import.errors import (
    BatchWriteError,
    DuplicateRegistrationError,
    FeedImportError,
    FileAccessError,
    MappingError,
    RowValidationError,
    UnsupportedFormatError,
    UnsupportedTargetError,
)
from feed_import.orchestrator import ImportOrchestrator
from feed_import.registry import ImportTarget, SourceResolver, TargetResolver
from feed_import.types import ImportResult, ValidationOutcome

__all__ = [
    "BatchWriteError",
    "DuplicateRegistrationError",
    "FeedImportError",
    "FileAccessError",
    "ImportOrchestrator",
    "ImportResult",
    "ImportTarget",
    "MappingError",
    "RowValidationError",
    "SourceResolver",
    "TargetResolver",
    "UnsupportedFormatError",
    "UnsupportedTargetError",
    "ValidationOutcome",
]
