"""
feed_import/types.py

Value types shared by every stage of the import pipeline.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

# Header-ordered column -> raw string value, one per input record.
RawRow = Mapping[str, str]

# Field -> typed scalar, ready for storage.
CanonicalRow = Mapping[str, Any]


def freeze_row(values: Mapping[str, Any]) -> Mapping[str, Any]:
    """
    Return a read-only view over a copy of ``values``, preserving key order.
    """

    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Verdict for one row plus every violated rule, in rule order.
    """

    violations: tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.violations

    @classmethod
    def ok(cls) -> ValidationOutcome:
        return cls()

    @classmethod
    def failed(cls, violations: Sequence[str]) -> ValidationOutcome:
        return cls(violations=tuple(violations))


@dataclass(frozen=True)
class ImportResult:
    """
    End-of-run import summary.

    ``processed`` counts rows written by committed batches, ``skipped`` counts
    rows rejected by validation or mapping. Rows dropped by the row source for
    structural reasons appear in neither.
    """

    processed: int = 0
    skipped: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)
    batches: int = 0


class ImportState(str, Enum):
    INITIALIZING = "initializing"
    STREAMING = "streaming"
    FLUSHING = "flushing"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    FAILED = "failed"
