"""
feed_import/registry.py

Keyed lookup tables for row sources and import targets.

Both tables are built once from a registration list. Duplicate keys are a
wiring mistake and are rejected when the table is built, so an unknown key at
lookup time always means the caller asked for something that was never
registered.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from feed_import.contracts import BatchWriter, RowMapper, RowSource, RowValidator
from feed_import.errors import (
    DuplicateRegistrationError,
    UnsupportedFormatError,
    UnsupportedTargetError,
)

T = TypeVar("T")


def normalize_key(key: str) -> str:
    return key.strip().lower()


@dataclass(frozen=True)
class ImportTarget:
    """
    Pipeline bundle for one destination: rules, shape, and persistence.
    """

    key: str
    validator: RowValidator
    mapper: RowMapper
    writer: BatchWriter


class _KeyedRegistry(Generic[T]):
    def __init__(self, entries: Iterable[T], *, key_of: Callable[[T], str], kind: str) -> None:
        table: dict[str, T] = {}
        for entry in entries:
            key = normalize_key(key_of(entry))
            if not key:
                raise DuplicateRegistrationError(f"{kind} registered with an empty key.")
            if key in table:
                raise DuplicateRegistrationError(f"{kind} '{key}' is registered more than once.")
            table[key] = entry
        self._entries = table

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._entries

    def _lookup(self, key: str) -> T | None:
        return self._entries.get(normalize_key(key))


class SourceResolver(_KeyedRegistry[RowSource]):
    """
    Maps a feed format identifier to its row source.
    """

    def __init__(self, sources: Iterable[RowSource]) -> None:
        super().__init__(sources, key_of=lambda source: source.format, kind="Row source")

    def resolve(self, fmt: str) -> RowSource:
        source = self._lookup(fmt)
        if source is None:
            raise UnsupportedFormatError(fmt, self.keys())
        return source


class TargetResolver(_KeyedRegistry[ImportTarget]):
    """
    Maps an import target identifier to its pipeline bundle.
    """

    def __init__(self, targets: Iterable[ImportTarget]) -> None:
        super().__init__(targets, key_of=lambda target: target.key, kind="Import target")

    def resolve(self, target: str) -> ImportTarget:
        resolved = self._lookup(target)
        if resolved is None:
            raise UnsupportedTargetError(target, self.keys())
        return resolved
