"""
feed_import/writers.py

Batch persistence through one multi-row INSERT ... ON CONFLICT DO UPDATE.

Statements are built with SQLAlchemy Core against the table object, so rows
never pass through the ORM unit of work. The caller's session only supplies
the connection and the transaction boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import Table
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from feed_import.contracts import BatchWriter
from feed_import.errors import BatchWriteError
from feed_import.types import CanonicalRow

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UpsertBatchWriter(BatchWriter):
    """
    Idempotent batch writer keyed by a unique conflict key.

    Every call commits on success and rolls back on failure, so one batch is
    either fully applied or not applied at all. Batches committed by earlier
    calls are never undone.
    """

    def __init__(
        self,
        *,
        session: Session,
        table: Table,
        conflict_key: Sequence[str],
        touch_on_update: Mapping[str, Any] | None = None,
    ) -> None:
        if not conflict_key:
            raise ValueError("conflict_key must name at least one column.")
        unknown = [column for column in conflict_key if column not in table.c]
        if unknown:
            raise ValueError(
                f"Conflict key column(s) {', '.join(unknown)} not found on table '{table.name}'."
            )
        self._session = session
        self._table = table
        self._conflict_key = tuple(conflict_key)
        self._touch_on_update = dict(touch_on_update or {})

    @property
    def table_name(self) -> str:
        return self._table.name

    def save_batch(self, rows: Sequence[CanonicalRow]) -> int:
        if not rows:
            return 0

        columns = list(rows[0].keys())
        missing_key = [column for column in self._conflict_key if column not in columns]
        if missing_key:
            raise BatchWriteError(
                f"Batch rows do not carry conflict key column(s): {', '.join(missing_key)}."
            )

        payloads = self._deduplicate(self._build_payloads(rows, columns))
        stmt = self._build_upsert(payloads, columns)

        try:
            self._session.execute(stmt)
            self._session.commit()
        except Exception as exc:  # noqa: BLE001
            # Driver-side bind errors (e.g. integer overflow) bypass SQLAlchemyError.
            self._session.rollback()
            raise BatchWriteError(
                f"Failed to upsert {len(payloads)} row(s) into '{self._table.name}' ({type(exc).__name__})."
            ) from exc

        logger.debug(
            "Upserted batch table=%s rows=%s unique_keys=%s",
            self._table.name,
            len(rows),
            len(payloads),
        )
        return len(rows)

    def _build_payloads(
        self,
        rows: Sequence[CanonicalRow],
        columns: list[str],
    ) -> list[dict[str, Any]]:
        expected = set(columns)
        payloads: list[dict[str, Any]] = []
        for position, row in enumerate(rows):
            if set(row.keys()) != expected:
                raise BatchWriteError(
                    f"Batch row {position} has columns {sorted(row.keys())}; "
                    f"expected {sorted(expected)}."
                )
            payloads.append({column: row[column] for column in columns})
        return payloads

    def _deduplicate(self, payloads: list[dict[str, Any]]) -> list[dict[str, Any]]:
        # A single statement may not touch the same key twice; last row wins.
        by_key: dict[tuple[Any, ...], dict[str, Any]] = {}
        for payload in payloads:
            key = tuple(payload[column] for column in self._conflict_key)
            by_key[key] = payload
        return list(by_key.values())

    def _build_upsert(self, payloads: list[dict[str, Any]], columns: list[str]) -> Any:
        dialect_name = self._dialect_name()
        insert = _UPSERT_DIALECTS.get(dialect_name)
        if insert is None:
            raise BatchWriteError(f"Upsert is not supported for dialect '{dialect_name}'.")

        stmt = insert(self._table).values(payloads)
        update_columns = [column for column in columns if column not in self._conflict_key]
        if not update_columns:
            return stmt.on_conflict_do_nothing(index_elements=list(self._conflict_key))

        assignments: dict[str, Any] = {column: stmt.excluded[column] for column in update_columns}
        for column, value in self._touch_on_update.items():
            assignments.setdefault(column, value)
        return stmt.on_conflict_do_update(
            index_elements=list(self._conflict_key),
            set_=assignments,
        )

    def _dialect_name(self) -> str:
        bind = self._session.get_bind()
        return bind.dialect.name
