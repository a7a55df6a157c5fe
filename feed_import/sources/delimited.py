"""
feed_import/sources/delimited.py

Row sources for delimiter-separated feeds (CSV, TSV).
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import TextIO

from feed_import.contracts import RowSource
from feed_import.errors import FileAccessError
from feed_import.logging_utils import log_event
from feed_import.types import RawRow, freeze_row

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


def normalize_headers(headers: Sequence[str]) -> list[str]:
    """
    Strip a leading byte-order mark, trim, and lower-case header names.
    """

    normalized = [header.strip().lower() for header in headers]
    if normalized:
        normalized[0] = normalized[0].lstrip(_BOM).strip()
    return normalized


def is_empty_record(record: Sequence[str]) -> bool:
    """
    True for a blank line: no fields, or one whitespace-only field.

    A delimiter-only line such as ",,," is a real record with empty values
    and is yielded so that validation can report it.
    """

    return not record or (len(record) == 1 and not record[0].strip())


class DelimitedRowSource(RowSource):
    """
    Streams one record at a time from a delimited text file.

    The first line is the header. Blank lines and records whose field
    count differs from the header are dropped without being reported.
    """

    def __init__(self, *, format: str, delimiter: str, quotechar: str = '"') -> None:
        self._format = format.strip().lower()
        self._delimiter = delimiter
        self._quotechar = quotechar

    @property
    def format(self) -> str:
        return self._format

    def read(self, path: str | Path) -> Iterator[RawRow]:
        file_path = Path(path)
        try:
            handle = file_path.open("r", encoding="utf-8-sig", newline="")
        except OSError as exc:
            raise FileAccessError(
                f"Cannot open {self._format.upper()} file: {file_path}"
            ) from exc
        return self._iter_rows(handle, file_path)

    def _iter_rows(self, handle: TextIO, path: Path) -> Iterator[RawRow]:
        with handle:
            reader = csv.reader(
                handle,
                delimiter=self._delimiter,
                quotechar=self._quotechar,
                doublequote=True,
                strict=False,
            )
            try:
                header_record = next(reader, None)
                if header_record is None:
                    return

                headers = normalize_headers(header_record)
                width = len(headers)
                emitted = 0
                dropped = 0

                for record in reader:
                    if is_empty_record(record):
                        continue
                    if len(record) != width:
                        dropped += 1
                        logger.debug(
                            "Dropping malformed record path=%s line=%s fields=%s expected=%s",
                            path,
                            reader.line_num,
                            len(record),
                            width,
                        )
                        continue

                    emitted += 1
                    yield freeze_row(dict(zip(headers, record)))
            except UnicodeDecodeError as exc:
                raise FileAccessError(f"Feed file is not valid UTF-8: {path}") from exc
            except csv.Error as exc:
                raise FileAccessError(f"Invalid {self._format.upper()} content in {path}: {exc}") from exc

            log_event(
                logger,
                logging.DEBUG if dropped == 0 else logging.INFO,
                "feed_source_exhausted",
                path=str(path),
                format=self._format,
                rows_emitted=emitted,
                rows_dropped=dropped,
            )


class CSVRowSource(DelimitedRowSource):
    """Comma-separated feed with double-quote enclosure."""

    def __init__(self) -> None:
        super().__init__(format="csv", delimiter=",")


class TSVRowSource(DelimitedRowSource):
    """Tab-separated feed with double-quote enclosure."""

    def __init__(self) -> None:
        super().__init__(format="tsv", delimiter="\t")
