"""
feed_import/orchestrator.py

Drives one import run: stream rows, validate, map, buffer, and flush in
bounded batches.

Run lifecycle:

    INITIALIZING -> STREAMING -> (FLUSHING -> STREAMING)* -> FINALIZING -> COMPLETED

Any failure moves the run to FAILED. Target/format/file resolution happens
entirely in INITIALIZING, so those errors surface before a single row is read.
A batch write failure raises BatchWriteError carrying the partial result;
batches flushed before the failure stay committed.

Memory is bounded by the batch size: the source yields one row at a time and
the buffer is cleared after every flush.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from pathlib import Path

from feed_import.config import ImportSettings, clamp_batch_size, get_import_settings
from feed_import.errors import BatchWriteError, FeedImportError, MappingError, RowValidationError
from feed_import.logging_utils import log_event
from feed_import.registry import ImportTarget, SourceResolver, TargetResolver
from feed_import.types import CanonicalRow, ImportResult, ImportState, RawRow

logger = logging.getLogger(__name__)


class _ImportRun:
    """
    Mutable accounting for a single run. Never shared between runs.
    """

    def __init__(
        self,
        *,
        target: str,
        path: Path,
        batch_size: int,
        max_recorded_errors: int,
        log_row_errors: bool,
    ) -> None:
        self.target = target
        self.path = path
        self.state = ImportState.INITIALIZING
        self.processed = 0
        self.skipped = 0
        self.batches = 0
        self.errors: list[str] = []
        self.buffer: list[CanonicalRow] = []
        self._batch_size = batch_size
        self._max_recorded_errors = max_recorded_errors
        self._log_row_errors = log_row_errors
        self._errors_truncated = False

    def transition(self, state: ImportState) -> None:
        logger.debug("Import run %s -> %s target=%s path=%s", self.state.value, state.value, self.target, self.path)
        self.state = state

    @property
    def buffer_full(self) -> bool:
        return len(self.buffer) >= self._batch_size

    def reject(self, error: RowValidationError) -> None:
        self.skipped += 1
        for violation in error.violations:
            self._record_error(f"row {error.row_number}: {violation}")

    def snapshot(self) -> ImportResult:
        return ImportResult(
            processed=self.processed,
            skipped=self.skipped,
            errors=tuple(self.errors),
            batches=self.batches,
        )

    def _record_error(self, message: str) -> None:
        if self._log_row_errors:
            logger.warning("Import row rejected target=%s %s", self.target, message)

        if len(self.errors) < self._max_recorded_errors:
            self.errors.append(message)
        elif not self._errors_truncated:
            self._errors_truncated = True
            logger.warning(
                "Recorded error limit reached target=%s limit=%s; further row errors are counted only",
                self.target,
                self._max_recorded_errors,
            )


class ImportOrchestrator:
    """
    Coordinates row source, validator, mapper, and batch writer for one feed.
    """

    def __init__(
        self,
        *,
        sources: SourceResolver,
        targets: TargetResolver,
        settings: ImportSettings | None = None,
        batch_size: int | None = None,
    ) -> None:
        self._sources = sources
        self._targets = targets
        self._settings = settings or get_import_settings()
        self._batch_size = clamp_batch_size(
            batch_size if batch_size is not None else self._settings.batch_size
        )

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def run(self, target: str, path: str | Path, fmt: str = "csv") -> ImportResult:
        """
        Import one feed file into ``target`` and return the run summary.

        Raises UnsupportedTargetError, UnsupportedFormatError, or
        FileAccessError before any row is read, and BatchWriteError (with
        ``.result`` set) when a flush fails mid-run.
        """

        run = _ImportRun(
            target=target,
            path=Path(path),
            batch_size=self._batch_size,
            max_recorded_errors=self._settings.max_recorded_errors,
            log_row_errors=self._settings.log_row_errors,
        )
        started = time.perf_counter()

        try:
            pipeline = self._targets.resolve(target)
            source = self._sources.resolve(fmt)
            rows = source.read(run.path)
        except FeedImportError as exc:
            run.transition(ImportState.FAILED)
            log_event(
                logger,
                logging.ERROR,
                "import_run_rejected",
                target=target,
                format=fmt,
                path=str(run.path),
                error=str(exc),
            )
            raise

        log_event(
            logger,
            logging.INFO,
            "import_run_started",
            target=target,
            format=source.format,
            path=str(run.path),
            batch_size=self._batch_size,
        )

        try:
            self._stream(run, pipeline, rows)
        except BatchWriteError as exc:
            run.transition(ImportState.FAILED)
            exc.result = run.snapshot()
            self._log_failure(run, exc, started)
            raise
        except FeedImportError as exc:
            run.transition(ImportState.FAILED)
            self._log_failure(run, exc, started)
            raise

        run.transition(ImportState.COMPLETED)
        result = run.snapshot()
        log_event(
            logger,
            logging.INFO,
            "import_run_completed",
            target=target,
            path=str(run.path),
            processed=result.processed,
            skipped=result.skipped,
            batches=result.batches,
            elapsed_seconds=round(time.perf_counter() - started, 3),
        )
        return result

    def _stream(self, run: _ImportRun, pipeline: ImportTarget, rows: Iterator[RawRow]) -> None:
        run.transition(ImportState.STREAMING)

        for row_number, raw_row in enumerate(rows, start=1):
            canonical = self._prepare_row(run, pipeline, raw_row, row_number)
            if canonical is None:
                continue

            run.buffer.append(canonical)
            if run.buffer_full:
                run.transition(ImportState.FLUSHING)
                self._flush(run, pipeline)
                run.transition(ImportState.STREAMING)

        run.transition(ImportState.FINALIZING)
        if run.buffer:
            self._flush(run, pipeline)

    def _prepare_row(
        self,
        run: _ImportRun,
        pipeline: ImportTarget,
        raw_row: RawRow,
        row_number: int,
    ) -> CanonicalRow | None:
        outcome = pipeline.validator.validate(raw_row)
        if not outcome.valid:
            violations = list(outcome.violations) or ["row failed validation"]
            run.reject(RowValidationError(row_number, violations))
            return None

        try:
            return pipeline.mapper.map(raw_row)
        except MappingError as exc:
            run.reject(RowValidationError(row_number, [str(exc)]))
            return None

    def _flush(self, run: _ImportRun, pipeline: ImportTarget) -> None:
        batch_rows = len(run.buffer)
        pipeline.writer.save_batch(list(run.buffer))
        run.processed += batch_rows
        run.batches += 1
        run.buffer.clear()
        log_event(
            logger,
            logging.DEBUG,
            "import_batch_flushed",
            target=run.target,
            batch=run.batches,
            rows=batch_rows,
            processed=run.processed,
        )

    @staticmethod
    def _log_failure(run: _ImportRun, exc: Exception, started: float) -> None:
        log_event(
            logger,
            logging.ERROR,
            "import_run_failed",
            target=run.target,
            path=str(run.path),
            processed=run.processed,
            skipped=run.skipped,
            batches=run.batches,
            error=str(exc),
            elapsed_seconds=round(time.perf_counter() - started, 3),
        )
