"""
feed_import/api/routers.py

Feed import HTTP endpoints.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status

from feed_import.api.dependencies import get_feed_upload, get_import_orchestrator
from feed_import.api.schemas import ImportSummaryResponse
from feed_import.errors import (
    BatchWriteError,
    FileAccessError,
    UnsupportedFormatError,
    UnsupportedTargetError,
)
from feed_import.orchestrator import ImportOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["imports"])


@router.post("/imports/{target}", response_model=ImportSummaryResponse)
def import_feed(
    target: str,
    file: UploadFile = Depends(get_feed_upload),
    feed_format: str = Query(
        default="csv",
        alias="format",
        description="Feed format, e.g. csv or tsv",
    ),
    orchestrator: ImportOrchestrator = Depends(get_import_orchestrator),
) -> ImportSummaryResponse:
    """
    Spool one uploaded feed to disk and import it into ``target``.
    """

    spool_path: str | None = None
    try:
        suffix = f".{feed_format}" if feed_format.isalnum() else ""
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as spool:
            shutil.copyfileobj(file.file, spool)
            spool_path = spool.name

        result = orchestrator.run(target, spool_path, feed_format)
    except (UnsupportedTargetError, UnsupportedFormatError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except FileAccessError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except BatchWriteError as exc:
        detail: dict[str, object] = {"message": str(exc)}
        if exc.result is not None:
            detail["partial"] = ImportSummaryResponse.from_result(
                target=target,
                format=feed_format,
                result=exc.result,
            ).model_dump()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        ) from exc
    finally:
        file.file.close()
        if spool_path is not None:
            try:
                os.unlink(spool_path)
            except OSError:
                logger.warning("Could not remove spooled feed file path=%s", spool_path)

    return ImportSummaryResponse.from_result(target=target, format=feed_format, result=result)
