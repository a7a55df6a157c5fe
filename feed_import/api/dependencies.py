"""
feed_import/api/dependencies.py

Shared FastAPI dependencies for feed uploads and orchestrator wiring.
"""

from __future__ import annotations

from fastapi import Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from db.session import get_db
from feed_import.orchestrator import ImportOrchestrator
from feed_import.wiring import build_orchestrator

FEED_FILE_EXTENSIONS = (".csv", ".tsv", ".txt")

FEED_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "text/tab-separated-values",
    "text/plain",
    "application/vnd.ms-excel",
}


def get_feed_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file looks like a delimited text feed.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    if not filename.endswith(FEED_FILE_EXTENSIONS) and content_type not in FEED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only delimited text feeds (CSV, TSV) are allowed.",
        )

    return file


def get_import_orchestrator(db: Session = Depends(get_db)) -> ImportOrchestrator:
    return build_orchestrator(db)
