"""
feed_import/wiring.py

Registration tables for the formats and targets shipped with the project.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from feed_import.config import ImportSettings, get_import_settings
from feed_import.orchestrator import ImportOrchestrator
from feed_import.registry import SourceResolver, TargetResolver
from feed_import.sources import CSVRowSource, TSVRowSource
from products import build_product_target


def build_source_resolver() -> SourceResolver:
    return SourceResolver([CSVRowSource(), TSVRowSource()])


def build_target_resolver(session: Session) -> TargetResolver:
    return TargetResolver([build_product_target(session)])


def build_orchestrator(
    session: Session,
    *,
    settings: ImportSettings | None = None,
    batch_size: int | None = None,
) -> ImportOrchestrator:
    """
    Build an orchestrator whose targets write through ``session``.
    """

    return ImportOrchestrator(
        sources=build_source_resolver(),
        targets=build_target_resolver(session),
        settings=settings or get_import_settings(),
        batch_size=batch_size,
    )
