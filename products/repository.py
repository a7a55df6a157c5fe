"""
products/repository.py

Batch upsert persistence for the ``products`` table.
"""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from db.models.product import Product
from feed_import.writers import UpsertBatchWriter

PRODUCT_CONFLICT_KEY: tuple[str, ...] = ("gtin",)


class ProductRepository(UpsertBatchWriter):
    """
    Upserts product rows on ``gtin``; existing products take the incoming
    values for every other feed column and get a fresh ``updated_at``.
    """

    def __init__(self, session: Session) -> None:
        super().__init__(
            session=session,
            table=Product.__table__,
            conflict_key=PRODUCT_CONFLICT_KEY,
            touch_on_update={"updated_at": func.now()},
        )
