"""
Product feed target: validation rules, row mapping, and upsert persistence.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from feed_import.registry import ImportTarget
from products.mapper import ProductRowMapper
from products.repository import ProductRepository
from products.validator import ProductRowValidator

PRODUCT_TARGET_KEY = "product"


def build_product_target(session: Session) -> ImportTarget:
    """
    Bundle the product validator, mapper, and repository for one session.
    """

    return ImportTarget(
        key=PRODUCT_TARGET_KEY,
        validator=ProductRowValidator(),
        mapper=ProductRowMapper(),
        writer=ProductRepository(session),
    )


__all__ = [
    "PRODUCT_TARGET_KEY",
    "ProductRepository",
    "ProductRowMapper",
    "ProductRowValidator",
    "build_product_target",
]
