"""
db/models/product.py

Product catalogue row loaded from supplier feeds.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Index, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Product(Base, TimestampMixin):
    """
    One sellable product, identified by its GTIN.

    Feed imports upsert on ``gtin``; every other column is overwritten by the
    latest feed row for that GTIN.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    gtin: Mapped[str] = mapped_column(
        String(14),
        nullable=False,
        comment="GTIN-8/12/13/14, digits only",
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    brand: Mapped[str | None] = mapped_column(String(120), nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
        default="EUR",
        comment="ISO 4217 code",
    )
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("gtin", name="uq_products_gtin"),
        Index("ix_products_brand", "brand"),
        Index("ix_products_is_active", "is_active"),
    )
