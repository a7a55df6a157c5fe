"""
db/base.py

Declarative base and shared mixins for import destination tables.
"""

from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Project-wide declarative base.
    All destination tables must inherit from this class.
    """


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at to a destination table.

    Upserts bypass ORM ``onupdate`` hooks, so writers refresh updated_at
    explicitly in their conflict clause.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
