"""
products/mapper.py

Raw feed row -> canonical ``products`` row.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from feed_import.contracts import RowMapper
from feed_import.errors import MappingError
from feed_import.types import CanonicalRow, RawRow, freeze_row
from products.fields import (
    DEFAULT_CURRENCY,
    PRICE_QUANTUM,
    clean,
    parse_flag,
    parse_price,
)


class ProductRowMapper(RowMapper):
    """
    Trims, coerces, and defaults product fields.

    Output always carries every ``products`` feed column in the same order,
    so all rows in a batch share one column set.
    """

    def map(self, row: RawRow) -> CanonicalRow:
        return freeze_row(
            {
                "gtin": clean(row.get("gtin")),
                "title": clean(row.get("title")),
                "description": clean(row.get("description")) or None,
                "brand": clean(row.get("brand")) or None,
                "price": self._map_price(clean(row.get("price"))),
                "currency": (clean(row.get("currency")) or DEFAULT_CURRENCY).upper(),
                "stock": self._map_stock(clean(row.get("stock"))),
                "is_active": self._map_is_active(clean(row.get("is_active"))),
            }
        )

    @staticmethod
    def _map_price(value: str) -> Decimal:
        price = parse_price(value)
        if price is None:
            raise MappingError(
                f"price could not be converted to a decimal: {value!r}", column="price"
            )
        try:
            return price.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise MappingError(f"price is out of range: {value!r}", column="price") from exc

    @staticmethod
    def _map_stock(value: str) -> int:
        if not value:
            return 0
        try:
            return int(value)
        except ValueError as exc:
            raise MappingError(
                f"stock could not be converted to an integer: {value!r}", column="stock"
            ) from exc

    @staticmethod
    def _map_is_active(value: str) -> bool:
        if not value:
            return True
        flag = parse_flag(value)
        if flag is None:
            raise MappingError(
                f"is_active could not be converted to a boolean: {value!r}", column="is_active"
            )
        return flag
