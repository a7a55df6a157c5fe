"""
products/validator.py

Row-level validation rules for product feeds.
"""

from __future__ import annotations

from feed_import.contracts import RowValidator
from feed_import.types import RawRow, ValidationOutcome
from products.fields import (
    BRAND_MAX_LENGTH,
    PRICE_MAX,
    REQUIRED_COLUMNS,
    STOCK_MAX,
    TITLE_MAX_LENGTH,
    clean,
    exceeds_stock_max,
    is_currency_code,
    is_non_negative_integer,
    is_valid_gtin,
    parse_flag,
    parse_price,
)


class ProductRowValidator(RowValidator):
    """
    Checks one raw product row and reports every rule it breaks.

    Holds no per-row state; the same instance validates every row of a run.
    """

    def validate(self, row: RawRow) -> ValidationOutcome:
        violations: list[str] = []

        for column in REQUIRED_COLUMNS:
            if not clean(row.get(column)):
                violations.append(f"{column} is required")

        self._check_gtin(clean(row.get("gtin")), violations)
        self._check_title(clean(row.get("title")), violations)
        self._check_brand(clean(row.get("brand")), violations)
        self._check_price(clean(row.get("price")), violations)
        self._check_currency(clean(row.get("currency")), violations)
        self._check_stock(clean(row.get("stock")), violations)
        self._check_is_active(clean(row.get("is_active")), violations)

        if violations:
            return ValidationOutcome.failed(violations)
        return ValidationOutcome.ok()

    def _check_gtin(self, value: str, violations: list[str]) -> None:
        if value and not is_valid_gtin(value):
            violations.append(
                f"gtin must be 8, 12, 13 or 14 digits with a valid check digit, got {value!r}"
            )

    def _check_title(self, value: str, violations: list[str]) -> None:
        if len(value) > TITLE_MAX_LENGTH:
            violations.append(f"title must be at most {TITLE_MAX_LENGTH} characters")

    def _check_brand(self, value: str, violations: list[str]) -> None:
        if len(value) > BRAND_MAX_LENGTH:
            violations.append(f"brand must be at most {BRAND_MAX_LENGTH} characters")

    def _check_price(self, value: str, violations: list[str]) -> None:
        if not value:
            return
        price = parse_price(value)
        if price is None:
            violations.append(f"price must be numeric, got {value!r}")
        elif price < 0:
            violations.append(f"price must not be negative, got {value!r}")
        elif price > PRICE_MAX:
            violations.append(f"price must not exceed {PRICE_MAX}, got {value!r}")

    def _check_currency(self, value: str, violations: list[str]) -> None:
        if value and not is_currency_code(value):
            violations.append(f"currency must be a 3-letter ISO code, got {value!r}")

    def _check_stock(self, value: str, violations: list[str]) -> None:
        if not value:
            return
        if not is_non_negative_integer(value):
            violations.append(f"stock must be a non-negative integer, got {value!r}")
        elif exceeds_stock_max(value):
            violations.append(f"stock must not exceed {STOCK_MAX}, got {value!r}")

    def _check_is_active(self, value: str, violations: list[str]) -> None:
        if value and parse_flag(value) is None:
            violations.append(f"is_active must be a boolean flag, got {value!r}")
