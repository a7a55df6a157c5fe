"""
products/fields.py

Column names, limits, and value parsers shared by the product validator and
mapper.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

PRODUCT_COLUMNS: tuple[str, ...] = (
    "gtin",
    "title",
    "description",
    "brand",
    "price",
    "currency",
    "stock",
    "is_active",
)

REQUIRED_COLUMNS: tuple[str, ...] = ("gtin", "title", "price")

GTIN_LENGTHS = {8, 12, 13, 14}
TITLE_MAX_LENGTH = 255
BRAND_MAX_LENGTH = 120
DEFAULT_CURRENCY = "EUR"
PRICE_QUANTUM = Decimal("0.01")
PRICE_MAX = Decimal("9999999999.99")
# Upper bound of the INTEGER column type.
STOCK_MAX = 2_147_483_647

TRUE_VALUES = {"1", "true", "yes", "y", "on"}
FALSE_VALUES = {"0", "false", "no", "n", "off"}

_CURRENCY_PATTERN = re.compile(r"^[A-Za-z]{3}$")
_INTEGER_PATTERN = re.compile(r"^[+]?\d+$")


def clean(value: str | None) -> str:
    return (value or "").strip()


def gtin_check_digit(body: str) -> int:
    """
    GS1 mod-10 check digit for the digits preceding the check position.
    """

    total = 0
    for offset, digit in enumerate(reversed(body)):
        weight = 3 if offset % 2 == 0 else 1
        total += int(digit) * weight
    return (10 - total % 10) % 10


def is_valid_gtin(value: str) -> bool:
    if not value.isdigit() or len(value) not in GTIN_LENGTHS:
        return False
    return gtin_check_digit(value[:-1]) == int(value[-1])


def parse_price(value: str) -> Decimal | None:
    """
    Parse a price string, returning None when it is not a finite number.
    """

    try:
        parsed = Decimal(value)
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def is_currency_code(value: str) -> bool:
    return bool(_CURRENCY_PATTERN.match(value))


def is_non_negative_integer(value: str) -> bool:
    return bool(_INTEGER_PATTERN.match(value))


def parse_flag(value: str) -> bool | None:
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    return None


def exceeds_stock_max(value: str) -> bool:
    """
    True when a non-negative integer string is larger than STOCK_MAX.
    """

    digits = value.lstrip("+").lstrip("0")
    if len(digits) > len(str(STOCK_MAX)):
        return True
    return int(digits or "0") > STOCK_MAX
