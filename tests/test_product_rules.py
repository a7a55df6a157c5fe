from __future__ import annotations

import unittest
from decimal import Decimal

from feed_import.errors import MappingError
from products.fields import gtin_check_digit, is_valid_gtin, parse_flag, parse_price
from products.mapper import ProductRowMapper
from products.validator import ProductRowValidator


def _row(**overrides: str) -> dict[str, str]:
    row = {
        "gtin": "4006381333931",
        "title": "Ballpoint pen",
        "description": "Blue ink",
        "brand": "Acme",
        "price": "1.99",
        "currency": "eur",
        "stock": "12",
        "is_active": "yes",
    }
    row.update(overrides)
    return row


class TestGtin(unittest.TestCase):
    def test_known_valid_codes(self) -> None:
        self.assertTrue(is_valid_gtin("4006381333931"))
        self.assertTrue(is_valid_gtin("73513537"))

    def test_wrong_check_digit(self) -> None:
        self.assertFalse(is_valid_gtin("4006381333932"))

    def test_unsupported_length_or_characters(self) -> None:
        self.assertFalse(is_valid_gtin("123"))
        self.assertFalse(is_valid_gtin("40063813339A1"))
        self.assertFalse(is_valid_gtin(""))

    def test_check_digit(self) -> None:
        self.assertEqual(gtin_check_digit("400638133393"), 1)
        self.assertEqual(gtin_check_digit("7351353"), 7)


class TestFieldParsers(unittest.TestCase):
    def test_parse_price(self) -> None:
        self.assertEqual(parse_price("19.990"), Decimal("19.990"))
        self.assertIsNone(parse_price("abc"))
        self.assertIsNone(parse_price("NaN"))
        self.assertIsNone(parse_price("Infinity"))

    def test_parse_flag(self) -> None:
        self.assertTrue(parse_flag("YES"))
        self.assertFalse(parse_flag("off"))
        self.assertIsNone(parse_flag("maybe"))


class TestProductRowValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = ProductRowValidator()

    def test_complete_row_is_valid(self) -> None:
        outcome = self.validator.validate(_row())

        self.assertTrue(outcome.valid)
        self.assertEqual(outcome.violations, ())

    def test_optional_columns_may_be_absent(self) -> None:
        outcome = self.validator.validate({"gtin": "73513537", "title": "Pen", "price": "2"})

        self.assertTrue(outcome.valid)

    def test_missing_required_columns(self) -> None:
        outcome = self.validator.validate(_row(gtin="", title="  ", price=""))

        self.assertFalse(outcome.valid)
        self.assertEqual(
            outcome.violations,
            ("gtin is required", "title is required", "price is required"),
        )

    def test_non_numeric_price_message(self) -> None:
        outcome = self.validator.validate(_row(price="abc"))

        self.assertEqual(outcome.violations, ("price must be numeric, got 'abc'",))

    def test_negative_and_oversized_price(self) -> None:
        self.assertIn(
            "price must not be negative, got '-1'",
            self.validator.validate(_row(price="-1")).violations,
        )
        self.assertFalse(self.validator.validate(_row(price="1e12")).valid)

    def test_every_violation_is_reported(self) -> None:
        outcome = self.validator.validate(
            _row(
                gtin="4006381333932",
                brand="x" * 121,
                currency="euro",
                stock="-3",
                is_active="maybe",
            )
        )

        self.assertEqual(len(outcome.violations), 5)
        self.assertTrue(outcome.violations[0].startswith("gtin must be 8, 12, 13 or 14 digits"))
        self.assertIn("brand must be at most 120 characters", outcome.violations)
        self.assertIn("currency must be a 3-letter ISO code, got 'euro'", outcome.violations)
        self.assertIn("stock must be a non-negative integer, got '-3'", outcome.violations)
        self.assertIn("is_active must be a boolean flag, got 'maybe'", outcome.violations)

    def test_stock_above_integer_column_range(self) -> None:
        self.assertTrue(self.validator.validate(_row(stock="2147483647")).valid)
        self.assertEqual(
            self.validator.validate(_row(stock="2147483648")).violations,
            ("stock must not exceed 2147483647, got '2147483648'",),
        )
        self.assertFalse(self.validator.validate(_row(stock="9" * 20)).valid)
        self.assertTrue(self.validator.validate(_row(stock="000000000000042")).valid)

    def test_title_length_limit(self) -> None:
        self.assertTrue(self.validator.validate(_row(title="t" * 255)).valid)
        self.assertEqual(
            self.validator.validate(_row(title="t" * 256)).violations,
            ("title must be at most 255 characters",),
        )


class TestProductRowMapper(unittest.TestCase):
    def setUp(self) -> None:
        self.mapper = ProductRowMapper()

    def test_maps_and_coerces_every_column(self) -> None:
        mapped = self.mapper.map(_row(title="  Ballpoint pen  ", price="1.995"))

        self.assertEqual(
            dict(mapped),
            {
                "gtin": "4006381333931",
                "title": "Ballpoint pen",
                "description": "Blue ink",
                "brand": "Acme",
                "price": Decimal("2.00"),
                "currency": "EUR",
                "stock": 12,
                "is_active": True,
            },
        )

    def test_defaults_for_blank_optional_columns(self) -> None:
        mapped = self.mapper.map({"gtin": "73513537", "title": "Pen", "price": "2"})

        self.assertIsNone(mapped["description"])
        self.assertIsNone(mapped["brand"])
        self.assertEqual(mapped["currency"], "EUR")
        self.assertEqual(mapped["stock"], 0)
        self.assertIs(mapped["is_active"], True)
        self.assertEqual(mapped["price"], Decimal("2.00"))

    def test_column_order_is_stable(self) -> None:
        first = self.mapper.map(_row())
        second = self.mapper.map({"price": "3", "title": "Ink", "gtin": "73513537"})

        self.assertEqual(list(first.keys()), list(second.keys()))

    def test_output_is_read_only(self) -> None:
        mapped = self.mapper.map(_row())

        with self.assertRaises(TypeError):
            mapped["title"] = "changed"  # type: ignore[index]

    def test_unconvertible_value_raises_mapping_error(self) -> None:
        with self.assertRaises(MappingError) as ctx:
            self.mapper.map(_row(stock="many"))

        self.assertEqual(ctx.exception.column, "stock")


if __name__ == "__main__":
    unittest.main()
