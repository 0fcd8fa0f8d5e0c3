# Overview: Pytest coverage for the money and quantity codec.

import math

import pytest

from shopledger.errors import InvalidAmount, InvalidQuantity
from shopledger.money import (
    MAX_QTY,
    cents_to_price,
    parse_quantity,
    price_to_cents,
    require_non_negative_cents,
    require_positive_cents,
    round_cents,
    round_qty,
)


class TestPriceToCents:
    def test_dot_decimal(self):
        assert price_to_cents("6500.00") == 650000

    def test_comma_decimal(self):
        assert price_to_cents("1234,56") == 123456

    def test_whole_number(self):
        assert price_to_cents("42") == 4200

    def test_surrounding_whitespace(self):
        assert price_to_cents("  10.5 ") == 1050

    def test_empty_is_zero(self):
        assert price_to_cents("") == 0
        assert price_to_cents("   ") == 0

    def test_half_cent_rounds_up(self):
        assert price_to_cents("0.005") == 1
        assert price_to_cents("1.115") == 112

    @pytest.mark.parametrize("bad", ["abc", "12.3.4", "1,2,3", "nan", "inf"])
    def test_rejects_garbage(self, bad):
        with pytest.raises(InvalidAmount) as exc:
            price_to_cents(bad)
        assert exc.value.field == "price"


class TestCentsToPrice:
    def test_formats_two_decimals(self):
        assert cents_to_price(650000) == "6500.00"
        assert cents_to_price(5) == "0.05"

    def test_none_is_zero(self):
        assert cents_to_price(None) == "0.00"

    def test_negative(self):
        assert cents_to_price(-150) == "-1.50"

    def test_round_trip(self):
        for cents in (0, 1, 99, 100, 123456, 650000, 99999999):
            assert price_to_cents(cents_to_price(cents)) == cents


class TestRounding:
    def test_round_qty_three_decimals(self):
        assert round_qty(500000 / 650000) == 0.769
        assert round_qty(1.25) == 1.25
        assert round_qty(0.0004) == 0.0

    def test_round_qty_passes_non_finite_through(self):
        assert math.isinf(round_qty(math.inf))

    def test_round_qty_beyond_decimal_precision(self):
        with pytest.raises(InvalidQuantity) as exc:
            round_qty(1e30, "stock_qty")
        assert exc.value.field == "stock_qty"

    def test_round_cents_half_up(self):
        assert round_cents(2.5) == 3
        assert round_cents(2.4999) == 2
        assert round_cents(-2.5) == -2
        assert round_cents(1.25 * 650000) == 812500


class TestParseQuantity:
    def test_numbers_and_strings(self):
        assert parse_quantity(2) == 2.0
        assert parse_quantity(1.5) == 1.5
        assert parse_quantity("1,25") == 1.25
        assert parse_quantity(" 0.5 ") == 0.5

    @pytest.mark.parametrize("bad", [None, True, "abc", "", [], float("nan"), float("inf")])
    def test_rejects_non_numbers(self, bad):
        with pytest.raises(InvalidQuantity) as exc:
            parse_quantity(bad)
        assert exc.value.field == "qty_kg"

    @pytest.mark.parametrize("huge", [MAX_QTY + 1, 1e30, 1e306, 10 ** 400, "1e30", -1e30])
    def test_rejects_out_of_range(self, huge):
        with pytest.raises(InvalidQuantity) as exc:
            parse_quantity(huge)
        assert exc.value.field == "qty_kg"

    def test_bound_is_inclusive(self):
        assert parse_quantity(MAX_QTY) == float(MAX_QTY)


class TestCentsValidation:
    def test_positive(self):
        assert require_positive_cents(100) == 100
        assert require_positive_cents("250") == 250
        assert require_positive_cents(300.0) == 300

    @pytest.mark.parametrize("bad", [0, -1, 1.5, "1.5", "abc", None, True])
    def test_positive_rejects(self, bad):
        with pytest.raises(InvalidAmount):
            require_positive_cents(bad)

    def test_maximum(self):
        assert require_positive_cents(100, maximum=100) == 100
        with pytest.raises(InvalidAmount):
            require_positive_cents(101, maximum=100)

    def test_non_negative_allows_zero(self):
        assert require_non_negative_cents(0, "opening_cash_cents") == 0
        with pytest.raises(InvalidAmount) as exc:
            require_non_negative_cents(-1, "opening_cash_cents")
        assert exc.value.field == "opening_cash_cents"
