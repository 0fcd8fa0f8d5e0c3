# Overview: Money and quantity codec; integer cents and 3-decimal kg quantities.

"""
Money is integer minor units (cents) everywhere inside the system. Decimal
strings only exist at the edges: price_to_cents() parses what a person typed
("6500,00" or "6500.00") and cents_to_price() formats for display.

Kilogram quantities are floats kept at 3 decimal places: every computed
quantity goes through round_qty() before it is used again or persisted.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_FLOOR, ROUND_HALF_UP

from .errors import InvalidAmount, InvalidQuantity

# Upper bound for manual cash movements and shift cash counts (1,000,000.00)
MAX_AMOUNT_CENTS = 100_000_000

QTY_PLACES = Decimal("0.001")

# Upper bound for any kg quantity (stock levels, sale lines)
MAX_QTY = 1_000_000

# Stock may dip this far below zero from float rounding; anything lower is an overdraft.
STOCK_TOLERANCE = 0.0001


def price_to_cents(price: str) -> int:
    """
    "6500.00" -> 650000, "1234,56" -> 123456.

    Empty input is 0. Rounds half toward +infinity on the exact decimal value.
    """
    normalized = str(price).replace(",", ".", 1).strip()
    if not normalized:
        return 0

    try:
        num = Decimal(normalized)
    except InvalidOperation:
        raise InvalidAmount(f"Invalid price: {price!r}", field="price")

    if not num.is_finite():
        raise InvalidAmount(f"Invalid price: {price!r}", field="price")

    return int((num * 100 + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def cents_to_price(cents: int | None) -> str:
    """650000 -> "6500.00"."""
    return f"{Decimal(int(cents or 0)) / Decimal(100):.2f}"


def round_qty(value: float, field: str = "qty_kg") -> float:
    """Round a kg quantity to 3 decimals (half away from zero)."""
    if not math.isfinite(value):
        return value
    try:
        return float(Decimal(value).quantize(QTY_PLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # more significant digits than the decimal context holds
        raise InvalidQuantity(f"{field} is out of range", field=field)


def round_cents(value: float) -> int:
    """Nearest whole cent, halves toward +infinity."""
    return math.floor(value + 0.5)


def parse_quantity(value, field: str = "qty_kg") -> float:
    """Coerce a number or locale-decimal string to a finite float."""
    if isinstance(value, bool) or value is None:
        raise InvalidQuantity(f"{field} must be a number", field=field)

    if isinstance(value, (int, float)):
        try:
            qty = float(value)
        except OverflowError:
            raise InvalidQuantity(f"{field} cannot exceed {MAX_QTY}", field=field)
    elif isinstance(value, str):
        try:
            qty = float(value.replace(",", ".", 1).strip())
        except ValueError:
            raise InvalidQuantity(f"{field} must be a number", field=field)
    else:
        raise InvalidQuantity(f"{field} must be a number", field=field)

    if not math.isfinite(qty):
        raise InvalidQuantity(f"{field} must be a finite number", field=field)
    if abs(qty) > MAX_QTY:
        raise InvalidQuantity(f"{field} cannot exceed {MAX_QTY}", field=field)
    return qty


def _coerce_cents(value, field: str) -> int:
    if isinstance(value, bool) or value is None:
        raise InvalidAmount(f"{field} must be an integer", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidAmount(f"{field} must be an integer number of cents", field=field)
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
    raise InvalidAmount(f"{field} must be an integer", field=field)


def require_positive_cents(value, field: str = "amount_cents", *, maximum: int | None = None) -> int:
    cents = _coerce_cents(value, field)
    if cents <= 0:
        raise InvalidAmount(f"{field} must be > 0", field=field)
    if maximum is not None and cents > maximum:
        raise InvalidAmount(f"{field} cannot exceed {maximum}", field=field)
    return cents


def require_non_negative_cents(value, field: str, *, maximum: int | None = None) -> int:
    cents = _coerce_cents(value, field)
    if cents < 0:
        raise InvalidAmount(f"{field} must be >= 0", field=field)
    if maximum is not None and cents > maximum:
        raise InvalidAmount(f"{field} cannot exceed {maximum}", field=field)
    return cents
