"""
Sales Service - one-shot, all-or-nothing checkout

A sale is recorded in a single database transaction that:
1. reads and decrements the stock of every product on the ticket
2. writes the immutable Sale and its lines
3. writes the matching sale-type CashMovement
4. increments the day and month summaries (sales view and cash view)

Any failure aborts the whole transaction: no partial stock decrement, no
sale, no movement, no summary change. Write conflicts on a product's stock
are retried against the refreshed row by run_in_transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

from flask import current_app

from ..errors import (
    CalculationError,
    InsufficientStock,
    InvalidQuantity,
    ProductNotFound,
    UnsupportedUnit,
    ValidationError,
)
from ..extensions import db
from ..models import CashMovement, Product, Sale, SaleLine, PAYMENT_METHODS
from ..money import MAX_AMOUNT_CENTS, STOCK_TOLERANCE, parse_quantity, require_positive_cents, round_cents, round_qty
from ..time_utils import utcnow
from .concurrency import lock_for_update, run_in_transaction
from .shop_service import get_shop
from .summary_service import SummaryDelta, apply_summary_delta


@dataclass(frozen=True)
class KgLine:
    """Cashier entered the weight; the total is derived from the price."""
    product_id: int
    qty_kg: float

    mode = "kg"


@dataclass(frozen=True)
class AmountLine:
    """Cashier entered the money amount; the weight is derived from the price."""
    product_id: int
    amount_cents: int

    mode = "amount"


SaleItem = KgLine | AmountLine


@dataclass(frozen=True)
class ResolvedLine:
    product_id: int
    product_name: str
    mode: str
    qty_kg: float
    price_per_kg_cents: int
    total_cents: int
    new_stock: float

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "mode": self.mode,
            "qty_kg": self.qty_kg,
            "price_per_kg_cents": self.price_per_kg_cents,
            "total_cents": self.total_cents,
        }


def parse_sale_item(raw: dict, index: int = 0) -> SaleItem:
    """
    Build a typed sale line from a request dict.

    {"product_id": 1, "mode": "kg", "qty_kg": 1.25}
    {"product_id": 1, "mode": "amount", "amount_cents": 500000}
    """
    if not isinstance(raw, dict):
        raise ValidationError(f"items[{index}] must be an object", field="items")

    product_id = raw.get("product_id")
    if isinstance(product_id, bool) or not isinstance(product_id, (int, str)) or not str(product_id).strip().isdigit():
        raise ValidationError(f"items[{index}].product_id is required", field="product_id")
    product_id = int(product_id)

    mode = raw.get("mode")
    if mode == "kg":
        return KgLine(product_id=product_id, qty_kg=raw.get("qty_kg"))
    if mode == "amount":
        return AmountLine(product_id=product_id, amount_cents=raw.get("amount_cents"))
    raise ValidationError(f"items[{index}].mode must be 'kg' or 'amount'", field="mode")


def _resolve_qty_and_total(item: SaleItem, price_per_kg_cents: int) -> tuple[float, int]:
    if isinstance(item, KgLine):
        qty_kg = round_qty(parse_quantity(item.qty_kg, "qty_kg"))
        if qty_kg <= 0:
            raise InvalidQuantity("qty_kg must be > 0", field="qty_kg")
        return qty_kg, round_cents(qty_kg * price_per_kg_cents)

    if isinstance(item, AmountLine):
        amount_cents = require_positive_cents(item.amount_cents, "amount_cents", maximum=MAX_AMOUNT_CENTS)
        if price_per_kg_cents <= 0:
            raise CalculationError("Cannot derive qty_kg from a zero price")
        qty_kg = round_qty(amount_cents / price_per_kg_cents)
        if not math.isfinite(qty_kg) or qty_kg <= 0:
            raise CalculationError("Derived qty_kg is not a positive number")
        return qty_kg, amount_cents

    raise TypeError(f"Unsupported sale item: {item!r}")


def _resolve_line(shop_id: int, item: SaleItem) -> tuple[Product, ResolvedLine]:
    product = lock_for_update(
        db.session.query(Product).filter_by(id=item.product_id, shop_id=shop_id)
    ).first()
    if not product:
        raise ProductNotFound("Product not found", details={"product_id": item.product_id})

    if product.unit != "kg":
        raise UnsupportedUnit(
            "Only products sold by kg can be sold",
            details={"product_id": product.id, "unit": product.unit},
        )

    price = product.sale_price_cents
    qty_kg, total_cents = _resolve_qty_and_total(item, price)

    current_stock = float(product.stock_qty or 0)
    new_stock = round_qty(current_stock - qty_kg)
    if new_stock < -STOCK_TOLERANCE:
        raise InsufficientStock(
            "Insufficient stock",
            details={
                "product_id": product.id,
                "requested_qty_kg": qty_kg,
                "stock_qty": current_stock,
            },
        )

    line = ResolvedLine(
        product_id=product.id,
        product_name=product.name,
        mode=item.mode,
        qty_kg=qty_kg,
        price_per_kg_cents=price,
        total_cents=total_cents,
        new_stock=new_stock,
    )
    return product, line


def record_sale(shop_id: int, user_id: str, payment_method: str, items: list[SaleItem]) -> dict:
    """
    Record a (possibly multi-line) sale atomically.

    Lines are processed in request order; the first failing line aborts the
    sale. The same product may appear on several lines and is decremented
    cumulatively. Zero-price lines are allowed next to paid ones, but a sale
    whose total is 0 is rejected with CalculationError.

    Returns:
        {"sale_id", "total_cents", "total_qty_kg", "items": [...]}

    Raises:
        ValidationError, ProductNotFound, UnsupportedUnit, InvalidQuantity,
        InvalidAmount, CalculationError, InsufficientStock, TransactionConflict
    """
    if not user_id:
        raise ValidationError("Caller identity is required", field="created_by")
    if payment_method not in PAYMENT_METHODS:
        raise ValidationError(
            f"payment_method must be one of {', '.join(PAYMENT_METHODS)}",
            field="payment_method",
        )
    if not items:
        raise ValidationError("A sale needs at least one item", field="items")

    def _op():
        shop = get_shop(shop_id)
        now = utcnow()

        lines: list[ResolvedLine] = []
        total_cents = 0
        total_qty_kg = 0.0

        for item in items:
            product, line = _resolve_line(shop.id, item)
            product.stock_qty = line.new_stock
            product.updated_at = now
            # Flush now so a repeated product sees its own decrement and a
            # concurrent writer surfaces as StaleDataError inside this attempt
            db.session.flush()

            lines.append(line)
            total_cents += line.total_cents
            total_qty_kg = round_qty(total_qty_kg + line.qty_kg)

        if total_cents <= 0:
            # nothing to collect; a sale movement always carries a positive amount
            raise CalculationError("Sale total must be > 0", details={"total_cents": total_cents})

        sale = Sale(
            shop_id=shop.id,
            created_at=now,
            created_by=user_id,
            payment_method=payment_method,
            total_qty_kg=total_qty_kg,
            total_cents=total_cents,
        )
        db.session.add(sale)
        db.session.flush()

        for number, line in enumerate(lines, start=1):
            db.session.add(SaleLine(
                sale_id=sale.id,
                line_number=number,
                product_id=line.product_id,
                product_name=line.product_name,
                mode=line.mode,
                qty_kg=line.qty_kg,
                price_per_kg_cents=line.price_per_kg_cents,
                total_cents=line.total_cents,
            ))

        db.session.add(CashMovement(
            shop_id=shop.id,
            type="sale",
            direction="in",
            method=payment_method,
            amount_cents=total_cents,
            sale_id=sale.id,
            occurred_at=now,
            created_at=now,
            created_by=user_id,
        ))

        apply_summary_delta(shop, now, SummaryDelta.for_sale(payment_method, total_cents))

        return {
            "sale_id": sale.id,
            "total_cents": total_cents,
            "total_qty_kg": total_qty_kg,
            "items": [line.to_dict() for line in lines],
        }

    result = run_in_transaction(_op)
    current_app.logger.info(
        "Sale %s recorded: shop=%s total_cents=%s lines=%d",
        result["sale_id"], shop_id, result["total_cents"], len(result["items"]),
    )
    return result


def get_sale(shop_id: int, sale_id: int) -> Sale | None:
    return db.session.query(Sale).filter_by(id=sale_id, shop_id=shop_id).first()
