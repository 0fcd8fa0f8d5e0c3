# Overview: Service-layer operations for the cash ledger; manual movements and their summaries.

from __future__ import annotations

from datetime import datetime

from flask import current_app

from ..errors import ValidationError
from ..extensions import db
from ..models import CashMovement, DIRECTIONS, PAYMENT_METHODS
from ..money import MAX_AMOUNT_CENTS, require_positive_cents
from ..time_utils import normalize_datetime, utcnow
from ..validation import clean_text
from .concurrency import run_in_transaction
from .shop_service import get_shop
from .summary_service import SummaryDelta, apply_summary_delta
"""
Cash Ledger Invariants (authoritative)

- Append-only: cash movements are never updated or deleted.
- A movement and the summary increments it implies are written in the same
  DB transaction; there is no window in which one exists without the other.
- occurred_at is business time and decides the summary day/month;
  created_at is system time.
- Sale-type movements are written only by sales_service.record_sale.
"""

CATEGORY_MAX_LENGTH = 64


def normalize_category(category: str | None) -> str:
    return (clean_text(category, "category") or "").lower()


def _validate_movement(direction, method, category, amount_cents) -> tuple[str, int]:
    if direction not in DIRECTIONS:
        raise ValidationError("direction must be 'in' or 'out'", field="direction")
    if method not in PAYMENT_METHODS:
        raise ValidationError(f"method must be one of {', '.join(PAYMENT_METHODS)}", field="method")

    normalized = normalize_category(category)
    if not normalized:
        raise ValidationError("category is required", field="category")
    if len(normalized) > CATEGORY_MAX_LENGTH:
        raise ValidationError(f"category exceeds max length {CATEGORY_MAX_LENGTH}", field="category")

    amount = require_positive_cents(amount_cents, "amount_cents", maximum=MAX_AMOUNT_CENTS)
    return normalized, amount


def record_cash_movement(
    shop_id: int,
    user_id: str,
    direction: str,
    method: str,
    category: str,
    amount_cents: int,
    note: str | None = None,
    occurred_at: datetime | str | None = None,
) -> dict:
    """
    Record a manual expense ("out") or income ("in").

    Writes one immutable movement and, in the same transaction, increments
    the day and month summaries of occurred_at (shop-local date):
    - signed: cash_net_cents, cash_by_method[method], cash_by_category[category]
    - directional: cash_in_cents/cash_in_by_method or
      cash_out_cents/cash_out_by_method

    Returns:
        {"movement_id": int}
    """
    if not user_id:
        raise ValidationError("Caller identity is required", field="created_by")

    normalized_category, amount = _validate_movement(direction, method, category, amount_cents)

    try:
        when = normalize_datetime(occurred_at)
    except ValueError:
        raise ValidationError("occurred_at must be an ISO-8601 datetime", field="occurred_at")

    clean_note = clean_text(note, "note")

    def _op():
        shop = get_shop(shop_id)

        movement = CashMovement(
            shop_id=shop.id,
            type="manual",
            direction=direction,
            method=method,
            category=normalized_category,
            note=clean_note,
            amount_cents=amount,
            occurred_at=when,
            created_at=utcnow(),
            created_by=user_id,
        )
        db.session.add(movement)
        db.session.flush()

        apply_summary_delta(
            shop,
            when,
            SummaryDelta.for_cash_movement(direction, method, normalized_category, amount),
        )
        return {"movement_id": movement.id}

    result = run_in_transaction(_op)
    current_app.logger.info(
        "Cash movement %s recorded: shop=%s direction=%s amount_cents=%s",
        result["movement_id"], shop_id, direction, amount,
    )
    return result
