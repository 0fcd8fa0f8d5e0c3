"""
Cash Shift Register

WHY: Cashier accountability. A shift records the cash counted into the
drawer at opening and the cash counted at closing; the difference is the
shift's variance.

DESIGN PRINCIPLES:
- open -> closed is the only transition; closed is terminal
- difference_cents is always computed here from the stored opening count,
  never taken from the caller
- Shifts are an audit trail correlated with the ledger by cashier and time;
  they share no transaction with sales or cash movements
"""

from __future__ import annotations

from datetime import datetime

from ..errors import InvalidState, NotFound, ValidationError
from ..extensions import db
from ..models import CashShift
from ..money import MAX_AMOUNT_CENTS, require_non_negative_cents
from ..time_utils import normalize_datetime
from ..validation import clean_text
from .concurrency import lock_for_update, run_with_retry
from .shop_service import get_shop

SHIFT_STATUSES = ("open", "closed")


def _when(value, field: str) -> datetime:
    try:
        return normalize_datetime(value)
    except ValueError:
        raise ValidationError(f"{field} must be an ISO-8601 datetime", field=field)


def open_shift(
    shop_id: int,
    user_id: str,
    cashier_name: str,
    opening_cash_cents: int,
    opened_at: datetime | str | None = None,
    note: str | None = None,
) -> CashShift:
    """
    Open a new shift.

    Args:
        shop_id: Shop the drawer belongs to
        user_id: Authenticated caller, recorded as created_by
        cashier_name: Person responsible for the drawer
        opening_cash_cents: Starting cash in drawer (in cents)
        opened_at: Business time of the opening count (defaults to now)

    Raises:
        ValidationError: empty cashier name or invalid cash count
    """
    if not user_id:
        raise ValidationError("Caller identity is required", field="created_by")

    name = clean_text(cashier_name, "cashier_name")
    if not name:
        raise ValidationError("cashier_name is required", field="cashier_name")
    opening = require_non_negative_cents(opening_cash_cents, "opening_cash_cents", maximum=MAX_AMOUNT_CENTS)
    when = _when(opened_at, "opened_at")
    clean_note = clean_text(note, "note")

    shop = get_shop(shop_id)

    shift = CashShift(
        shop_id=shop.id,
        cashier_name=name,
        status="open",
        opening_cash_cents=opening,
        opened_at=when,
        note=clean_note,
        created_by=user_id,
    )
    db.session.add(shift)
    db.session.commit()
    return shift


def close_shift(
    shop_id: int,
    user_id: str,
    shift_id: int,
    closing_cash_cents: int,
    closed_at: datetime | str | None = None,
    note: str | None = None,
) -> dict:
    """
    Close an open shift and compute its difference.

    IMMUTABLE: Once closed, the shift cannot be reopened or modified.

    Returns:
        {"shift_id": int, "difference_cents": int}

    Raises:
        NotFound: shift missing or owned by another shop
        InvalidState: shift already closed
        ValidationError: invalid closing count or timestamp
    """
    if not user_id:
        raise ValidationError("Caller identity is required", field="closed_by")

    closing = require_non_negative_cents(closing_cash_cents, "closing_cash_cents", maximum=MAX_AMOUNT_CENTS)
    when = _when(closed_at, "closed_at")
    clean_note = clean_text(note, "note")

    def _op():
        shift = lock_for_update(
            db.session.query(CashShift).filter_by(id=shift_id, shop_id=shop_id)
        ).first()
        if not shift:
            raise NotFound("Shift not found")

        if shift.status != "open":
            raise InvalidState("Shift already closed", details={"shift_id": shift.id, "status": shift.status})

        difference = closing - shift.opening_cash_cents

        shift.status = "closed"
        shift.closing_cash_cents = closing
        shift.difference_cents = difference
        shift.closed_at = when
        shift.closed_by = user_id
        if note is not None:
            shift.note = clean_note

        db.session.commit()
        return {"shift_id": shift.id, "difference_cents": difference}

    return run_with_retry(_op)


def get_shift(shop_id: int, shift_id: int) -> CashShift:
    shift = db.session.query(CashShift).filter_by(id=shift_id, shop_id=shop_id).first()
    if not shift:
        raise NotFound("Shift not found")
    return shift


def list_shifts(shop_id: int, limit: int = 20, status: str | None = None) -> list[CashShift]:
    """Recent shifts, newest opening first."""
    if status is not None and status not in SHIFT_STATUSES:
        raise ValidationError("status must be 'open' or 'closed'", field="status")

    query = db.session.query(CashShift).filter(CashShift.shop_id == shop_id)
    if status is not None:
        query = query.filter(CashShift.status == status)

    return (
        query.order_by(CashShift.opened_at.desc(), CashShift.id.desc())
        .limit(max(1, min(limit, 200)))
        .all()
    )
