from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow

PAYMENT_METHODS = ("cash", "transfer", "debit", "credit", "mp")
DIRECTIONS = ("in", "out")


class CashMovement(db.Model):
    """
    Immutable cash-ledger entry.

    TYPES:
    - sale: written automatically by the sale transaction (direction=in)
    - manual: expense/income entered by a user; category is required

    occurred_at is business time (may be back-dated for manual entries);
    created_at is system time.
    """
    __tablename__ = "cash_movements"
    __table_args__ = (
        db.Index("ix_cash_movements_shop_occurred", "shop_id", "occurred_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    shop_id = db.Column(db.Integer, db.ForeignKey("shops.id"), nullable=False, index=True)

    type = db.Column(db.String(8), nullable=False, index=True)
    direction = db.Column(db.String(4), nullable=False)
    method = db.Column(db.String(16), nullable=False)
    category = db.Column(db.String(64), nullable=True)
    note = db.Column(db.Text, nullable=True)

    amount_cents = db.Column(db.Integer, nullable=False)

    sale_id = db.Column(db.Integer, db.ForeignKey("sales.id"), nullable=True, index=True)

    occurred_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    created_by = db.Column(db.String(128), nullable=False)

    @property
    def signed_amount_cents(self) -> int:
        return self.amount_cents if self.direction == "in" else -self.amount_cents

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "shop_id": self.shop_id,
            "type": self.type,
            "direction": self.direction,
            "method": self.method,
            "category": self.category,
            "note": self.note,
            "amount_cents": self.amount_cents,
            "sale_id": self.sale_id,
            "occurred_at": to_utc_z(self.occurred_at),
            "created_at": to_utc_z(self.created_at),
            "created_by": self.created_by,
        }

class CashShift(db.Model):
    """
    Cashier shift with opening/closing cash counts.

    LIFECYCLE:
    - open: created by open_shift
    - closed: terminal; closing count and difference recorded

    Not linked to the ledger transactionally; correlated by cashier and time.
    """
    __tablename__ = "cash_shifts"
    __table_args__ = (
        db.Index("ix_cash_shifts_shop_opened", "shop_id", "opened_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    shop_id = db.Column(db.Integer, db.ForeignKey("shops.id"), nullable=False, index=True)

    cashier_name = db.Column(db.String(128), nullable=False)
    status = db.Column(db.String(8), nullable=False, default="open", index=True)  # open, closed

    # Cash counts (all amounts in cents)
    opening_cash_cents = db.Column(db.Integer, nullable=False, default=0)
    closing_cash_cents = db.Column(db.Integer, nullable=True)
    difference_cents = db.Column(db.Integer, nullable=True)  # closing - opening

    opened_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    closed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    note = db.Column(db.Text, nullable=True)

    created_by = db.Column(db.String(128), nullable=False)
    closed_by = db.Column(db.String(128), nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version_id}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "shop_id": self.shop_id,
            "cashier_name": self.cashier_name,
            "status": self.status,
            "opening_cash_cents": self.opening_cash_cents,
            "closing_cash_cents": self.closing_cash_cents,
            "difference_cents": self.difference_cents,
            "opened_at": to_utc_z(self.opened_at),
            "closed_at": to_utc_z(self.closed_at) if self.closed_at else None,
            "note": self.note,
            "created_by": self.created_by,
            "closed_by": self.closed_by,
        }
