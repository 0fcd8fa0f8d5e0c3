from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow

class Sale(db.Model):
    """
    Immutable checkout record.

    Written once by the sale transaction together with its lines, its cash
    movement and the summary increments. No update or delete path exists.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_shop_created", "shop_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    shop_id = db.Column(db.Integer, db.ForeignKey("shops.id"), nullable=False, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    created_by = db.Column(db.String(128), nullable=False)

    payment_method = db.Column(db.String(16), nullable=False)

    total_qty_kg = db.Column(db.Numeric(14, 3, asdecimal=False), nullable=False, default=0)
    total_cents = db.Column(db.Integer, nullable=False, default=0)

    lines = db.relationship(
        "SaleLine",
        backref="sale",
        lazy=True,
        order_by="SaleLine.line_number",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "shop_id": self.shop_id,
            "created_at": to_utc_z(self.created_at),
            "created_by": self.created_by,
            "payment_method": self.payment_method,
            "items": [line.to_dict() for line in self.lines],
            "total_qty_kg": float(self.total_qty_kg or 0),
            "total_cents": self.total_cents,
        }

class SaleLine(db.Model):
    """
    One line of a sale with a snapshot of the product at time of sale.

    product_id is deliberately not a foreign key: products can be hard-deleted
    and historical lines keep their own name/price copy.
    """
    __tablename__ = "sale_lines"
    __table_args__ = (
        db.UniqueConstraint("sale_id", "line_number", name="uq_sale_lines_sale_line"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(db.Integer, db.ForeignKey("sales.id"), nullable=False, index=True)
    line_number = db.Column(db.Integer, nullable=False)

    product_id = db.Column(db.Integer, nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=False)

    # How the cashier entered the line: "kg" or "amount"
    mode = db.Column(db.String(8), nullable=False)

    qty_kg = db.Column(db.Numeric(14, 3, asdecimal=False), nullable=False)
    price_per_kg_cents = db.Column(db.Integer, nullable=False)
    total_cents = db.Column(db.Integer, nullable=False)

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "mode": self.mode,
            "qty_kg": float(self.qty_kg),
            "price_per_kg_cents": self.price_per_kg_cents,
            "total_cents": self.total_cents,
        }
