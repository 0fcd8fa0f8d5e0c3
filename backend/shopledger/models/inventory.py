from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow

PRODUCT_UNITS = ("kg", "unit")


class Product(db.Model):
    """
    Product master data with its live stock level.

    MULTI-TENANT: Products are owned by exactly one shop.

    STOCK: stock_qty is decremented only inside the sale transaction.
    version_id makes concurrent decrements collide instead of overwriting
    each other; the loser is retried against the refreshed stock.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_shop_name", "shop_id", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    shop_id = db.Column(db.Integer, db.ForeignKey("shops.id"), nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    unit = db.Column(db.String(8), nullable=False, default="kg")

    # Price per kg (or per unit) in cents
    sale_price_cents = db.Column(db.Integer, nullable=False, default=0)

    # Quantities keep 3 decimals (grams for kg products)
    stock_qty = db.Column(db.Numeric(14, 3, asdecimal=False), nullable=False, default=0)
    low_stock_alert_qty = db.Column(db.Numeric(14, 3, asdecimal=False), nullable=False, default=0)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    shop = db.relationship("Shop", backref=db.backref("products", lazy=True))
    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_low_stock(self) -> bool:
        return float(self.stock_qty or 0) <= float(self.low_stock_alert_qty or 0)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} shop_id={self.shop_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "shop_id": self.shop_id,
            "name": self.name,
            "unit": self.unit,
            "sale_price_cents": self.sale_price_cents,
            "stock_qty": float(self.stock_qty or 0),
            "low_stock_alert_qty": float(self.low_stock_alert_qty or 0),
            "is_low_stock": self.is_low_stock,
            "version_id": self.version_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
