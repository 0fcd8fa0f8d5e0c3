from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow

class Shop(db.Model):
    """
    Multi-tenant root: every product, sale, movement, shift and summary
    belongs to exactly one shop.

    DESIGN:
    - All queries must be scoped by shop_id
    - timezone decides where day/month boundaries fall for summary keys
    """
    __tablename__ = "shops"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)

    # IANA zone name used for YYYY-MM-DD / YYYY-MM period keys
    timezone = db.Column(db.String(64), nullable=False, default="America/Argentina/Buenos_Aires")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Shop id={self.id} name={self.name!r} timezone={self.timezone!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "timezone": self.timezone,
            "created_at": to_utc_z(self.created_at),
        }
