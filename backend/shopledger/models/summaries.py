from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow

PERIODS = ("day", "month")

BREAKDOWNS = (
    "sales_by_method",
    "cash_in_by_method",
    "cash_out_by_method",
    "cash_by_method",     # signed, manual movements only
    "cash_by_category",   # signed, manual movements only
)


class Summary(db.Model):
    """
    Running totals for one shop and one day or month.

    Derived data: rows are only ever changed by increment statements issued
    inside the same transaction as the sale or cash movement they count.
    period_key is YYYY-MM-DD or YYYY-MM in the shop's timezone.
    """
    __tablename__ = "summaries"
    __table_args__ = (
        db.UniqueConstraint("shop_id", "period", "period_key", name="uq_summaries_shop_period_key"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    shop_id = db.Column(db.Integer, db.ForeignKey("shops.id"), nullable=False, index=True)
    period = db.Column(db.String(8), nullable=False)
    period_key = db.Column(db.String(10), nullable=False)

    sales_count = db.Column(db.Integer, nullable=False, default=0)
    sales_total_cents = db.Column(db.BigInteger, nullable=False, default=0)

    cash_in_cents = db.Column(db.BigInteger, nullable=False, default=0)
    cash_out_cents = db.Column(db.BigInteger, nullable=False, default=0)
    cash_net_cents = db.Column(db.BigInteger, nullable=False, default=0)  # signed

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "shop_id": self.shop_id,
            "period": self.period,
            "period_key": self.period_key,
            "sales_count": self.sales_count,
            "sales_total_cents": self.sales_total_cents,
            "cash_in_cents": self.cash_in_cents,
            "cash_out_cents": self.cash_out_cents,
            "cash_net_cents": self.cash_net_cents,
            "updated_at": to_utc_z(self.updated_at),
        }

class SummaryBreakdown(db.Model):
    """
    One keyed counter of a summary map (e.g. sales_by_method["cash"]).

    Keys are created on first increment, so concurrent transactions touching
    different methods or categories never contend on the same row.
    """
    __tablename__ = "summary_breakdowns"
    __table_args__ = (
        db.UniqueConstraint(
            "shop_id", "period", "period_key", "breakdown", "key",
            name="uq_summary_breakdowns_entry",
        ),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    shop_id = db.Column(db.Integer, db.ForeignKey("shops.id"), nullable=False, index=True)
    period = db.Column(db.String(8), nullable=False)
    period_key = db.Column(db.String(10), nullable=False)
    breakdown = db.Column(db.String(32), nullable=False)
    key = db.Column(db.String(64), nullable=False)

    cents = db.Column(db.BigInteger, nullable=False, default=0)  # signed
