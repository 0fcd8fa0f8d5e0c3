# Overview: Service-layer operations for day/month summaries; atomic increments and reads.

"""
Aggregate Summary Store

Summaries are never recomputed from raw records. Each sale or cash movement
carries a SummaryDelta that is applied, in the writer's own transaction, to
the day row and the month row of its shop-local date.

Increments are issued as single SQL statements (INSERT ... ON CONFLICT DO
UPDATE SET col = col + delta), so they are commutative and two transactions
touching the same summary never overwrite each other's totals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import insert as generic_insert, update
from sqlalchemy.exc import IntegrityError

from ..errors import ValidationError
from ..extensions import db
from ..models import Shop, Summary, SummaryBreakdown, BREAKDOWNS, PERIODS
from ..time_utils import day_key, month_key, utcnow

COUNTERS = (
    "sales_count",
    "sales_total_cents",
    "cash_in_cents",
    "cash_out_cents",
    "cash_net_cents",
)


@dataclass
class SummaryDelta:
    """Increments to apply to one summary: scalar counters plus keyed breakdowns."""

    counters: dict[str, int] = field(default_factory=dict)
    breakdowns: dict[str, dict[str, int]] = field(default_factory=dict)

    def add(self, counter: str, cents: int) -> "SummaryDelta":
        if counter not in COUNTERS:
            raise ValueError(f"Unknown summary counter: {counter}")
        self.counters[counter] = self.counters.get(counter, 0) + cents
        return self

    def add_to(self, breakdown: str, key: str, cents: int) -> "SummaryDelta":
        if breakdown not in BREAKDOWNS:
            raise ValueError(f"Unknown summary breakdown: {breakdown}")
        entries = self.breakdowns.setdefault(breakdown, {})
        entries[key] = entries.get(key, 0) + cents
        return self

    def merge(self, other: "SummaryDelta") -> "SummaryDelta":
        merged = SummaryDelta()
        for delta in (self, other):
            for counter, cents in delta.counters.items():
                merged.add(counter, cents)
            for breakdown, entries in delta.breakdowns.items():
                for key, cents in entries.items():
                    merged.add_to(breakdown, key, cents)
        return merged

    def is_empty(self) -> bool:
        return not self.counters and not self.breakdowns

    @classmethod
    def for_sale(cls, method: str, total_cents: int) -> "SummaryDelta":
        """A sale counts as a sale and as cash coming in."""
        return (
            cls()
            .add("sales_count", 1)
            .add("sales_total_cents", total_cents)
            .add_to("sales_by_method", method, total_cents)
            .add("cash_in_cents", total_cents)
            .add("cash_net_cents", total_cents)
            .add_to("cash_in_by_method", method, total_cents)
        )

    @classmethod
    def for_cash_movement(cls, direction: str, method: str, category: str, amount_cents: int) -> "SummaryDelta":
        """Manual movement: signed net/method/category views plus the split in/out view."""
        signed = amount_cents if direction == "in" else -amount_cents
        delta = (
            cls()
            .add("cash_net_cents", signed)
            .add_to("cash_by_method", method, signed)
            .add_to("cash_by_category", category, signed)
        )
        if direction == "in":
            delta.add("cash_in_cents", amount_cents).add_to("cash_in_by_method", method, amount_cents)
        else:
            delta.add("cash_out_cents", amount_cents).add_to("cash_out_by_method", method, amount_cents)
        return delta


def period_keys(shop: Shop, occurred_at: datetime) -> dict[str, str]:
    return {
        "day": day_key(occurred_at, shop.timezone),
        "month": month_key(occurred_at, shop.timezone),
    }


def _dialect_insert():
    name = db.engine.dialect.name
    if name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
        return insert
    if name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
        return insert
    return None


def _increment(table, key_values: dict, deltas: dict, extra: dict) -> None:
    """Add deltas to the row identified by key_values, creating it on first use."""
    insert = _dialect_insert()
    if insert is not None:
        stmt = insert(table).values(**key_values, **deltas, **extra)
        set_ = {col: table.c[col] + stmt.excluded[col] for col in deltas}
        set_.update({col: stmt.excluded[col] for col in extra})
        stmt = stmt.on_conflict_do_update(index_elements=list(key_values), set_=set_)
        db.session.execute(stmt)
        return

    conditions = [table.c[k] == v for k, v in key_values.items()]
    values = {col: table.c[col] + d for col, d in deltas.items()}
    values.update(extra)
    upd = update(table).where(*conditions).values(values)

    if db.session.execute(upd).rowcount:
        return
    try:
        with db.session.begin_nested():
            db.session.execute(generic_insert(table).values(**key_values, **deltas, **extra))
    except IntegrityError:
        # Another transaction created the row between our UPDATE and INSERT
        db.session.execute(upd)


def apply_summary_delta(shop: Shop, occurred_at: datetime, delta: SummaryDelta) -> dict[str, str]:
    """
    Apply delta to the day and month summaries containing occurred_at.

    Must be called inside the transaction that writes the originating record.
    Returns the period keys that were touched.
    """
    keys = period_keys(shop, occurred_at)
    if delta.is_empty():
        return keys

    now = utcnow()
    summary_table = Summary.__table__
    breakdown_table = SummaryBreakdown.__table__

    for period, key in keys.items():
        _increment(
            summary_table,
            {"shop_id": shop.id, "period": period, "period_key": key},
            dict(delta.counters),
            {"updated_at": now},
        )

        for breakdown, entries in delta.breakdowns.items():
            for entry_key, cents in entries.items():
                _increment(
                    breakdown_table,
                    {
                        "shop_id": shop.id,
                        "period": period,
                        "period_key": key,
                        "breakdown": breakdown,
                        "key": entry_key,
                    },
                    {"cents": cents},
                    {},
                )

    return keys


def get_summary(shop_id: int, period: str, period_key: str) -> dict | None:
    """Current summary with every breakdown map, or None when nothing was recorded."""
    if period not in PERIODS:
        raise ValidationError(f"period must be one of {', '.join(PERIODS)}", field="period")

    row = (
        db.session.query(Summary)
        .filter_by(shop_id=shop_id, period=period, period_key=period_key)
        .first()
    )
    if not row:
        return None

    data = row.to_dict()
    for breakdown in BREAKDOWNS:
        data[breakdown] = {}

    entries = (
        db.session.query(SummaryBreakdown)
        .filter_by(shop_id=shop_id, period=period, period_key=period_key)
        .order_by(SummaryBreakdown.breakdown.asc(), SummaryBreakdown.key.asc())
        .all()
    )
    for entry in entries:
        data[entry.breakdown][entry.key] = entry.cents

    return data


def list_day_summaries(shop_id: int, month: str) -> list[Summary]:
    """Daily summary rows for one month (YYYY-MM), ordered by day."""
    return (
        db.session.query(Summary)
        .filter(
            Summary.shop_id == shop_id,
            Summary.period == "day",
            Summary.period_key.like(f"{month}-%"),
        )
        .order_by(Summary.period_key.asc())
        .all()
    )
