# Overview: Service-layer read models for dashboards and reports; no business logic.

from __future__ import annotations

import calendar
from datetime import datetime

from ..errors import ValidationError
from ..extensions import db
from ..models import CashMovement, Sale
from ..time_utils import day_key, month_key, utcnow
from .shop_service import get_shop
from .summary_service import get_summary, list_day_summaries


KEY_PATTERNS = {"%Y-%m-%d": "YYYY-MM-DD", "%Y-%m": "YYYY-MM"}


def _check_key(value: str, fmt: str, field: str) -> str:
    try:
        parsed = datetime.strptime(value or "", fmt)
    except ValueError:
        raise ValidationError(f"{field} must be {KEY_PATTERNS[fmt]}", field=field)
    # strptime accepts "2026-3-1"; keys are always zero-padded
    if parsed.strftime(fmt) != value:
        raise ValidationError(f"{field} must be zero-padded", field=field)
    return value


def get_daily_summary(shop_id: int, day: str) -> dict | None:
    """Summary for YYYY-MM-DD (shop-local), or None if nothing happened that day."""
    return get_summary(shop_id, "day", _check_key(day, "%Y-%m-%d", "day"))


def get_monthly_summary(shop_id: int, month: str) -> dict | None:
    """Summary for YYYY-MM (shop-local), or None if nothing happened that month."""
    return get_summary(shop_id, "month", _check_key(month, "%Y-%m", "month"))


def _headline(summary: dict | None) -> dict:
    s = summary or {}
    cash_in = s.get("cash_in_cents", 0)
    cash_out = s.get("cash_out_cents", 0)
    return {
        "sales_count": s.get("sales_count", 0),
        "sales_total_cents": s.get("sales_total_cents", 0),
        "cash_in_cents": cash_in,
        "cash_out_cents": cash_out,
        "cash_net_cents": s.get("cash_net_cents", 0),
        # income (sales + manual) minus expenses
        "simple_net_cents": cash_in - cash_out,
        "sales_by_method": s.get("sales_by_method", {}),
        "cash_in_by_method": s.get("cash_in_by_method", {}),
        "cash_out_by_method": s.get("cash_out_by_method", {}),
    }


def get_today(shop_id: int, now: datetime | None = None) -> dict:
    """Dashboard figures for the shop-local current day and month."""
    shop = get_shop(shop_id)
    now = now or utcnow()
    day = day_key(now, shop.timezone)
    month = month_key(now, shop.timezone)

    daily = get_summary(shop_id, "day", day)
    monthly = get_summary(shop_id, "month", month)

    return {
        "day": day,
        "month": month,
        "has_data": daily is not None or monthly is not None,
        "today": _headline(daily),
        "this_month": _headline(monthly),
    }


def get_month_series(shop_id: int, month: str) -> dict:
    """
    Per-day sales and net cash for a month, for the dashboard chart.

    Built from the daily summary rows; days without activity are zero.
    """
    _check_key(month, "%Y-%m", "month")
    year, mon = (int(part) for part in month.split("-"))
    days = calendar.monthrange(year, mon)[1]

    labels = [f"{d:02d}" for d in range(1, days + 1)]
    sales = [0] * days
    net = [0] * days

    for row in list_day_summaries(shop_id, month):
        index = int(row.period_key[-2:]) - 1
        sales[index] = row.sales_total_cents
        net[index] = row.cash_net_cents

    return {
        "month": month,
        "labels": labels,
        "daily_sales_cents": sales,
        "daily_net_cents": net,
    }


def list_recent_sales(shop_id: int, limit: int = 5) -> list[dict]:
    sales = (
        db.session.query(Sale)
        .filter(Sale.shop_id == shop_id)
        .order_by(Sale.created_at.desc(), Sale.id.desc())
        .limit(max(1, min(limit, 200)))
        .all()
    )
    return [s.to_dict() for s in sales]


def list_cash_movements(shop_id: int, limit: int = 50, movement_type: str | None = None) -> list[dict]:
    """Most recent movements by business time (sale and manual)."""
    query = db.session.query(CashMovement).filter(CashMovement.shop_id == shop_id)
    if movement_type is not None:
        if movement_type not in ("sale", "manual"):
            raise ValidationError("type must be 'sale' or 'manual'", field="type")
        query = query.filter(CashMovement.type == movement_type)

    movements = (
        query.order_by(CashMovement.occurred_at.desc(), CashMovement.id.desc())
        .limit(max(1, min(limit, 500)))
        .all()
    )
    return [m.to_dict() for m in movements]
