# Overview: Pytest coverage for dashboard and report reads.

from datetime import datetime

import pytest

from shopledger.errors import ValidationError
from shopledger.services import ledger_service, reporting_service, sales_service
from shopledger.services.sales_service import KgLine
from shopledger.time_utils import day_key, month_key, utcnow


def test_daily_and_monthly(shop_a):
    ledger_service.record_cash_movement(
        shop_a.id, "owner-a", "in", "cash", "aporte", 1000, occurred_at="2026-03-10T15:00:00Z"
    )
    assert reporting_service.get_daily_summary(shop_a.id, "2026-03-10")["cash_in_cents"] == 1000
    assert reporting_service.get_monthly_summary(shop_a.id, "2026-03")["cash_in_cents"] == 1000
    assert reporting_service.get_daily_summary(shop_a.id, "2026-03-11") is None


@pytest.mark.parametrize("bad", ["2026-3-10", "2026-03-32", "10/03/2026", "", "2026-03"])
def test_daily_key_format(shop_a, bad):
    with pytest.raises(ValidationError) as exc:
        reporting_service.get_daily_summary(shop_a.id, bad)
    assert exc.value.field == "day"


@pytest.mark.parametrize("bad", ["2026-3", "2026-13", "2026-03-01"])
def test_monthly_key_format(shop_a, bad):
    with pytest.raises(ValidationError):
        reporting_service.get_monthly_summary(shop_a.id, bad)


def test_today_without_activity(shop_a):
    today = reporting_service.get_today(shop_a.id)
    assert today["has_data"] is False
    assert today["today"]["sales_total_cents"] == 0
    assert today["this_month"]["simple_net_cents"] == 0


def test_today_headline(shop_a, vacio):
    sales_service.record_sale(shop_a.id, "cashier-a", "cash", [KgLine(vacio["id"], 1)])
    ledger_service.record_cash_movement(shop_a.id, "owner-a", "out", "transfer", "proveedor", 150000)

    now = utcnow()
    today = reporting_service.get_today(shop_a.id, now=now)
    assert today["day"] == day_key(now, shop_a.timezone)
    assert today["month"] == month_key(now, shop_a.timezone)
    assert today["has_data"] is True

    headline = today["today"]
    assert headline["sales_count"] == 1
    assert headline["sales_total_cents"] == 650000
    assert headline["cash_in_cents"] == 650000
    assert headline["cash_out_cents"] == 150000
    assert headline["simple_net_cents"] == 500000
    assert headline["cash_out_by_method"] == {"transfer": 150000}


def test_today_uses_shop_timezone(shop_a):
    # 02:00 UTC on the 1st is still the previous month in Buenos Aires
    now = datetime(2026, 4, 1, 2, 0, 0)
    today = reporting_service.get_today(shop_a.id, now=now)
    assert today["day"] == "2026-03-31"
    assert today["month"] == "2026-03"


def test_month_series(shop_a):
    ledger_service.record_cash_movement(shop_a.id, "o", "in", "cash", "a", 500, occurred_at="2026-02-03T15:00:00Z")
    ledger_service.record_cash_movement(shop_a.id, "o", "out", "cash", "b", 200, occurred_at="2026-02-03T16:00:00Z")
    ledger_service.record_cash_movement(shop_a.id, "o", "in", "cash", "a", 900, occurred_at="2026-02-28T15:00:00Z")

    series = reporting_service.get_month_series(shop_a.id, "2026-02")
    assert len(series["labels"]) == 28
    assert series["labels"][0] == "01"
    assert series["daily_net_cents"][2] == 300
    assert series["daily_net_cents"][27] == 900
    assert series["daily_sales_cents"] == [0] * 28
    assert sum(series["daily_net_cents"]) == 1200


def test_recent_sales_and_movements(shop_a, vacio):
    first = sales_service.record_sale(shop_a.id, "cashier-a", "cash", [KgLine(vacio["id"], 1)])
    second = sales_service.record_sale(shop_a.id, "cashier-a", "debit", [KgLine(vacio["id"], 2)])
    ledger_service.record_cash_movement(
        shop_a.id, "owner-a", "out", "cash", "luz", 1000, occurred_at="2020-01-01T12:00:00Z"
    )

    recent = reporting_service.list_recent_sales(shop_a.id, limit=5)
    assert [s["id"] for s in recent] == [second["sale_id"], first["sale_id"]]
    assert recent[0]["items"][0]["qty_kg"] == 2.0

    movements = reporting_service.list_cash_movements(shop_a.id)
    assert [m["type"] for m in movements] == ["sale", "sale", "manual"]
    assert len(reporting_service.list_cash_movements(shop_a.id, movement_type="manual")) == 1
    with pytest.raises(ValidationError):
        reporting_service.list_cash_movements(shop_a.id, movement_type="refund")
