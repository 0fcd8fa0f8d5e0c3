# Overview: Flask API routes for dashboard and summary reports.

"""
Reporting API routes.

All reads come from the pre-aggregated day/month summaries; no report scans
the sales or movement tables. A period with no activity returns
{"summary": null}, which is not an error.
"""

from flask import Blueprint, request, jsonify, g

from ..errors import LedgerError
from ..services import reporting_service
from ..decorators import require_auth

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/daily/<day>")
@require_auth
def daily_summary_route(day: str):
    try:
        summary = reporting_service.get_daily_summary(g.shop_id, day)
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status
    return jsonify({"day": day, "summary": summary}), 200


@reports_bp.get("/monthly/<month>")
@require_auth
def monthly_summary_route(month: str):
    try:
        summary = reporting_service.get_monthly_summary(g.shop_id, month)
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status
    return jsonify({"month": month, "summary": summary}), 200


@reports_bp.get("/today")
@require_auth
def today_route():
    """Dashboard headline for the shop-local current day and month."""
    try:
        return jsonify(reporting_service.get_today(g.shop_id)), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status


@reports_bp.get("/series/<month>")
@require_auth
def month_series_route(month: str):
    """Per-day sales and net cash for the dashboard chart."""
    try:
        return jsonify(reporting_service.get_month_series(g.shop_id, month)), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status


@reports_bp.get("/recent-sales")
@require_auth
def recent_sales_route():
    sales = reporting_service.list_recent_sales(g.shop_id, limit=request.args.get("limit", 5, type=int))
    return jsonify({"sales": sales}), 200
