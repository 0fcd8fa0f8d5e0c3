# Overview: Flask API routes for the cash ledger and cash shifts; parses input and returns JSON responses.

"""
Cash API routes.

Manual movements (expenses/income) and cashier shifts. Sale-type movements
are written only by POST /api/sales.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..errors import LedgerError
from ..services import ledger_service, reporting_service, shift_service
from ..decorators import require_auth


cash_bp = Blueprint("cash", __name__, url_prefix="/api/cash")


@cash_bp.post("/movements")
@require_auth
def create_movement_route():
    """
    Record a manual cash movement.

    Request body:
    {
        "direction": "out",
        "method": "cash",
        "category": "Proveedor",
        "amount_cents": 250000,
        "note": "media res",                    (optional)
        "occurred_at": "2026-03-01T12:00:00Z"   (optional, defaults to now)
    }
    """
    data = request.get_json(silent=True) or {}

    try:
        result = ledger_service.record_cash_movement(
            g.shop_id,
            g.user_id,
            direction=data.get("direction"),
            method=data.get("method"),
            category=data.get("category"),
            amount_cents=data.get("amount_cents"),
            note=data.get("note"),
            occurred_at=data.get("occurred_at"),
        )
        return jsonify(result), 201

    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to record cash movement")
        return jsonify({"error": "Internal server error"}), 500


@cash_bp.get("/movements")
@require_auth
def list_movements_route():
    """Recent movements (?limit=50, ?type=sale|manual)."""
    try:
        movements = reporting_service.list_cash_movements(
            g.shop_id,
            limit=request.args.get("limit", 50, type=int),
            movement_type=request.args.get("type") or None,
        )
        return jsonify({"movements": movements, "count": len(movements)}), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status


@cash_bp.post("/shifts")
@require_auth
def open_shift_route():
    """
    Open a cashier shift.

    Request body:
    {
        "cashier_name": "Ana",
        "opening_cash_cents": 1500000,
        "opened_at": "...",     (optional)
        "note": "..."           (optional)
    }
    """
    data = request.get_json(silent=True) or {}

    try:
        shift = shift_service.open_shift(
            g.shop_id,
            g.user_id,
            cashier_name=data.get("cashier_name"),
            opening_cash_cents=data.get("opening_cash_cents"),
            opened_at=data.get("opened_at"),
            note=data.get("note"),
        )
        return jsonify({"shift_id": shift.id, "shift": shift.to_dict()}), 201

    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to open shift")
        return jsonify({"error": "Internal server error"}), 500


@cash_bp.get("/shifts")
@require_auth
def list_shifts_route():
    """Recent shifts (?limit=20, ?status=open|closed)."""
    try:
        shifts = shift_service.list_shifts(
            g.shop_id,
            limit=request.args.get("limit", 20, type=int),
            status=request.args.get("status") or None,
        )
        return jsonify({"shifts": [s.to_dict() for s in shifts]}), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status


@cash_bp.post("/shifts/<int:shift_id>/close")
@require_auth
def close_shift_route(shift_id: int):
    """
    Close a shift with the counted closing cash.

    The difference is computed server-side from the stored opening count.
    """
    data = request.get_json(silent=True) or {}

    try:
        result = shift_service.close_shift(
            g.shop_id,
            g.user_id,
            shift_id,
            closing_cash_cents=data.get("closing_cash_cents"),
            closed_at=data.get("closed_at"),
            note=data.get("note"),
        )
        return jsonify(result), 200

    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to close shift")
        return jsonify({"error": "Internal server error"}), 500
