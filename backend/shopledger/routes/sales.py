# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

"""Sales API routes (one-shot checkout)"""

from flask import Blueprint, request, jsonify, g, current_app

from ..errors import LedgerError, NotFound
from ..services import sales_service, reporting_service
from ..decorators import require_auth


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
@require_auth
def record_sale_route():
    """
    Record a sale: stock decrement, sale, cash movement and summaries in one
    transaction.

    Request body:
    {
        "payment_method": "cash",
        "items": [
            {"product_id": 1, "mode": "kg", "qty_kg": 1.25},
            {"product_id": 2, "mode": "amount", "amount_cents": 500000}
        ]
    }
    """
    data = request.get_json(silent=True) or {}
    raw_items = data.get("items")

    try:
        if not isinstance(raw_items, list) or not raw_items:
            return jsonify({"error": "items must be a non-empty list", "code": "VALIDATION_ERROR", "field": "items"}), 400

        items = [sales_service.parse_sale_item(raw, i) for i, raw in enumerate(raw_items)]
        result = sales_service.record_sale(g.shop_id, g.user_id, data.get("payment_method"), items)
        return jsonify(result), 201

    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to record sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("")
@require_auth
def list_sales_route():
    """Most recent sales of the caller's shop (?limit=, default 5)."""
    limit = request.args.get("limit", 5, type=int)
    sales = reporting_service.list_recent_sales(g.shop_id, limit=limit)
    return jsonify({"sales": sales, "count": len(sales)}), 200


@sales_bp.get("/<int:sale_id>")
@require_auth
def get_sale_route(sale_id: int):
    sale = sales_service.get_sale(g.shop_id, sale_id)
    if not sale:
        e = NotFound("Sale not found")
        return jsonify(e.to_dict()), e.http_status

    return jsonify({"sale": sale.to_dict()}), 200
