# Overview: Flask API routes for products operations; parses input and returns JSON responses.

"""
Product management routes.

MULTI-TENANT: All product operations are scoped to the caller's shop.
The shop_id is derived from g.shop_id (set by @require_auth).
"""
from flask import Blueprint, request, jsonify, g, current_app

from ..errors import LedgerError
from ..services import products_service
from ..decorators import require_auth

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


def _parse_flag(value: str | None) -> bool | None:
    if value is None or value == "":
        return None
    return value.strip().lower() in ("1", "true", "yes")


@products_bp.get("")
@require_auth
def list_products_route():
    """
    List the shop's products.

    Query params:
    - name: substring filter (case-insensitive)
    - unit: "kg" or "unit"
    - low_stock: true/false
    - order_by: "name" (default), "newest", "stock"
    """
    try:
        items = products_service.list_products(
            g.shop_id,
            name=request.args.get("name"),
            unit=request.args.get("unit") or None,
            low_stock=_parse_flag(request.args.get("low_stock")),
            order_by=request.args.get("order_by", "name"),
        )
        return jsonify({"items": items, "count": len(items)}), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status


@products_bp.get("/low-stock")
@require_auth
def low_stock_route():
    items = products_service.list_low_stock_products(g.shop_id)
    return jsonify({"items": items, "count": len(items)}), 200


@products_bp.get("/<int:product_id>")
@require_auth
def get_product_route(product_id: int):
    try:
        return jsonify(products_service.get_product(g.shop_id, product_id)), 200
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status


@products_bp.post("")
@require_auth
def create_product_route():
    """
    Create a new product.

    Request body:
    {
        "name": "Vacio",
        "unit": "kg",
        "sale_price_cents": 650000,
        "stock_qty": 12.5,            (optional, default 0)
        "low_stock_alert_qty": 2      (optional, default 0)
    }
    """
    payload = request.get_json(silent=True) or {}

    try:
        created = products_service.create_product(g.shop_id, payload)
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(created), 201


@products_bp.route("/<int:product_id>", methods=["PUT", "PATCH"])
@require_auth
def update_product_route(product_id: int):
    """Partially update a product; only the provided fields change."""
    payload = request.get_json(silent=True) or {}

    try:
        updated = products_service.update_product(g.shop_id, product_id, payload)
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to update product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(updated), 200


@products_bp.delete("/<int:product_id>")
@require_auth
def delete_product_route(product_id: int):
    """Hard-delete a product. Past sales keep their own snapshot."""
    try:
        products_service.delete_product(g.shop_id, product_id)
    except LedgerError as e:
        return jsonify(e.to_dict()), e.http_status

    return jsonify({"ok": True}), 200
