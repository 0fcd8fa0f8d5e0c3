# backend/shopledger/services/products_service.py
"""
Products Service with Multi-Tenant Support

MULTI-TENANT: All product operations are shop-scoped.
- A product id that belongs to another shop behaves exactly like a missing one
- Stock is edited directly here only by explicit owner action; sales decrement
  it inside the ledger transaction (see sales_service)
"""
from __future__ import annotations

from ..errors import NotFound, ValidationError
from ..extensions import db
from ..models import Product, PRODUCT_UNITS
from ..money import round_qty
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_product
from ..time_utils import utcnow
from .concurrency import run_with_retry
from .shop_service import get_shop

PRODUCT_MUTABLE_FIELDS = {"name", "unit", "sale_price_cents", "stock_qty", "low_stock_alert_qty"}

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields=PRODUCT_MUTABLE_FIELDS,
    required_on_create={"name", "unit", "sale_price_cents"},
)

PRODUCT_ORDERINGS = {
    "name": (Product.name.asc(), Product.id.asc()),
    "newest": (Product.created_at.desc(), Product.id.desc()),
    "stock": (Product.stock_qty.asc(), Product.name.asc()),
}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        if k in ("stock_qty", "low_stock_alert_qty"):
            v = round_qty(v, k)
        setattr(p, k, v)


def _clean(payload: dict, *, partial: bool) -> dict:
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=partial)
    enforce_rules_product(patch)
    return patch


def _get_shop_product(shop_id: int, product_id: int) -> Product:
    p = db.session.query(Product).filter_by(id=product_id, shop_id=shop_id).first()
    if not p:
        raise NotFound("Product not found")
    return p


def list_products(
    shop_id: int,
    *,
    name: str | None = None,
    unit: str | None = None,
    low_stock: bool | None = None,
    order_by: str = "name",
) -> list[dict]:
    """
    Shop-scoped product listing.

    Args:
        shop_id: Tenant
        name: Case-insensitive substring filter on the product name
        unit: Only products sold by this unit ("kg" or "unit")
        low_stock: True keeps only stock_qty <= low_stock_alert_qty,
            False keeps only products above their alert level
        order_by: "name" (default), "newest" or "stock"
    """
    if order_by not in PRODUCT_ORDERINGS:
        raise ValidationError(f"order_by must be one of {', '.join(PRODUCT_ORDERINGS)}", field="order_by")
    if unit is not None and unit not in PRODUCT_UNITS:
        raise ValidationError(f"unit must be one of {', '.join(PRODUCT_UNITS)}", field="unit")

    query = db.session.query(Product).filter(Product.shop_id == shop_id)

    term = (name or "").strip()
    if term:
        query = query.filter(Product.name.ilike(f"%{term}%"))
    if unit is not None:
        query = query.filter(Product.unit == unit)
    if low_stock is True:
        query = query.filter(Product.stock_qty <= Product.low_stock_alert_qty)
    elif low_stock is False:
        query = query.filter(Product.stock_qty > Product.low_stock_alert_qty)

    products = query.order_by(*PRODUCT_ORDERINGS[order_by]).all()
    return [p.to_dict() for p in products]


def list_low_stock_products(shop_id: int) -> list[dict]:
    """Products at or under their alert level, lowest stock first."""
    return list_products(shop_id, low_stock=True, order_by="stock")


def get_product(shop_id: int, product_id: int) -> dict:
    return _get_shop_product(shop_id, product_id).to_dict()


def create_product(shop_id: int, payload: dict) -> dict:
    """
    Create a product in the shop.

    Raises:
        ValidationError: naming the first offending field
        NotFound: if the shop does not exist
    """
    patch = _clean(payload, partial=False)
    get_shop(shop_id)

    p = Product(shop_id=shop_id, stock_qty=0, low_stock_alert_qty=0)
    apply_product_patch(p, patch)

    db.session.add(p)
    db.session.commit()
    return p.to_dict()


def update_product(shop_id: int, product_id: int, patch: dict) -> dict:
    """
    Partially update a product (name, unit, price, stock, alert level).

    Raises:
        ValidationError: naming the first offending field
        NotFound: if the product is missing or belongs to another shop
    """
    clean = _clean(patch, partial=True)

    def _op():
        p = _get_shop_product(shop_id, product_id)
        apply_product_patch(p, clean)
        p.updated_at = utcnow()
        db.session.commit()
        return p.to_dict()

    return run_with_retry(_op)


def delete_product(shop_id: int, product_id: int) -> None:
    """
    Hard-delete a product.

    Historical sale lines keep their own product name/price snapshot, so no
    referential check is made.
    """
    p = _get_shop_product(shop_id, product_id)
    db.session.delete(p)
    db.session.commit()
