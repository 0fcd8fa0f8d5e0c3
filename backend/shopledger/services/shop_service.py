# Overview: Service-layer operations for shops (tenants); lookup and bootstrap.

from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import current_app

from ..errors import NotFound, ValidationError
from ..extensions import db
from ..models import Shop


def validate_timezone(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("timezone is required", field="timezone")
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name}", field="timezone")
    return name


def create_shop(name: str, timezone: str | None = None) -> Shop:
    """Create a shop; timezone defaults to DEFAULT_SHOP_TIMEZONE."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("name is required", field="name")

    tz = validate_timezone(timezone or current_app.config["DEFAULT_SHOP_TIMEZONE"])

    shop = Shop(name=name, timezone=tz)
    db.session.add(shop)
    db.session.commit()
    return shop


def get_shop(shop_id: int) -> Shop:
    shop = db.session.get(Shop, shop_id)
    if not shop:
        raise NotFound("Shop not found")
    return shop


def list_shops() -> list[Shop]:
    return db.session.query(Shop).order_by(Shop.id.asc()).all()
