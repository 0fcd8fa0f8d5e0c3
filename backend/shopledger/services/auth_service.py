# Overview: Bearer identity tokens; verification of the caller's uid and shop.

"""
Identity tokens are signed, timestamped {uid, shop_id} payloads.

Login, password handling and user-to-shop provisioning live in the external
auth layer, which mints tokens with the same SECRET_KEY. This module only
verifies them and turns them into an explicit Identity that routes pass into
every service call.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..errors import Unauthenticated

TOKEN_SALT = "shopledger-identity"


@dataclass(frozen=True)
class Identity:
    uid: str
    shop_id: int


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(uid: str, shop_id: int) -> str:
    """Mint a token (used by the CLI and tests; production tokens come from the auth layer)."""
    return _serializer().dumps({"uid": str(uid), "shop_id": int(shop_id)})


def verify_token(token: str) -> Identity:
    if not token:
        raise Unauthenticated("Authentication required")

    max_age = current_app.config.get("AUTH_TOKEN_MAX_AGE")
    try:
        data = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        raise Unauthenticated("Token expired")
    except BadSignature:
        raise Unauthenticated("Invalid token")

    if not isinstance(data, dict) or not data.get("uid") or data.get("shop_id") is None:
        raise Unauthenticated("Invalid token")

    return Identity(uid=str(data["uid"]), shop_id=int(data["shop_id"]))
