# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .errors import Unauthenticated
from .services import auth_service


def require_auth(f):
    """
    Require a verified bearer identity and establish shop context.

    Sets the following Flask g attributes:
    - g.identity: the verified Identity
    - g.user_id: caller uid, recorded as created_by/closed_by
    - g.shop_id: the caller's shop (tenant context)

    Role checks (e.g. who may delete products) belong to the access-control
    layer in front of this service, not here.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify(Unauthenticated("Authentication required").to_dict()), 401

        token = auth_header.split(" ", 1)[1].strip()

        try:
            identity = auth_service.verify_token(token)
        except Unauthenticated as e:
            return jsonify(e.to_dict()), e.http_status

        g.identity = identity
        g.user_id = identity.uid
        g.shop_id = identity.shop_id

        return f(*args, **kwargs)

    return decorated_function
