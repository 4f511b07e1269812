from functools import wraps

from flask import current_app, jsonify
from flask_jwt_extended import get_jwt


def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            claims = get_jwt()

            if claims.get("role") not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403

            return current_app.ensure_sync(fn)(*args, **kwargs)
        return wrapper
    return decorator


def site_owner_required(fn):
    """The token's tenant_id claim must match the site_id route argument."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        claims = get_jwt()

        if claims.get("tenant_id") != kwargs.get("site_id"):
            return jsonify({"error": "Tenant mismatch"}), 403

        return current_app.ensure_sync(fn)(*args, **kwargs)
    return wrapper
