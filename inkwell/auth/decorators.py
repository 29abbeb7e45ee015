"""
Admin API Decorator

Admin API handlers re-derive the token themselves instead of trusting the
gateway's result, so the role check holds even for routes the gateway
lets through (a USER token reaching /api/admin/*).
"""

from functools import wraps
from flask import current_app, g, request

from inkwell.auth.security import token_from_request
from inkwell.errors import Unauthorized


def current_claims():
    """Validate the token on the current request from scratch."""
    issuer = current_app.extensions['token_issuer']
    return issuer.validate(token_from_request(request, current_app.config['AUTH_COOKIE_NAME']))


def admin_required(f):
    """Decorator to ensure the request carries a valid ADMIN token.

    Raises Unauthorized (401, JSON body) when the token is missing, invalid
    or belongs to a non-admin.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        claims = current_claims()
        policy = current_app.extensions['authorization_policy']
        if not policy.decide_admin_api(claims).allowed:
            raise Unauthorized()
        g.admin_claims = claims
        return f(*args, **kwargs)
    return wrapper
