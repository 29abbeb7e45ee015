"""
Auth Blueprints

Login, registration and logout pages plus the JSON auth API under
/api/auth. Both issue the same signed access token.
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)
auth_api_bp = Blueprint('auth_api', __name__, url_prefix='/api/auth')

from inkwell.auth import routes  # noqa: E402, F401
