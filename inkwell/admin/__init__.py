"""
Admin Blueprints

Page routes under /admin are protected by the request gateway; the JSON
API under /api/admin re-checks the ADMIN role in every handler.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')
admin_api_bp = Blueprint('admin_api', __name__, url_prefix='/api/admin')

from inkwell.admin import routes, api  # noqa: E402, F401
