"""
Dashboard Blueprint

Home page, the signed-in user's dashboard and the self-service profile.
"""

from flask import Blueprint

dashboard_bp = Blueprint('dashboard', __name__)

from inkwell.dashboard import routes  # noqa: E402, F401
