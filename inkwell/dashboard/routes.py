"""
Dashboard Routes

The landing page, the user dashboard and the /api/profile endpoints.
`current_user` is resolved from the access token by the login manager.
"""

from flask import jsonify, render_template, request
from flask_login import current_user, login_required

from inkwell.dashboard import dashboard_bp
from inkwell.errors import ValidationError
from inkwell.models import PROFILE_FIELDS
from inkwell.services import posts as post_service
from inkwell.services import users as user_service

PROFILE_UPDATE_FIELDS = ('name',) + PROFILE_FIELDS
RECENT_POSTS_ON_HOME = 3


@dashboard_bp.route('/')
def index():
    """Landing page with the latest published posts"""
    posts = post_service.public_list_posts()[:RECENT_POSTS_ON_HOME]
    return render_template('index.html', posts=posts)


@dashboard_bp.route('/dashboard')
@login_required
def dashboard():
    return render_template('dashboard/dashboard.html', user=current_user)


@dashboard_bp.route('/dashboard/profile')
@login_required
def profile_page():
    return render_template('dashboard/profile.html', user=current_user)


@dashboard_bp.route('/api/profile', methods=['GET'])
@login_required
def get_profile():
    return jsonify(current_user.to_dict(include_profile=True))


@dashboard_bp.route('/api/profile', methods=['PATCH'])
@login_required
def update_profile():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    fields = {key: data[key] for key in PROFILE_UPDATE_FIELDS if key in data}
    user = user_service.update_profile(current_user._get_current_object(), fields)
    return jsonify(user.to_dict(include_profile=True))
