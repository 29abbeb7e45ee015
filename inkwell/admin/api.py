"""
Admin API Routes

JSON endpoints for managing users, blog posts and site settings. Every
mutating or privileged handler carries @admin_required.
"""

from flask import g, jsonify, request

from inkwell.admin import admin_api_bp
from inkwell.auth.decorators import admin_required
from inkwell.errors import ValidationError
from inkwell.services import posts as post_service
from inkwell.services import site_settings as settings_service
from inkwell.services import users as user_service

USER_FIELDS = ('name', 'email', 'role', 'password', 'bio')
POST_FIELDS = ('title', 'content', 'published', 'author_id')


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _present(data, allowed):
    """Keep only the keys the client actually sent."""
    return {key: data[key] for key in allowed if key in data}


# -----------------------------------------------------------------------------
# Users
# -----------------------------------------------------------------------------

@admin_api_bp.route('/users', methods=['GET'])
@admin_required
def list_users():
    return jsonify(user_service.list_users())


@admin_api_bp.route('/users', methods=['POST'])
@admin_required
def create_user():
    data = _json_body()
    user = user_service.create_user(
        email=data.get('email'),
        password=data.get('password'),
        role=data.get('role'),
        name=data.get('name'),
    )
    return jsonify(user.to_dict()), 201


@admin_api_bp.route('/users/<int:user_id>', methods=['GET'])
@admin_required
def get_user(user_id):
    return jsonify(user_service.get_user(user_id))


@admin_api_bp.route('/users/<int:user_id>', methods=['PATCH'])
@admin_required
def update_user(user_id):
    user = user_service.update_user(user_id, _present(_json_body(), USER_FIELDS))
    return jsonify(user.to_dict(include_profile=True))


@admin_api_bp.route('/users/<int:user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    user_service.delete_user(user_id)
    return jsonify({'success': True})


# -----------------------------------------------------------------------------
# Blog posts
# -----------------------------------------------------------------------------

@admin_api_bp.route('/blogs', methods=['GET'])
@admin_required
def list_posts():
    return jsonify(post_service.admin_list_posts())


@admin_api_bp.route('/blogs', methods=['POST'])
@admin_required
def create_post():
    data = _json_body()
    post = post_service.create_post(
        title=data.get('title'),
        content=data.get('content'),
        published=data.get('published', False),
        author_id=data.get('author_id'),
        requested_by=g.admin_claims.user_id,
    )
    return jsonify(post), 201


@admin_api_bp.route('/blogs/<int:post_id>', methods=['GET'])
@admin_required
def get_post(post_id):
    return jsonify(post_service.admin_get_post(post_id))


@admin_api_bp.route('/blogs/<int:post_id>', methods=['PATCH'])
@admin_required
def update_post(post_id):
    return jsonify(post_service.update_post(post_id, _present(_json_body(), POST_FIELDS)))


@admin_api_bp.route('/blogs/<int:post_id>', methods=['DELETE'])
@admin_required
def delete_post(post_id):
    post_service.delete_post(post_id)
    return jsonify({'success': True})


# -----------------------------------------------------------------------------
# Site settings
# -----------------------------------------------------------------------------

@admin_api_bp.route('/site-settings', methods=['GET'])
def get_site_settings():
    """Public branding read; never includes the image bytes."""
    return jsonify(settings_service.get_settings().to_dict())


@admin_api_bp.route('/site-settings', methods=['PUT'])
@admin_required
def update_site_settings():
    data = _json_body()
    settings = settings_service.update_settings(
        logo_text=data.get('logo_text'),
        remove_image=bool(data.get('remove_logo_image')),
    )
    return jsonify(settings.to_dict())


@admin_api_bp.route('/upload', methods=['POST'])
@admin_required
def upload_logo():
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        raise ValidationError('No file uploaded')
    settings_service.upload_logo_image(upload.read(), upload.mimetype)
    return jsonify({'success': True})
