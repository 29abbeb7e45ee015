"""
Blog Routes

Everything here is public; unpublished posts are never returned.
"""

from flask import Response, jsonify, render_template
from inkwell.blog import blog_bp
from inkwell.services import posts as post_service
from inkwell.services import site_settings as settings_service

LOGO_CACHE_CONTROL = 'public, max-age=3600'


@blog_bp.route('/blogs')
def blog_index():
    """Published posts, newest first"""
    return render_template('blogs/index.html', posts=post_service.public_list_posts())


@blog_bp.route('/blogs/<slug>')
def blog_detail(slug):
    return render_template('blogs/detail.html', post=post_service.public_get_post(slug))


@blog_bp.route('/api/blogs', methods=['GET'])
def api_list_posts():
    return jsonify(post_service.public_list_posts())


@blog_bp.route('/api/blogs/<slug>', methods=['GET'])
def api_get_post(slug):
    return jsonify(post_service.public_get_post(slug))


@blog_bp.route('/api/logo-image', methods=['GET'])
def logo_image():
    """Stream the stored logo bytes with their stored content type."""
    data, mime_type = settings_service.get_logo_image()
    return Response(data, mimetype=mime_type, headers={'Cache-Control': LOGO_CACHE_CONTROL})
