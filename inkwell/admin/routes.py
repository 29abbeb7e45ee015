"""
Admin Page Routes

Server-rendered admin screens. Access is enforced by the request gateway,
which sends non-admins back to their dashboard.
"""

from flask import render_template
from inkwell.admin import admin_bp
from inkwell.models import Post, User
from inkwell.services import posts as post_service
from inkwell.services import site_settings as settings_service
from inkwell.services import users as user_service


@admin_bp.route('')
def admin_dashboard():
    """Admin dashboard with content overview."""
    return render_template('admin/dashboard.html',
                           total_users=User.query.count(),
                           total_posts=Post.query.count(),
                           published_posts=Post.query.filter_by(published=True).count(),
                           settings=settings_service.get_settings())


@admin_bp.route('/users')
def manage_users():
    return render_template('admin/users.html', users=user_service.list_users())


@admin_bp.route('/users/<int:user_id>')
def edit_user(user_id):
    return render_template('admin/user_detail.html', user=user_service.get_user(user_id))


@admin_bp.route('/blogs')
def manage_blogs():
    return render_template('admin/blogs.html', posts=post_service.admin_list_posts())


@admin_bp.route('/blogs/<int:post_id>')
def edit_blog(post_id):
    return render_template('admin/blog_detail.html', post=post_service.admin_get_post(post_id))


@admin_bp.route('/site-settings')
def site_settings():
    return render_template('admin/site_settings.html', settings=settings_service.get_settings())
