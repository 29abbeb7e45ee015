"""
Inkwell CMS - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
import os

from flask import Flask, g, jsonify, redirect, request
from inkwell.extensions import db, login_manager
from inkwell.config import Config

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance
    """
    from inkwell.auth.gateway import RequestGateway
    from inkwell.auth.policy import AuthorizationPolicy
    from inkwell.auth.security import TokenIssuer, token_from_request
    from inkwell.errors import register_error_handlers
    from inkwell.services.markdown import render_markdown

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.session_protection = None

    # Signing secret and allow-lists are read once here and injected
    issuer = TokenIssuer.from_config(app.config)
    policy = AuthorizationPolicy.from_config(app.config)
    app.extensions['token_issuer'] = issuer
    app.extensions['authorization_policy'] = policy
    RequestGateway(policy, issuer, app.config['AUTH_COOKIE_NAME']).init_app(app)

    register_error_handlers(app)

    # Register blueprints
    from inkwell.auth import auth_bp, auth_api_bp
    from inkwell.admin import admin_bp, admin_api_bp
    from inkwell.blog import blog_bp
    from inkwell.dashboard import dashboard_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(auth_api_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(admin_api_bp)
    app.register_blueprint(blog_bp)
    app.register_blueprint(dashboard_bp)

    # Context processor for branding and the viewer's role
    @app.context_processor
    def inject_site_context():
        from inkwell.services.site_settings import get_settings
        claims = g.get('token_claims')
        return dict(site_settings=get_settings(),
                    is_authenticated=claims is not None,
                    is_admin=bool(claims and claims.is_admin))

    # User loader for Flask-Login: identity comes from the access token
    @login_manager.request_loader
    def load_user_from_request(req):
        from inkwell.models import User
        claims = g.get('token_claims')
        if claims is None:
            claims = issuer.validate(token_from_request(req, app.config['AUTH_COOKIE_NAME']))
        return db.session.get(User, claims.user_id) if claims else None

    @login_manager.unauthorized_handler
    def unauthorized():
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Unauthorized'}), 401
        return redirect(policy.login_redirect(request.path).location)

    # Template filter for post bodies
    app.add_template_filter(render_markdown, 'markdown')

    # Create database tables
    with app.app_context():
        _ensure_sqlite_directory(app.config['SQLALCHEMY_DATABASE_URI'])
        db.create_all()
        _ensure_default_data(app)

    return app


def _ensure_sqlite_directory(uri):
    prefix = 'sqlite:///'
    if uri.startswith(prefix) and ':memory:' not in uri:
        directory = os.path.dirname(uri[len(prefix):])
        if directory:
            os.makedirs(directory, exist_ok=True)


def _ensure_default_data(app):
    """Ensure the bootstrap admin exists when credentials are configured."""
    from inkwell.services.users import ensure_admin

    email = app.config.get('ADMIN_EMAIL')
    password = app.config.get('ADMIN_PASSWORD')
    if not email or not password:
        logger.info('Admin credentials not configured, skipping admin seed')
        return

    try:
        ensure_admin(email, password, name=app.config.get('ADMIN_NAME') or 'Admin')
    except Exception:
        db.session.rollback()
        logger.exception('Could not seed admin user %s', email)
        raise
