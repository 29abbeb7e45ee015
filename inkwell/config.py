"""
Configuration settings for the Inkwell CMS
"""
import os


def _int_env(name, default):
    value = os.environ.get(name)
    return int(value) if value else default


class Config:
    """Flask application configuration"""

    # Flask secret key for flash messages
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'

    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'inkwell.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Signed access tokens (loaded once, never mutated at runtime)
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or 'dev-jwt-secret-change-in-production'
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_HOURS = _int_env('JWT_EXPIRES_HOURS', 8)
    AUTH_COOKIE_NAME = os.environ.get('AUTH_COOKIE_NAME') or 'inkwell_token'
    AUTH_COOKIE_SECURE = os.environ.get('AUTH_COOKIE_SECURE', '').lower() in ('1', 'true', 'yes')

    # Gateway allow-lists
    PUBLIC_PATHS = ('/', '/login', '/register', '/blogs', '/api/admin/site-settings')
    PUBLIC_PATH_PREFIXES = ('/blogs/',)
    PUBLIC_API_PREFIXES = ('/api/auth', '/api/blogs', '/api/logo-image')
    LOGIN_PATH = '/login'
    HOME_PATH = '/dashboard'

    # Site settings
    DEFAULT_LOGO_TEXT = 'MyApp'
    MAX_LOGO_BYTES = _int_env('MAX_LOGO_BYTES', 2 * 1024 * 1024)
    MAX_CONTENT_LENGTH = _int_env('MAX_CONTENT_LENGTH', 4 * 1024 * 1024)

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # Bootstrap admin, created at startup when set and not already present
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD')
    ADMIN_NAME = os.environ.get('ADMIN_NAME') or 'Admin'


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'test-jwt-secret'
    MAX_LOGO_BYTES = 1024
    ADMIN_EMAIL = None
    ADMIN_PASSWORD = None
