"""
Application Errors

Typed failures raised by the service layer and rendered as
``{"error": message}`` JSON bodies by the handlers registered here.
"""

import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from inkwell.extensions import db

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class Unauthorized(AppError):
    status_code = 401
    default_message = 'Unauthorized'


class InvalidCredentials(Unauthorized):
    default_message = 'Invalid email or password'


class ValidationError(AppError):
    status_code = 400
    default_message = 'Invalid request'


class NotFound(AppError):
    status_code = 404
    default_message = 'Not found'


class Conflict(AppError):
    status_code = 409
    default_message = 'Conflict'


class LastAdminProtection(AppError):
    status_code = 400
    default_message = 'Cannot remove the last admin user'


class InvalidFileType(AppError):
    status_code = 400
    default_message = 'Only image files are allowed'


class InternalError(AppError):
    pass


def _is_api_request():
    return request.path.startswith('/api/')


def register_error_handlers(app):
    """Attach JSON error rendering to the application."""

    @app.errorhandler(AppError)
    def handle_app_error(error):
        if _is_api_request():
            return jsonify({'error': error.message}), error.status_code
        return error.message, error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if _is_api_request():
            return jsonify({'error': error.description}), error.code
        return error

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.exception('Unhandled error on %s %s', request.method, request.path)
        if _is_api_request():
            failure = InternalError()
            return jsonify({'error': failure.message}), failure.status_code
        return 'Internal server error', 500
