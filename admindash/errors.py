"""Typed domain errors and the JSON error envelope."""

import logging

from flask import jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = 'INTERNAL_ERROR'

    def __init__(self, message, details=None, status_code=None, code=None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code

    def to_dict(self):
        error = {'code': self.code, 'message': self.message}
        if self.details:
            error['details'] = self.details
        return {'success': False, 'error': error}


class NotFoundError(AppError):
    """Missing record, or a record owned by somebody else.

    Both cases produce the same message so callers cannot probe for
    other users' ids.
    """

    status_code = 404
    code = 'NOT_FOUND'

    def __init__(self, resource, resource_id=None):
        if resource_id is not None:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f'{resource} not found'
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(AppError):
    status_code = 409
    code = 'CONFLICT'

    def __init__(self, message, resource=None, key=None):
        super().__init__(message)
        self.resource = resource
        self.key = key


class ValidationError(AppError):
    status_code = 400
    code = 'VALIDATION_ERROR'

    def __init__(self, message='Invalid request payload', details=None):
        super().__init__(message, details=details)


class UnauthorizedError(AppError):
    status_code = 401
    code = 'UNAUTHORIZED'

    def __init__(self, message='Unauthorized'):
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = 403
    code = 'FORBIDDEN'

    def __init__(self, message='Forbidden'):
        super().__init__(message)


class SearchUnavailableError(AppError):
    status_code = 503
    code = 'SEARCH_UNAVAILABLE'

    def __init__(self, message='Search is temporarily unavailable'):
        super().__init__(message)


def register_error_handlers(app):
    """Attach JSON error handlers to the application."""
    from admindash.extensions import db

    @app.errorhandler(AppError)
    def handle_app_error(e):
        logger.info('%s: %s', e.code, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        db.session.rollback()
        logger.warning('Integrity error: %s', e.orig)
        return jsonify({
            'success': False,
            'error': {
                'code': 'DUPLICATE_ENTRY',
                'message': 'A record with these values already exists',
            },
        }), 409

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        codes = {
            404: 'ROUTE_NOT_FOUND',
            405: 'METHOD_NOT_ALLOWED',
            429: 'RATE_LIMITED',
        }
        return jsonify({
            'success': False,
            'error': {
                'code': codes.get(e.code, e.name.upper().replace(' ', '_')),
                'message': e.description,
            },
        }), e.code

    @app.errorhandler(500)
    def internal_error(e):
        db.session.rollback()
        logger.error('Unhandled error', exc_info=getattr(e, 'original_exception', None))
        message = str(e) if app.debug else 'An unexpected error occurred'
        return jsonify({
            'success': False,
            'error': {'code': 'INTERNAL_ERROR', 'message': message},
        }), 500
