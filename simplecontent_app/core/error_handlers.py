"""
Error Handlers for the SimpleContent host

Provides:
- Custom exception classes
- Consistent error response format
- Status code pages re-executed through the conventional route table
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException, InternalServerError, default_exceptions


class SimpleContentError(Exception):
    """Base exception class for request-level errors."""

    def __init__(
        self,
        message: str,
        code: str = 'UNKNOWN_ERROR',
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for JSON response."""
        return {
            'success': False,
            'message': self.message,
            'code': self.code,
            'details': self.details
        }


class NotFoundError(SimpleContentError):
    """Resource not found."""

    def __init__(self, message: str = 'Resource not found', resource: str = None):
        super().__init__(
            message=message,
            code='NOT_FOUND',
            status_code=404,
            details={'resource': resource} if resource else None
        )


class ValidationError(SimpleContentError):
    """Input validation failed."""

    def __init__(self, message: str = 'Validation failed', errors: Dict = None):
        super().__init__(
            message=message,
            code='VALIDATION_ERROR',
            status_code=400,
            details={'errors': errors} if errors else None
        )


class AuthorizationError(SimpleContentError):
    """Access denied."""

    def __init__(self, message: str = 'Access denied'):
        super().__init__(
            message=message,
            code='FORBIDDEN',
            status_code=403
        )


class ConfigurationError(Exception):
    """A settings file is missing or malformed."""


class ServiceNotRegisteredError(LookupError):
    """Nothing is registered in the service container under the requested key."""


JSON_PATH_PREFIXES = ('/api/', '/filemanager/')


def error_response(
    message: str,
    code: str = 'ERROR',
    status_code: int = 400,
    details: Dict = None
) -> tuple:
    """Create a standardized error response."""
    response = {
        'success': False,
        'message': message,
        'code': code
    }
    if details:
        response['details'] = details

    return jsonify(response), status_code


def success_response(data: Any = None, message: str = None) -> dict:
    """Create a standardized success response."""
    response = {'success': True}
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return response


def _wants_json() -> bool:
    return (request.path.rstrip('/') + '/').startswith(JSON_PATH_PREFIXES)


def reexecute_error_page(status_code: int, error: HTTPException):
    """Run the error action for ``status_code`` inside the current request.

    The response keeps the original status code. When the error page itself
    fails, the plain Werkzeug error is returned instead.
    """
    if g.get('reexecuting_error_page'):
        return error

    route_table = current_app.extensions.get('route_table')
    template = current_app.config.get('STATUS_CODE_PAGE_PATH', '/home/error/{0}')
    if route_table is None:
        return error

    g.reexecuting_error_page = True
    g.original_path = request.path
    try:
        response = current_app.make_response(route_table.dispatch(template.format(status_code), method="GET"))
    except Exception:
        current_app.logger.exception('Status code page for %s failed', status_code)
        return error
    finally:
        g.reexecuting_error_page = False

    response.status_code = status_code
    valid_methods = getattr(error, 'valid_methods', None)
    if valid_methods:
        response.headers['Allow'] = ', '.join(valid_methods)
    return response


def register_error_handlers(app: Flask, is_development: bool) -> None:
    """Register error handlers with the Flask app."""

    @app.errorhandler(SimpleContentError)
    def handle_simplecontent_error(error: SimpleContentError):
        current_app.logger.warning(f"{error.code}: {error.message}")
        if _wants_json():
            return jsonify(error.to_dict()), error.status_code
        fallback = default_exceptions.get(error.status_code, InternalServerError)(error.message)
        return reexecute_error_page(error.status_code, fallback)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        # Redirects raised through abort() are not error pages
        if error.code is None or error.code < 400:
            return error
        if _wants_json():
            return error_response(error.description or error.name, error.name.upper().replace(' ', '_'), error.code)
        return reexecute_error_page(error.code, error)

    if is_development:
        # Unhandled exceptions propagate to the Werkzeug debugger
        return

    @app.errorhandler(Exception)
    def handle_unhandled_exception(error: Exception):
        current_app.logger.exception('Internal server error')
        if _wants_json():
            return error_response('Internal server error', 'SERVER_ERROR', 500)

        path = current_app.config.get('EXCEPTION_HANDLER_PATH', '/home/error')
        route_table = current_app.extensions.get('route_table')
        if route_table is None or g.get('reexecuting_error_page'):
            return InternalServerError()

        g.reexecuting_error_page = True
        g.original_path = request.path
        try:
            response = current_app.make_response(route_table.dispatch(path, method="GET"))
        except Exception:
            current_app.logger.exception('Exception handler page failed')
            return InternalServerError()
        finally:
            g.reexecuting_error_page = False
        response.status_code = 500
        return response
