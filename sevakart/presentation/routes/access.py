"""
Shared route helpers: role guards and the domain error -> JSON mapping.
"""

from functools import wraps

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from sevakart.buisness.core.identity import current_identity
from sevakart.buisness.errors import (
    OrderTransitionError,
    PersistenceError,
    RecordConflictError,
    RecordNotFoundError,
    SevaKartDomainError,
)
from sevakart.utils.logger import get_logger

logger = get_logger("sevakart.routes.access")


def _role_required(role_check, role_name):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            identity = current_identity()
            if identity is None:
                return jsonify({'error': 'Authentication required'}), 401
            if not role_check(identity):
                logger.warning(f"User {identity.id} ({identity.role}) attempted {role_name}-only {request.path}")
                return jsonify({'error': f'Only {role_name}s can do this'}), 403
            return f(identity, *args, **kwargs)
        return decorated_function
    return decorator


def login_identity_required(f):
    """Pass the caller's Identity as the first argument; 401 when not logged in."""
    return _role_required(lambda identity: True, 'user')(f)


def vendor_required(f):
    """Decorator to require a vendor account"""
    return _role_required(lambda identity: identity.is_vendor, 'vendor')(f)


def supplier_required(f):
    """Decorator to require a supplier account"""
    return _role_required(lambda identity: identity.is_supplier, 'supplier')(f)


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def status_for(error: SevaKartDomainError) -> int:
    if isinstance(error, RecordNotFoundError):
        return 404
    if isinstance(error, (OrderTransitionError, RecordConflictError)):
        return 409
    if isinstance(error, PersistenceError):
        return 503
    return 400


def register_error_handlers(app):
    """Answer domain, HTTP and unexpected errors with a JSON `{"error": ...}` body."""

    @app.errorhandler(SevaKartDomainError)
    def handle_domain_error(error):
        status = status_for(error)
        if status >= 500:
            logger.error(f"{type(error).__name__} on {request.method} {request.path}: {error}")
        else:
            logger.info(f"{type(error).__name__} on {request.method} {request.path}: {error}")
        return jsonify({'error': str(error), 'type': type(error).__name__}), status

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({'error': 'Internal server error'}), 500
