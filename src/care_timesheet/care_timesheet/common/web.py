from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import g, jsonify, session

from ..core.enums import Permission
from ..core.exceptions import (
    AlreadyApprovedError,
    AlreadyRejectedError,
    DatabaseError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from ..users.model import Identity

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (ForbiddenError, 403),
    (NotFoundError, 404),
    (AlreadyApprovedError, 409),
    (AlreadyRejectedError, 409),
    (DatabaseError, 500),
)

GENERIC_ERROR = "Internal server error"


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def error_response(error: DomainError):
    status = status_for(error)
    message = GENERIC_ERROR if status >= 500 else str(error)
    return jsonify({"error": message}), status


def current_identity() -> Identity:
    return g.identity


def _load_identity() -> Optional[Identity]:
    return Identity.from_session(session)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        identity = _load_identity()
        if identity is None:
            return jsonify({"error": "Authentication required"}), 401
        g.identity = identity
        return view(*args, **kwargs)

    return wrapper


def permission_required(permission: Permission):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            identity = _load_identity()
            if identity is None:
                return jsonify({"error": "Authentication required"}), 401
            if not identity.has_permission(permission):
                return jsonify({"error": "Forbidden: admin access required"}), 403
            g.identity = identity
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_errors(view):
    """Map domain errors raised by services to JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            if isinstance(e, DatabaseError):
                logger.error("request failed: %s", e)
            return error_response(e)

    return wrapper


def query_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}
