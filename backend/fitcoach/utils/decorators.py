"""
Custom decorators for route protection and access control.

Provides JWT validation, tenant membership and role-based access control.
"""

import uuid
from functools import wraps
from typing import List, Optional, Callable
from flask import request, g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity, get_jwt
import logging

from fitcoach.utils.responses import unauthorized, forbidden, bad_request
from fitcoach.services.auth_service import AuthService

logger = logging.getLogger(__name__)


def jwt_required_custom(fn: Callable) -> Callable:
    """
    Custom JWT authentication decorator.

    Validates the JWT and injects the caller's identity into Flask's g object.
    Missing, expired or malformed tokens are answered by the JWT loaders
    registered in the application factory (401 envelopes).

    Usage:
        @students_bp.route('', methods=['GET'])
        @jwt_required_custom
        def list_students():
            tenant_id = g.tenant_id

    Sets in Flask g:
        - g.user_id: UUID of authenticated user
        - g.user_role: 'super_admin', 'admin', 'trainer' or 'student'
        - g.tenant_id: UUID of the caller's tenant (None for super-admins)
        - g.jwt_claims: Full JWT claims dict (includes jti, exp, iat, etc.)
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()

        identity = get_jwt_identity()
        jwt_claims = get_jwt()

        if not identity:
            logger.warning("JWT token missing user identity")
            return unauthorized("Invalid authentication token")

        jti = jwt_claims.get('jti')
        if jti and AuthService.is_token_blacklisted(jti):
            logger.warning(f"Blacklisted token attempted: user_id={identity}, jti={jti}")
            return unauthorized("Token has been revoked")

        try:
            g.user_id = uuid.UUID(str(identity))
            tenant_claim = jwt_claims.get('tenant_id')
            g.tenant_id = uuid.UUID(tenant_claim) if tenant_claim else None
        except ValueError:
            logger.warning(f"Malformed identity in token: {identity}")
            return unauthorized("Invalid authentication token")

        g.user_role = jwt_claims.get('role')
        g.jwt_claims = jwt_claims

        logger.debug(f"Authenticated user: {g.user_id} role={g.user_role}")

        return fn(*args, **kwargs)

    return wrapper


def role_required(allowed_roles: List[str]) -> Callable:
    """
    Decorator to enforce role-based access control.

    Must be used together with (and below) @jwt_required_custom.

    Usage:
        @staff_bp.route('', methods=['POST'])
        @jwt_required_custom
        @role_required(['admin'])
        def create_trainer():
            ...

    Roles:
        - super_admin: back office (no tenant)
        - admin: tenant owner / manager
        - trainer: tenant staff
        - student: self-service only
    """
    def decorator(fn: Callable) -> Callable:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user_role = getattr(g, 'user_role', None)

            if not user_role:
                logger.error("role_required used without jwt_required_custom")
                return forbidden("Access denied")

            if user_role not in allowed_roles:
                user_id = getattr(g, 'user_id', 'unknown')
                logger.warning(
                    f"User {user_id} with role '{user_role}' attempted to access "
                    f"endpoint requiring roles {allowed_roles}"
                )
                return forbidden(
                    f"Access denied. Required roles: {', '.join(allowed_roles)}",
                    f"Your role: {user_role}"
                )

            return fn(*args, **kwargs)

        return wrapper
    return decorator


def tenant_required(fn: Callable) -> Callable:
    """
    Reject callers that are not attached to a tenant (e.g. super-admins on
    tenant-scoped endpoints). Must be used below @jwt_required_custom.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, 'tenant_id', None) is None:
            logger.warning(f"User {getattr(g, 'user_id', 'unknown')} has no tenant for a tenant-scoped endpoint")
            return forbidden("This endpoint requires a tenant account")
        return fn(*args, **kwargs)

    return wrapper


def staff_required(fn: Callable) -> Callable:
    """Convenience decorator: tenant admin or trainer with a tenant."""
    return role_required(['admin', 'trainer'])(tenant_required(fn))


def admin_required(fn: Callable) -> Callable:
    """Convenience decorator: tenant admin with a tenant."""
    return role_required(['admin'])(tenant_required(fn))


def super_admin_required(fn: Callable) -> Callable:
    """Convenience decorator for back-office endpoints."""
    return role_required(['super_admin'])(fn)


def student_required(fn: Callable) -> Callable:
    """Convenience decorator for student self-service endpoints."""
    return role_required(['student'])(tenant_required(fn))


def validate_json(required_fields: Optional[List[str]] = None) -> Callable:
    """
    Decorator to validate JSON request body.

    Ensures request has a JSON object body and optionally validates required fields.

    Usage:
        @auth_bp.route('/activate', methods=['POST'])
        @validate_json(required_fields=['token', 'password'])
        def activate():
            data = request.get_json()
    """
    def decorator(fn: Callable) -> Callable:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not request.is_json:
                return bad_request("Content-Type must be application/json")

            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                return bad_request("Request body must be a JSON object")

            if required_fields:
                missing_fields = [field for field in required_fields if field not in data]

                if missing_fields:
                    logger.warning(f"Missing required fields: {missing_fields}")
                    return bad_request(
                        "Missing required fields",
                        {"missing_fields": missing_fields}
                    )

            return fn(*args, **kwargs)

        return wrapper
    return decorator
