"""
Authentication Blueprint.

Endpoints:
- POST /api/auth/register - Personal trainer self-signup (tenant + owner admin)
- POST /api/auth/login - Email/password login
- POST /api/auth/refresh - New access token from a refresh token
- POST /api/auth/logout - Revoke the current token
- GET /api/auth/me - Current user and tenant
- POST /api/auth/change-password - Change own password
- POST /api/auth/activate - Student account activation from an invitation

Security features:
- Password hashing with bcrypt
- JWT tokens carrying `role` and `tenant_id` claims
- Token blocklist for logout (Redis, in-memory fallback)
"""

import logging
from flask import Blueprint, request, g, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity, get_jwt
from marshmallow import ValidationError

from fitcoach.schemas.auth_schema import (
    register_schema,
    login_schema,
    change_password_schema,
    activate_account_schema,
)
from fitcoach.services.auth_service import AuthService
from fitcoach.utils.decorators import jwt_required_custom, validate_json
from fitcoach.utils.helpers import get_current_user, parse_uuid
from fitcoach.utils.responses import (
    ok, created, bad_request, unauthorized, forbidden, not_found, service_error
)

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/register', methods=['POST'])
@validate_json()
def register():
    """
    Register a personal trainer.

    POST /api/auth/register

    Request Body:
        {
            "full_name": "Ana Souza",
            "email": "ana@example.com",
            "password": "SecurePass123",
            "business_name": "Ana Personal"   // optional, defaults to full_name
        }

    Response (201):
        {
            "success": true,
            "message": "Registration successful",
            "data": {
                "access_token": "...",
                "refresh_token": "...",
                "user": {...},
                "tenant": {...}
            }
        }

    Errors:
        - 400: Validation error (invalid data, weak password)
        - 403: Self-registration disabled
        - 409: Email already exists
    """
    if not current_app.config.get('ENABLE_REGISTRATION', True):
        return forbidden('Self-registration is disabled')

    try:
        data = register_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid registration data', err.messages)

    payload, error = AuthService.register_trainer(data)
    if error:
        return service_error(error)

    return created(payload, 'Registration successful')


@auth_bp.route('/login', methods=['POST'])
@validate_json()
def login():
    """
    Authenticate with email and password.

    POST /api/auth/login

    Request Body:
        {"email": "ana@example.com", "password": "SecurePass123"}

    Response (200):
        {
            "success": true,
            "message": "Login successful",
            "data": {"access_token": "...", "refresh_token": "...", "user": {...}, "tenant": {...}}
        }

    Errors:
        - 400: Validation error
        - 401: Invalid credentials
        - 403: Account inactive or organization suspended
    """
    try:
        data = login_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid login data', err.messages)

    payload, error = AuthService.authenticate(data['email'], data['password'])
    if error:
        if error == 'Invalid email or password':
            return unauthorized(error)
        if error in ('Account is inactive', 'Organization is suspended'):
            return forbidden(error)
        return service_error(error)

    return ok(payload, 'Login successful')


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    """
    Issue a new access token.

    POST /api/auth/refresh
    Authorization: Bearer <refresh_token>

    Response (200):
        {"success": true, "data": {"access_token": "..."}}
    """
    user_id = parse_uuid(get_jwt_identity())
    if user_id is None:
        return unauthorized('Invalid authentication token')

    access_token, error = AuthService.refresh_access_token(user_id)
    if error:
        return unauthorized(error)

    return ok({'access_token': access_token}, 'Token refreshed')


@auth_bp.route('/logout', methods=['POST'])
@jwt_required_custom
def logout():
    """
    Revoke the token used for this request.

    POST /api/auth/logout
    Authorization: Bearer <access_token>
    """
    AuthService.logout(get_jwt()['jti'])
    return ok(message='Logged out successfully')


@auth_bp.route('/me', methods=['GET'])
@jwt_required_custom
def me():
    """
    Current user and tenant.

    GET /api/auth/me

    Response (200):
        {"success": true, "data": {"user": {...}, "tenant": {...} | null}}
    """
    user = get_current_user()
    if not user:
        return not_found('User')

    return ok({
        'user': user.to_dict(),
        'tenant': user.tenant.to_dict() if user.tenant else None,
    })


@auth_bp.route('/change-password', methods=['POST'])
@jwt_required_custom
@validate_json()
def change_password():
    """
    Change own password.

    POST /api/auth/change-password

    Request Body:
        {"current_password": "...", "new_password": "..."}

    Clears `must_change_password` for staff created with a temporary password.
    """
    try:
        data = change_password_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid password data', err.messages)

    _, error = AuthService.change_password(g.user_id, data['current_password'], data['new_password'])
    if error:
        return service_error(error)

    return ok(message='Password changed successfully')


@auth_bp.route('/activate', methods=['POST'])
@validate_json(required_fields=['token', 'password'])
def activate():
    """
    Activate a student account from an invitation.

    POST /api/auth/activate

    Request Body:
        {"token": "<activation token>", "password": "SecurePass123"}

    Response (200): same payload as login.

    Errors:
        - 400: Invalid, used or expired token; weak password
        - 409: Email already registered to another account
    """
    try:
        data = activate_account_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid activation data', err.messages)

    payload, error = AuthService.activate_student(data['token'], data['password'])
    if error:
        return service_error(error)

    return ok(payload, 'Account activated')
