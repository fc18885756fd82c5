"""
AuthService - Business Logic for Authentication

Handles trainer self-registration, login, token refresh and revocation,
password changes and student account activation.

Token Management:
- Access tokens: 15 minutes expiration (configurable via JWT_ACCESS_TOKEN_EXPIRES)
- Refresh tokens: 7 days expiration (configurable via JWT_REFRESH_TOKEN_EXPIRES)
- Access tokens carry `role` and `tenant_id` claims used by the route decorators
- Token blocklist: Redis with TTL, in-memory set when Redis is unavailable
"""

import logging
from typing import Dict, Optional, Tuple
from flask_jwt_extended import create_access_token, create_refresh_token
from flask import current_app
import redis

from fitcoach.extensions import db, redis_manager, blocklist_key
from fitcoach.models.base import utcnow
from fitcoach.models.tenant import Tenant
from fitcoach.models.user import User, ROLE_ADMIN, ROLE_STUDENT
from fitcoach.models.student import Student, ActivationToken

logger = logging.getLogger(__name__)

# In-memory token blocklist fallback for when Redis is not available
TOKEN_BLACKLIST = set()


class AuthService:
    """
    Service class for authentication operations.

    All methods are static since there's no instance state to maintain.
    """

    @staticmethod
    def _add_to_blacklist(jti: str) -> None:
        """Add a token JTI to the blocklist (Redis with expiry, or memory)."""
        redis_client = redis_manager.get_client()
        if redis_client:
            try:
                expire_time = current_app.config.get('REDIS_TOKEN_BLACKLIST_EXPIRE', 86400)
                redis_client.setex(blocklist_key(jti), expire_time, "1")
                logger.debug(f"Token blacklisted in Redis: {jti}")
                return
            except redis.RedisError as e:
                logger.error(f"Error adding token to Redis blacklist: {e}")

        TOKEN_BLACKLIST.add(jti)
        logger.debug(f"Token blacklisted in memory: {jti}")

    @staticmethod
    def is_token_blacklisted(jti: str) -> bool:
        """
        Check if a token JTI has been revoked.

        Used by the JWT blocklist loader and by @jwt_required_custom.
        """
        redis_client = redis_manager.get_client()
        if redis_client:
            try:
                return redis_client.exists(blocklist_key(jti)) > 0
            except redis.RedisError as e:
                logger.error(f"Error checking token blacklist: {e}")
        return jti in TOKEN_BLACKLIST

    @staticmethod
    def issue_tokens(user: User) -> Dict[str, str]:
        """Create access and refresh tokens carrying the user's role and tenant."""
        claims = {
            'role': user.role,
            'tenant_id': str(user.tenant_id) if user.tenant_id else None,
        }
        return {
            'access_token': create_access_token(identity=str(user.id), additional_claims=claims),
            'refresh_token': create_refresh_token(identity=str(user.id), additional_claims=claims),
        }

    @staticmethod
    def _auth_payload(user: User) -> Dict:
        payload = AuthService.issue_tokens(user)
        payload['user'] = user.to_dict()
        payload['tenant'] = user.tenant.to_dict() if user.tenant else None
        return payload

    @staticmethod
    def register_trainer(data: Dict) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Self-signup of an independent personal trainer.

        Creates a 'personal' tenant on the starter plan and its owner admin,
        then logs the new owner in.

        Args:
            data: Validated RegisterSchema payload (full_name, email, password, business_name)

        Returns:
            Tuple of (auth payload, error message)

        Business Rules:
            - Email must be unique (case-insensitive)
            - Tenant name defaults to the trainer's name
        """
        try:
            email = data['email'].lower()
            if User.find_by_email(email):
                logger.warning(f"Registration failed: Email already exists: {email}")
                return None, 'Email already registered'

            tenant_name = data.get('business_name') or data['full_name']
            tenant = Tenant(
                name=tenant_name,
                slug=Tenant.generate_slug(tenant_name),
                type='personal',
                plan='starter',
                status='active',
            )
            db.session.add(tenant)
            db.session.flush()

            user = User(
                full_name=data['full_name'],
                email=email,
                role=ROLE_ADMIN,
                tenant_id=tenant.id,
                is_owner=True,
                is_active=True,
            )
            user.set_password(data['password'])
            db.session.add(user)
            db.session.commit()

            logger.info(f"Trainer registered: user={user.id} tenant={tenant.id} ({email})")
            return AuthService._auth_payload(user), None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Registration error: {str(e)}", exc_info=True)
            return None, f'Failed to register: {str(e)}'

    @staticmethod
    def authenticate(email: str, password: str) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Authenticate user with email and password.

        Returns:
            Tuple of (auth_data dict, error message). auth_data contains
            access_token, refresh_token, user and tenant.

        Business Rules:
            - Email lookup is case-insensitive
            - Inactive users and users of suspended tenants are rejected
            - last_login_at is stamped on success
        """
        user = User.find_by_email(email)

        if not user or not user.check_password(password):
            logger.warning(f"Authentication failed for: {email}")
            return None, 'Invalid email or password'

        if not user.is_active:
            logger.warning(f"Authentication refused, inactive account: {email}")
            return None, 'Account is inactive'

        if user.tenant is not None and not user.tenant.is_active:
            logger.warning(f"Authentication refused, tenant suspended: {email} tenant={user.tenant_id}")
            return None, 'Organization is suspended'

        try:
            user.last_login_at = utcnow()
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Could not stamp last login for {user.id}: {str(e)}", exc_info=True)
            return None, f'Failed to log in: {str(e)}'

        logger.info(f"User authenticated successfully: {user.id} ({email})")
        return AuthService._auth_payload(user), None

    @staticmethod
    def refresh_access_token(user_id) -> Tuple[Optional[str], Optional[str]]:
        """
        Generate a new access token for the identity of a valid refresh token.

        The user must still exist, be active and belong to an active tenant.
        """
        user = db.session.get(User, user_id)
        if not user or not user.is_active:
            logger.warning(f"Refresh failed: User not found or inactive: {user_id}")
            return None, 'User not found or inactive'

        if user.tenant is not None and not user.tenant.is_active:
            return None, 'Organization is suspended'

        logger.info(f"Access token refreshed for user: {user_id}")
        return AuthService.issue_tokens(user)['access_token'], None

    @staticmethod
    def logout(jti: str) -> None:
        """Revoke a token by JTI. Idempotent."""
        AuthService._add_to_blacklist(jti)
        logger.info(f"Token blacklisted (logout): {jti}")

    @staticmethod
    def change_password(user_id, current_password: str, new_password: str) -> Tuple[bool, Optional[str]]:
        """
        Change a user's password after verifying the current one.

        Clears `must_change_password` (set for staff created with a temporary password).
        """
        try:
            user = db.session.get(User, user_id)
            if not user:
                return False, 'User not found'

            if not user.check_password(current_password):
                logger.warning(f"Password change refused, wrong current password: {user_id}")
                return False, 'Current password is incorrect'

            if current_password == new_password:
                return False, 'New password must differ from the current password'

            user.set_password(new_password)
            user.must_change_password = False
            db.session.commit()

            logger.info(f"Password changed for user: {user_id}")
            return True, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Password change error: {str(e)}", exc_info=True)
            return False, f'Failed to change password: {str(e)}'

    @staticmethod
    def activate_student(token: str, password: str) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Activate a student account from an invitation token.

        Flow:
        1. Token must exist, be unused and not expired
        2. Creates the student's login (role 'student') or reuses an existing
           student login with the same email in the same tenant
        3. Links the user, sets enrollment to 'active', consumes the token
        4. Returns an auth payload so the student is logged in immediately
        """
        try:
            activation = ActivationToken.query.filter_by(token=token).first()
            if not activation or activation.is_used:
                return None, 'Invalid or used activation token'

            if activation.is_expired:
                logger.warning(f"Expired activation token used for student {activation.student_id}")
                return None, 'Activation token has expired'

            student = db.session.get(Student, activation.student_id)
            if not student or student.is_deleted:
                return None, 'Student not found'

            user = User.find_by_email(student.email)
            if user and (user.tenant_id != student.tenant_id or user.role != ROLE_STUDENT):
                logger.warning(f"Activation conflict: email {student.email} belongs to another account")
                return None, 'Email already registered to another account'

            if user is None:
                user = User(
                    full_name=student.full_name,
                    email=student.email,
                    role=ROLE_STUDENT,
                    tenant_id=student.tenant_id,
                    is_active=True,
                )
                db.session.add(user)

            user.set_password(password)
            user.is_active = True
            db.session.flush()

            student.user_id = user.id
            student.enrollment_status = 'active'
            activation.used_at = utcnow()
            db.session.commit()

            logger.info(f"Student activated: student={student.id} user={user.id}")
            return AuthService._auth_payload(user), None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Activation error: {str(e)}", exc_info=True)
            return None, f'Failed to activate account: {str(e)}'


__all__ = ['AuthService', 'TOKEN_BLACKLIST']
