"""
User model for authentication and staff/student accounts.

Users belong to at most one tenant. Super-admins have no tenant. Passwords are
hashed with bcrypt.
"""

import bcrypt
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship
from typing import Optional
import logging

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel

logger = logging.getLogger(__name__)

ROLE_SUPER_ADMIN = 'super_admin'
ROLE_ADMIN = 'admin'
ROLE_TRAINER = 'trainer'
ROLE_STUDENT = 'student'
USER_ROLES = (ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_TRAINER, ROLE_STUDENT)
STAFF_ROLES = (ROLE_ADMIN, ROLE_TRAINER)


class User(BaseModel, db.Model):
    """
    User model for authentication and profile management.

    Attributes:
        full_name: Display name
        email: Unique login (stored lower-cased)
        password_hash: Bcrypt hashed password
        role: 'super_admin', 'admin', 'trainer' or 'student'
        tenant_id: Owning tenant (NULL for super-admins)
        is_owner: Tenant owner (the account that signed up or was provisioned)
        is_active: Whether user can log in
        must_change_password: Set for staff created with a temporary password

    Example:
        >>> user = User(full_name='Ana Souza', email='ana@example.com', role='trainer')
        >>> user.set_password('secure_password123')
        >>> db.session.add(user)
        >>> db.session.commit()
    """

    __tablename__ = 'users'

    full_name = Column(String(200), nullable=False)

    email = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User's email address (unique, used for login)"
    )

    password_hash = Column(String(255), nullable=False, comment="Bcrypt hashed password")

    role = Column(String(20), nullable=False, default=ROLE_STUDENT)

    tenant_id = Column(
        Uuid(as_uuid=True),
        ForeignKey('tenants.id', ondelete='CASCADE'),
        nullable=True,
        index=True
    )

    is_owner = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, comment="Whether user account is active (can login)")
    must_change_password = Column(Boolean, default=False, nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    tenant = relationship('Tenant', back_populates='users')

    __table_args__ = (
        Index('ix_users_email_active', 'email', 'is_active'),
        Index('ix_users_tenant_role', 'tenant_id', 'role'),
    )

    def set_password(self, password: str) -> None:
        """
        Hash and set user password using bcrypt.

        Raises:
            ValueError: If password is less than 8 characters
        """
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        self.password_hash = hashed.decode('utf-8')
        logger.debug(f"Password hashed for user: {self.email}")

    def check_password(self, password: str) -> bool:
        """Verify password against stored hash."""
        if not password or not self.password_hash:
            return False

        try:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        except ValueError as e:
            logger.error(f"Error checking password for user {self.email}: {str(e)}")
            return False

    @property
    def is_super_admin(self) -> bool:
        return self.role == ROLE_SUPER_ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @classmethod
    def find_by_email(cls, email: str) -> Optional['User']:
        """Find user by email (case-insensitive)."""
        if not email:
            return None
        return cls.query.filter(cls.email == email.strip().lower()).first()

    def to_dict(self, exclude: Optional[list] = None) -> dict:
        """Serialize without the password hash."""
        exclude = list(exclude or [])
        if 'password_hash' not in exclude:
            exclude.append('password_hash')
        return super().to_dict(exclude=exclude)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
