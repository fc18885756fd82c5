"""
Student model: a trainee enrolled with a tenant.

A student record exists before the student has a login. The linked user is
created when the student activates the invitation.
"""

import secrets
from datetime import timedelta
from sqlalchemy import Column, String, Integer, Float, Text, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel, TenantScopedMixin, SoftDeleteMixin, utcnow, as_utc

ENROLLMENT_STATUSES = ('active', 'inactive', 'suspended', 'pending_activation')
GENDERS = ('M', 'F')


class Student(BaseModel, TenantScopedMixin, SoftDeleteMixin, db.Model):
    """
    Student profile with anthropometric baseline and enrollment state.

    Attributes:
        user_id: Login account, set once the invitation is activated
        trainer_id: Assigned trainer (staff user)
        enrollment_status: 'active', 'inactive', 'suspended' or 'pending_activation'
        gender: 'M' or 'F' (drives body-fat and waist-hip classifications)
    """

    __tablename__ = 'students'

    user_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    trainer_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)

    full_name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    cpf = Column(String(20), nullable=True)
    enrollment_status = Column(String(30), nullable=False, default='pending_activation')

    age = Column(Integer, nullable=True)
    gender = Column(String(1), nullable=True)
    weight = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    goal = Column(String(200), nullable=True)
    level = Column(String(50), nullable=True)
    injuries = Column(Text, nullable=True)
    avatar_url = Column(String(500), nullable=True)
    last_checkin_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship('User', foreign_keys=[user_id])
    trainer = relationship('User', foreign_keys=[trainer_id])

    __table_args__ = (
        Index('ix_students_tenant_email', 'tenant_id', 'email'),
    )

    def __repr__(self) -> str:
        return f"<Student {self.full_name} ({self.enrollment_status})>"


class ActivationToken(BaseModel, db.Model):
    """
    Single-use invitation token for student account activation.

    Tokens are URL-safe random strings that expire after a configurable TTL
    (24 hours by default) and are consumed by setting `used_at`.
    """

    __tablename__ = 'activation_tokens'

    student_id = Column(Uuid(as_uuid=True), ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used_at = Column(DateTime(timezone=True), nullable=True)

    student = relationship('Student')

    @classmethod
    def issue(cls, student_id, ttl_hours: int = 24) -> 'ActivationToken':
        return cls(
            student_id=student_id,
            token=secrets.token_urlsafe(32),
            expires_at=utcnow() + timedelta(hours=ttl_hours),
        )

    @property
    def is_expired(self) -> bool:
        return as_utc(self.expires_at) < utcnow()

    @property
    def is_used(self) -> bool:
        return self.used_at is not None

    def __repr__(self) -> str:
        return f"<ActivationToken student={self.student_id} used={self.is_used}>"
