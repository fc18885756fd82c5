"""
Append-only audit trail of sensitive actions.
"""

from sqlalchemy import Column, String, JSON, ForeignKey, Uuid, Index

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel


class AuditLog(BaseModel, db.Model):
    """
    Audit log entry.

    Rows are never updated or deleted by the application. `actor_email` is
    copied at write time so the trail survives account anonymisation.
    """

    __tablename__ = 'audit_logs'

    actor_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    actor_email = Column(String(255), nullable=True)
    tenant_id = Column(Uuid(as_uuid=True), ForeignKey('tenants.id', ondelete='SET NULL'), nullable=True, index=True)
    action = Column(String(100), nullable=False, index=True)
    target_resource = Column(String(200), nullable=True)
    details = Column(JSON, nullable=True)
    ip_address = Column(String(64), nullable=True)

    __table_args__ = (
        Index('ix_audit_logs_created', 'created_at'),
    )
