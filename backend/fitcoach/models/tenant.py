"""
Tenant model: a gym (academy) or an independent personal trainer.

Every coaching record is scoped to a tenant. Super-admins manage tenants from
the back office; a tenant's owner is the admin user flagged with `is_owner`.
"""

import re
import uuid
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
import logging

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel

logger = logging.getLogger(__name__)

TENANT_TYPES = ('academy', 'personal')
TENANT_PLANS = ('starter', 'pro', 'enterprise')
TENANT_STATUSES = ('active', 'suspended')


class Tenant(BaseModel, db.Model):
    """
    Tenant (organization) model.

    Attributes:
        name: Display name of the gym or trainer business
        slug: Unique URL-friendly identifier
        type: 'academy' or 'personal'
        plan: Commercial plan ('starter', 'pro', 'enterprise')
        status: 'active' or 'suspended' (suspended tenants cannot log in)
        primary_color, logo_url, app_name: White-label branding
    """

    __tablename__ = 'tenants'

    name = Column(String(200), nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    type = Column(String(20), nullable=False, default='personal')
    plan = Column(String(20), nullable=False, default='starter')
    status = Column(String(20), nullable=False, default='active', index=True)

    primary_color = Column(String(20), nullable=True)
    logo_url = Column(String(500), nullable=True)
    app_name = Column(String(100), nullable=True)

    users = relationship('User', back_populates='tenant', lazy='dynamic')

    @property
    def is_active(self) -> bool:
        return self.status == 'active'

    def get_owner(self):
        """Return the owner admin (or the first admin) of this tenant."""
        from fitcoach.models.user import User

        owner = self.users.filter(User.is_owner.is_(True)).first()
        if owner is None:
            owner = self.users.filter(User.role == 'admin').order_by(User.created_at.asc()).first()
        return owner

    @staticmethod
    def generate_slug(name: str) -> str:
        """
        Build a unique slug from a display name.

        Example:
            >>> Tenant.generate_slug('Iron Gym SP')
            'iron-gym-sp-3f9a1c2b'
        """
        base = re.sub(r'[^a-z0-9]+', '-', (name or '').lower()).strip('-')[:100] or 'tenant'
        return f"{base}-{uuid.uuid4().hex[:8]}"

    def __repr__(self) -> str:
        return f"<Tenant {self.slug} ({self.status})>"
