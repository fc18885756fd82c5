"""
Billing records mirrored from the payment provider.

Payment processing itself is delegated; these tables only hold what the
back office and the tenant billing page display.
"""

from sqlalchemy import Column, String, Integer, Boolean, JSON, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel

PLAN_INTERVALS = ('monthly', 'yearly')
SUBSCRIPTION_STATUSES = ('active', 'past_due', 'canceled', 'trialing', 'incomplete')
INVOICE_STATUSES = ('paid', 'open', 'void', 'uncollectible')
PAYMENT_METHODS = ('credit_card', 'pix', 'boleto')


class Plan(BaseModel, db.Model):
    __tablename__ = 'plans'

    name = Column(String(100), nullable=False)
    slug = Column(String(50), unique=True, nullable=False)
    price_cents = Column(Integer, nullable=False, default=0)
    interval = Column(String(10), nullable=False, default='monthly')
    features = Column(JSON, nullable=True)
    active = Column(Boolean, nullable=False, default=True)

    def to_dict(self, exclude=None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['price'] = round((self.price_cents or 0) / 100, 2)
        data['features'] = self.features or []
        return data


class Subscription(BaseModel, db.Model):
    __tablename__ = 'subscriptions'

    tenant_id = Column(Uuid(as_uuid=True), ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True)
    plan_id = Column(Uuid(as_uuid=True), ForeignKey('plans.id', ondelete='RESTRICT'), nullable=False)
    status = Column(String(20), nullable=False, default='active', index=True)
    current_period_end = Column(DateTime(timezone=True), nullable=True)

    plan = relationship('Plan')
    tenant = relationship('Tenant')

    def to_dict(self, exclude=None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['plan'] = self.plan.to_dict() if self.plan else None
        data['tenant_name'] = self.tenant.name if self.tenant else None
        return data


class Invoice(BaseModel, db.Model):
    __tablename__ = 'invoices'

    tenant_id = Column(Uuid(as_uuid=True), ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, index=True)
    amount_paid_cents = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default='open')
    method = Column(String(20), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    invoice_url = Column(String(500), nullable=True)

    tenant = relationship('Tenant')

    def to_dict(self, exclude=None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['amount'] = round((self.amount_paid_cents or 0) / 100, 2)
        data['tenant_name'] = self.tenant.name if self.tenant else None
        return data
