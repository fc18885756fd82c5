"""
BillingService - plans, subscriptions and invoices.

Payments are processed by an external provider; this service only reads the
mirrored records and hands out the provider's portal URL.
"""

import logging
from typing import Dict, List, Optional, Tuple

from flask import current_app

from fitcoach.extensions import db
from fitcoach.models.billing import Invoice, Plan, Subscription
from fitcoach.models.user import User
from fitcoach.services.audit_service import AuditService

logger = logging.getLogger(__name__)

INVOICE_LIMIT = 50
UNUSABLE_PASSWORD = '!'


class BillingService:

    @staticmethod
    def list_plans(active_only: bool = True) -> List[Plan]:
        query = Plan.query
        if active_only:
            query = query.filter(Plan.active.is_(True))
        return query.order_by(Plan.price_cents.asc()).all()

    @staticmethod
    def create_plan(data: Dict, actor: User) -> Tuple[Optional[Plan], Optional[str]]:
        try:
            if Plan.query.filter_by(slug=data['slug']).first():
                return None, 'Plan slug already exists'

            plan = Plan(created_by=actor.id, **data)
            db.session.add(plan)
            AuditService.record(actor, 'plan.create', f"plan:{data['slug']}", details={'price_cents': plan.price_cents})
            db.session.commit()
            return plan, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating plan: {str(e)}", exc_info=True)
            return None, f'Failed to create plan: {str(e)}'

    @staticmethod
    def get_subscription(tenant_id) -> Optional[Subscription]:
        """Most recent subscription of a tenant, if any."""
        return (
            Subscription.query.filter_by(tenant_id=tenant_id)
            .order_by(Subscription.created_at.desc())
            .first()
        )

    @staticmethod
    def list_invoices(tenant_id=None, limit: int = INVOICE_LIMIT) -> List[Invoice]:
        """Latest invoices, of one tenant or (back office) of all tenants."""
        query = Invoice.query
        if tenant_id is not None:
            query = query.filter(Invoice.tenant_id == tenant_id)
        return query.order_by(Invoice.created_at.desc()).limit(limit).all()

    @staticmethod
    def list_subscriptions(status: Optional[str] = None) -> List[Subscription]:
        query = Subscription.query
        if status:
            query = query.filter(Subscription.status == status)
        return query.order_by(Subscription.created_at.desc()).all()

    @staticmethod
    def get_portal_url() -> Tuple[Optional[str], Optional[str]]:
        url = current_app.config.get('BILLING_PORTAL_URL')
        if not url:
            return None, 'Billing portal is not configured'
        return url, None

    @staticmethod
    def delete_account(user: User) -> Tuple[bool, Optional[str]]:
        """
        Close the caller's own account.

        The email is anonymised so it can be registered again, the password
        becomes unusable and the user is deactivated. The audit entry keeps
        the original email.
        """
        try:
            original_email = user.email
            AuditService.record(
                user, 'account.delete', f'user:{user.id}',
                details={'reason': 'User requested account deletion'},
            )

            user.email = f'deleted_{user.id}@deleted.local'
            user.password_hash = UNUSABLE_PASSWORD
            user.is_active = False
            db.session.commit()

            logger.info(f"Account deleted: {original_email} ({user.id})")
            return True, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error deleting account: {str(e)}", exc_info=True)
            return False, f'Failed to delete account: {str(e)}'
