"""
TenantService - super-admin back office: tenant provisioning and KPIs.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func

from fitcoach.extensions import db
from fitcoach.models.billing import Invoice, Plan, Subscription
from fitcoach.models.student import Student
from fitcoach.models.tenant import Tenant
from fitcoach.models.user import User, ROLE_ADMIN
from fitcoach.services.audit_service import AuditService

logger = logging.getLogger(__name__)


class TenantService:

    @staticmethod
    def list_tenants() -> List[Dict[str, Any]]:
        """Every tenant with its owner contact and active-student count, newest first."""
        active_counts = dict(
            db.session.query(Student.tenant_id, func.count(Student.id))
            .filter(Student.enrollment_status == 'active', Student.deleted_at.is_(None))
            .group_by(Student.tenant_id)
            .all()
        )

        result = []
        for tenant in Tenant.query.order_by(Tenant.created_at.desc()).all():
            owner = tenant.get_owner()
            data = tenant.to_dict()
            data['owner_name'] = owner.full_name if owner else None
            data['owner_email'] = owner.email if owner else None
            data['active_students_count'] = active_counts.get(tenant.id, 0)
            result.append(data)
        return result

    @staticmethod
    def get_tenant(tenant_id) -> Tuple[Optional[Tenant], Optional[str]]:
        tenant = db.session.get(Tenant, tenant_id)
        if not tenant:
            return None, 'Tenant not found'
        return tenant, None

    @staticmethod
    def create_tenant(data: Dict, actor: User) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Provision a tenant together with its owner admin.

        Returns:
            Tuple of ({'tenant', 'owner'}, error)
        """
        try:
            if User.find_by_email(data['owner_email']):
                return None, 'Owner email already registered'

            tenant = Tenant(
                name=data['name'],
                slug=Tenant.generate_slug(data['name']),
                type=data.get('type', 'academy'),
                plan=data.get('plan', 'starter'),
                status='active',
                created_by=actor.id,
            )
            db.session.add(tenant)
            db.session.flush()

            owner = User(
                full_name=data['owner_name'],
                email=data['owner_email'],
                role=ROLE_ADMIN,
                tenant_id=tenant.id,
                is_owner=True,
                is_active=True,
                created_by=actor.id,
            )
            owner.set_password(data['owner_password'])
            db.session.add(owner)

            AuditService.record(
                actor, 'tenant.create', f'tenant:{tenant.id}',
                details={'name': tenant.name, 'owner_email': owner.email},
                tenant_id=tenant.id,
            )
            db.session.commit()

            logger.info(f"Tenant created by {actor.email}: {tenant.slug}")
            return {'tenant': tenant.to_dict(), 'owner': owner.to_dict()}, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating tenant: {str(e)}", exc_info=True)
            return None, f'Failed to create tenant: {str(e)}'

    @staticmethod
    def update_tenant(tenant_id, data: Dict, actor: User) -> Tuple[Optional[Tenant], Optional[str]]:
        try:
            tenant = db.session.get(Tenant, tenant_id)
            if not tenant:
                return None, 'Tenant not found'

            tenant.update_from_dict(data, allowed_fields=['name', 'type', 'plan', 'primary_color', 'logo_url', 'app_name'])
            AuditService.record(actor, 'tenant.update', f'tenant:{tenant.id}', details=data, tenant_id=tenant.id)
            db.session.commit()
            return tenant, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating tenant: {str(e)}", exc_info=True)
            return None, f'Failed to update tenant: {str(e)}'

    @staticmethod
    def set_status(tenant_id, status: str, actor: User) -> Tuple[Optional[Tenant], Optional[str]]:
        """Activate or suspend a tenant; suspended tenants cannot log in."""
        try:
            tenant = db.session.get(Tenant, tenant_id)
            if not tenant:
                return None, 'Tenant not found'

            previous = tenant.status
            tenant.status = status
            AuditService.record(
                actor, 'tenant.status', f'tenant:{tenant.id}',
                details={'from': previous, 'to': status},
                tenant_id=tenant.id,
            )
            db.session.commit()

            logger.info(f"Tenant {tenant.slug} status {previous} -> {status} by {actor.email}")
            return tenant, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error changing tenant status: {str(e)}", exc_info=True)
            return None, f'Failed to change tenant status: {str(e)}'

    @staticmethod
    def get_kpis() -> Dict[str, Any]:
        """
        Back-office revenue indicators.

        mrr: sum of plan prices over active subscriptions
        churn_rate_percent: canceled / (active + canceled) * 100
        ltv_estimated: total paid revenue / (active + canceled)
        Counts are distinct tenants per subscription status.
        """
        def tenants_with(status):
            return (
                db.session.query(func.count(func.distinct(Subscription.tenant_id)))
                .filter(Subscription.status == status)
                .scalar()
            ) or 0

        mrr_cents = (
            db.session.query(func.coalesce(func.sum(Plan.price_cents), 0))
            .join(Subscription, Subscription.plan_id == Plan.id)
            .filter(Subscription.status == 'active')
            .scalar()
        ) or 0
        revenue_cents = (
            db.session.query(func.coalesce(func.sum(Invoice.amount_paid_cents), 0))
            .filter(Invoice.status == 'paid')
            .scalar()
        ) or 0

        active = tenants_with('active')
        trialing = tenants_with('trialing')
        canceled = tenants_with('canceled')
        base = active + canceled

        return {
            'mrr': round(mrr_cents / 100, 2),
            'active_subscribers': active,
            'trialing_subscribers': trialing,
            'total_canceled': canceled,
            'churn_rate_percent': round(canceled / base * 100, 2) if base else 0,
            'ltv_estimated': round(revenue_cents / base / 100, 2) if base else 0,
            'total_revenue': round(revenue_cents / 100, 2),
        }
