"""
Admin Blueprint - Super-admin Back Office

Endpoints (super_admin):
- GET /api/admin/tenants - Tenants with owner contact and active-student count
- POST /api/admin/tenants - Create a tenant with its owner admin
- PUT /api/admin/tenants/<tenant_id> - Update a tenant
- PATCH /api/admin/tenants/<tenant_id>/status - Activate or suspend (audited)
- GET /api/admin/audit-logs - Audit trail (?action=, ?page=, ?per_page=)
- GET /api/admin/kpis - Revenue indicators
- GET /api/admin/subscriptions - All subscriptions (?status=)
- GET /api/admin/invoices - Latest invoices of all tenants
- GET /api/admin/plans - All plans
- POST /api/admin/plans - Create a plan
"""

import logging
from flask import Blueprint, request
from marshmallow import ValidationError

from fitcoach.schemas.billing_schema import plan_create_schema
from fitcoach.schemas.tenant_schema import tenant_create_schema, tenant_update_schema, tenant_status_schema
from fitcoach.services.audit_service import AuditService
from fitcoach.services.billing_service import BillingService
from fitcoach.services.tenant_service import TenantService
from fitcoach.utils.decorators import jwt_required_custom, super_admin_required, validate_json
from fitcoach.utils.helpers import get_current_user, get_pagination
from fitcoach.utils.responses import ok, created, bad_request, unauthorized, internal_error, service_error

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')


@admin_bp.route('/tenants', methods=['GET'])
@jwt_required_custom
@super_admin_required
def list_tenants():
    """
    List every tenant, newest first.

    **Response**:
        200 OK:
            {
                "success": true,
                "data": [
                    {
                        "id": "uuid",
                        "name": "Iron Gym",
                        "type": "academy",
                        "status": "active",
                        "owner_name": "Ana Souza",
                        "owner_email": "ana@irongym.com",
                        "active_students_count": 42
                    }
                ]
            }
    """
    try:
        return ok(TenantService.list_tenants(), 'Tenants retrieved successfully')

    except Exception as e:
        logger.error(f"Error listing tenants: {str(e)}", exc_info=True)
        return internal_error('Failed to list tenants')


@admin_bp.route('/tenants', methods=['POST'])
@jwt_required_custom
@super_admin_required
@validate_json(required_fields=['name', 'owner_name', 'owner_email', 'owner_password'])
def create_tenant():
    """
    Create a tenant and its owner admin.

    **Request Body**:
        {
            "name": "Iron Gym",
            "type": "academy",
            "plan": "pro",
            "owner_name": "Ana Souza",
            "owner_email": "ana@irongym.com",
            "owner_password": "SecurePass123"
        }
    """
    try:
        data = tenant_create_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid tenant data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    result, error = TenantService.create_tenant(data, actor)
    if error:
        return service_error(error)

    return created(result, 'Tenant created successfully')


@admin_bp.route('/tenants/<uuid:tenant_id>', methods=['PUT'])
@jwt_required_custom
@super_admin_required
@validate_json()
def update_tenant(tenant_id):
    try:
        data = tenant_update_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid tenant data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    tenant, error = TenantService.update_tenant(tenant_id, data, actor)
    if error:
        return service_error(error)

    return ok(tenant.to_dict(), 'Tenant updated successfully')


@admin_bp.route('/tenants/<uuid:tenant_id>/status', methods=['PATCH'])
@jwt_required_custom
@super_admin_required
@validate_json(required_fields=['status'])
def set_tenant_status(tenant_id):
    """
    Activate or suspend a tenant. Users of a suspended tenant cannot log in.

    **Request Body**:
        {"status": "suspended"}
    """
    try:
        data = tenant_status_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid status', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    tenant, error = TenantService.set_status(tenant_id, data['status'], actor)
    if error:
        return service_error(error)

    return ok(tenant.to_dict(), 'Tenant status updated')


@admin_bp.route('/audit-logs', methods=['GET'])
@jwt_required_custom
@super_admin_required
def list_audit_logs():
    page, per_page = get_pagination()
    logs, error = AuditService.list_logs(
        limit=per_page,
        action=request.args.get('action'),
        offset=(page - 1) * per_page,
    )
    if error:
        return service_error(error)

    return ok([log.to_dict() for log in logs], 'Audit logs retrieved successfully')


@admin_bp.route('/kpis', methods=['GET'])
@jwt_required_custom
@super_admin_required
def get_kpis():
    """
    Revenue indicators.

    **Response**:
        200 OK:
            {
                "success": true,
                "data": {
                    "mrr": 1490.0,
                    "active_subscribers": 10,
                    "trialing_subscribers": 2,
                    "total_canceled": 1,
                    "churn_rate_percent": 9.09,
                    "ltv_estimated": 812.45,
                    "total_revenue": 8936.9
                }
            }
    """
    try:
        return ok(TenantService.get_kpis(), 'KPIs computed')

    except Exception as e:
        logger.error(f"Error computing KPIs: {str(e)}", exc_info=True)
        return internal_error('Failed to compute KPIs')


@admin_bp.route('/subscriptions', methods=['GET'])
@jwt_required_custom
@super_admin_required
def list_subscriptions():
    subscriptions = BillingService.list_subscriptions(status=request.args.get('status'))
    return ok([s.to_dict() for s in subscriptions], 'Subscriptions retrieved successfully')


@admin_bp.route('/invoices', methods=['GET'])
@jwt_required_custom
@super_admin_required
def list_invoices():
    _, per_page = get_pagination()
    invoices = BillingService.list_invoices(limit=per_page)
    return ok([i.to_dict() for i in invoices], 'Invoices retrieved successfully')


@admin_bp.route('/plans', methods=['GET'])
@jwt_required_custom
@super_admin_required
def list_plans():
    plans = BillingService.list_plans(active_only=False)
    return ok([p.to_dict() for p in plans], 'Plans retrieved successfully')


@admin_bp.route('/plans', methods=['POST'])
@jwt_required_custom
@super_admin_required
@validate_json(required_fields=['name', 'slug', 'price_cents'])
def create_plan():
    """
    Create a plan.

    **Request Body**:
        {"name": "Pro", "slug": "pro", "price_cents": 14900, "interval": "monthly", "features": ["Unlimited students"]}
    """
    try:
        data = plan_create_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid plan data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    plan, error = BillingService.create_plan(data, actor)
    if error:
        return service_error(error)

    return created(plan.to_dict(), 'Plan created')
