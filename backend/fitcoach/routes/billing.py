"""
Billing Blueprint - Tenant Billing Page

Endpoints (tenant admin):
- GET /api/billing/plans - Active plans
- GET /api/billing/subscription - Tenant's current subscription
- GET /api/billing/invoices - Latest 50 invoices of the tenant
- GET /api/billing/portal - Payment provider portal URL
- DELETE /api/billing/account - Close own account

Payments themselves are handled by the external provider.
"""

import logging
from flask import Blueprint, request, g
from marshmallow import ValidationError

from fitcoach.schemas.billing_schema import delete_account_schema
from fitcoach.services.billing_service import BillingService
from fitcoach.utils.decorators import jwt_required_custom, admin_required, validate_json
from fitcoach.utils.helpers import get_current_user
from fitcoach.utils.responses import ok, bad_request, unauthorized, service_error

logger = logging.getLogger(__name__)

billing_bp = Blueprint('billing', __name__, url_prefix='/api/billing')


@billing_bp.route('/plans', methods=['GET'])
@jwt_required_custom
@admin_required
def list_plans():
    plans = BillingService.list_plans(active_only=True)
    return ok([p.to_dict() for p in plans], 'Plans retrieved successfully')


@billing_bp.route('/subscription', methods=['GET'])
@jwt_required_custom
@admin_required
def get_subscription():
    """Current subscription with its plan, or null when the tenant has none."""
    subscription = BillingService.get_subscription(g.tenant_id)
    return ok(subscription.to_dict() if subscription else None, 'Subscription retrieved successfully')


@billing_bp.route('/invoices', methods=['GET'])
@jwt_required_custom
@admin_required
def list_invoices():
    invoices = BillingService.list_invoices(tenant_id=g.tenant_id)
    return ok([i.to_dict() for i in invoices], 'Invoices retrieved successfully')


@billing_bp.route('/portal', methods=['GET'])
@jwt_required_custom
@admin_required
def get_portal_url():
    """
    URL of the payment provider's customer portal.

    **Response**:
        200 OK: {"success": true, "data": {"url": "https://billing.example.com/portal"}}
        400 Bad Request: Billing portal is not configured
    """
    url, error = BillingService.get_portal_url()
    if error:
        return service_error(error)

    return ok({'url': url})


@billing_bp.route('/account', methods=['DELETE'])
@jwt_required_custom
@admin_required
@validate_json(required_fields=['confirmation'])
def delete_account():
    """
    Close the caller's own account.

    The email is anonymised, the password made unusable and the user
    deactivated. The action is audited.

    **Request Body**:
        {"confirmation": "DELETE"}
    """
    try:
        delete_account_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Confirmation required', err.messages)

    user = get_current_user()
    if not user:
        return unauthorized('User not found')

    _, error = BillingService.delete_account(user)
    if error:
        return service_error(error)

    return ok(message='Account deleted')
