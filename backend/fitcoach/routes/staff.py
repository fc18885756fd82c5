"""
Staff Blueprint - Trainers of a Tenant

Endpoints (tenant admin):
- GET /api/staff - List admins and trainers
- POST /api/staff - Create a trainer with a temporary password
- PATCH /api/staff/<user_id>/status - Deactivate or reactivate a staff member
"""

import logging
from flask import Blueprint, request, g
from marshmallow import ValidationError

from fitcoach.schemas.staff_schema import trainer_create_schema, staff_status_schema
from fitcoach.services.staff_service import StaffService
from fitcoach.utils.decorators import jwt_required_custom, admin_required, validate_json
from fitcoach.utils.helpers import get_current_user
from fitcoach.utils.responses import ok, created, bad_request, unauthorized, internal_error, service_error

logger = logging.getLogger(__name__)

staff_bp = Blueprint('staff', __name__, url_prefix='/api/staff')


@staff_bp.route('', methods=['GET'])
@jwt_required_custom
@admin_required
def list_staff():
    """
    List the tenant's admins and trainers (active first).

    **Response**:
        200 OK:
            {"success": true, "data": [{"id": "uuid", "full_name": "...", "role": "trainer", "is_active": true}]}
    """
    try:
        members = StaffService.list_staff(g.tenant_id)
        return ok([m.to_dict() for m in members], 'Staff retrieved successfully')

    except Exception as e:
        logger.error(f"Error listing staff: {str(e)}", exc_info=True)
        return internal_error('Failed to list staff')


@staff_bp.route('', methods=['POST'])
@jwt_required_custom
@admin_required
@validate_json(required_fields=['full_name', 'email', 'temporary_password'])
def create_trainer():
    """
    Create a trainer.

    The trainer logs in with the temporary password and is asked to change
    it (`must_change_password` is true until they do).

    **Request Body**:
        {"full_name": "Carla Dias", "email": "carla@example.com", "temporary_password": "Temp12345"}

    **Response**:
        201 Created: the new user
        409 Conflict: Email already registered
    """
    try:
        data = trainer_create_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid trainer data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    trainer, error = StaffService.create_trainer(data, actor)
    if error:
        return service_error(error)

    return created(trainer.to_dict(), 'Trainer created successfully')


@staff_bp.route('/<uuid:user_id>/status', methods=['PATCH'])
@jwt_required_custom
@admin_required
@validate_json(required_fields=['is_active'])
def set_staff_status(user_id):
    """
    Deactivate or reactivate a staff member.

    **Request Body**:
        {"is_active": false}

    Admins cannot change their own status and the owner cannot be deactivated.
    """
    try:
        data = staff_status_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid status data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    member, error = StaffService.set_active(user_id, data['is_active'], actor)
    if error:
        return service_error(error)

    return ok(member.to_dict(), 'Staff status updated')
