"""
Auto-message Config Blueprint

Endpoints (tenant admin or trainer):
- GET /api/message-config - Tenant settings (created with defaults on first access)
- PUT /api/message-config - Update flags, texts and thresholds
- GET /api/message-config/variables - Placeholders usable in templates
- POST /api/message-config/preview - Render a template with sample values
"""

import logging
from flask import Blueprint, request, g
from marshmallow import ValidationError

from fitcoach.schemas.message_config_schema import message_config_update_schema, template_preview_schema
from fitcoach.services.message_config_service import MessageConfigService
from fitcoach.utils.decorators import jwt_required_custom, staff_required, validate_json
from fitcoach.utils.message_templates import replace_variables, get_variables_description
from fitcoach.utils.responses import ok, bad_request, service_error

logger = logging.getLogger(__name__)

message_config_bp = Blueprint('message_config', __name__, url_prefix='/api/message-config')


@message_config_bp.route('', methods=['GET'])
@jwt_required_custom
@staff_required
def get_message_config():
    config, error = MessageConfigService.get_or_create(g.tenant_id)
    if error:
        return service_error(error)

    return ok(config.to_dict(), 'Message config retrieved successfully')


@message_config_bp.route('', methods=['PUT'])
@jwt_required_custom
@staff_required
@validate_json()
def update_message_config():
    """
    Update automatic message settings. Every field is optional.

    **Request Body**:
        {
            "reminder_now_active": true,
            "reminder_now_text": "Hi {name}! Your session starts at {time}.",
            "motivational_streak_days": 5
        }
    """
    try:
        data = message_config_update_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid message config', err.messages)

    config, error = MessageConfigService.update(g.tenant_id, data)
    if error:
        return service_error(error)

    return ok(config.to_dict(), 'Message config updated')


@message_config_bp.route('/variables', methods=['GET'])
@jwt_required_custom
@staff_required
def list_variables():
    return ok(get_variables_description())


@message_config_bp.route('/preview', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['template'])
def preview_template():
    """
    Render a template.

    **Request Body**:
        {"template": "Hi {name}, see you at {time}!", "variables": {"name": "Ana"}}

    **Response**:
        200 OK: {"success": true, "data": {"rendered": "Hi Ana, see you at --:--!"}}
    """
    try:
        data = template_preview_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid template', err.messages)

    return ok({'rendered': replace_variables(data['template'], data['variables'])})
