"""
Chat Blueprint - Trainer/Student Conversations

Endpoints (any tenant user):
- GET /api/chat/contacts - People the caller can talk to
- GET /api/chat/conversations - Caller's conversations, most recent first
- POST /api/chat/conversations - Open (or fetch) a conversation
- GET /api/chat/conversations/<conversation_id>/messages - Messages (?after= for polling)
- POST /api/chat/conversations/<conversation_id>/messages - Send a message
- POST /api/chat/conversations/<conversation_id>/read - Mark messages as read

Clients poll for new messages with `after` set to the `created_at` of the
last message they have.
"""

import logging
from datetime import datetime, timezone
from flask import Blueprint, request
from marshmallow import ValidationError

from fitcoach.schemas.chat_schema import open_conversation_schema, send_message_schema
from fitcoach.services.chat_service import ChatService
from fitcoach.utils.decorators import jwt_required_custom, tenant_required, validate_json
from fitcoach.utils.helpers import get_current_user
from fitcoach.utils.responses import ok, created, bad_request, unauthorized, internal_error, service_error

logger = logging.getLogger(__name__)

chat_bp = Blueprint('chat', __name__, url_prefix='/api/chat')


def _parse_after(value):
    """ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@chat_bp.route('/contacts', methods=['GET'])
@jwt_required_custom
@tenant_required
def list_contacts():
    """
    Contacts available to start a conversation.

    Staff get the tenant's active students; a student gets the assigned
    trainer (or every active staff member when none is assigned).
    """
    user = get_current_user()
    if not user:
        return unauthorized('User not found')

    try:
        return ok(ChatService.list_contacts(user), 'Contacts retrieved successfully')

    except Exception as e:
        logger.error(f"Error listing contacts: {str(e)}", exc_info=True)
        return internal_error('Failed to list contacts')


@chat_bp.route('/conversations', methods=['GET'])
@jwt_required_custom
@tenant_required
def list_conversations():
    """
    Conversations of the caller with the last-message preview and unread counters.

    **Response**:
        200 OK:
            {
                "success": true,
                "data": [
                    {
                        "id": "uuid",
                        "student_name": "Bruno Lima",
                        "trainer_name": "Ana Souza",
                        "last_message": "See you tomorrow!",
                        "last_message_at": "2024-05-06T10:00:00+00:00",
                        "trainer_unread_count": 0,
                        "student_unread_count": 1
                    }
                ]
            }
    """
    user = get_current_user()
    if not user:
        return unauthorized('User not found')

    conversations = ChatService.list_conversations(user)
    return ok([c.to_dict() for c in conversations], 'Conversations retrieved successfully')


@chat_bp.route('/conversations', methods=['POST'])
@jwt_required_custom
@tenant_required
@validate_json()
def open_conversation():
    """
    Open a conversation, or return the existing one.

    **Request Body**:
        Staff: {"student_id": "uuid"}
        Student: {"trainer_id": "uuid"}   // optional, defaults to the assigned trainer
    """
    try:
        data = open_conversation_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid conversation data', err.messages)

    user = get_current_user()
    if not user:
        return unauthorized('User not found')

    conversation, error = ChatService.open_conversation(user, data['student_id'], data['trainer_id'])
    if error:
        return service_error(error)

    return ok(conversation.to_dict(), 'Conversation ready')


@chat_bp.route('/conversations/<uuid:conversation_id>/messages', methods=['GET'])
@jwt_required_custom
@tenant_required
def list_messages(conversation_id):
    """
    Messages in chronological order.

    **Query Parameters**:
        after: ISO-8601 timestamp; only newer messages are returned
    """
    after = None
    if request.args.get('after'):
        try:
            after = _parse_after(request.args['after'])
        except ValueError:
            return bad_request('after must be an ISO-8601 timestamp')

    user = get_current_user()
    if not user:
        return unauthorized('User not found')

    conversation, error = ChatService.get_conversation(conversation_id, user)
    if error:
        return service_error(error)

    messages = ChatService.list_messages(conversation, after=after)
    return ok([m.to_dict() for m in messages], 'Messages retrieved successfully')


@chat_bp.route('/conversations/<uuid:conversation_id>/messages', methods=['POST'])
@jwt_required_custom
@tenant_required
@validate_json(required_fields=['content'])
def send_message(conversation_id):
    """
    Send a message. The other participant's unread counter is incremented
    and they receive a notification.

    **Request Body**:
        {"content": "See you tomorrow!", "type": "text"}
    """
    try:
        data = send_message_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid message', err.messages)

    user = get_current_user()
    if not user:
        return unauthorized('User not found')

    conversation, error = ChatService.get_conversation(conversation_id, user)
    if error:
        return service_error(error)

    message, error = ChatService.send_message(conversation, user, data['content'], data['type'])
    if error:
        return service_error(error)

    return created(message.to_dict(), 'Message sent')


@chat_bp.route('/conversations/<uuid:conversation_id>/read', methods=['POST'])
@jwt_required_custom
@tenant_required
def mark_conversation_read(conversation_id):
    user = get_current_user()
    if not user:
        return unauthorized('User not found')

    conversation, error = ChatService.get_conversation(conversation_id, user)
    if error:
        return service_error(error)

    updated, error = ChatService.mark_read(conversation, user)
    if error:
        return service_error(error)

    return ok({'updated': updated}, 'Messages marked as read')
