"""
Chat Schemas
"""

from marshmallow import Schema, fields, validate, validates, ValidationError

from fitcoach.models.chat import MESSAGE_TYPES


class OpenConversationSchema(Schema):
    """
    Used for POST /api/chat/conversations.

    Staff pass `student_id`; students may pass `trainer_id` (defaults to their
    assigned trainer).
    """
    student_id = fields.UUID(load_default=None)
    trainer_id = fields.UUID(load_default=None)


class SendMessageSchema(Schema):
    """Used for POST /api/chat/conversations/<id>/messages."""
    content = fields.Str(required=True, validate=validate.Length(min=1, max=5000))
    type = fields.Str(load_default='text', validate=validate.OneOf(MESSAGE_TYPES))

    @validates('content')
    def validate_content(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Message cannot be empty")


open_conversation_schema = OpenConversationSchema()
send_message_schema = SendMessageSchema()
