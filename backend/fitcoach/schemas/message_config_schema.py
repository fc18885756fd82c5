"""
Auto-message configuration Schemas
"""

from marshmallow import Schema, fields, validate


def _flag():
    return fields.Boolean()


def _text():
    return fields.Str(validate=validate.Length(min=1, max=1000))


def _days():
    return fields.Int(validate=validate.Range(min=1, max=365))


class MessageConfigUpdateSchema(Schema):
    """Used for PUT /api/message-config. Every field is optional."""
    reminder_24h_active = _flag()
    reminder_24h_text = _text()
    reminder_2h_active = _flag()
    reminder_2h_text = _text()
    reminder_now_active = _flag()
    reminder_now_text = _text()

    alert_missed_student_active = _flag()
    alert_missed_student_text = _text()
    alert_missed_critical_active = _flag()
    alert_missed_critical_text = _text()

    assessment_reminder_active = _flag()
    assessment_reminder_days = _days()
    assessment_reminder_text = _text()
    photo_reminder_active = _flag()
    photo_reminder_days = _days()
    photo_reminder_text = _text()

    motivational_workout_active = _flag()
    motivational_workout_text = _text()
    motivational_streak_active = _flag()
    motivational_streak_days = _days()
    motivational_streak_text = _text()
    motivational_record_active = _flag()
    motivational_record_text = _text()

    welcome_active = _flag()
    welcome_text = _text()


class TemplatePreviewSchema(Schema):
    """Used for POST /api/message-config/preview."""
    template = fields.Str(required=True, validate=validate.Length(max=1000))
    variables = fields.Dict(keys=fields.Str(), values=fields.Raw(allow_none=True), load_default=dict)


message_config_update_schema = MessageConfigUpdateSchema()
template_preview_schema = TemplatePreviewSchema()
