"""
Staff Schemas

Validation for trainers created by a tenant admin.
"""

from marshmallow import Schema, fields, validate, post_load

from fitcoach.schemas.auth_schema import validate_password_strength


class TrainerCreateSchema(Schema):
    """Used for POST /api/staff. The password is temporary and must be changed on first login."""
    full_name = fields.Str(required=True, validate=validate.Length(min=2, max=200))
    email = fields.Email(required=True, validate=validate.Length(max=255))
    temporary_password = fields.Str(required=True, load_only=True, validate=validate_password_strength)

    @post_load
    def normalize_data(self, data, **kwargs):
        data['email'] = data['email'].strip().lower()
        data['full_name'] = data['full_name'].strip()
        return data


class StaffStatusSchema(Schema):
    """Used for PATCH /api/staff/<id>/status."""
    is_active = fields.Boolean(required=True)


trainer_create_schema = TrainerCreateSchema()
staff_status_schema = StaffStatusSchema()
