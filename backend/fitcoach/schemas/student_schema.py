"""
Student Schemas

Validation for student enrollment, trainer-side updates and the student's
own profile edits, plus body measurement check-ins.
"""

from marshmallow import Schema, fields, validate, validates, ValidationError, post_load

from fitcoach.models.student import ENROLLMENT_STATUSES, GENDERS


class StudentCreateSchema(Schema):
    """Used for POST /api/students (creates a pending invitation)."""
    full_name = fields.Str(required=True, validate=validate.Length(min=2, max=200))
    email = fields.Email(required=True, validate=validate.Length(max=255))
    cpf = fields.Str(load_default=None, validate=validate.Length(max=20))
    trainer_id = fields.UUID(load_default=None)
    age = fields.Int(load_default=None, validate=validate.Range(min=5, max=120))
    gender = fields.Str(load_default=None, validate=validate.OneOf(GENDERS))
    weight = fields.Float(load_default=None, validate=validate.Range(min=1, max=500))
    height = fields.Float(load_default=None, validate=validate.Range(min=50, max=272))
    goal = fields.Str(load_default=None, validate=validate.Length(max=200))
    level = fields.Str(load_default=None, validate=validate.Length(max=50))
    injuries = fields.Str(load_default=None)

    @validates('full_name')
    def validate_full_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Full name cannot be empty or whitespace")

    @post_load
    def normalize_data(self, data, **kwargs):
        if 'email' in data:
            data['email'] = data['email'].strip().lower()
        if 'full_name' in data:
            data['full_name'] = data['full_name'].strip()
        return data


class StudentUpdateSchema(Schema):
    """
    Used for PUT /api/students/<id>. All fields are optional.

    Email is intentionally absent: it is the student's login identifier.
    """
    full_name = fields.Str(validate=validate.Length(min=2, max=200))
    cpf = fields.Str(allow_none=True, validate=validate.Length(max=20))
    trainer_id = fields.UUID(allow_none=True)
    enrollment_status = fields.Str(validate=validate.OneOf(ENROLLMENT_STATUSES))
    age = fields.Int(allow_none=True, validate=validate.Range(min=5, max=120))
    gender = fields.Str(allow_none=True, validate=validate.OneOf(GENDERS))
    weight = fields.Float(allow_none=True, validate=validate.Range(min=1, max=500))
    height = fields.Float(allow_none=True, validate=validate.Range(min=50, max=272))
    goal = fields.Str(allow_none=True, validate=validate.Length(max=200))
    level = fields.Str(allow_none=True, validate=validate.Length(max=50))
    injuries = fields.Str(allow_none=True)
    avatar_url = fields.Str(allow_none=True, validate=validate.Length(max=500))


class StudentProfileUpdateSchema(Schema):
    """Fields a student may change on their own profile (PUT /api/me/profile)."""
    full_name = fields.Str(validate=validate.Length(min=2, max=200))
    age = fields.Int(allow_none=True, validate=validate.Range(min=5, max=120))
    gender = fields.Str(allow_none=True, validate=validate.OneOf(GENDERS))
    weight = fields.Float(allow_none=True, validate=validate.Range(min=1, max=500))
    height = fields.Float(allow_none=True, validate=validate.Range(min=50, max=272))
    goal = fields.Str(allow_none=True, validate=validate.Length(max=200))
    injuries = fields.Str(allow_none=True)
    avatar_url = fields.Str(allow_none=True, validate=validate.Length(max=500))


class BodyMeasurementSchema(Schema):
    """Used for POST /api/students/<id>/measurements."""
    measured_on = fields.Date(required=True)
    weight = fields.Float(load_default=None, validate=validate.Range(min=1, max=500))
    height = fields.Float(load_default=None, validate=validate.Range(min=50, max=272))
    body_fat = fields.Float(load_default=None, validate=validate.Range(min=1, max=75))
    muscle_mass = fields.Float(load_default=None, validate=validate.Range(min=1, max=300))
    notes = fields.Str(load_default=None)


student_create_schema = StudentCreateSchema()
student_update_schema = StudentUpdateSchema()
student_profile_update_schema = StudentProfileUpdateSchema()
body_measurement_schema = BodyMeasurementSchema()
