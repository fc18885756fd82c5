"""
Authentication Schemas

Marshmallow schemas for registration, login, password change and student
account activation.
"""

import re
from marshmallow import Schema, fields, validate, validates, ValidationError, post_load


def validate_password_strength(value: str) -> None:
    """
    Password rules shared by every schema that sets a password.

    Requirements:
    - At least 8 characters
    - At least one letter
    - At least one number
    """
    if len(value) < 8:
        raise ValidationError("Password must be at least 8 characters")

    if not re.search(r'[a-zA-Z]', value):
        raise ValidationError("Password must contain at least one letter")

    if not re.search(r'\d', value):
        raise ValidationError("Password must contain at least one number")


class RegisterSchema(Schema):
    """
    Self-signup of an independent personal trainer.

    Used for POST /api/auth/register. Creates a 'personal' tenant and its owner.
    """
    full_name = fields.Str(
        required=True,
        validate=validate.Length(min=2, max=200, error="Full name must be between 2 and 200 characters")
    )
    email = fields.Email(
        required=True,
        validate=validate.Length(max=255, error="Email must not exceed 255 characters")
    )
    password = fields.Str(required=True, load_only=True, validate=validate_password_strength)
    business_name = fields.Str(
        load_default=None,
        validate=validate.Length(max=200)
    )

    @validates('full_name')
    def validate_full_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Full name cannot be empty or whitespace")

    @post_load
    def normalize_data(self, data, **kwargs):
        data['email'] = data['email'].strip().lower()
        data['full_name'] = data['full_name'].strip()
        return data


class LoginSchema(Schema):
    """Schema for POST /api/auth/login."""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=1))

    @post_load
    def normalize_data(self, data, **kwargs):
        data['email'] = data['email'].strip().lower()
        return data


class ChangePasswordSchema(Schema):
    """Schema for POST /api/auth/change-password."""
    current_password = fields.Str(required=True, load_only=True, validate=validate.Length(min=1))
    new_password = fields.Str(required=True, load_only=True, validate=validate_password_strength)


class ActivateAccountSchema(Schema):
    """Schema for POST /api/auth/activate (student invitation)."""
    token = fields.Str(required=True, validate=validate.Length(min=10, max=128))
    password = fields.Str(required=True, load_only=True, validate=validate_password_strength)


register_schema = RegisterSchema()
login_schema = LoginSchema()
change_password_schema = ChangePasswordSchema()
activate_account_schema = ActivateAccountSchema()
