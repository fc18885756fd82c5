"""
Tenant Schemas

Back-office tenant provisioning and updates.
"""

from marshmallow import Schema, fields, validate, post_load

from fitcoach.models.tenant import TENANT_TYPES, TENANT_PLANS, TENANT_STATUSES
from fitcoach.schemas.auth_schema import validate_password_strength


class TenantCreateSchema(Schema):
    """Used for POST /api/admin/tenants (creates the tenant and its owner admin)."""
    name = fields.Str(required=True, validate=validate.Length(min=2, max=200))
    type = fields.Str(load_default='academy', validate=validate.OneOf(TENANT_TYPES))
    plan = fields.Str(load_default='starter', validate=validate.OneOf(TENANT_PLANS))
    owner_name = fields.Str(required=True, validate=validate.Length(min=2, max=200))
    owner_email = fields.Email(required=True, validate=validate.Length(max=255))
    owner_password = fields.Str(required=True, load_only=True, validate=validate_password_strength)

    @post_load
    def normalize_data(self, data, **kwargs):
        data['name'] = data['name'].strip()
        data['owner_email'] = data['owner_email'].strip().lower()
        return data


class TenantUpdateSchema(Schema):
    """Used for PUT /api/admin/tenants/<id>."""
    name = fields.Str(validate=validate.Length(min=2, max=200))
    type = fields.Str(validate=validate.OneOf(TENANT_TYPES))
    plan = fields.Str(validate=validate.OneOf(TENANT_PLANS))
    primary_color = fields.Str(allow_none=True, validate=validate.Regexp(r'^#[0-9a-fA-F]{6}$'))
    logo_url = fields.Str(allow_none=True, validate=validate.Length(max=500))
    app_name = fields.Str(allow_none=True, validate=validate.Length(max=100))


class TenantStatusSchema(Schema):
    """Used for PATCH /api/admin/tenants/<id>/status."""
    status = fields.Str(required=True, validate=validate.OneOf(TENANT_STATUSES))


tenant_create_schema = TenantCreateSchema()
tenant_update_schema = TenantUpdateSchema()
tenant_status_schema = TenantStatusSchema()
