"""
Billing Schemas
"""

from marshmallow import Schema, fields, validate

from fitcoach.models.billing import PLAN_INTERVALS


class PlanCreateSchema(Schema):
    """Used for POST /api/admin/plans."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    slug = fields.Str(required=True, validate=validate.Regexp(r'^[a-z0-9-]{2,50}$'))
    price_cents = fields.Int(required=True, validate=validate.Range(min=0))
    interval = fields.Str(load_default='monthly', validate=validate.OneOf(PLAN_INTERVALS))
    features = fields.List(fields.Str(), load_default=list)
    active = fields.Boolean(load_default=True)


class DeleteAccountSchema(Schema):
    """Used for DELETE /api/billing/account; the literal confirmation guards against accidents."""
    confirmation = fields.Str(required=True, validate=validate.Equal('DELETE'))


plan_create_schema = PlanCreateSchema()
delete_account_schema = DeleteAccountSchema()
