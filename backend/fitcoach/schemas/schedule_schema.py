"""
Schedule Schemas

Validation for single slots and recurring slot generation.
"""

from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from fitcoach.models.schedule_slot import SLOT_STATUSES, SLOT_TYPES

# Generated slots carry no student, so they cannot start booked
RECURRING_STATUSES = tuple(s for s in SLOT_STATUSES if s != 'booked')


class SlotCreateSchema(Schema):
    """Used for POST /api/schedule/slots."""
    date = fields.Date(required=True)
    time = fields.Time(required=True)
    end_time = fields.Time(load_default=None)
    status = fields.Str(load_default='available', validate=validate.OneOf(SLOT_STATUSES))
    type = fields.Str(load_default='workout', validate=validate.OneOf(SLOT_TYPES))
    title = fields.Str(load_default=None, validate=validate.Length(max=200))
    notes = fields.Str(load_default=None)
    student_id = fields.UUID(load_default=None)
    trainer_id = fields.UUID(load_default=None)


class SlotUpdateSchema(Schema):
    """Used for PUT /api/schedule/slots/<id>. All fields optional."""
    date = fields.Date()
    time = fields.Time()
    end_time = fields.Time(allow_none=True)
    status = fields.Str(validate=validate.OneOf(SLOT_STATUSES))
    type = fields.Str(validate=validate.OneOf(SLOT_TYPES))
    title = fields.Str(allow_none=True, validate=validate.Length(max=200))
    notes = fields.Str(allow_none=True)
    student_id = fields.UUID(allow_none=True)


class RecurringSlotsSchema(Schema):
    """
    Used for POST /api/schedule/slots/preview and /bulk.

    Weekdays follow the client convention 0=Sunday ... 6=Saturday.
    Empty weekday/time lists are accepted and simply generate nothing.
    """
    start_date = fields.Date(required=True)
    end_date = fields.Date(required=True)
    weekdays = fields.List(fields.Int(validate=validate.Range(min=0, max=6)), required=True)
    times = fields.List(fields.Time(), required=True)
    type = fields.Str(load_default='workout', validate=validate.OneOf(SLOT_TYPES))
    status = fields.Str(load_default='available', validate=validate.OneOf(RECURRING_STATUSES))
    title = fields.Str(load_default=None, validate=validate.Length(max=200))

    @validates_schema
    def validate_range_length(self, data, **kwargs):
        start, end = data.get('start_date'), data.get('end_date')
        if start and end and (end - start).days > 366:
            raise ValidationError('Date range cannot exceed one year', 'end_date')


slot_create_schema = SlotCreateSchema()
slot_update_schema = SlotUpdateSchema()
recurring_slots_schema = RecurringSlotsSchema()
