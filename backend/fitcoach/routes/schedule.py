"""
Schedule Blueprint - Agenda, Recurring Slots and Bookings

Staff endpoints (tenant admin or trainer):
- GET /api/schedule/slots - Slots in a date range (?start=, ?end=, ?status=)
- POST /api/schedule/slots - Create a single slot
- PUT /api/schedule/slots/<slot_id> - Update a slot
- DELETE /api/schedule/slots/<slot_id> - Delete a slot
- POST /api/schedule/slots/preview - Draft recurring slots (nothing saved)
- POST /api/schedule/slots/bulk - Create recurring slots in one batch

Student endpoints:
- GET /api/schedule/available - Open slots from today on
- GET /api/schedule/bookings - Own booked slots
- POST /api/schedule/slots/<slot_id>/book - Book an open slot
- POST /api/schedule/slots/<slot_id>/cancel - Cancel own booking
"""

import logging
from flask import Blueprint, request, g
from marshmallow import ValidationError

from fitcoach.models.schedule_slot import SLOT_STATUSES
from fitcoach.schemas.schedule_schema import slot_create_schema, slot_update_schema, recurring_slots_schema
from fitcoach.services.schedule_service import ScheduleService, generate_recurring_slots, serialize_draft
from fitcoach.services.student_service import StudentService
from fitcoach.utils.decorators import jwt_required_custom, staff_required, student_required, validate_json
from fitcoach.utils.helpers import get_current_user, parse_date, parse_uuid
from fitcoach.utils.responses import ok, created, bad_request, unauthorized, not_found, internal_error, service_error

logger = logging.getLogger(__name__)

schedule_bp = Blueprint('schedule', __name__, url_prefix='/api/schedule')


def _current_student():
    return StudentService.get_student_for_user(g.user_id, g.tenant_id)


def _load_recurring_drafts():
    """Validate the recurring request body and expand it into slot drafts."""
    data = recurring_slots_schema.load(request.get_json())
    return generate_recurring_slots(
        data['start_date'],
        data['end_date'],
        data['weekdays'],
        data['times'],
        slot_type=data['type'],
        status=data['status'],
        title=data['title'],
    )


@schedule_bp.route('/slots', methods=['GET'])
@jwt_required_custom
@staff_required
def list_slots():
    """
    Slots of the tenant ordered by date and time.

    **Query Parameters**:
        start: First date (YYYY-MM-DD), inclusive
        end: Last date (YYYY-MM-DD), inclusive
        status: available, booked, blocked or completed
        trainer_id: Only this trainer's slots
    """
    start = parse_date(request.args.get('start'))
    end = parse_date(request.args.get('end'))
    if (request.args.get('start') and start is None) or (request.args.get('end') and end is None):
        return bad_request('Dates must use the YYYY-MM-DD format')

    status = request.args.get('status')
    if status and status not in SLOT_STATUSES:
        return bad_request(f"Invalid status. Expected one of: {', '.join(SLOT_STATUSES)}")

    trainer_id = None
    if request.args.get('trainer_id'):
        trainer_id = parse_uuid(request.args['trainer_id'])
        if trainer_id is None:
            return bad_request('Invalid trainer_id')

    try:
        slots = ScheduleService.list_slots(g.tenant_id, start=start, end=end, status=status, trainer_id=trainer_id)
        return ok([s.to_dict() for s in slots], 'Slots retrieved successfully')

    except Exception as e:
        logger.error(f"Error listing slots: {str(e)}", exc_info=True)
        return internal_error('Failed to list slots')


@schedule_bp.route('/slots', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['date', 'time'])
def create_slot():
    """
    Create a single slot.

    **Request Body**:
        {"date": "2024-05-06", "time": "07:00", "type": "workout", "student_id": "uuid"}

    A slot created for a student is stored as booked.
    """
    try:
        data = slot_create_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid slot data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    slot, error = ScheduleService.create_slot(data, actor)
    if error:
        return service_error(error)

    return created(slot.to_dict(), 'Slot created')


@schedule_bp.route('/slots/<uuid:slot_id>', methods=['PUT'])
@jwt_required_custom
@staff_required
@validate_json()
def update_slot(slot_id):
    try:
        data = slot_update_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid slot data', err.messages)

    slot, error = ScheduleService.update_slot(slot_id, data, g.tenant_id)
    if error:
        return service_error(error)

    return ok(slot.to_dict(), 'Slot updated')


@schedule_bp.route('/slots/<uuid:slot_id>', methods=['DELETE'])
@jwt_required_custom
@staff_required
def delete_slot(slot_id):
    _, error = ScheduleService.delete_slot(slot_id, g.tenant_id)
    if error:
        return service_error(error)

    return ok(message='Slot deleted')


@schedule_bp.route('/slots/preview', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['start_date', 'end_date', 'weekdays', 'times'])
def preview_recurring_slots():
    """
    Preview recurring slots without saving them.

    **Request Body**:
        {
            "start_date": "2024-05-01",
            "end_date": "2024-05-31",
            "weekdays": [1, 3, 5],        // 0=Sunday ... 6=Saturday
            "times": ["07:00", "18:30"],
            "type": "class",
            "title": "Functional"
        }

    **Response**:
        200 OK:
            {"success": true, "data": {"count": 26, "slots": [{"date": "2024-05-01", "time": "07:00", ...}]}}
    """
    try:
        drafts = _load_recurring_drafts()
    except ValidationError as err:
        return bad_request('Invalid recurrence data', err.messages)

    return ok({'count': len(drafts), 'slots': [serialize_draft(d) for d in drafts]}, 'Preview generated')


@schedule_bp.route('/slots/bulk', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['start_date', 'end_date', 'weekdays', 'times'])
def create_recurring_slots():
    """
    Create recurring slots in a single batch.

    Same body as the preview. A selection that generates no slot is a 400.
    """
    try:
        drafts = _load_recurring_drafts()
    except ValidationError as err:
        return bad_request('Invalid recurrence data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    slots, error = ScheduleService.create_bulk(drafts, actor)
    if error:
        return service_error(error)

    return created({'count': len(slots), 'slots': [s.to_dict() for s in slots]}, f'{len(slots)} slots created')


@schedule_bp.route('/available', methods=['GET'])
@jwt_required_custom
@student_required
def list_available_slots():
    """Open slots of the student's tenant from today on."""
    slots = ScheduleService.list_available(g.tenant_id)
    return ok([s.to_dict(exclude=['notes']) for s in slots], 'Available slots retrieved successfully')


@schedule_bp.route('/bookings', methods=['GET'])
@jwt_required_custom
@student_required
def list_my_bookings():
    student = _current_student()
    if not student:
        return not_found('Student profile')

    slots = ScheduleService.list_student_bookings(student)
    return ok([s.to_dict() for s in slots], 'Bookings retrieved successfully')


@schedule_bp.route('/slots/<uuid:slot_id>/book', methods=['POST'])
@jwt_required_custom
@student_required
def book_slot(slot_id):
    """
    Book an open slot (available -> booked). The trainer is notified.

    **Response**:
        200 OK: the booked slot
        404 Not Found: Slot not found
        409 Conflict: Slot is already booked or unavailable
    """
    student = _current_student()
    if not student:
        return not_found('Student profile')

    slot, error = ScheduleService.book_slot(slot_id, student)
    if error:
        return service_error(error)

    return ok(slot.to_dict(), 'Slot booked')


@schedule_bp.route('/slots/<uuid:slot_id>/cancel', methods=['POST'])
@jwt_required_custom
@student_required
def cancel_booking(slot_id):
    """Cancel own booking (booked -> available). The trainer is notified."""
    student = _current_student()
    if not student:
        return not_found('Student profile')

    slot, error = ScheduleService.cancel_booking(slot_id, student)
    if error:
        return service_error(error)

    return ok(slot.to_dict(), 'Booking cancelled')
