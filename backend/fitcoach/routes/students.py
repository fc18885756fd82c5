"""
Students Blueprint - Student Roster Routes

Endpoints (tenant admin or trainer):
- GET /api/students - List students (?status=, ?search=)
- POST /api/students - Enroll a student and issue an invitation
- GET /api/students/<student_id> - Student details
- PUT /api/students/<student_id> - Update a student (audited)
- DELETE /api/students/<student_id> - Soft delete (deactivates the login)
- POST /api/students/<student_id>/invitation - Re-issue the activation link
- GET /api/students/<student_id>/workout-logs - Session history and streak
- GET /api/students/<student_id>/measurements - Body measurements
- POST /api/students/<student_id>/measurements - Add a body measurement
"""

import logging
from flask import Blueprint, request, g
from marshmallow import ValidationError

from fitcoach.models.student import ENROLLMENT_STATUSES
from fitcoach.schemas.student_schema import (
    student_create_schema,
    student_update_schema,
    body_measurement_schema,
)
from fitcoach.services.student_service import StudentService
from fitcoach.services.workout_log_service import WorkoutLogService
from fitcoach.utils.decorators import jwt_required_custom, staff_required, validate_json
from fitcoach.utils.helpers import get_current_user
from fitcoach.utils.responses import ok, created, bad_request, unauthorized, internal_error, service_error

logger = logging.getLogger(__name__)

students_bp = Blueprint('students', __name__, url_prefix='/api/students')


@students_bp.route('', methods=['GET'])
@jwt_required_custom
@staff_required
def list_students():
    """
    List students of the caller's tenant.

    **Query Parameters**:
        status: Enrollment status filter (active, inactive, pending_activation)
        search: Case-insensitive match on name or email

    **Response**:
        200 OK:
            {
                "success": true,
                "message": "Students retrieved successfully",
                "data": [{"id": "uuid", "full_name": "Ana", "enrollment_status": "active", ...}]
            }
    """
    status = request.args.get('status')
    if status and status not in ENROLLMENT_STATUSES:
        return bad_request(f"Invalid status. Expected one of: {', '.join(ENROLLMENT_STATUSES)}")

    try:
        students = StudentService.list_students(g.tenant_id, status=status, search=request.args.get('search'))
        return ok([s.to_dict() for s in students], 'Students retrieved successfully')

    except Exception as e:
        logger.error(f"Error listing students: {str(e)}", exc_info=True)
        return internal_error('Failed to list students')


@students_bp.route('', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['full_name', 'email'])
def create_student():
    """
    Enroll a student.

    The student starts as `pending_activation`; the response carries the
    activation link to share with them (valid for 24 hours).

    **Request Body**:
        {
            "full_name": "Bruno Lima",
            "email": "bruno@example.com",
            "gender": "M",
            "age": 30,
            "trainer_id": "uuid"   // optional; trainers default to themselves
        }

    **Response**:
        201 Created:
            {
                "success": true,
                "data": {
                    "student": {...},
                    "activation_link": "https://app.example.com/activate?token=...",
                    "expires_at": "2024-01-02T00:00:00+00:00"
                }
            }

        400 Bad Request: Validation error
        409 Conflict: A student with this email already exists
    """
    try:
        data = student_create_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid student data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    result, error = StudentService.create_student(data, actor)
    if error:
        return service_error(error)

    return created(result, 'Student created successfully')


@students_bp.route('/<uuid:student_id>', methods=['GET'])
@jwt_required_custom
@staff_required
def get_student(student_id):
    """Student details (404 for other tenants and deleted students)."""
    student, error = StudentService.get_student(student_id, g.tenant_id)
    if error:
        return service_error(error)

    return ok(student.to_dict(), 'Student retrieved successfully')


@students_bp.route('/<uuid:student_id>', methods=['PUT'])
@jwt_required_custom
@staff_required
@validate_json()
def update_student(student_id):
    """
    Update a student.

    Changes to name, status, trainer and physical data are recorded in the
    audit trail.

    **Request Body** (all optional):
        {"full_name": "...", "enrollment_status": "inactive", "trainer_id": "uuid", "weight": 80.5, ...}
    """
    try:
        data = student_update_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid student data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    student, error = StudentService.update_student(student_id, data, actor)
    if error:
        return service_error(error)

    return ok(student.to_dict(), 'Student updated successfully')


@students_bp.route('/<uuid:student_id>', methods=['DELETE'])
@jwt_required_custom
@staff_required
def delete_student(student_id):
    """Soft delete a student and deactivate their login."""
    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    _, error = StudentService.delete_student(student_id, actor)
    if error:
        return service_error(error)

    return ok(message='Student deleted successfully')


@students_bp.route('/<uuid:student_id>/invitation', methods=['POST'])
@jwt_required_custom
@staff_required
def resend_invitation(student_id):
    """
    Re-issue the activation link of a student who has not activated yet.

    Previous unused tokens are invalidated.
    """
    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    result, error = StudentService.resend_invitation(student_id, actor)
    if error:
        return service_error(error)

    return ok(result, 'Invitation re-issued')


@students_bp.route('/<uuid:student_id>/workout-logs', methods=['GET'])
@jwt_required_custom
@staff_required
def list_student_workout_logs(student_id):
    """
    Session history of a student, most recent first, with the current streak.

    **Query Parameters**:
        limit: Maximum number of logs (optional)
    """
    student, error = StudentService.get_student(student_id, g.tenant_id)
    if error:
        return service_error(error)

    logs = WorkoutLogService.list_logs(student, limit=request.args.get('limit', type=int))
    return ok({
        'logs': [log.to_dict() for log in logs],
        'streak': WorkoutLogService.get_streak(student),
    }, 'Workout logs retrieved successfully')


@students_bp.route('/<uuid:student_id>/measurements', methods=['GET'])
@jwt_required_custom
@staff_required
def list_measurements(student_id):
    """Body measurements of a student in chronological order."""
    student, error = StudentService.get_student(student_id, g.tenant_id)
    if error:
        return service_error(error)

    measurements = StudentService.list_measurements(student)
    return ok([m.to_dict() for m in measurements], 'Measurements retrieved successfully')


@students_bp.route('/<uuid:student_id>/measurements', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['measured_on'])
def add_measurement(student_id):
    """
    Record a body measurement.

    **Request Body**:
        {"measured_on": "2024-05-06", "weight": 80.2, "body_fat": 18.5, "muscle_mass": 35.0}
    """
    try:
        data = body_measurement_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid measurement data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    measurement, error = StudentService.add_measurement(student_id, data, actor)
    if error:
        return service_error(error)

    return created(measurement.to_dict(), 'Measurement recorded')
