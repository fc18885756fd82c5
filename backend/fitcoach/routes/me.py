"""
Me Blueprint - Student Self-service

Endpoints (student):
- GET /api/me/profile - Own student profile
- PUT /api/me/profile - Update own profile (audited)
- GET /api/me/evolution - Measurements, assessments and recent sessions
- GET /api/me/workouts - Own routines
- GET /api/me/workouts/<workout_id> - Own routine with exercises
- GET /api/me/assessments - Own assessments (newest first)
- GET /api/me/workout-logs - Own session history and streak
- POST /api/me/workout-logs - Log a completed session (idempotent on client_reference)
"""

import logging
from flask import Blueprint, request, g
from marshmallow import ValidationError

from fitcoach.schemas.student_schema import student_profile_update_schema
from fitcoach.schemas.workout_schema import workout_log_create_schema
from fitcoach.services.assessment_service import AssessmentService
from fitcoach.services.student_service import StudentService
from fitcoach.services.workout_log_service import WorkoutLogService
from fitcoach.services.workout_service import WorkoutService
from fitcoach.utils.decorators import jwt_required_custom, student_required, validate_json
from fitcoach.utils.helpers import get_current_user
from fitcoach.utils.responses import ok, created, bad_request, unauthorized, not_found, service_error

logger = logging.getLogger(__name__)

me_bp = Blueprint('me', __name__, url_prefix='/api/me')

RECENT_LOGS = 10


def _current_student():
    return StudentService.get_student_for_user(g.user_id, g.tenant_id)


@me_bp.route('/profile', methods=['GET'])
@jwt_required_custom
@student_required
def get_profile():
    student = _current_student()
    if not student:
        return not_found('Student profile')

    data = student.to_dict()
    data['trainer_name'] = student.trainer.full_name if student.trainer else None
    return ok(data, 'Profile retrieved successfully')


@me_bp.route('/profile', methods=['PUT'])
@jwt_required_custom
@student_required
@validate_json()
def update_profile():
    """
    Update own profile.

    **Request Body** (all optional):
        {"full_name": "...", "age": 31, "gender": "F", "weight": 62.0, "height": 165, "goal": "...", "avatar_url": "..."}
    """
    try:
        data = student_profile_update_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid profile data', err.messages)

    user = get_current_user()
    if not user:
        return unauthorized('User not found')

    student, error = StudentService.update_own_profile(user, data)
    if error:
        return service_error(error)

    return ok(student.to_dict(), 'Profile updated')


@me_bp.route('/evolution', methods=['GET'])
@jwt_required_custom
@student_required
def get_evolution():
    """
    Everything the evolution screen charts.

    **Response**:
        200 OK:
            {
                "success": true,
                "data": {
                    "measurements": [...],     // oldest first
                    "assessments": [...],      // oldest first
                    "recent_logs": [...],      // last 10, newest first
                    "streak": 3
                }
            }
    """
    student = _current_student()
    if not student:
        return not_found('Student profile')

    return ok({
        'measurements': [m.to_dict() for m in StudentService.list_measurements(student)],
        'assessments': AssessmentService.evolution(student),
        'recent_logs': [log.to_dict() for log in WorkoutLogService.list_logs(student, limit=RECENT_LOGS)],
        'streak': WorkoutLogService.get_streak(student),
    }, 'Evolution retrieved successfully')


@me_bp.route('/workouts', methods=['GET'])
@jwt_required_custom
@student_required
def list_my_workouts():
    student = _current_student()
    if not student:
        return not_found('Student profile')

    workouts = WorkoutService.list_workouts(g.tenant_id, student_id=student.id)
    return ok([w.to_dict() for w in workouts], 'Workouts retrieved successfully')


@me_bp.route('/workouts/<uuid:workout_id>', methods=['GET'])
@jwt_required_custom
@student_required
def get_my_workout(workout_id):
    student = _current_student()
    if not student:
        return not_found('Student profile')

    workout, error = WorkoutService.get_workout(workout_id, g.tenant_id)
    if error or workout.student_id != student.id:
        return not_found('Workout')

    return ok(workout.to_dict(include_exercises=True), 'Workout retrieved successfully')


@me_bp.route('/assessments', methods=['GET'])
@jwt_required_custom
@student_required
def list_my_assessments():
    student = _current_student()
    if not student:
        return not_found('Student profile')

    assessments = AssessmentService.list_for_student(student)
    return ok(
        [AssessmentService.serialize(a, student.gender) for a in assessments],
        'Assessments retrieved successfully'
    )


@me_bp.route('/workout-logs', methods=['GET'])
@jwt_required_custom
@student_required
def list_my_workout_logs():
    student = _current_student()
    if not student:
        return not_found('Student profile')

    logs = WorkoutLogService.list_logs(student, limit=request.args.get('limit', type=int))
    return ok({
        'logs': [log.to_dict() for log in logs],
        'streak': WorkoutLogService.get_streak(student),
    }, 'Workout logs retrieved successfully')


@me_bp.route('/workout-logs', methods=['POST'])
@jwt_required_custom
@student_required
@validate_json()
def create_workout_log():
    """
    Log a completed session.

    Offline clients send a `client_reference` generated on the device;
    resubmitting the same reference returns the stored log (200) instead of
    creating a duplicate (201).

    **Request Body**:
        {
            "workout_id": "uuid",
            "performed_at": "2024-05-06T07:45:00-03:00",
            "duration_minutes": 55,
            "rating": 4,
            "feedback": "Felt strong",
            "client_reference": "device-1715000000-abc",
            "exercises": [{"name": "Squat", "sets_done": 4, "reps_done": "10", "weight_used": 80}]
        }
    """
    try:
        data = workout_log_create_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid workout log', err.messages)

    student = _current_student()
    if not student:
        return not_found('Student profile')

    result, error = WorkoutLogService.create_log(student, data)
    if error:
        return service_error(error)

    log, was_created = result
    if was_created:
        return created(log.to_dict(), 'Workout logged')
    return ok(log.to_dict(), 'Workout already logged')
