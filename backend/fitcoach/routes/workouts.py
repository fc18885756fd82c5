"""
Workouts Blueprint - Routines, Templates and Exercises

Endpoints (tenant admin or trainer):
- GET /api/workouts - List routines (?student_id=, ?templates=true)
- POST /api/workouts - Create a routine with nested exercises
- GET /api/workouts/<workout_id> - Routine with its exercises
- PUT /api/workouts/<workout_id> - Update routine fields
- DELETE /api/workouts/<workout_id> - Soft delete
- POST /api/workouts/<workout_id>/exercises - Add an exercise
- PUT /api/workouts/<workout_id>/exercises/<exercise_id> - Update an exercise
- DELETE /api/workouts/<workout_id>/exercises/<exercise_id> - Remove an exercise
- POST /api/workouts/<workout_id>/assign - Copy a routine to a student
"""

import logging
from flask import Blueprint, request, g
from marshmallow import ValidationError

from fitcoach.schemas.workout_schema import (
    exercise_schema,
    workout_create_schema,
    workout_update_schema,
    assign_workout_schema,
)
from fitcoach.services.workout_service import WorkoutService
from fitcoach.utils.decorators import jwt_required_custom, staff_required, validate_json
from fitcoach.utils.helpers import get_current_user, parse_uuid
from fitcoach.utils.responses import ok, created, bad_request, unauthorized, internal_error, service_error

logger = logging.getLogger(__name__)

workouts_bp = Blueprint('workouts', __name__, url_prefix='/api/workouts')


@workouts_bp.route('', methods=['GET'])
@jwt_required_custom
@staff_required
def list_workouts():
    """
    List routines of the tenant, newest first.

    **Query Parameters**:
        student_id: Only routines assigned to this student
        templates: "true" to list reusable templates only
    """
    student_id = None
    if request.args.get('student_id'):
        student_id = parse_uuid(request.args['student_id'])
        if student_id is None:
            return bad_request('Invalid student_id')

    templates_only = request.args.get('templates', '').lower() in ('1', 'true', 'yes')

    try:
        workouts = WorkoutService.list_workouts(g.tenant_id, student_id=student_id, templates_only=templates_only)
        return ok([w.to_dict() for w in workouts], 'Workouts retrieved successfully')

    except Exception as e:
        logger.error(f"Error listing workouts: {str(e)}", exc_info=True)
        return internal_error('Failed to list workouts')


@workouts_bp.route('', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['name'])
def create_workout():
    """
    Create a routine.

    A routine without `student_id` is stored as a template.

    **Request Body**:
        {
            "name": "Upper body A",
            "student_id": "uuid",          // optional
            "objective": "Hypertrophy",
            "exercises": [
                {"name": "Bench press", "sets": 4, "reps": "8-10", "weight": 60, "rest_seconds": 90}
            ]
        }

    Missing exercise fields default to 3 sets of "12" reps, 0 kg, 60 s rest.
    """
    try:
        data = workout_create_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid workout data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    workout, error = WorkoutService.create_workout(data, actor)
    if error:
        return service_error(error)

    return created(workout.to_dict(include_exercises=True), 'Workout created successfully')


@workouts_bp.route('/<uuid:workout_id>', methods=['GET'])
@jwt_required_custom
@staff_required
def get_workout(workout_id):
    workout, error = WorkoutService.get_workout(workout_id, g.tenant_id)
    if error:
        return service_error(error)

    return ok(workout.to_dict(include_exercises=True), 'Workout retrieved successfully')


@workouts_bp.route('/<uuid:workout_id>', methods=['PUT'])
@jwt_required_custom
@staff_required
@validate_json()
def update_workout(workout_id):
    try:
        data = workout_update_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid workout data', err.messages)

    workout, error = WorkoutService.update_workout(workout_id, data, g.tenant_id)
    if error:
        return service_error(error)

    return ok(workout.to_dict(include_exercises=True), 'Workout updated successfully')


@workouts_bp.route('/<uuid:workout_id>', methods=['DELETE'])
@jwt_required_custom
@staff_required
def delete_workout(workout_id):
    _, error = WorkoutService.delete_workout(workout_id, g.tenant_id)
    if error:
        return service_error(error)

    return ok(message='Workout deleted successfully')


@workouts_bp.route('/<uuid:workout_id>/exercises', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['name'])
def add_exercise(workout_id):
    """Add an exercise at the end of the routine (or at `position`)."""
    try:
        data = exercise_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid exercise data', err.messages)

    exercise, error = WorkoutService.add_exercise(workout_id, data, g.tenant_id)
    if error:
        return service_error(error)

    return created(exercise.to_dict(), 'Exercise added')


@workouts_bp.route('/<uuid:workout_id>/exercises/<uuid:exercise_id>', methods=['PUT'])
@jwt_required_custom
@staff_required
@validate_json()
def update_exercise(workout_id, exercise_id):
    try:
        data = exercise_schema.load(request.get_json(), partial=True)
    except ValidationError as err:
        return bad_request('Invalid exercise data', err.messages)

    exercise, error = WorkoutService.update_exercise(workout_id, exercise_id, data, g.tenant_id)
    if error:
        return service_error(error)

    return ok(exercise.to_dict(), 'Exercise updated')


@workouts_bp.route('/<uuid:workout_id>/exercises/<uuid:exercise_id>', methods=['DELETE'])
@jwt_required_custom
@staff_required
def delete_exercise(workout_id, exercise_id):
    _, error = WorkoutService.delete_exercise(workout_id, exercise_id, g.tenant_id)
    if error:
        return service_error(error)

    return ok(message='Exercise removed')


@workouts_bp.route('/<uuid:workout_id>/assign', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['student_id'])
def assign_workout(workout_id):
    """
    Copy a routine (usually a template) to a student.

    The copy is independent: later template edits do not reach the student.

    **Request Body**:
        {"student_id": "uuid"}
    """
    try:
        data = assign_workout_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid assignment data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    workout, error = WorkoutService.assign_to_student(workout_id, data['student_id'], actor)
    if error:
        return service_error(error)

    return created(workout.to_dict(include_exercises=True), 'Workout assigned')
