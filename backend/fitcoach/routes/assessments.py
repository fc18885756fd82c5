"""
Assessments Blueprint - Physical Assessments

Endpoints (tenant admin or trainer):
- POST /api/assessments - Save an assessment (metrics computed at save time)
- POST /api/assessments/preview - Compute metrics without saving
- GET /api/assessments/student/<student_id> - Assessments of a student (newest first)
- GET /api/assessments/student/<student_id>/evolution - Metric series (oldest first)
- GET /api/assessments/<assessment_id> - Assessment with classifications
- DELETE /api/assessments/<assessment_id> - Soft delete
"""

import logging
from flask import Blueprint, request, g
from marshmallow import ValidationError

from fitcoach.schemas.assessment_schema import assessment_create_schema, assessment_preview_schema
from fitcoach.services.assessment_service import AssessmentService
from fitcoach.services.student_service import StudentService
from fitcoach.utils.decorators import jwt_required_custom, staff_required, validate_json
from fitcoach.utils.helpers import get_current_user
from fitcoach.utils.responses import ok, created, bad_request, unauthorized, service_error

logger = logging.getLogger(__name__)

assessments_bp = Blueprint('assessments', __name__, url_prefix='/api/assessments')


@assessments_bp.route('', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['student_id', 'assessed_on', 'weight', 'height'])
def create_assessment():
    """
    Save a physical assessment.

    BMI, body fat (US Navy method), waist-hip ratio and body composition are
    computed from the raw measurements and the student's gender, then stored.

    **Request Body**:
        {
            "student_id": "uuid",
            "assessed_on": "2024-05-06",
            "weight": 80.0,
            "height": 178.0,
            "neck": 38.0,
            "waist": 85.0,
            "hips": 98.0,
            "triceps": 12.0,
            "photo_front": "https://..."
        }

    **Response**:
        201 Created:
            {
                "success": true,
                "data": {
                    "id": "uuid",
                    "bmi": 25.25,
                    "body_fat_percentage": 17.4,
                    "bmi_classification": {"label": "Overweight", "color": "..."},
                    "ideal_weight": {"min": ..., "ideal": ..., "max": ...},
                    "warnings": []
                }
            }

    `warnings` explains metrics that could not be computed, e.g. body fat for
    a female student without a hip measurement.
    """
    try:
        data = assessment_create_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid assessment data', err.messages)

    actor = get_current_user()
    if not actor:
        return unauthorized('User not found')

    payload, error = AssessmentService.create_assessment(data, actor)
    if error:
        return service_error(error)

    logger.info(f"Assessment created by {actor.id}: warnings={payload['warnings']}")
    return created(payload, 'Assessment saved')


@assessments_bp.route('/preview', methods=['POST'])
@jwt_required_custom
@staff_required
@validate_json(required_fields=['gender', 'weight', 'height'])
def preview_assessment():
    """
    Compute assessment metrics for the form, without saving anything.

    **Request Body**: same measurements as create, plus "gender" ("M" or "F").
    """
    try:
        data = assessment_preview_schema.load(request.get_json())
    except ValidationError as err:
        return bad_request('Invalid assessment data', err.messages)

    return ok(AssessmentService.preview(data), 'Metrics computed')


@assessments_bp.route('/student/<uuid:student_id>', methods=['GET'])
@jwt_required_custom
@staff_required
def list_student_assessments(student_id):
    student, error = StudentService.get_student(student_id, g.tenant_id)
    if error:
        return service_error(error)

    assessments = AssessmentService.list_for_student(student)
    return ok(
        [AssessmentService.serialize(a, student.gender) for a in assessments],
        'Assessments retrieved successfully'
    )


@assessments_bp.route('/student/<uuid:student_id>/evolution', methods=['GET'])
@jwt_required_custom
@staff_required
def student_evolution(student_id):
    """Chronological series of weight, BMI, body fat, RCQ and body composition."""
    student, error = StudentService.get_student(student_id, g.tenant_id)
    if error:
        return service_error(error)

    return ok(AssessmentService.evolution(student), 'Evolution retrieved successfully')


@assessments_bp.route('/<uuid:assessment_id>', methods=['GET'])
@jwt_required_custom
@staff_required
def get_assessment(assessment_id):
    result, error = AssessmentService.get_assessment(assessment_id, g.tenant_id)
    if error:
        return service_error(error)

    assessment, student = result
    return ok(
        AssessmentService.serialize(assessment, student.gender if student else None),
        'Assessment retrieved successfully'
    )


@assessments_bp.route('/<uuid:assessment_id>', methods=['DELETE'])
@jwt_required_custom
@staff_required
def delete_assessment(assessment_id):
    _, error = AssessmentService.delete_assessment(assessment_id, g.tenant_id)
    if error:
        return service_error(error)

    return ok(message='Assessment deleted successfully')
