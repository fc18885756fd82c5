"""
AssessmentService - physical assessments and evolution series.

Derived metrics are computed once, at save time, from the raw measurements
and the student's gender; stored values are never recomputed on read.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from fitcoach.extensions import db
from fitcoach.models.assessment import PhysicalAssessment
from fitcoach.models.student import Student
from fitcoach.models.user import User
from fitcoach.utils.assessment_calculations import compute_assessment_metrics, describe_metrics

logger = logging.getLogger(__name__)

EVOLUTION_FIELDS = ('weight', 'bmi', 'body_fat_percentage', 'waist_hip_ratio', 'lean_mass_kg', 'fat_mass_kg', 'waist')


class AssessmentService:

    @staticmethod
    def serialize(assessment: PhysicalAssessment, gender: Optional[str]) -> Dict[str, Any]:
        """Stored assessment plus classifications and ideal weight."""
        data = assessment.to_dict()
        data.update(describe_metrics(
            gender,
            assessment.height,
            assessment.bmi,
            assessment.body_fat_percentage,
            assessment.waist_hip_ratio,
        ))
        return data

    @staticmethod
    def preview(data: Dict) -> Dict[str, Any]:
        """Compute metrics without persisting anything."""
        gender = data.get('gender')
        metrics = compute_assessment_metrics(
            gender,
            data.get('weight'),
            data.get('height'),
            waist_cm=data.get('waist'),
            neck_cm=data.get('neck'),
            hip_cm=data.get('hips'),
        )
        metrics.update(describe_metrics(
            gender,
            data.get('height'),
            metrics['bmi'],
            metrics['body_fat_percentage'],
            metrics['waist_hip_ratio'],
        ))
        return metrics

    @staticmethod
    def create_assessment(data: Dict, actor: User) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Store an assessment with its derived metrics.

        Returns:
            Tuple of (serialized assessment including `warnings`, error)
        """
        try:
            data = dict(data)
            student = Student.get_for_tenant(data.pop('student_id'), actor.tenant_id)
            if not student:
                return None, 'Student not found'

            metrics = compute_assessment_metrics(
                student.gender,
                data.get('weight'),
                data.get('height'),
                waist_cm=data.get('waist'),
                neck_cm=data.get('neck'),
                hip_cm=data.get('hips'),
            )
            warnings = metrics.pop('warnings')

            if data.get('age_at_assessment') is None:
                data['age_at_assessment'] = student.age

            assessment = PhysicalAssessment(
                tenant_id=student.tenant_id,
                student_id=student.id,
                created_by=actor.id,
                **data,
                **metrics
            )
            db.session.add(assessment)

            # Latest anthropometrics become the student's baseline
            student.weight = assessment.weight
            student.height = assessment.height
            db.session.commit()

            logger.info(f"Assessment {assessment.id} saved for student {student.id}")
            payload = AssessmentService.serialize(assessment, student.gender)
            payload['warnings'] = warnings
            return payload, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating assessment: {str(e)}", exc_info=True)
            return None, f'Failed to create assessment: {str(e)}'

    @staticmethod
    def list_for_student(student: Student) -> List[PhysicalAssessment]:
        """Assessments of a student, most recent first."""
        return (
            PhysicalAssessment.for_tenant(student.tenant_id)
            .filter(PhysicalAssessment.student_id == student.id)
            .order_by(PhysicalAssessment.assessed_on.desc(), PhysicalAssessment.created_at.desc())
            .all()
        )

    @staticmethod
    def get_assessment(assessment_id, tenant_id) -> Tuple[Optional[Tuple[PhysicalAssessment, Student]], Optional[str]]:
        assessment = PhysicalAssessment.get_for_tenant(assessment_id, tenant_id)
        if not assessment:
            return None, 'Assessment not found'
        student = db.session.get(Student, assessment.student_id)
        return (assessment, student), None

    @staticmethod
    def delete_assessment(assessment_id, tenant_id) -> Tuple[bool, Optional[str]]:
        try:
            assessment = PhysicalAssessment.get_for_tenant(assessment_id, tenant_id)
            if not assessment:
                return False, 'Assessment not found'

            assessment.soft_delete()
            db.session.commit()
            logger.info(f"Assessment soft-deleted: {assessment.id}")
            return True, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error deleting assessment: {str(e)}", exc_info=True)
            return False, f'Failed to delete assessment: {str(e)}'

    @staticmethod
    def evolution(student: Student) -> List[Dict[str, Any]]:
        """Chronological series of the main metrics, for charts."""
        assessments = (
            PhysicalAssessment.for_tenant(student.tenant_id)
            .filter(PhysicalAssessment.student_id == student.id)
            .order_by(PhysicalAssessment.assessed_on.asc())
            .all()
        )
        series = []
        for assessment in assessments:
            point = {'id': str(assessment.id), 'date': assessment.assessed_on.isoformat()}
            for field in EVOLUTION_FIELDS:
                point[field] = getattr(assessment, field)
            series.append(point)
        return series
