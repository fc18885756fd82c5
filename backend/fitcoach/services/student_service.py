"""
StudentService - Business Logic for Student Management

Enrollment, invitations, profile updates, soft deletion and body
measurement check-ins. Every lookup is narrowed to the caller's tenant;
records of other tenants behave exactly like missing records.
"""

import logging
from typing import Dict, List, Optional, Tuple
from flask import current_app
from sqlalchemy import or_

from fitcoach.extensions import db
from fitcoach.models.student import Student, ActivationToken
from fitcoach.models.user import User, STAFF_ROLES
from fitcoach.models.assessment import BodyMeasurement
from fitcoach.services.audit_service import AuditService

logger = logging.getLogger(__name__)

AUDITED_FIELDS = ('full_name', 'enrollment_status', 'trainer_id', 'cpf', 'gender', 'weight', 'height', 'goal')


class StudentService:
    """Tenant-scoped student operations."""

    @staticmethod
    def build_activation_link(token: str) -> str:
        app_url = current_app.config.get('APP_URL', '').rstrip('/')
        return f"{app_url}/activate?token={token}"

    @staticmethod
    def _issue_invitation(student: Student) -> ActivationToken:
        ttl_hours = current_app.config.get('ACTIVATION_TOKEN_TTL_HOURS', 24)
        # Older pending tokens become unusable once a new invitation is issued
        ActivationToken.query.filter_by(student_id=student.id, used_at=None).delete()
        activation = ActivationToken.issue(student.id, ttl_hours=ttl_hours)
        db.session.add(activation)
        return activation

    @staticmethod
    def _validate_trainer(trainer_id, tenant_id) -> Optional[str]:
        if trainer_id is None:
            return None
        trainer = User.query.filter(
            User.id == trainer_id,
            User.tenant_id == tenant_id,
            User.role.in_(STAFF_ROLES),
        ).first()
        return None if trainer else 'Trainer not found'

    @staticmethod
    def list_students(tenant_id, status: Optional[str] = None, search: Optional[str] = None) -> List[Student]:
        """
        List live students of a tenant ordered by name.

        Args:
            status: Optional enrollment status filter
            search: Optional case-insensitive substring of name or email
        """
        query = Student.for_tenant(tenant_id)
        if status:
            query = query.filter(Student.enrollment_status == status)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Student.full_name.ilike(pattern), Student.email.ilike(pattern)))
        return query.order_by(Student.full_name.asc()).all()

    @staticmethod
    def get_student(student_id, tenant_id) -> Tuple[Optional[Student], Optional[str]]:
        student = Student.get_for_tenant(student_id, tenant_id)
        if not student:
            return None, 'Student not found'
        return student, None

    @staticmethod
    def get_student_for_user(user_id, tenant_id) -> Optional[Student]:
        """Student profile linked to a logged-in student account."""
        return Student.for_tenant(tenant_id).filter(Student.user_id == user_id).first()

    @staticmethod
    def create_student(data: Dict, actor: User) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Enroll a student and issue an invitation.

        The student starts as 'pending_activation'. No email is sent: the
        activation link is returned to the caller (and logged) so the trainer
        can share it.

        Returns:
            Tuple of ({'student', 'activation_link', 'expires_at'}, error)
        """
        try:
            tenant_id = actor.tenant_id
            email = data['email']

            duplicate = Student.for_tenant(tenant_id).filter(Student.email == email).first()
            if duplicate:
                return None, 'A student with this email already exists'

            trainer_id = data.get('trainer_id') or (actor.id if actor.role == 'trainer' else None)
            error = StudentService._validate_trainer(trainer_id, tenant_id)
            if error:
                return None, error

            student = Student(
                tenant_id=tenant_id,
                trainer_id=trainer_id,
                full_name=data['full_name'],
                email=email,
                cpf=data.get('cpf'),
                enrollment_status='pending_activation',
                age=data.get('age'),
                gender=data.get('gender'),
                weight=data.get('weight'),
                height=data.get('height'),
                goal=data.get('goal'),
                level=data.get('level'),
                injuries=data.get('injuries'),
                created_by=actor.id,
            )
            db.session.add(student)
            db.session.flush()

            activation = StudentService._issue_invitation(student)
            AuditService.record(actor, 'student.create', f"student:{student.id}", {'email': email})
            db.session.commit()

            link = StudentService.build_activation_link(activation.token)
            logger.info(f"Student {student.id} invited in tenant {tenant_id}; activation link: {link}")
            return {
                'student': student.to_dict(),
                'activation_link': link,
                'expires_at': activation.expires_at.isoformat(),
            }, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating student: {str(e)}", exc_info=True)
            return None, f'Failed to create student: {str(e)}'

    @staticmethod
    def resend_invitation(student_id, actor: User) -> Tuple[Optional[Dict], Optional[str]]:
        """Issue a fresh activation token for a student who has not activated yet."""
        try:
            student = Student.get_for_tenant(student_id, actor.tenant_id)
            if not student:
                return None, 'Student not found'

            if student.user_id is not None:
                return None, 'Student account is already active'

            activation = StudentService._issue_invitation(student)
            db.session.commit()

            link = StudentService.build_activation_link(activation.token)
            logger.info(f"Invitation re-issued for student {student.id}; activation link: {link}")
            return {
                'activation_link': link,
                'expires_at': activation.expires_at.isoformat(),
            }, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error re-issuing invitation: {str(e)}", exc_info=True)
            return None, f'Failed to resend invitation: {str(e)}'

    @staticmethod
    def update_student(student_id, data: Dict, actor: User) -> Tuple[Optional[Student], Optional[str]]:
        """Update a student; changed fields are recorded in the audit trail."""
        try:
            student = Student.get_for_tenant(student_id, actor.tenant_id)
            if not student:
                return None, 'Student not found'

            if 'trainer_id' in data:
                error = StudentService._validate_trainer(data['trainer_id'], actor.tenant_id)
                if error:
                    return None, error

            changes = StudentService._apply_changes(student, data)

            if student.user_id and 'full_name' in data:
                linked_user = db.session.get(User, student.user_id)
                if linked_user:
                    linked_user.full_name = student.full_name

            if changes:
                AuditService.record(actor, 'student.update', f"student:{student.id}", {'changes': changes})
            db.session.commit()

            logger.info(f"Student updated: {student.id} fields={list(changes)}")
            return student, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating student: {str(e)}", exc_info=True)
            return None, f'Failed to update student: {str(e)}'

    @staticmethod
    def update_own_profile(user: User, data: Dict) -> Tuple[Optional[Student], Optional[str]]:
        """Student edits their own profile (audited like a staff update)."""
        try:
            student = StudentService.get_student_for_user(user.id, user.tenant_id)
            if not student:
                return None, 'Student profile not found'

            changes = StudentService._apply_changes(student, data)
            if 'full_name' in data:
                user.full_name = student.full_name
            if 'avatar_url' in data:
                user.avatar_url = student.avatar_url

            if changes:
                AuditService.record(user, 'student.profile_update', f"student:{student.id}", {'changes': changes})
            db.session.commit()
            return student, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating own profile: {str(e)}", exc_info=True)
            return None, f'Failed to update profile: {str(e)}'

    @staticmethod
    def _apply_changes(student: Student, data: Dict) -> Dict:
        changes = {}
        for field, value in data.items():
            old_value = getattr(student, field, None)
            if old_value != value:
                if field in AUDITED_FIELDS:
                    changes[field] = {
                        'old': str(old_value) if old_value is not None else None,
                        'new': str(value) if value is not None else None,
                    }
                setattr(student, field, value)
        return changes

    @staticmethod
    def delete_student(student_id, actor: User) -> Tuple[bool, Optional[str]]:
        """
        Soft delete a student.

        The linked login (if any) is deactivated so the student can no longer
        sign in; history (logs, assessments) is kept.
        """
        try:
            student = Student.get_for_tenant(student_id, actor.tenant_id)
            if not student:
                return False, 'Student not found'

            student.soft_delete()
            student.enrollment_status = 'inactive'

            if student.user_id:
                linked_user = db.session.get(User, student.user_id)
                if linked_user:
                    linked_user.is_active = False

            AuditService.record(actor, 'student.delete', f"student:{student.id}", {'email': student.email})
            db.session.commit()

            logger.info(f"Student soft-deleted: {student.id} by {actor.id}")
            return True, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error deleting student: {str(e)}", exc_info=True)
            return False, f'Failed to delete student: {str(e)}'

    @staticmethod
    def add_measurement(student_id, data: Dict, actor: User) -> Tuple[Optional[BodyMeasurement], Optional[str]]:
        """Record a body measurement check-in for a student."""
        try:
            student = Student.get_for_tenant(student_id, actor.tenant_id)
            if not student:
                return None, 'Student not found'

            measurement = BodyMeasurement(
                tenant_id=student.tenant_id,
                student_id=student.id,
                created_by=actor.id,
                **data
            )
            db.session.add(measurement)
            db.session.commit()
            return measurement, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error adding measurement: {str(e)}", exc_info=True)
            return None, f'Failed to add measurement: {str(e)}'

    @staticmethod
    def list_measurements(student: Student) -> List[BodyMeasurement]:
        """Measurements in chronological order (for evolution charts)."""
        return (
            BodyMeasurement.for_tenant(student.tenant_id)
            .filter(BodyMeasurement.student_id == student.id)
            .order_by(BodyMeasurement.measured_on.asc())
            .all()
        )
