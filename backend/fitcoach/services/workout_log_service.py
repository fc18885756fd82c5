"""
WorkoutLogService - completed sessions, streaks and motivational messages.
"""

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from fitcoach.extensions import db
from fitcoach.models.base import utcnow, as_utc
from fitcoach.models.student import Student
from fitcoach.models.workout import WorkoutRoutine
from fitcoach.models.workout_log import WorkoutLog, WorkoutLogExercise
from fitcoach.services.message_config_service import MessageConfigService
from fitcoach.services.notification_service import NotificationService
from fitcoach.utils.message_templates import replace_variables

logger = logging.getLogger(__name__)


def calculate_streak(log_dates: Iterable[date], today: date) -> int:
    """
    Number of consecutive days with at least one workout.

    The run must end today or yesterday; an older last workout means the
    streak is broken (0).

    Example:
        >>> calculate_streak([date(2024, 5, 6), date(2024, 5, 5)], date(2024, 5, 6))
        2
    """
    days = set(log_dates)
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


class WorkoutLogService:

    @staticmethod
    def list_logs(student: Student, limit: Optional[int] = None) -> List[WorkoutLog]:
        """Logs of a student, most recent first."""
        query = (
            WorkoutLog.for_tenant(student.tenant_id)
            .filter(WorkoutLog.student_id == student.id)
            .order_by(WorkoutLog.performed_at.desc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def get_streak(student: Student, today: Optional[date] = None) -> int:
        today = today or utcnow().date()
        rows = (
            db.session.query(WorkoutLog.performed_at)
            .filter(
                WorkoutLog.tenant_id == student.tenant_id,
                WorkoutLog.student_id == student.id,
                WorkoutLog.deleted_at.is_(None),
            )
            .all()
        )
        return calculate_streak((as_utc(performed_at).date() for (performed_at,) in rows), today)

    @staticmethod
    def create_log(student: Student, data: Dict) -> Tuple[Optional[Tuple[WorkoutLog, bool]], Optional[str]]:
        """
        Save a completed workout for a student.

        Idempotent on `client_reference`: replaying a submission that was
        already stored returns the stored log with created=False.

        Returns:
            Tuple of ((log, created), error)
        """
        try:
            client_reference = data.get('client_reference')
            if client_reference:
                existing = WorkoutLog.query.filter_by(
                    student_id=student.id, client_reference=client_reference
                ).first()
                if existing:
                    logger.info(f"Duplicate workout log submission ignored: {client_reference}")
                    return (existing, False), None

            workout_name = data.get('workout_name')
            workout_id = data.get('workout_id')
            if workout_id is not None:
                workout = WorkoutRoutine.get_for_tenant(workout_id, student.tenant_id)
                if not workout or (workout.student_id is not None and workout.student_id != student.id):
                    return None, 'Workout not found'
                workout_name = workout_name or workout.name

            if not workout_name:
                return None, 'Workout name is required when no workout is referenced'

            log = WorkoutLog(
                tenant_id=student.tenant_id,
                student_id=student.id,
                workout_id=workout_id,
                workout_name=workout_name,
                performed_at=data.get('performed_at') or utcnow(),
                duration_minutes=data.get('duration_minutes'),
                rating=data.get('rating'),
                feedback=data.get('feedback'),
                client_reference=client_reference,
                created_by=student.user_id,
            )
            log.exercises = [WorkoutLogExercise(**item) for item in data.get('exercises', [])]
            db.session.add(log)

            student.last_checkin_at = utcnow()
            db.session.flush()

            WorkoutLogService._send_motivation(student, log)
            db.session.commit()

            logger.info(f"Workout log saved: {log.id} for student {student.id}")
            return (log, True), None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error saving workout log: {str(e)}", exc_info=True)
            return None, f'Failed to save workout log: {str(e)}'

    @staticmethod
    def _send_motivation(student: Student, log: WorkoutLog) -> None:
        """Stage motivational notifications according to the tenant's auto-message config."""
        if student.user_id is None:
            return

        config = MessageConfigService.get_or_default(student.tenant_id)
        first_name = (student.full_name or '').split(' ')[0]
        trainer_name = student.trainer.full_name if student.trainer else None

        if config.motivational_workout_active:
            NotificationService.notify(
                student.user_id,
                title='Workout completed',
                message=replace_variables(config.motivational_workout_text, {
                    'name': first_name, 'workout': log.workout_name, 'trainer': trainer_name,
                }),
                type='info',
                data={'workout_log_id': str(log.id)},
            )

        if config.motivational_streak_active:
            today = utcnow().date()
            streak = WorkoutLogService.get_streak(student, today)
            if streak >= config.motivational_streak_days:
                NotificationService.notify(
                    student.user_id,
                    title='Training streak',
                    message=replace_variables(config.motivational_streak_text, {
                        'name': first_name, 'streak': streak, 'trainer': trainer_name,
                    }),
                    type='info',
                    reference_id=f"streak:{student.id}:{today.isoformat()}",
                )
