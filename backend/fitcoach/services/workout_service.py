"""
WorkoutService - routines, templates and exercises.
"""

import logging
from typing import Dict, List, Optional, Tuple

from fitcoach.extensions import db
from fitcoach.models.student import Student
from fitcoach.models.user import User
from fitcoach.models.workout import WorkoutRoutine, Exercise

logger = logging.getLogger(__name__)


class WorkoutService:

    @staticmethod
    def list_workouts(tenant_id, student_id=None, templates_only: bool = False) -> List[WorkoutRoutine]:
        query = WorkoutRoutine.for_tenant(tenant_id)
        if templates_only:
            query = query.filter(WorkoutRoutine.is_template.is_(True))
        if student_id is not None:
            query = query.filter(WorkoutRoutine.student_id == student_id)
        return query.order_by(WorkoutRoutine.created_at.desc()).all()

    @staticmethod
    def get_workout(workout_id, tenant_id) -> Tuple[Optional[WorkoutRoutine], Optional[str]]:
        workout = WorkoutRoutine.get_for_tenant(workout_id, tenant_id)
        if not workout:
            return None, 'Workout not found'
        return workout, None

    @staticmethod
    def _build_exercises(items: List[Dict]) -> List[Exercise]:
        exercises = []
        for index, item in enumerate(items):
            item = dict(item)
            position = item.pop('position', None)
            exercises.append(Exercise(position=index if position is None else position, **item))
        return exercises

    @staticmethod
    def create_workout(data: Dict, actor: User) -> Tuple[Optional[WorkoutRoutine], Optional[str]]:
        """
        Create a routine with its exercises in one transaction.

        A routine without a student is always stored as a template.
        """
        try:
            student_id = data.get('student_id')
            if student_id is not None and not Student.get_for_tenant(student_id, actor.tenant_id):
                return None, 'Student not found'

            workout = WorkoutRoutine(
                tenant_id=actor.tenant_id,
                trainer_id=actor.id,
                student_id=student_id,
                is_template=data.get('is_template', False) or student_id is None,
                name=data['name'],
                objective=data.get('objective'),
                description=data.get('description'),
                day_of_week=data.get('day_of_week'),
                created_by=actor.id,
            )
            workout.exercises = WorkoutService._build_exercises(data.get('exercises', []))
            db.session.add(workout)
            db.session.commit()

            logger.info(f"Workout created: {workout.id} with {len(workout.exercises)} exercises")
            return workout, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating workout: {str(e)}", exc_info=True)
            return None, f'Failed to create workout: {str(e)}'

    @staticmethod
    def update_workout(workout_id, data: Dict, tenant_id) -> Tuple[Optional[WorkoutRoutine], Optional[str]]:
        try:
            workout = WorkoutRoutine.get_for_tenant(workout_id, tenant_id)
            if not workout:
                return None, 'Workout not found'

            workout.update_from_dict(data, allowed_fields=['name', 'objective', 'description', 'day_of_week'])
            db.session.commit()
            return workout, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating workout: {str(e)}", exc_info=True)
            return None, f'Failed to update workout: {str(e)}'

    @staticmethod
    def delete_workout(workout_id, tenant_id) -> Tuple[bool, Optional[str]]:
        try:
            workout = WorkoutRoutine.get_for_tenant(workout_id, tenant_id)
            if not workout:
                return False, 'Workout not found'

            workout.soft_delete()
            db.session.commit()
            logger.info(f"Workout soft-deleted: {workout.id}")
            return True, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error deleting workout: {str(e)}", exc_info=True)
            return False, f'Failed to delete workout: {str(e)}'

    @staticmethod
    def add_exercise(workout_id, data: Dict, tenant_id) -> Tuple[Optional[Exercise], Optional[str]]:
        """Append an exercise (at the end unless a position is given)."""
        try:
            workout = WorkoutRoutine.get_for_tenant(workout_id, tenant_id)
            if not workout:
                return None, 'Workout not found'

            data = dict(data)
            position = data.pop('position', None)
            if position is None:
                position = max((e.position for e in workout.exercises), default=-1) + 1

            exercise = Exercise(position=position, **data)
            workout.exercises.append(exercise)
            db.session.commit()
            return exercise, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error adding exercise: {str(e)}", exc_info=True)
            return None, f'Failed to add exercise: {str(e)}'

    @staticmethod
    def _get_exercise(workout_id, exercise_id, tenant_id) -> Optional[Exercise]:
        workout = WorkoutRoutine.get_for_tenant(workout_id, tenant_id)
        if not workout:
            return None
        return next((e for e in workout.exercises if e.id == exercise_id), None)

    @staticmethod
    def update_exercise(workout_id, exercise_id, data: Dict, tenant_id) -> Tuple[Optional[Exercise], Optional[str]]:
        try:
            exercise = WorkoutService._get_exercise(workout_id, exercise_id, tenant_id)
            if not exercise:
                return None, 'Exercise not found'

            exercise.update_from_dict(data, allowed_fields=[
                'name', 'sets', 'reps', 'weight', 'rest_seconds', 'rpe',
                'video_url', 'video_type', 'notes', 'position',
            ])
            db.session.commit()
            return exercise, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating exercise: {str(e)}", exc_info=True)
            return None, f'Failed to update exercise: {str(e)}'

    @staticmethod
    def delete_exercise(workout_id, exercise_id, tenant_id) -> Tuple[bool, Optional[str]]:
        try:
            exercise = WorkoutService._get_exercise(workout_id, exercise_id, tenant_id)
            if not exercise:
                return False, 'Exercise not found'

            db.session.delete(exercise)
            db.session.commit()
            return True, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error deleting exercise: {str(e)}", exc_info=True)
            return False, f'Failed to delete exercise: {str(e)}'

    @staticmethod
    def assign_to_student(workout_id, student_id, actor: User) -> Tuple[Optional[WorkoutRoutine], Optional[str]]:
        """
        Deep-copy a routine (normally a template) for a student.

        Later edits to the template never affect the student's copy.
        """
        try:
            source = WorkoutRoutine.get_for_tenant(workout_id, actor.tenant_id)
            if not source:
                return None, 'Workout not found'

            student = Student.get_for_tenant(student_id, actor.tenant_id)
            if not student:
                return None, 'Student not found'

            copy = WorkoutRoutine(
                tenant_id=actor.tenant_id,
                trainer_id=actor.id,
                student_id=student.id,
                is_template=False,
                name=source.name,
                objective=source.objective,
                description=source.description,
                day_of_week=source.day_of_week,
                created_by=actor.id,
            )
            copy.exercises = [exercise.copy() for exercise in source.exercises]
            db.session.add(copy)
            db.session.commit()

            logger.info(f"Workout {source.id} assigned to student {student.id} as {copy.id}")
            return copy, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error assigning workout: {str(e)}", exc_info=True)
            return None, f'Failed to assign workout: {str(e)}'
