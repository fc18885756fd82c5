"""
Workout routines and their ordered exercises.

A routine with `is_template=True` and no student is a reusable template;
assigning it to a student creates a deep copy.
"""

from sqlalchemy import Column, String, Integer, Float, Text, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel, TenantScopedMixin, SoftDeleteMixin

VIDEO_TYPES = ('upload', 'youtube')

DEFAULT_SETS = 3
DEFAULT_REPS = '12'
DEFAULT_WEIGHT = 0.0
DEFAULT_REST_SECONDS = 60


class WorkoutRoutine(BaseModel, TenantScopedMixin, SoftDeleteMixin, db.Model):
    """Prescribed routine (e.g. "Treino A - Upper body")."""

    __tablename__ = 'workout_routines'

    trainer_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey('students.id', ondelete='CASCADE'), nullable=True, index=True)
    is_template = Column(Boolean, nullable=False, default=False)

    name = Column(String(200), nullable=False)
    objective = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    day_of_week = Column(String(20), nullable=True)

    exercises = relationship(
        'Exercise',
        back_populates='workout',
        cascade='all, delete-orphan',
        order_by='Exercise.position'
    )
    student = relationship('Student')

    def to_dict(self, exclude=None, include_exercises: bool = False) -> dict:
        data = super().to_dict(exclude=exclude)
        data['exercise_count'] = len(self.exercises)
        if include_exercises:
            data['exercises'] = [exercise.to_dict() for exercise in self.exercises]
        return data

    def __repr__(self) -> str:
        return f"<WorkoutRoutine {self.name}>"


class Exercise(BaseModel, db.Model):
    """One exercise line inside a routine."""

    __tablename__ = 'exercises'

    workout_id = Column(Uuid(as_uuid=True), ForeignKey('workout_routines.id', ondelete='CASCADE'), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    name = Column(String(200), nullable=False)
    sets = Column(Integer, nullable=False, default=DEFAULT_SETS)
    reps = Column(String(20), nullable=False, default=DEFAULT_REPS)
    weight = Column(Float, nullable=False, default=DEFAULT_WEIGHT)
    rest_seconds = Column(Integer, nullable=False, default=DEFAULT_REST_SECONDS)
    rpe = Column(Integer, nullable=True)
    video_url = Column(String(500), nullable=True)
    video_type = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)

    workout = relationship('WorkoutRoutine', back_populates='exercises')

    def copy(self) -> 'Exercise':
        """Detached copy used when a template is assigned to a student."""
        return Exercise(
            position=self.position,
            name=self.name,
            sets=self.sets,
            reps=self.reps,
            weight=self.weight,
            rest_seconds=self.rest_seconds,
            rpe=self.rpe,
            video_url=self.video_url,
            video_type=self.video_type,
            notes=self.notes,
        )

    def __repr__(self) -> str:
        return f"<Exercise {self.name} {self.sets}x{self.reps}>"
