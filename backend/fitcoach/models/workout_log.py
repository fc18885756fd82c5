"""
Workout execution logs recorded by students.
"""

from sqlalchemy import Column, String, Integer, Float, Text, DateTime, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel, TenantScopedMixin, SoftDeleteMixin, utcnow

DIFFICULTIES = ('easy', 'normal', 'hard')


class WorkoutLog(BaseModel, TenantScopedMixin, SoftDeleteMixin, db.Model):
    """
    A completed workout session.

    `client_reference` is an idempotency key generated on the device so that
    offline retries of the same submission never create duplicates.
    """

    __tablename__ = 'workout_logs'

    student_id = Column(Uuid(as_uuid=True), ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    workout_id = Column(Uuid(as_uuid=True), ForeignKey('workout_routines.id', ondelete='SET NULL'), nullable=True)
    workout_name = Column(String(200), nullable=False)
    performed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    duration_minutes = Column(Integer, nullable=True)
    rating = Column(Integer, nullable=True)
    feedback = Column(Text, nullable=True)
    client_reference = Column(String(100), nullable=True)

    exercises = relationship('WorkoutLogExercise', back_populates='log', cascade='all, delete-orphan')

    __table_args__ = (
        UniqueConstraint('student_id', 'client_reference', name='uq_workout_logs_student_client_ref'),
    )

    def to_dict(self, exclude=None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['exercises'] = [exercise.to_dict() for exercise in self.exercises]
        return data


class WorkoutLogExercise(BaseModel, db.Model):
    """Per-exercise detail of a logged session."""

    __tablename__ = 'workout_log_exercises'

    log_id = Column(Uuid(as_uuid=True), ForeignKey('workout_logs.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    sets_done = Column(Integer, nullable=True)
    reps_done = Column(String(20), nullable=True)
    weight_used = Column(Float, nullable=True)
    difficulty = Column(String(10), nullable=True)

    log = relationship('WorkoutLog', back_populates='exercises')
