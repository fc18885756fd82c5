"""
Physical assessments and lightweight body measurements.
"""

from sqlalchemy import Column, String, Integer, Float, Text, Date, ForeignKey, Uuid, Index

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel, TenantScopedMixin, SoftDeleteMixin

CIRCUMFERENCE_FIELDS = (
    'neck', 'shoulders', 'chest', 'waist', 'abdomen', 'hips',
    'right_arm', 'left_arm', 'right_forearm', 'left_forearm',
    'right_thigh', 'left_thigh', 'right_calf', 'left_calf',
)

SKINFOLD_FIELDS = (
    'triceps', 'subscapular', 'chest_fold', 'axillary',
    'suprailiac', 'abdominal', 'thigh_fold',
)

PHOTO_FIELDS = ('photo_front', 'photo_back', 'photo_side_right', 'photo_side_left')


class PhysicalAssessment(BaseModel, TenantScopedMixin, SoftDeleteMixin, db.Model):
    """
    Full anthropometric assessment.

    Raw circumferences (cm) and skinfolds (mm) are stored as entered; BMI,
    body-fat %, waist-hip ratio and lean/fat mass are derived at save time.
    """

    __tablename__ = 'physical_assessments'

    student_id = Column(Uuid(as_uuid=True), ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    assessed_on = Column(Date, nullable=False)

    weight = Column(Float, nullable=False)
    height = Column(Float, nullable=False)
    age_at_assessment = Column(Integer, nullable=True)

    # Circumferences (cm)
    neck = Column(Float, nullable=True)
    shoulders = Column(Float, nullable=True)
    chest = Column(Float, nullable=True)
    waist = Column(Float, nullable=True)
    abdomen = Column(Float, nullable=True)
    hips = Column(Float, nullable=True)
    right_arm = Column(Float, nullable=True)
    left_arm = Column(Float, nullable=True)
    right_forearm = Column(Float, nullable=True)
    left_forearm = Column(Float, nullable=True)
    right_thigh = Column(Float, nullable=True)
    left_thigh = Column(Float, nullable=True)
    right_calf = Column(Float, nullable=True)
    left_calf = Column(Float, nullable=True)

    # Skinfolds (mm)
    triceps = Column(Float, nullable=True)
    subscapular = Column(Float, nullable=True)
    chest_fold = Column(Float, nullable=True)
    axillary = Column(Float, nullable=True)
    suprailiac = Column(Float, nullable=True)
    abdominal = Column(Float, nullable=True)
    thigh_fold = Column(Float, nullable=True)

    # Derived metrics
    bmi = Column(Float, nullable=True)
    body_fat_percentage = Column(Float, nullable=True)
    waist_hip_ratio = Column(Float, nullable=True)
    lean_mass_kg = Column(Float, nullable=True)
    fat_mass_kg = Column(Float, nullable=True)

    photo_front = Column(String(500), nullable=True)
    photo_back = Column(String(500), nullable=True)
    photo_side_right = Column(String(500), nullable=True)
    photo_side_left = Column(String(500), nullable=True)

    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index('ix_assessments_student_date', 'student_id', 'assessed_on'),
    )


class BodyMeasurement(BaseModel, TenantScopedMixin, db.Model):
    """Quick progress check-in (weight, body fat, muscle mass)."""

    __tablename__ = 'body_measurements'

    student_id = Column(Uuid(as_uuid=True), ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    measured_on = Column(Date, nullable=False)
    weight = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    body_fat = Column(Float, nullable=True)
    muscle_mass = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
