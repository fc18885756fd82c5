"""
SQLAlchemy models for the FitCoach platform.

This package contains all database models:
- BaseModel, TenantScopedMixin, SoftDeleteMixin: shared columns and helpers
- Tenant, User: organizations and accounts
- Student, ActivationToken: enrolled trainees and their invitations
- WorkoutRoutine, Exercise, WorkoutLog, WorkoutLogExercise: training
- PhysicalAssessment, BodyMeasurement: progress tracking
- ScheduleSlot: agenda
- Conversation, Message, Notification, AutoMessageConfig: communication
- AuditLog: audit trail
- Plan, Subscription, Invoice: billing mirror
"""

from fitcoach.models.base import BaseModel, TenantScopedMixin, SoftDeleteMixin
from fitcoach.models.tenant import Tenant
from fitcoach.models.user import User
from fitcoach.models.student import Student, ActivationToken
from fitcoach.models.workout import WorkoutRoutine, Exercise
from fitcoach.models.workout_log import WorkoutLog, WorkoutLogExercise
from fitcoach.models.assessment import PhysicalAssessment, BodyMeasurement
from fitcoach.models.schedule_slot import ScheduleSlot
from fitcoach.models.chat import Conversation, Message
from fitcoach.models.notification import Notification
from fitcoach.models.auto_message_config import AutoMessageConfig
from fitcoach.models.audit_log import AuditLog
from fitcoach.models.billing import Plan, Subscription, Invoice

__all__ = [
    'BaseModel',
    'TenantScopedMixin',
    'SoftDeleteMixin',
    'Tenant',
    'User',
    'Student',
    'ActivationToken',
    'WorkoutRoutine',
    'Exercise',
    'WorkoutLog',
    'WorkoutLogExercise',
    'PhysicalAssessment',
    'BodyMeasurement',
    'ScheduleSlot',
    'Conversation',
    'Message',
    'Notification',
    'AutoMessageConfig',
    'AuditLog',
    'Plan',
    'Subscription',
    'Invoice',
]
