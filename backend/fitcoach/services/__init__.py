"""
Services Package - Business Logic Layer

Service classes sit between the routes and the models. Methods are static and
return `(result, error)` tuples; routes turn errors into response envelopes.

Available Services:
- AuthService: registration, login, tokens, logout, password change, activation
- StudentService: student roster, invitations, profile, body measurements
- StaffService: trainers of a tenant
- WorkoutService / WorkoutLogService: routines, templates, session logs, streaks
- AssessmentService: physical assessments and evolution series
- ScheduleService: agenda, recurring slot generation, bookings
- ChatService / NotificationService: conversations and in-app notifications
- MessageConfigService / ReminderService: automatic messages
- TenantService / BillingService / AuditService: back office
"""

from fitcoach.services.auth_service import AuthService
from fitcoach.services.audit_service import AuditService
from fitcoach.services.notification_service import NotificationService
from fitcoach.services.student_service import StudentService
from fitcoach.services.staff_service import StaffService
from fitcoach.services.workout_service import WorkoutService
from fitcoach.services.workout_log_service import WorkoutLogService
from fitcoach.services.assessment_service import AssessmentService
from fitcoach.services.schedule_service import ScheduleService
from fitcoach.services.chat_service import ChatService
from fitcoach.services.message_config_service import MessageConfigService
from fitcoach.services.reminder_service import ReminderService
from fitcoach.services.tenant_service import TenantService
from fitcoach.services.billing_service import BillingService

__all__ = [
    'AuthService',
    'AuditService',
    'NotificationService',
    'StudentService',
    'StaffService',
    'WorkoutService',
    'WorkoutLogService',
    'AssessmentService',
    'ScheduleService',
    'ChatService',
    'MessageConfigService',
    'ReminderService',
    'TenantService',
    'BillingService',
]
