"""
Routes Package - API Blueprints

This package contains all Flask blueprints for the API endpoints.
"""

from fitcoach.routes.auth import auth_bp
from fitcoach.routes.students import students_bp
from fitcoach.routes.staff import staff_bp
from fitcoach.routes.workouts import workouts_bp
from fitcoach.routes.assessments import assessments_bp
from fitcoach.routes.schedule import schedule_bp
from fitcoach.routes.chat import chat_bp
from fitcoach.routes.notifications import notifications_bp
from fitcoach.routes.message_config import message_config_bp
from fitcoach.routes.billing import billing_bp
from fitcoach.routes.admin import admin_bp
from fitcoach.routes.me import me_bp

__all__ = [
    'auth_bp',
    'students_bp',
    'staff_bp',
    'workouts_bp',
    'assessments_bp',
    'schedule_bp',
    'chat_bp',
    'notifications_bp',
    'message_config_bp',
    'billing_bp',
    'admin_bp',
    'me_bp',
]
