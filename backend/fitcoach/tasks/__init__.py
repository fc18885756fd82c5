"""
Celery tasks package for asynchronous operations.

This package contains the background tasks:
- Session reminders ("starts soon" notifications)
- System maintenance (health check)
"""

# Import tasks to register them with Celery
from fitcoach.tasks.reminder_tasks import send_session_reminders
from fitcoach.tasks.maintenance_tasks import health_check

__all__ = [
    'send_session_reminders',
    'health_check',
]
