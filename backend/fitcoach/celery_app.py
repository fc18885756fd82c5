"""
Celery application factory for background tasks.

Periodic tasks:
- Session reminders ("starts soon" notifications) every 5 minutes
- Health check (database and Redis) every 5 minutes

Redis is used as broker and result backend.
"""

import os
from typing import Optional
from celery import Celery, Task
from celery.schedules import crontab
from flask import Flask, has_app_context
import logging

logger = logging.getLogger(__name__)

_flask_app: Optional[Flask] = None


def bind_flask_app(app: Flask) -> None:
    """Use `app` as the application context for every task run by this process."""
    global _flask_app
    _flask_app = app


def get_flask_app() -> Flask:
    """Flask app bound by the worker, created from FLASK_ENV on first use otherwise."""
    global _flask_app
    if _flask_app is None:
        from fitcoach import create_app
        _flask_app = create_app(os.environ.get('FLASK_ENV', 'development'))
    return _flask_app


class ContextTask(Task):
    """Make celery tasks work with Flask app context."""
    abstract = True

    def __call__(self, *args, **kwargs):
        if has_app_context():
            return super().__call__(*args, **kwargs)
        with get_flask_app().app_context():
            return super().__call__(*args, **kwargs)


def create_celery_app(app: Flask = None) -> Celery:
    """
    Create and configure a Celery application instance.

    Args:
        app: Optional Flask application; its CELERY_* settings override the
             environment and it becomes the tasks' application context.

    Returns:
        Configured Celery application
    """
    broker_url = os.environ.get('CELERY_BROKER_URL', 'redis://localhost:6379/3')
    result_backend = os.environ.get('CELERY_RESULT_BACKEND', 'redis://localhost:6379/4')

    celery = Celery(
        'fitcoach',
        broker=broker_url,
        backend=result_backend,
        task_cls=ContextTask,
        include=['fitcoach.tasks.reminder_tasks', 'fitcoach.tasks.maintenance_tasks']
    )

    celery.conf.update(
        task_serializer='json',
        accept_content=['json'],
        result_serializer='json',
        timezone='UTC',
        enable_utc=True,

        task_routes={
            'fitcoach.tasks.reminder_tasks.*': {'queue': 'notifications'},
            'fitcoach.tasks.maintenance_tasks.*': {'queue': 'maintenance'},
        },

        task_annotations={
            'fitcoach.tasks.reminder_tasks.send_session_reminders': {
                'time_limit': 240,
                'soft_time_limit': 180,
            },
        },

        task_default_priority=5,
        task_acks_late=True,
        worker_prefetch_multiplier=1,

        result_expires=3600,

        task_reject_on_worker_lost=True,
        task_ignore_result=False,

        beat_schedule={
            # "Starts soon" reminders - every 5 minutes
            'send-session-reminders': {
                'task': 'fitcoach.tasks.reminder_tasks.send_session_reminders',
                'schedule': crontab(minute='*/5'),
                'options': {
                    'queue': 'notifications',
                    'priority': 7,
                }
            },

            # Health check for monitoring - every 5 minutes
            'health-check': {
                'task': 'fitcoach.tasks.maintenance_tasks.health_check',
                'schedule': crontab(minute='*/5'),
                'options': {
                    'queue': 'maintenance',
                    'priority': 1,
                }
            },
        }
    )

    if app:
        bind_flask_app(app)
        celery.conf.update(
            broker_url=app.config.get('CELERY_BROKER_URL') or broker_url,
            result_backend=app.config.get('CELERY_RESULT_BACKEND') or result_backend,
        )

    logger.info(f"Celery configured with broker: {celery.conf.broker_url}")
    return celery


# Default Celery instance (tasks register against it)
celery_app = create_celery_app()
