"""
Session reminder Celery tasks.

Scheduled every 5 minutes by the beat schedule in fitcoach.celery_app.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Any

from fitcoach.celery_app import celery_app
from fitcoach.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name='fitcoach.tasks.reminder_tasks.send_session_reminders')
def send_session_reminders(self) -> Dict[str, Any]:
    """
    Notify students whose booked session starts within the reminder window.

    Returns:
        Dictionary with the task id, run timestamp and number of reminders sent
    """
    started_at = datetime.now(timezone.utc)
    sent = ReminderService.send_session_reminders(now=started_at)

    logger.info(f"Reminder task {self.request.id}: {sent} notifications")
    return {
        'task_id': self.request.id,
        'timestamp': started_at.isoformat(),
        'sent': sent,
    }
