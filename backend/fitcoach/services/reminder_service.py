"""
ReminderService - "session starting soon" notifications.

Run periodically by the Celery beat schedule; notifications are keyed by the
slot id so overlapping runs never remind a student twice for the same slot.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from flask import current_app

from fitcoach.extensions import db
from fitcoach.models.base import utcnow
from fitcoach.models.schedule_slot import ScheduleSlot
from fitcoach.services.message_config_service import MessageConfigService
from fitcoach.services.notification_service import NotificationService
from fitcoach.utils.message_templates import replace_variables

logger = logging.getLogger(__name__)


class ReminderService:

    @staticmethod
    def send_session_reminders(now: Optional[datetime] = None) -> int:
        """
        Notify students whose booked session starts within the reminder window.

        Slot dates and times are interpreted as UTC.

        Returns:
            Number of notifications created
        """
        now = now or utcnow()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        window = timedelta(minutes=current_app.config.get('REMINDER_WINDOW_MINUTES', 15))

        # The window may cross midnight; exact start times are checked below
        slots = (
            ScheduleSlot.query.filter(
                ScheduleSlot.status == 'booked',
                ScheduleSlot.date.between(now.date(), (now + window).date()),
                ScheduleSlot.student_id.isnot(None),
            )
            .order_by(ScheduleSlot.date.asc(), ScheduleSlot.time.asc())
            .all()
        )

        configs = {}
        sent = 0
        try:
            for slot in slots:
                starts_at = datetime.combine(slot.date, slot.time, tzinfo=timezone.utc)
                if not timedelta(0) <= starts_at - now <= window:
                    continue

                student = slot.student
                if student is None or student.user_id is None:
                    continue

                if slot.tenant_id not in configs:
                    configs[slot.tenant_id] = MessageConfigService.get_or_default(slot.tenant_id)
                config = configs[slot.tenant_id]
                if not config.reminder_now_active:
                    continue

                trainer_name = student.trainer.full_name if student.trainer else None
                notification = NotificationService.notify(
                    student.user_id,
                    title='Your session starts soon',
                    message=replace_variables(config.reminder_now_text, {
                        'name': (student.full_name or '').split(' ')[0],
                        'time': slot.time.strftime('%H:%M'),
                        'day': 'today' if slot.date == now.date() else 'tomorrow',
                        'trainer': trainer_name,
                        'workout': slot.title,
                    }),
                    type='reminder',
                    data={'slot_id': str(slot.id)},
                    reference_id=str(slot.id),
                )
                if notification is not None:
                    sent += 1

            db.session.commit()

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error sending session reminders: {str(e)}", exc_info=True)
            raise

        logger.info(f"Session reminders: {sent} sent, {len(slots)} candidate slots")
        return sent
