"""
NotificationService - in-app notifications.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from fitcoach.extensions import db
from fitcoach.models.notification import Notification

logger = logging.getLogger(__name__)

LATEST_LIMIT = 50


class NotificationService:
    """Create, list and acknowledge notifications of a single user."""

    @staticmethod
    def notify(
        user_id,
        title: str,
        message: str,
        type: str = 'info',
        data: Optional[Dict[str, Any]] = None,
        reference_id: Optional[str] = None,
    ) -> Optional[Notification]:
        """
        Stage a notification in the current session (the caller commits).

        When `reference_id` is given and the user already has a notification
        with the same type and reference, nothing is created.
        """
        if user_id is None:
            return None

        if reference_id is not None:
            existing = Notification.query.filter_by(
                user_id=user_id, type=type, reference_id=reference_id
            ).first()
            if existing:
                logger.debug(f"Notification already sent: user={user_id} ref={reference_id}")
                return None

        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            data=data,
            reference_id=reference_id,
        )
        db.session.add(notification)
        return notification

    @staticmethod
    def list_latest(user_id) -> List[Notification]:
        return (
            Notification.query.filter_by(user_id=user_id)
            .order_by(Notification.created_at.desc())
            .limit(LATEST_LIMIT)
            .all()
        )

    @staticmethod
    def unread_count(user_id) -> int:
        return Notification.query.filter_by(user_id=user_id, read=False).count()

    @staticmethod
    def mark_read(notification_id, user_id) -> Tuple[Optional[Notification], Optional[str]]:
        try:
            notification = Notification.query.filter_by(id=notification_id, user_id=user_id).first()
            if not notification:
                return None, 'Notification not found'

            notification.read = True
            db.session.commit()
            return notification, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error marking notification read: {str(e)}", exc_info=True)
            return None, f'Failed to mark notification as read: {str(e)}'

    @staticmethod
    def mark_all_read(user_id) -> Tuple[Optional[int], Optional[str]]:
        try:
            updated = (
                Notification.query.filter_by(user_id=user_id, read=False)
                .update({Notification.read: True}, synchronize_session=False)
            )
            db.session.commit()
            logger.info(f"Marked {updated} notifications read for user {user_id}")
            return updated, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error marking all notifications read: {str(e)}", exc_info=True)
            return None, f'Failed to mark notifications as read: {str(e)}'
