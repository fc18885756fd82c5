"""
Notifications Blueprint

Endpoints (any authenticated user):
- GET /api/notifications - Latest 50 notifications
- GET /api/notifications/unread-count - Number of unread notifications
- POST /api/notifications/<notification_id>/read - Mark one as read
- POST /api/notifications/read-all - Mark all as read
"""

import logging
from flask import Blueprint, g

from fitcoach.services.notification_service import NotificationService
from fitcoach.utils.decorators import jwt_required_custom
from fitcoach.utils.responses import ok, internal_error, service_error

logger = logging.getLogger(__name__)

notifications_bp = Blueprint('notifications', __name__, url_prefix='/api/notifications')


@notifications_bp.route('', methods=['GET'])
@jwt_required_custom
def list_notifications():
    try:
        notifications = NotificationService.list_latest(g.user_id)
        return ok({
            'notifications': [n.to_dict() for n in notifications],
            'unread_count': NotificationService.unread_count(g.user_id),
        }, 'Notifications retrieved successfully')

    except Exception as e:
        logger.error(f"Error listing notifications: {str(e)}", exc_info=True)
        return internal_error('Failed to list notifications')


@notifications_bp.route('/unread-count', methods=['GET'])
@jwt_required_custom
def unread_count():
    return ok({'unread_count': NotificationService.unread_count(g.user_id)})


@notifications_bp.route('/<uuid:notification_id>/read', methods=['POST'])
@jwt_required_custom
def mark_read(notification_id):
    notification, error = NotificationService.mark_read(notification_id, g.user_id)
    if error:
        return service_error(error)

    return ok(notification.to_dict(), 'Notification marked as read')


@notifications_bp.route('/read-all', methods=['POST'])
@jwt_required_custom
def mark_all_read():
    updated, error = NotificationService.mark_all_read(g.user_id)
    if error:
        return service_error(error)

    return ok({'updated': updated}, 'All notifications marked as read')
