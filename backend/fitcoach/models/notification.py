"""
In-app notifications delivered to a single user.
"""

from sqlalchemy import Column, String, Text, Boolean, JSON, ForeignKey, Uuid, Index

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel

NOTIFICATION_TYPES = ('booking', 'cancellation', 'reminder', 'info', 'message')


class Notification(BaseModel, db.Model):
    """
    Notification for a user.

    `reference_id` identifies the source event (e.g. the schedule slot of a
    reminder) so that periodic jobs never notify twice for the same event.
    """

    __tablename__ = 'notifications'

    user_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    type = Column(String(20), nullable=False, default='info')
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    data = Column(JSON, nullable=True)
    reference_id = Column(String(100), nullable=True, index=True)

    __table_args__ = (
        Index('ix_notifications_user_read', 'user_id', 'read'),
    )
