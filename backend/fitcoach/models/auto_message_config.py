"""
Per-tenant automatic message settings.

Each automatic message has an on/off flag and a template using the
placeholders rendered by `fitcoach.utils.message_templates`.
"""

from sqlalchemy import Column, Integer, Text, Boolean, ForeignKey, Uuid

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel

DEFAULT_TEXTS = {
    'reminder_24h_text': 'Hi {name}! Reminder: your workout is tomorrow at {time}.',
    'reminder_2h_text': 'Hi {name}! Your workout starts in 2 hours, at {time}. See you soon!',
    'reminder_now_text': 'Hi {name}! Your session with {trainer} starts at {time}. Get ready!',
    'alert_missed_student_text': 'Hi {name}, we missed you at {workout}. Shall we reschedule?',
    'alert_missed_critical_text': '{name} has missed several sessions in a row.',
    'assessment_reminder_text': 'Hi {name}! It is time for a new physical assessment.',
    'photo_reminder_text': 'Hi {name}! Time to update your progress photos.',
    'motivational_workout_text': 'Great job finishing {workout}, {name}!',
    'motivational_streak_text': 'Amazing, {name}! You are on a {streak} day streak!',
    'motivational_record_text': 'New personal record, {name}! Keep pushing!',
    'welcome_text': 'Welcome, {name}! {trainer} is glad to have you on board.',
}


class AutoMessageConfig(BaseModel, db.Model):
    __tablename__ = 'auto_message_configs'

    tenant_id = Column(Uuid(as_uuid=True), ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, unique=True)

    reminder_24h_active = Column(Boolean, nullable=False, default=True)
    reminder_24h_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['reminder_24h_text'])
    reminder_2h_active = Column(Boolean, nullable=False, default=True)
    reminder_2h_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['reminder_2h_text'])
    reminder_now_active = Column(Boolean, nullable=False, default=True)
    reminder_now_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['reminder_now_text'])

    alert_missed_student_active = Column(Boolean, nullable=False, default=False)
    alert_missed_student_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['alert_missed_student_text'])
    alert_missed_critical_active = Column(Boolean, nullable=False, default=False)
    alert_missed_critical_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['alert_missed_critical_text'])

    assessment_reminder_active = Column(Boolean, nullable=False, default=False)
    assessment_reminder_days = Column(Integer, nullable=False, default=30)
    assessment_reminder_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['assessment_reminder_text'])
    photo_reminder_active = Column(Boolean, nullable=False, default=False)
    photo_reminder_days = Column(Integer, nullable=False, default=30)
    photo_reminder_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['photo_reminder_text'])

    motivational_workout_active = Column(Boolean, nullable=False, default=True)
    motivational_workout_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['motivational_workout_text'])
    motivational_streak_active = Column(Boolean, nullable=False, default=True)
    motivational_streak_days = Column(Integer, nullable=False, default=7)
    motivational_streak_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['motivational_streak_text'])
    motivational_record_active = Column(Boolean, nullable=False, default=False)
    motivational_record_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['motivational_record_text'])

    welcome_active = Column(Boolean, nullable=False, default=True)
    welcome_text = Column(Text, nullable=False, default=DEFAULT_TEXTS['welcome_text'])
