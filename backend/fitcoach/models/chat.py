"""
Trainer/student conversations and their messages.

Clients poll for new messages; the conversation keeps a denormalized
last-message cache and per-side unread counters for the inbox view.
"""

from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, ForeignKey, Uuid, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel, TenantScopedMixin, SoftDeleteMixin

MESSAGE_TYPES = ('text', 'image')


class Conversation(BaseModel, TenantScopedMixin, db.Model):
    __tablename__ = 'conversations'

    student_id = Column(Uuid(as_uuid=True), ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    trainer_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    last_message = Column(Text, nullable=True)
    last_message_at = Column(DateTime(timezone=True), nullable=True)
    trainer_unread_count = Column(Integer, nullable=False, default=0)
    student_unread_count = Column(Integer, nullable=False, default=0)

    student = relationship('Student')
    trainer = relationship('User')

    __table_args__ = (
        UniqueConstraint('student_id', 'trainer_id', name='uq_conversations_student_trainer'),
    )

    def to_dict(self, exclude=None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['student_name'] = self.student.full_name if self.student else None
        data['student_avatar_url'] = self.student.avatar_url if self.student else None
        data['trainer_name'] = self.trainer.full_name if self.trainer else None
        return data


class Message(BaseModel, TenantScopedMixin, SoftDeleteMixin, db.Model):
    __tablename__ = 'messages'

    conversation_id = Column(Uuid(as_uuid=True), ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False)
    sender_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    type = Column(String(10), nullable=False, default='text')
    content = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index('ix_messages_conversation_created', 'conversation_id', 'created_at'),
    )
