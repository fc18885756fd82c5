"""
ChatService - trainer/student conversations.

Clients poll `list_messages(after=...)`; there is no push channel and no
ordering reconciliation beyond `created_at`.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from fitcoach.extensions import db
from fitcoach.models.base import utcnow
from fitcoach.models.chat import Conversation, Message
from fitcoach.models.student import Student
from fitcoach.models.user import User, STAFF_ROLES, ROLE_ADMIN
from fitcoach.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 120


class ChatService:

    @staticmethod
    def _student_of(user: User) -> Optional[Student]:
        return Student.for_tenant(user.tenant_id).filter(Student.user_id == user.id).first()

    @staticmethod
    def list_contacts(user: User) -> List[Dict[str, Any]]:
        """
        People the user can start a conversation with.

        Staff see the tenant's active students. A student sees the assigned
        trainer, or every active staff member when none is assigned.
        """
        if user.role in STAFF_ROLES:
            students = (
                Student.for_tenant(user.tenant_id)
                .filter(Student.enrollment_status == 'active', Student.user_id.isnot(None))
                .order_by(Student.full_name.asc())
                .all()
            )
            return [
                {
                    'id': str(s.id),
                    'user_id': str(s.user_id),
                    'name': s.full_name,
                    'email': s.email,
                    'avatar_url': s.avatar_url,
                    'role': 'student',
                }
                for s in students
            ]

        student = ChatService._student_of(user)
        if student and student.trainer and student.trainer.is_active:
            staff = [student.trainer]
        else:
            staff = (
                User.query.filter(
                    User.tenant_id == user.tenant_id,
                    User.role.in_(STAFF_ROLES),
                    User.is_active.is_(True),
                )
                .order_by(User.full_name.asc())
                .all()
            )
        return [
            {
                'id': str(member.id),
                'user_id': str(member.id),
                'name': member.full_name,
                'email': member.email,
                'avatar_url': member.avatar_url,
                'role': member.role,
            }
            for member in staff
        ]

    @staticmethod
    def list_conversations(user: User) -> List[Conversation]:
        """Conversations of the user, most recently active first."""
        query = Conversation.for_tenant(user.tenant_id)
        if user.role in STAFF_ROLES:
            query = query.filter(Conversation.trainer_id == user.id)
        else:
            student = ChatService._student_of(user)
            if not student:
                return []
            query = query.filter(Conversation.student_id == student.id)

        return query.order_by(
            Conversation.last_message_at.desc().nulls_last(),
            Conversation.created_at.desc(),
        ).all()

    @staticmethod
    def open_conversation(user: User, student_id=None, trainer_id=None) -> Tuple[Optional[Conversation], Optional[str]]:
        """Fetch or create the conversation between a student and a staff member."""
        try:
            if user.role in STAFF_ROLES:
                if student_id is None:
                    return None, 'student_id is required'
                student = Student.get_for_tenant(student_id, user.tenant_id)
                if not student:
                    return None, 'Student not found'
                trainer = user
            else:
                student = ChatService._student_of(user)
                if not student:
                    return None, 'Student profile not found'
                trainer_id = trainer_id or student.trainer_id
                if trainer_id is None:
                    return None, 'trainer_id is required when no trainer is assigned'
                trainer = db.session.get(User, trainer_id)
                if not trainer or trainer.tenant_id != user.tenant_id or trainer.role not in STAFF_ROLES:
                    return None, 'Trainer not found'

            conversation = Conversation.query.filter_by(student_id=student.id, trainer_id=trainer.id).first()
            if conversation is None:
                conversation = Conversation(
                    tenant_id=user.tenant_id,
                    student_id=student.id,
                    trainer_id=trainer.id,
                    created_by=user.id,
                )
                db.session.add(conversation)
                db.session.commit()
                logger.info(f"Conversation opened: {conversation.id}")

            return conversation, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error opening conversation: {str(e)}", exc_info=True)
            return None, f'Failed to open conversation: {str(e)}'

    @staticmethod
    def get_conversation(conversation_id, user: User) -> Tuple[Optional[Conversation], Optional[str]]:
        """Conversation visible to the user (participant, or tenant admin)."""
        conversation = Conversation.get_for_tenant(conversation_id, user.tenant_id)
        if conversation:
            if user.role in STAFF_ROLES:
                if conversation.trainer_id == user.id or user.role == ROLE_ADMIN:
                    return conversation, None
            else:
                student = ChatService._student_of(user)
                if student and conversation.student_id == student.id:
                    return conversation, None
        return None, 'Conversation not found'

    @staticmethod
    def list_messages(conversation: Conversation, after: Optional[datetime] = None) -> List[Message]:
        """Messages in chronological order, optionally only those newer than `after`."""
        query = Message.for_tenant(conversation.tenant_id).filter(Message.conversation_id == conversation.id)
        if after is not None:
            query = query.filter(Message.created_at > after)
        return query.order_by(Message.created_at.asc()).all()

    @staticmethod
    def send_message(conversation: Conversation, sender: User, content: str,
                     type: str = 'text') -> Tuple[Optional[Message], Optional[str]]:
        """
        Store a message, refresh the inbox cache and notify the other side.
        """
        try:
            message = Message(
                tenant_id=conversation.tenant_id,
                conversation_id=conversation.id,
                sender_id=sender.id,
                type=type,
                content=content.strip(),
                created_by=sender.id,
            )
            db.session.add(message)

            conversation.last_message = message.content[:PREVIEW_LENGTH] if type == 'text' else '[image]'
            conversation.last_message_at = utcnow()

            # Any staff member writes on the trainer side (tenant admins included)
            if sender.role in STAFF_ROLES:
                conversation.student_unread_count = (conversation.student_unread_count or 0) + 1
                recipient_id = conversation.student.user_id if conversation.student else None
            else:
                conversation.trainer_unread_count = (conversation.trainer_unread_count or 0) + 1
                recipient_id = conversation.trainer_id

            NotificationService.notify(
                recipient_id,
                title=f'New message from {sender.full_name}',
                message=conversation.last_message,
                type='message',
                data={'conversation_id': str(conversation.id)},
            )
            db.session.commit()
            return message, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error sending message: {str(e)}", exc_info=True)
            return None, f'Failed to send message: {str(e)}'

    @staticmethod
    def mark_read(conversation: Conversation, reader: User) -> Tuple[Optional[int], Optional[str]]:
        """
        Mark the other side's messages as read and reset the reader's counter.

        A tenant admin viewing someone else's conversation leaves the
        trainer's unread state untouched.
        """
        if reader.role in STAFF_ROLES and reader.id != conversation.trainer_id:
            return 0, None

        try:
            query = Message.query.filter(
                Message.conversation_id == conversation.id,
                Message.read.is_(False),
            )
            if reader.role in STAFF_ROLES:
                student_user_id = conversation.student.user_id if conversation.student else None
                query = query.filter(Message.sender_id == student_user_id)
                conversation.trainer_unread_count = 0
            else:
                query = query.filter(Message.sender_id != reader.id)
                conversation.student_unread_count = 0

            updated = query.update({Message.read: True}, synchronize_session=False)
            db.session.commit()
            return updated, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error marking messages read: {str(e)}", exc_info=True)
            return None, f'Failed to mark messages as read: {str(e)}'
