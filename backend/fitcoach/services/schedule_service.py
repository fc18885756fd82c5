"""
ScheduleService - trainer agenda, recurring slot generation and bookings.
"""

import logging
from datetime import date, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fitcoach.extensions import db
from fitcoach.models.base import utcnow
from fitcoach.models.schedule_slot import ScheduleSlot
from fitcoach.models.student import Student
from fitcoach.models.tenant import Tenant
from fitcoach.models.user import User, STAFF_ROLES
from fitcoach.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def client_weekday(day: date) -> int:
    """Weekday in the client convention: 0=Sunday ... 6=Saturday."""
    return (day.weekday() + 1) % 7


def generate_recurring_slots(
    start_date: date,
    end_date: date,
    weekdays: Iterable[int],
    times: Iterable[time],
    slot_type: str = 'workout',
    status: str = 'available',
    title: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Draft slots for every selected weekday in [start_date, end_date], one per time.

    Weekdays use 0=Sunday ... 6=Saturday. Times are de-duplicated and sorted.
    An inverted range or an empty weekday/time selection yields no drafts.

    Example:
        >>> generate_recurring_slots(date(2024, 5, 6), date(2024, 5, 6), [1], [time(7, 0)])
        [{'date': date(2024, 5, 6), 'time': time(7, 0), 'type': 'workout', ...}]
    """
    selected_days = set(weekdays)
    slot_times = sorted(set(times))
    if start_date > end_date or not selected_days or not slot_times:
        return []

    drafts = []
    current = start_date
    while current <= end_date:
        if client_weekday(current) in selected_days:
            for slot_time in slot_times:
                drafts.append({
                    'date': current,
                    'time': slot_time,
                    'type': slot_type,
                    'status': status,
                    'title': title,
                    'notes': None,
                })
        current += timedelta(days=1)
    return drafts


def serialize_draft(draft: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **draft,
        'date': draft['date'].isoformat(),
        'time': draft['time'].strftime('%H:%M'),
        'weekday': client_weekday(draft['date']),
    }


class ScheduleService:

    @staticmethod
    def list_slots(tenant_id, start: Optional[date] = None, end: Optional[date] = None,
                   status: Optional[str] = None, trainer_id=None) -> List[ScheduleSlot]:
        query = ScheduleSlot.for_tenant(tenant_id)
        if start:
            query = query.filter(ScheduleSlot.date >= start)
        if end:
            query = query.filter(ScheduleSlot.date <= end)
        if status:
            query = query.filter(ScheduleSlot.status == status)
        if trainer_id:
            query = query.filter(ScheduleSlot.trainer_id == trainer_id)
        return query.order_by(ScheduleSlot.date.asc(), ScheduleSlot.time.asc()).all()

    @staticmethod
    def _validate_trainer(trainer_id, tenant_id) -> Optional[str]:
        trainer = db.session.get(User, trainer_id)
        if not trainer or trainer.tenant_id != tenant_id or trainer.role not in STAFF_ROLES:
            return 'Trainer not found'
        return None

    @staticmethod
    def create_slot(data: Dict, actor: User) -> Tuple[Optional[ScheduleSlot], Optional[str]]:
        """
        Create a single slot. `available` slots have no student and `booked`
        slots have one: a student on an open slot books it.
        """
        try:
            data = dict(data)
            student_id = data.get('student_id')
            if student_id is not None and not Student.get_for_tenant(student_id, actor.tenant_id):
                return None, 'Student not found'

            trainer_id = data.pop('trainer_id', None) or actor.id
            if trainer_id != actor.id:
                error = ScheduleService._validate_trainer(trainer_id, actor.tenant_id)
                if error:
                    return None, error

            status = data.get('status') or 'available'
            if student_id is None and status == 'booked':
                return None, 'A booked slot requires a student'
            if student_id is not None and status == 'available':
                data['status'] = 'booked'

            slot = ScheduleSlot(tenant_id=actor.tenant_id, trainer_id=trainer_id, created_by=actor.id, **data)
            db.session.add(slot)
            db.session.commit()
            return slot, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating slot: {str(e)}", exc_info=True)
            return None, f'Failed to create slot: {str(e)}'

    @staticmethod
    def update_slot(slot_id, data: Dict, tenant_id) -> Tuple[Optional[ScheduleSlot], Optional[str]]:
        """
        Update a slot keeping status and student consistent.

        Setting `available` without naming a student releases the current
        one; clearing the student of a booked slot reopens it.
        """
        try:
            slot = ScheduleSlot.get_for_tenant(slot_id, tenant_id)
            if not slot:
                return None, 'Slot not found'

            data = dict(data)
            student_given = 'student_id' in data
            status_given = 'status' in data
            student_id = data['student_id'] if student_given else slot.student_id
            status = data.get('status') or slot.status

            if student_given and student_id is not None and not Student.get_for_tenant(student_id, tenant_id):
                return None, 'Student not found'

            if status == 'available' and student_id is not None:
                if status_given and not student_given:
                    data['student_id'] = None
                else:
                    data['status'] = 'booked'
            elif status == 'booked' and student_id is None:
                if status_given:
                    return None, 'A booked slot requires a student'
                data['status'] = 'available'

            slot.update_from_dict(data)
            db.session.commit()
            return slot, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating slot: {str(e)}", exc_info=True)
            return None, f'Failed to update slot: {str(e)}'

    @staticmethod
    def delete_slot(slot_id, tenant_id) -> Tuple[bool, Optional[str]]:
        try:
            slot = ScheduleSlot.get_for_tenant(slot_id, tenant_id)
            if not slot:
                return False, 'Slot not found'

            db.session.delete(slot)
            db.session.commit()
            return True, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error deleting slot: {str(e)}", exc_info=True)
            return False, f'Failed to delete slot: {str(e)}'

    @staticmethod
    def create_bulk(drafts: List[Dict[str, Any]], actor: User) -> Tuple[Optional[List[ScheduleSlot]], Optional[str]]:
        """Persist generated drafts as a single batch."""
        if not drafts:
            return None, 'No slots generated for the selected dates, weekdays and times'

        try:
            slots = [
                ScheduleSlot(tenant_id=actor.tenant_id, trainer_id=actor.id, created_by=actor.id, **draft)
                for draft in drafts
            ]
            db.session.add_all(slots)
            db.session.commit()

            logger.info(f"Created {len(slots)} recurring slots for tenant {actor.tenant_id}")
            return slots, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating recurring slots: {str(e)}", exc_info=True)
            return None, f'Failed to create slots: {str(e)}'

    @staticmethod
    def list_available(tenant_id, today: Optional[date] = None) -> List[ScheduleSlot]:
        """Open slots from today on."""
        today = today or utcnow().date()
        return (
            ScheduleSlot.for_tenant(tenant_id)
            .filter(ScheduleSlot.status == 'available', ScheduleSlot.date >= today)
            .order_by(ScheduleSlot.date.asc(), ScheduleSlot.time.asc())
            .all()
        )

    @staticmethod
    def list_student_bookings(student: Student) -> List[ScheduleSlot]:
        return (
            ScheduleSlot.for_tenant(student.tenant_id)
            .filter(ScheduleSlot.student_id == student.id, ScheduleSlot.status == 'booked')
            .order_by(ScheduleSlot.date.asc(), ScheduleSlot.time.asc())
            .all()
        )

    @staticmethod
    def _staff_recipient(slot: ScheduleSlot):
        if slot.trainer_id:
            return slot.trainer_id
        tenant = db.session.get(Tenant, slot.tenant_id)
        owner = tenant.get_owner() if tenant else None
        return owner.id if owner else None

    @staticmethod
    def book_slot(slot_id, student: Student) -> Tuple[Optional[ScheduleSlot], Optional[str]]:
        """Student books an open slot (available -> booked); the trainer is notified."""
        try:
            slot = ScheduleSlot.get_for_tenant(slot_id, student.tenant_id)
            if not slot:
                return None, 'Slot not found'

            if slot.status != 'available':
                return None, 'Slot is already booked or unavailable'

            slot.status = 'booked'
            slot.student_id = student.id

            NotificationService.notify(
                ScheduleService._staff_recipient(slot),
                title='New booking',
                message=f"{student.full_name} booked {slot.date.strftime('%d/%m')} at {slot.time.strftime('%H:%M')}.",
                type='booking',
                data={'slot_id': str(slot.id), 'student_id': str(student.id)},
            )
            db.session.commit()

            logger.info(f"Slot {slot.id} booked by student {student.id}")
            return slot, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error booking slot: {str(e)}", exc_info=True)
            return None, f'Failed to book slot: {str(e)}'

    @staticmethod
    def cancel_booking(slot_id, student: Student) -> Tuple[Optional[ScheduleSlot], Optional[str]]:
        """Student cancels their booking (booked -> available); the trainer is notified."""
        try:
            slot = ScheduleSlot.get_for_tenant(slot_id, student.tenant_id)
            if not slot or slot.student_id != student.id or slot.status != 'booked':
                return None, 'Booking not found'

            slot.status = 'available'
            slot.student_id = None

            NotificationService.notify(
                ScheduleService._staff_recipient(slot),
                title='Booking cancelled',
                message=f"{student.full_name} cancelled {slot.date.strftime('%d/%m')} at {slot.time.strftime('%H:%M')}.",
                type='cancellation',
                data={'slot_id': str(slot.id), 'student_id': str(student.id)},
            )
            db.session.commit()

            logger.info(f"Booking on slot {slot.id} cancelled by student {student.id}")
            return slot, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error cancelling booking: {str(e)}", exc_info=True)
            return None, f'Failed to cancel booking: {str(e)}'
