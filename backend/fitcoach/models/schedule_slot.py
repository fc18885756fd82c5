"""
Schedule slots offered by trainers and booked by students.
"""

from sqlalchemy import Column, String, Text, Date, Time, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship

from fitcoach.extensions import db
from fitcoach.models.base import BaseModel, TenantScopedMixin

SLOT_STATUSES = ('available', 'booked', 'blocked', 'completed')
SLOT_TYPES = ('class', 'workout', 'assessment', 'other')


class ScheduleSlot(BaseModel, TenantScopedMixin, db.Model):
    """
    A time slot on a trainer's agenda.

    Status transitions driven by students: available -> booked (book) and
    booked -> available (cancel). Staff may set any status directly.
    """

    __tablename__ = 'schedule_slots'

    trainer_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey('students.id', ondelete='SET NULL'), nullable=True, index=True)

    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=True)
    status = Column(String(20), nullable=False, default='available')
    type = Column(String(20), nullable=False, default='workout')
    title = Column(String(200), nullable=True)
    notes = Column(Text, nullable=True)

    student = relationship('Student')

    __table_args__ = (
        Index('ix_schedule_slots_tenant_date', 'tenant_id', 'date'),
    )

    def to_dict(self, exclude=None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['student_name'] = self.student.full_name if self.student else None
        return data

    def __repr__(self) -> str:
        return f"<ScheduleSlot {self.date} {self.time} ({self.status})>"
