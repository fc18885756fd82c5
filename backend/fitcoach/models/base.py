"""
Base model with common fields for all database models.

Provides UUID primary keys, automatic timestamps, audit trail support,
plus the tenant-scoping and soft-delete mixins shared by coaching records.
"""

import uuid
from datetime import datetime, date, time, timezone
from decimal import Decimal
from sqlalchemy import Column, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import declared_attr
from typing import Dict, Any, Optional


def utcnow() -> datetime:
    """Timezone-aware current UTC timestamp."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps (SQLite drops tzinfo on the way back)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class BaseModel:
    """
    Abstract base model with common fields for all models.

    Provides:
    - UUID primary key (id)
    - Automatic timestamps (created_at, updated_at)
    - Audit trail (created_by)
    - Serialization helpers (to_dict)
    - String representation (__repr__)

    Usage:
        class Student(BaseModel, TenantScopedMixin, db.Model):
            __tablename__ = 'students'
            full_name = Column(String(200), nullable=False)
    """

    # Generic Uuid keeps the schema portable (PostgreSQL native uuid, CHAR(32) on SQLite)
    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
        comment="Unique identifier for the record"
    )

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Timestamp when record was created (UTC)"
    )

    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="Timestamp when record was last updated (UTC)"
    )

    created_by = Column(
        Uuid(as_uuid=True),
        nullable=True,
        comment="UUID of user who created this record (nullable for self-registration)"
    )

    def to_dict(self, exclude: Optional[list] = None) -> Dict[str, Any]:
        """
        Convert model instance to dictionary for JSON serialization.

        Args:
            exclude: List of field names to exclude from output

        Returns:
            Dictionary representation of the model

        Example:
            >>> slot = ScheduleSlot(date=date(2024, 5, 6), time=time(7, 0))
            >>> slot.to_dict(exclude=['notes'])
            {
                'id': '123e4567-e89b-12d3-a456-426614174000',
                'date': '2024-05-06',
                'time': '07:00',
                ...
            }
        """
        exclude = exclude or []
        result = {}

        for column in self.__table__.columns:
            field_name = column.name

            if field_name in exclude:
                continue

            result[field_name] = _serialize_value(getattr(self, field_name, None))

        return result

    def update_from_dict(self, data: Dict[str, Any], allowed_fields: Optional[list] = None):
        """
        Update model fields from dictionary.

        Only updates fields that exist in the model and are in allowed_fields list.

        Args:
            data: Dictionary with field names and values
            allowed_fields: List of field names that are allowed to be updated
                          If None, all fields except primary key, tenant and timestamps are allowed
        """
        if allowed_fields is None:
            forbidden_fields = {'id', 'tenant_id', 'created_at', 'updated_at', 'created_by', 'deleted_at'}
            allowed_fields = [
                col.name for col in self.__table__.columns
                if col.name not in forbidden_fields
            ]

        for field_name, value in data.items():
            if field_name in allowed_fields and hasattr(self, field_name):
                setattr(self, field_name, value)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"

    def __str__(self) -> str:
        return self.__repr__()

    @classmethod
    def get_column_names(cls) -> list:
        """
        Get list of all column names for this model.

        Example:
            >>> BodyMeasurement.get_column_names()
            ['id', 'created_at', 'updated_at', 'created_by', 'tenant_id', ...]
        """
        return [column.name for column in cls.__table__.columns]


class TenantScopedMixin:
    """
    Adds the owning tenant to a record.

    Every coaching record belongs to exactly one tenant; queries must always
    be narrowed with `for_tenant()` so data never crosses tenant boundaries.
    """

    @declared_attr
    def tenant_id(cls):
        return Column(
            Uuid(as_uuid=True),
            ForeignKey('tenants.id', ondelete='CASCADE'),
            nullable=False,
            index=True,
            comment="Owning tenant"
        )

    @classmethod
    def for_tenant(cls, tenant_id):
        query = cls.query.filter(cls.tenant_id == tenant_id)
        if issubclass(cls, SoftDeleteMixin):
            query = query.filter(cls.deleted_at.is_(None))
        return query

    @classmethod
    def get_for_tenant(cls, record_id, tenant_id):
        """Fetch a live record by id, or None when it belongs to another tenant."""
        return cls.for_tenant(tenant_id).filter(cls.id == record_id).first()


class SoftDeleteMixin:
    """Soft deletion through a nullable `deleted_at` timestamp."""

    deleted_at = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="Soft deletion timestamp (NULL = live record)"
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        self.deleted_at = utcnow()


def _serialize_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime('%H:%M')
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    return value
