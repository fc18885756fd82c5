"""
StaffService - trainers managed by a tenant admin.
"""

import logging
from typing import Dict, List, Optional, Tuple

from fitcoach.extensions import db
from fitcoach.models.user import User, ROLE_TRAINER, STAFF_ROLES
from fitcoach.services.audit_service import AuditService

logger = logging.getLogger(__name__)


class StaffService:

    @staticmethod
    def list_staff(tenant_id) -> List[User]:
        """Admins and trainers of a tenant, active first, then by name."""
        return (
            User.query.filter(User.tenant_id == tenant_id, User.role.in_(STAFF_ROLES))
            .order_by(User.is_active.desc(), User.full_name.asc())
            .all()
        )

    @staticmethod
    def create_trainer(data: Dict, actor: User) -> Tuple[Optional[User], Optional[str]]:
        """
        Create a trainer with a temporary password.

        The trainer must change it on first login (`must_change_password`).
        """
        try:
            if User.find_by_email(data['email']):
                return None, 'Email already registered'

            trainer = User(
                full_name=data['full_name'],
                email=data['email'],
                role=ROLE_TRAINER,
                tenant_id=actor.tenant_id,
                is_active=True,
                must_change_password=True,
                created_by=actor.id,
            )
            trainer.set_password(data['temporary_password'])
            db.session.add(trainer)
            db.session.flush()

            AuditService.record(actor, 'staff.create', f"user:{trainer.id}", {'email': trainer.email})
            db.session.commit()

            logger.info(f"Trainer created: {trainer.id} in tenant {actor.tenant_id}")
            return trainer, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating trainer: {str(e)}", exc_info=True)
            return None, f'Failed to create trainer: {str(e)}'

    @staticmethod
    def set_active(user_id, is_active: bool, actor: User) -> Tuple[Optional[User], Optional[str]]:
        """Deactivate or reactivate a staff member of the actor's tenant."""
        try:
            member = User.query.filter(
                User.id == user_id,
                User.tenant_id == actor.tenant_id,
                User.role.in_(STAFF_ROLES),
            ).first()
            if not member:
                return None, 'Staff member not found'

            if member.id == actor.id:
                return None, 'You cannot change your own status'

            if member.is_owner and not is_active:
                return None, 'The account owner cannot be deactivated'

            member.is_active = is_active
            action = 'staff.reactivate' if is_active else 'staff.deactivate'
            AuditService.record(actor, action, f"user:{member.id}")
            db.session.commit()

            logger.info(f"Staff {member.id} is_active={is_active} by {actor.id}")
            return member, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating staff status: {str(e)}", exc_info=True)
            return None, f'Failed to update staff status: {str(e)}'
