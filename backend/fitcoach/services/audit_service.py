"""
AuditService - append-only audit trail.

Audit entries are added to the caller's session and committed together with
the audited change, so a rolled-back change leaves no audit row behind.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app, has_request_context

from fitcoach.extensions import db
from fitcoach.models.audit_log import AuditLog
from fitcoach.models.user import User
from fitcoach.utils.helpers import get_client_ip

logger = logging.getLogger(__name__)


class AuditService:
    """Record and query audit log entries."""

    @staticmethod
    def record(
        actor: Optional[User],
        action: str,
        target_resource: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        tenant_id=None,
    ) -> Optional[AuditLog]:
        """
        Stage an audit entry in the current session (no commit).

        Args:
            actor: User performing the action (None for system actions)
            action: Dotted action name, e.g. 'student.update'
            target_resource: "<type>:<id>" of the affected record
            details: JSON-serializable context (changed fields, old/new values)
            tenant_id: Tenant concerned (defaults to the actor's tenant)
        """
        if not current_app.config.get('ENABLE_AUDIT_LOGGING', True):
            return None

        entry = AuditLog(
            actor_id=actor.id if actor else None,
            actor_email=actor.email if actor else None,
            tenant_id=tenant_id if tenant_id is not None else (actor.tenant_id if actor else None),
            action=action,
            target_resource=target_resource,
            details=details,
            ip_address=get_client_ip() if has_request_context() else None,
        )
        db.session.add(entry)
        logger.info(f"Audit: {action} on {target_resource} by {actor.email if actor else 'system'}")
        return entry

    @staticmethod
    def list_logs(limit: int = 100, action: Optional[str] = None, offset: int = 0) -> Tuple[Optional[List[AuditLog]], Optional[str]]:
        """Latest entries first, optionally filtered by exact action name."""
        try:
            query = AuditLog.query
            if action:
                query = query.filter(AuditLog.action == action)
            logs = query.order_by(AuditLog.created_at.desc()).offset(offset).limit(limit).all()
            return logs, None
        except Exception as e:
            logger.error(f"Error listing audit logs: {str(e)}", exc_info=True)
            return None, f'Failed to list audit logs: {str(e)}'
