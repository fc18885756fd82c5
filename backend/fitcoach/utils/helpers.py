"""
Small request helpers shared by the blueprints.
"""

import uuid
from datetime import date
from typing import Optional, Tuple
from flask import request, current_app, g


def parse_uuid(value) -> Optional[uuid.UUID]:
    """Return a UUID for a string/UUID value, or None when it is not a valid UUID."""
    if value is None or value == '':
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO date (YYYY-MM-DD) query parameter, None when absent or invalid."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def get_pagination() -> Tuple[int, int]:
    """Read ?page= and ?per_page= with config defaults and upper bound."""
    default_size = current_app.config.get('DEFAULT_PAGE_SIZE', 50)
    max_size = current_app.config.get('MAX_PAGE_SIZE', 200)

    page = request.args.get('page', 1, type=int) or 1
    per_page = request.args.get('per_page', default_size, type=int) or default_size

    return max(page, 1), min(max(per_page, 1), max_size)


def get_client_ip() -> Optional[str]:
    forwarded = request.headers.get('X-Forwarded-For')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr


def get_current_user():
    """Load the authenticated user (set on g by @jwt_required_custom)."""
    from fitcoach.extensions import db
    from fitcoach.models.user import User

    user_id = getattr(g, 'user_id', None)
    if user_id is None:
        return None
    return db.session.get(User, user_id)
