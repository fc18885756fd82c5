"""
Shared extension objects for FitCoach.

Bound to the application in `create_app`; services and tasks import them
from here.
"""

import logging
from typing import Optional

import redis
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger(__name__)

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
cors = CORS()

BLOCKLIST_PREFIX = 'token_blacklist'


def blocklist_key(jti: str) -> str:
    """Redis key under which a revoked token id is stored."""
    return f"{BLOCKLIST_PREFIX}:{jti}"


class RedisManager:
    """
    Optional Redis connection holding the JWT blocklist.

    Without REDIS_URL, or when the server does not answer at startup, the API
    keeps working and revoked tokens live in process memory instead.
    """

    def __init__(self):
        self.client: Optional[redis.Redis] = None
        self.enabled = False

    def init_app(self, app):
        self.client = None
        self.enabled = False

        url = app.config.get('REDIS_URL')
        if not url:
            logger.info("REDIS_URL not set; token blocklist kept in memory")
            return

        client = redis.from_url(
            url,
            max_connections=int(app.config.get('REDIS_MAX_CONNECTIONS', 20)),
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        try:
            client.ping()
        except redis.RedisError as e:
            logger.warning(f"Redis unreachable at {url} ({e}); token blocklist kept in memory")
            return

        self.client = client
        self.enabled = True
        logger.info(f"Token blocklist stored in Redis at {url}")

    def get_client(self) -> Optional[redis.Redis]:
        """Connected client, or None when running without Redis."""
        return self.client if self.enabled else None

    def is_enabled(self) -> bool:
        """True when Redis was connected at startup and still answers a ping."""
        client = self.get_client()
        if client is None:
            return False
        try:
            return bool(client.ping())
        except redis.RedisError:
            return False


redis_manager = RedisManager()
