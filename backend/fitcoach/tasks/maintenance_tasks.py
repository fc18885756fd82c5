"""
System maintenance Celery tasks.

Health check of the components the API depends on (database and Redis).
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Any

from sqlalchemy import text

from fitcoach.celery_app import celery_app
from fitcoach.extensions import db, redis_manager

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name='fitcoach.tasks.maintenance_tasks.health_check')
def health_check(self) -> Dict[str, Any]:
    """
    Perform system health check.

    This task runs every 5 minutes to verify all components are operational.
    Redis is optional: when it is not configured it is reported as a warning.

    Returns:
        Dictionary with health status of all components
    """
    health_status = {
        'task_id': self.request.id,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'components': {}
    }

    # Check database
    try:
        db.session.execute(text('SELECT 1'))
        health_status['components']['database'] = {
            'status': 'healthy',
            'message': 'Database connection successful'
        }
    except Exception as e:
        db.session.rollback()
        health_status['components']['database'] = {
            'status': 'unhealthy',
            'error': str(e)
        }

    # Check Redis
    redis_client = redis_manager.get_client()
    if redis_client is None:
        health_status['components']['redis'] = {
            'status': 'warning',
            'message': 'Redis not configured'
        }
    else:
        try:
            redis_client.ping()
            health_status['components']['redis'] = {
                'status': 'healthy',
                'message': 'Redis connection successful'
            }
        except Exception as e:
            health_status['components']['redis'] = {
                'status': 'unhealthy',
                'error': str(e)
            }

    unhealthy_components = [
        name for name, status in health_status['components'].items()
        if status.get('status') == 'unhealthy'
    ]

    health_status['overall'] = {
        'status': 'unhealthy' if unhealthy_components else 'healthy',
        'unhealthy_components': unhealthy_components
    }

    logger.info(f"Health check completed: {health_status['overall']}")
    return health_status
