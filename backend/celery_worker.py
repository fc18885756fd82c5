#!/usr/bin/env python
"""
Celery Worker Entry Point

Binds the full Flask application to the Celery tasks so they run inside an
application context.

Usage:
    celery -A celery_worker.celery worker -Q notifications,maintenance --loglevel=info
    celery -A celery_worker.celery beat --loglevel=info
"""

import os

from dotenv import load_dotenv

load_dotenv()

from fitcoach import create_app  # noqa: E402
from fitcoach.celery_app import celery_app, bind_flask_app  # noqa: E402

flask_app = create_app(os.environ.get('FLASK_ENV', 'development'))
bind_flask_app(flask_app)

# Import tasks to register them with the worker
import fitcoach.tasks  # noqa: E402,F401

celery = celery_app
celery.conf.update(
    broker_url=flask_app.config.get('CELERY_BROKER_URL') or celery.conf.broker_url,
    result_backend=flask_app.config.get('CELERY_RESULT_BACKEND') or celery.conf.result_backend,
)

if __name__ == '__main__':
    celery.start()
