"""
Flask Application Entry Point

This script serves as the main entry point for running the Flask application.
It creates an app instance using the application factory pattern and runs
the development server.

Usage:
    Development: python run.py
    Production: gunicorn -w 4 -b 0.0.0.0:4999 "run:app"
    Flask CLI: flask --app run db migrate
"""

import os
import sys
import logging

from dotenv import load_dotenv

load_dotenv()

from fitcoach import create_app  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

config_name = os.environ.get("FLASK_ENV", "development")
app = create_app(config_name)

if __name__ == '__main__':
    port = int(os.environ.get('FLASK_PORT', 4999))
    debug = app.config.get('DEBUG', True)

    app.run(
        host='0.0.0.0',
        port=port,
        debug=debug
    )
