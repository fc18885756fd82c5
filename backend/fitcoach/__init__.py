"""
Flask Application Factory for the FitCoach backend.

FitCoach is a multi-tenant platform for gyms and personal trainers: student
roster and invitations, workout routines and session logs, physical
assessments, agenda and bookings, chat, notifications and a super-admin
back office.

The create_app() function initializes the Flask application with:
- Configuration loading
- Database and migration setup
- JWT authentication (envelope responses for token errors)
- CORS configuration
- Redis (token blocklist)
- Blueprint registration for all API routes
- Error handlers
- Logging configuration
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from flask import Flask, jsonify
from flask.logging import default_handler
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from fitcoach.config import config
from fitcoach.extensions import db, migrate, jwt, cors, redis_manager
from fitcoach.utils.responses import error_response, bad_request, unauthorized, internal_error


def create_app(config_name=None):
    """
    Application factory function to create and configure Flask app instance.

    Args:
        config_name: Configuration name ('development', 'production', 'testing')
                    If None, uses FLASK_ENV environment variable or defaults to 'development'

    Returns:
        Flask: Configured Flask application instance

    Example:
        app = create_app('testing')
    """
    app = Flask(__name__)

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    config_class = config.get(config_name, config['default'])
    app.config.from_object(config_class)
    config_class.init_app(app)

    # Logging first so extension setup messages reach the handlers
    configure_logging(app)

    initialize_extensions(app)
    register_blueprints(app)
    register_error_handlers(app)
    register_shell_context(app)

    app.logger.info(f"Flask app created with config: {config_name}")
    app.logger.info(f"Debug mode: {app.config.get('DEBUG')}")
    app.logger.info(f"Database URI: {app.config.get('SQLALCHEMY_DATABASE_URI', 'Not configured')[:50]}...")

    return app


def initialize_extensions(app):
    """
    Initialize Flask extensions with the app instance.

    Extensions initialized:
        - SQLAlchemy (db): Database ORM
        - Flask-Migrate (migrate): Database migrations
        - Flask-JWT-Extended (jwt): JWT authentication
        - Flask-CORS (cors): Cross-Origin Resource Sharing
        - RedisManager: token blocklist storage (optional)
    """
    db.init_app(app)

    # Model classes must be registered before migrations/create_all
    from fitcoach import models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    cors.init_app(
        app,
        origins=app.config.get('CORS_ORIGINS', ['http://localhost:3000']),
        supports_credentials=app.config.get('CORS_ALLOW_CREDENTIALS', True),
        max_age=app.config.get('CORS_MAX_AGE', 3600),
        allow_headers=['Content-Type', 'Authorization'],
        methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
    )

    redis_manager.init_app(app)

    configure_jwt(app)

    app.logger.info("Extensions initialized: db, migrate, jwt, cors, redis")


def configure_jwt(app):
    """
    Configure JWT callbacks so token problems answer with the standard
    error envelope (401).
    """
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return unauthorized('The token has expired. Please log in again.')

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return unauthorized('Signature verification failed or token is malformed.', error)

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return unauthorized('Request does not contain a valid access token.', error)

    @jwt.revoked_token_loader
    def revoked_token_callback(jwt_header, jwt_payload):
        return unauthorized('The token has been revoked.')

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        """Called by Flask-JWT-Extended for every protected request."""
        from fitcoach.services.auth_service import AuthService
        jti = jwt_payload.get('jti')
        if jti:
            return AuthService.is_token_blacklisted(jti)
        return False


def register_blueprints(app):
    """
    Register Flask blueprints for API routes.

    Blueprints registered:
        - auth, students, staff, workouts, assessments, schedule, chat,
          notifications, message_config, billing, admin, me
    """
    from fitcoach.routes import (
        auth_bp, students_bp, staff_bp, workouts_bp, assessments_bp, schedule_bp,
        chat_bp, notifications_bp, message_config_bp, billing_bp, admin_bp, me_bp,
    )

    for blueprint in (
        auth_bp, students_bp, staff_bp, workouts_bp, assessments_bp, schedule_bp,
        chat_bp, notifications_bp, message_config_bp, billing_bp, admin_bp, me_bp,
    ):
        app.register_blueprint(blueprint)
        app.logger.debug(f"Registered blueprint: {blueprint.name} ({blueprint.url_prefix})")

    @app.route('/health')
    def health_check():
        """Health check endpoint for monitoring."""
        return jsonify({
            'status': 'healthy',
            'service': 'FitCoach Backend',
            'version': '1.0.0',
            'redis': 'enabled' if redis_manager.is_enabled() else 'disabled',
        }), 200

    @app.route('/')
    def index():
        """Root endpoint with API information."""
        return jsonify({
            'service': 'FitCoach Backend',
            'version': '1.0.0',
            'status': 'running',
            'endpoints': {
                'health': '/health',
                'auth': '/api/auth',
                'students': '/api/students',
                'staff': '/api/staff',
                'workouts': '/api/workouts',
                'assessments': '/api/assessments',
                'schedule': '/api/schedule',
                'chat': '/api/chat',
                'notifications': '/api/notifications',
                'message_config': '/api/message-config',
                'billing': '/api/billing',
                'admin': '/api/admin',
                'me': '/api/me',
            }
        }), 200


def register_error_handlers(app):
    """
    Register global error handlers answering with the standard envelope.

    Error handlers registered:
        - marshmallow ValidationError: 400 with field details
        - 400, 401, 403, 404, 405, 500
        - Other HTTP errors: their own status
        - Exception: Catch-all for unhandled exceptions (500, session rolled back)
    """
    @app.errorhandler(ValidationError)
    def validation_error(error):
        return bad_request('Validation failed', error.messages)

    @app.errorhandler(400)
    def bad_request_error(error):
        return bad_request(str(error.description) if hasattr(error, 'description') else 'Bad request')

    @app.errorhandler(401)
    def unauthorized_error(error):
        return unauthorized()

    @app.errorhandler(403)
    def forbidden_error(error):
        return error_response('FORBIDDEN', 'You do not have permission to access this resource', status_code=403)

    @app.errorhandler(404)
    def not_found_error(error):
        return error_response('NOT_FOUND', 'The requested resource was not found', status_code=404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response('METHOD_NOT_ALLOWED', 'The method is not allowed for this resource', status_code=405)

    @app.errorhandler(500)
    def internal_server_error(error):
        app.logger.error(f"Internal Server Error: {error}")
        return internal_error('An internal server error occurred')

    @app.errorhandler(HTTPException)
    def http_error(error):
        code = (error.name or 'error').upper().replace(' ', '_')
        return error_response(code, error.description or error.name, status_code=error.code)

    @app.errorhandler(Exception)
    def handle_exception(error):
        app.logger.error(f"Unhandled exception: {error}", exc_info=True)
        db.session.rollback()
        return internal_error('An unexpected error occurred')


def configure_logging(app):
    """
    Configure application logging.

    Handlers are attached to the application logger (named after the
    package), so every `logging.getLogger(__name__)` module logger of the
    package propagates to them.

    Configuration:
        - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - LOG_FORMAT: Log message format
        - LOG_FILE: Path to log file
        - LOG_MAX_BYTES: Maximum log file size before rotation
        - LOG_BACKUP_COUNT: Number of backup log files to keep
    """
    app.logger.removeHandler(default_handler)
    for handler in list(app.logger.handlers):
        app.logger.removeHandler(handler)

    log_level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO').upper())
    app.logger.setLevel(log_level)

    formatter = logging.Formatter(
        app.config.get('LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    app.logger.addHandler(console_handler)

    log_file = app.config.get('LOG_FILE')
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=app.config.get('LOG_MAX_BYTES', 10485760),  # 10MB
            backupCount=app.config.get('LOG_BACKUP_COUNT', 5)
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        app.logger.addHandler(file_handler)

    app.logger.info(f"Logging configured: level={log_level}, file={log_file}")


def register_shell_context(app):
    """
    Make common objects available in `flask shell` without imports.
    """
    @app.shell_context_processor
    def make_shell_context():
        from fitcoach.models import Tenant, User, Student, WorkoutRoutine, ScheduleSlot, PhysicalAssessment

        return {
            'db': db,
            'Tenant': Tenant,
            'User': User,
            'Student': Student,
            'WorkoutRoutine': WorkoutRoutine,
            'ScheduleSlot': ScheduleSlot,
            'PhysicalAssessment': PhysicalAssessment,
        }
