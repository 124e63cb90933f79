"""Campus Attendance Service - Application Factory."""
import logging
import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

__version__ = '1.0.0'

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


def create_app(config_name: str = None) -> Flask:
    """Application factory pattern."""
    app = Flask(__name__)

    # Load configuration
    from config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    check_required_settings(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Configure CORS
    CORS(app, origins=app.config.get('CORS_ORIGINS', ["*"]))

    # Setup logging
    setup_logging(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Setup database
    setup_database(app)

    # Add CLI commands
    register_commands(app)

    # Add health check
    @app.route('/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'service': 'Campus Attendance Service',
            'version': __version__
        })

    return app


def check_required_settings(app: Flask) -> None:
    """Fail fast when an environment leaves a mandatory setting empty."""
    missing = [
        key for key in app.config.get('REQUIRED_SETTINGS', ())
        if not app.config.get(key)
    ]
    if missing:
        raise RuntimeError(
            f"Service not configured: missing {', '.join(missing)}"
        )


def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    from campus_attendance.api.auth import auth_bp
    from campus_attendance.api.students import students_bp
    from campus_attendance.api.campus import campus_bp
    from campus_attendance.api.sessions import sessions_bp
    from campus_attendance.api.attendance import attendance_bp
    from campus_attendance.api.faces import faces_bp

    # Auth
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    # Admin Management
    app.register_blueprint(students_bp, url_prefix='/api/admin/students')
    app.register_blueprint(campus_bp, url_prefix='/api/campus')

    # Core Features
    app.register_blueprint(sessions_bp, url_prefix='/api/sessions')
    app.register_blueprint(attendance_bp, url_prefix='/api/attendance')
    app.register_blueprint(faces_bp, url_prefix='/api/faces')

    # Swagger UI
    from campus_attendance.utils.swagger import generate_swagger_spec

    @app.route('/api/swagger.json')
    def swagger_spec():
        """Serve Swagger/OpenAPI specification."""
        return jsonify(generate_swagger_spec())

    try:
        from campus_attendance.utils.swagger import get_swagger_blueprint, SWAGGER_URL
        app.register_blueprint(get_swagger_blueprint(), url_prefix=SWAGGER_URL)
    except ImportError:
        app.logger.warning("Flask-Swagger-UI not installed")


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from werkzeug.exceptions import HTTPException
    from campus_attendance.utils.errors import AttendanceError
    from campus_attendance.utils.helpers import handle_error, error_response

    @app.errorhandler(AttendanceError)
    def handle_attendance_error(error):
        db.session.rollback()
        return error_response(
            error.message,
            error.status_code,
            code=error.code,
            **error.extra
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return handle_error(e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        app.logger.exception('Unhandled error: %s', e)
        return error_response('Internal server error', 500, code='INTERNAL_ERROR')

    # JWT error handlers
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return error_response('Token has expired', 401, code='UNAUTHORIZED')

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return error_response('Invalid token', 401, code='UNAUTHORIZED')

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return error_response('Authorization token required', 401, code='UNAUTHORIZED')


def setup_logging(app: Flask) -> None:
    """Setup application logging."""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)

    if not app.debug and not app.testing:
        log_file = app.config.get('LOG_FILE', 'logs/app.log')
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(level)
        app.logger.addHandler(file_handler)
        logging.getLogger('campus_attendance').addHandler(file_handler)

    app.logger.setLevel(level)
    logging.getLogger('campus_attendance').setLevel(level)

    if not app.testing:
        app.logger.info('Campus Attendance Service startup')


def setup_database(app: Flask) -> None:
    """Setup database connections."""
    with app.app_context():
        # Import all models
        from campus_attendance.models import (  # noqa: F401
            User, UserRole, Student,
            CampusSettings, AttendanceSession, SessionStatus,
            SmartAttendanceRecord, VerificationType,
            AttendanceLedgerEntry, AttendanceStatus, StudentFace
        )


def register_commands(app: Flask) -> None:
    """Register CLI commands."""
    import click

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables')
    def init_db(drop):
        """Initialize the database."""
        from campus_attendance.models.campus_settings import CampusSettings
        from campus_attendance.models.user import User, UserRole

        if drop:
            db.drop_all()
            click.echo('Dropped all tables.')

        db.create_all()
        click.echo('Created all tables.')

        CampusSettings.get_or_create()
        click.echo('Campus settings ready.')

        email = app.config['ADMIN_EMAIL']
        if not User.query.filter_by(email=email).first():
            admin = User(email=email, name='Administrator', role=UserRole.ADMIN)
            admin.set_password(app.config['ADMIN_PASSWORD'])
            admin.save()
            click.echo(f'Created admin user: {email}')

    @app.cli.command('create-admin')
    def create_admin():
        """Create admin user."""
        from campus_attendance.models.user import User, UserRole

        email = click.prompt('Admin email')
        name = click.prompt('Admin name')
        password = click.prompt('Password', hide_input=True)

        admin = User(
            email=email.lower().strip(),
            name=name,
            role=UserRole.ADMIN
        )
        admin.set_password(password)

        try:
            db.session.add(admin)
            db.session.commit()
            click.echo(f'Admin user created: {email}')
        except Exception as e:
            db.session.rollback()
            click.echo(f'Error creating admin: {str(e)}')

    @app.cli.command('close-expired-sessions')
    def close_expired_sessions():
        """Close every active session whose window has passed."""
        from campus_attendance.services.session_service import SessionService

        closed = SessionService.close_expired_sessions()
        click.echo(f'Closed {closed} expired session(s).')
