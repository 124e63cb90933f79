"""Shared fixtures for the Campus Attendance test suite."""
import pytest
from flask_jwt_extended import create_access_token

from campus_attendance import create_app, db
from campus_attendance.models.campus_settings import CampusSettings
from campus_attendance.models.student import Student
from campus_attendance.models.user import User, UserRole
from campus_attendance.services.session_service import SessionService

CAMPUS_LAT = 12.9000
CAMPUS_LON = 77.6000
CAMPUS_IP = '203.0.113.10'
OFF_CAMPUS_IP = '198.51.100.7'


@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


def make_user(email, role=UserRole.STUDENT, password='password123', name='Test User'):
    user = User(email=email, name=name, role=role)
    user.set_password(password)
    return user.save()


def make_student(email, name='Test Student', student_code=None, roll_no=None, class_name=None):
    user = make_user(email, UserRole.STUDENT, name=name)
    student = Student(
        user_id=user.id,
        name=name,
        student_code=student_code,
        roll_no=roll_no,
        class_name=class_name,
        email=email
    )
    return student.save()


def auth_headers(user, **extra):
    headers = {'Authorization': f'Bearer {create_access_token(identity=str(user.id))}'}
    headers.update(extra)
    return headers


@pytest.fixture
def admin_user(app):
    return make_user('admin@campus.edu', UserRole.ADMIN, name='Administrator')


@pytest.fixture
def student(app):
    return make_student('asha@campus.edu', name='Asha Rao', student_code='CS-001',
                        roll_no='1', class_name='CSE-A')


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def student_headers(student):
    return auth_headers(student.user)


@pytest.fixture
def campus(app):
    """Campus at (12.9, 77.6) with a 200 m radius and a known public IP."""
    settings = CampusSettings(
        campus_name='Main Campus',
        latitude=CAMPUS_LAT,
        longitude=CAMPUS_LON,
        allowed_radius_meters=200,
        campus_ip=CAMPUS_IP,
        campus_ip_range='203.0.113.',
        gps_verification_enabled=True,
        wifi_verification_enabled=True
    )
    return settings.save()


@pytest.fixture
def open_session(app, admin_user):
    """Factory starting sessions as the admin user."""
    def _open(**kwargs):
        kwargs.setdefault('course', 'B.Tech')
        kwargs.setdefault('subject', 'Data Structures')
        kwargs.setdefault('batch', '2024')
        return SessionService.start_session(started_by=admin_user.id, **kwargs)
    return _open
