"""Attendance Session API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from campus_attendance.models.smart_attendance import SmartAttendanceRecord
from campus_attendance.models.student import Student
from campus_attendance.services.attendance_service import AttendanceService
from campus_attendance.services.session_service import SessionService
from campus_attendance.utils.decorators import admin_required, get_current_user
from campus_attendance.utils.helpers import success_response, error_response, utcnow
from campus_attendance.utils.validators import Validator, ValidationError

sessions_bp = Blueprint('sessions', __name__)


@sessions_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Sessions service is running')


@sessions_bp.route('/', methods=['POST'])
@jwt_required()
@admin_required
def start_session():
    """Open a new attendance session."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be JSON")

    session = SessionService.start_session(
        course=data.get('course'),
        subject=data.get('subject'),
        batch=data.get('batch'),
        started_by=get_current_user().id,
        duration_minutes=data.get('duration_minutes'),
        gps_required=Validator.parse_bool(data.get('gps_required'), 'gps_required'),
        wifi_required=Validator.parse_bool(data.get('wifi_required'), 'wifi_required')
    )
    return success_response(data=session.to_dict(), message='Attendance session started'), 201


@sessions_bp.route('/', methods=['GET'])
@jwt_required()
@admin_required
def list_sessions():
    """All sessions, newest first."""
    now = utcnow()
    sessions = SessionService.list_sessions(now)
    return success_response(data={
        'sessions': [session.to_dict(now) for session in sessions],
        'total': len(sessions)
    })


@sessions_bp.route('/current', methods=['GET'])
@jwt_required()
def current_session():
    """The session students should submit against right now, if any."""
    user = get_current_user()
    if not user:
        return error_response("User not found", 401, code='UNAUTHORIZED')

    now = utcnow()
    session = SessionService.get_current_session(now)
    if session is None:
        return success_response(data={'session': None}, message='No active session')

    data = {'session': session.to_dict(now)}
    if user.is_student():
        student = Student.get_by_user_id(user.id)
        data['already_marked'] = bool(
            student and AttendanceService.find_session_record(session.id, student.id)
        )
    return success_response(data=data)


@sessions_bp.route('/<int:session_id>', methods=['GET'])
@jwt_required()
@admin_required
def get_session(session_id):
    now = utcnow()
    session = SessionService.get_session(session_id)
    SessionService.expire_if_due(session, now)
    return success_response(data=session.to_dict(now))


@sessions_bp.route('/<int:session_id>/close', methods=['POST'])
@jwt_required()
@admin_required
def close_session(session_id):
    """End a session before its window runs out."""
    now = utcnow()
    session = SessionService.close_session(SessionService.get_session(session_id), now)
    return success_response(data=session.to_dict(now), message='Attendance session closed')


@sessions_bp.route('/<int:session_id>/records', methods=['GET'])
@jwt_required()
@admin_required
def session_records(session_id):
    """Who has marked so far, newest first."""
    session = SessionService.get_session(session_id)
    records = session.records.order_by(
        SmartAttendanceRecord.marked_at.desc(), SmartAttendanceRecord.id.desc()
    ).all()
    return success_response(data={
        'session_id': session.id,
        'records': [record.to_dict(include_student=True) for record in records],
        'total': len(records)
    })
