"""Smart Attendance API."""
from datetime import date

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from campus_attendance.models.attendance import AttendanceLedgerEntry, AttendanceStatus
from campus_attendance.models.campus_settings import CampusSettings
from campus_attendance.models.student import Student
from campus_attendance.services.attendance_service import AttendanceService
from campus_attendance.services.network_service import NetworkService
from campus_attendance.services.session_service import SessionService
from campus_attendance.services.verification_service import VerificationService
from campus_attendance.utils.decorators import admin_required, student_required, get_current_user
from campus_attendance.utils.errors import SessionClosedOrExpired, StudentNotFound
from campus_attendance.utils.helpers import success_response, utcnow
from campus_attendance.utils.validators import Validator, ValidationError

attendance_bp = Blueprint('attendance', __name__)


def _parse_date(value, field):
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"{field} must be a date (YYYY-MM-DD)")


@attendance_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Attendance service is running')


@attendance_bp.route('/smart', methods=['POST'])
@jwt_required()
@student_required
def mark_smart_attendance():
    """Mark attendance for the active session after GPS/WiFi verification.

    Expected JSON:
    {
        "session_id": 12,
        "latitude": 12.9001,
        "longitude": 77.6001,
        "device_info": "optional"
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be JSON")

    if data.get('session_id') in (None, ''):
        raise ValidationError("Session ID is required")

    latitude = data.get('latitude')
    longitude = data.get('longitude')
    Validator.ensure(Validator.validate_coordinates(latitude, longitude))

    now = utcnow()
    session = SessionService.get_session(data['session_id'])
    SessionService.expire_if_due(session, now)
    if not session.accepts_claims(now):
        raise SessionClosedOrExpired()

    user = get_current_user()
    student = Student.get_by_user_id(user.id)
    if student is None:
        raise StudentNotFound()

    existing = AttendanceService.find_session_record(session.id, student.id)
    if existing:
        return success_response(
            message='Attendance already marked for this session',
            success=True,
            already_marked=True,
            verification_type=existing.verification_type.value
        )

    client_ip = NetworkService.resolve_client_ip(request.headers)
    verification = VerificationService.evaluate(
        session, latitude, longitude, client_ip, CampusSettings.get_current(), now
    )

    device_info = data.get('device_info')
    if not isinstance(device_info, str) or not device_info.strip():
        device_info = request.headers.get('User-Agent') or 'unknown'

    outcome = AttendanceService.record_smart_attendance(
        session, student, user.id, verification,
        latitude=latitude,
        longitude=longitude,
        device_info=device_info,
        now=now
    )

    return success_response(
        message='Attendance already marked for this session' if outcome.already_marked
        else 'Attendance marked successfully',
        success=True,
        already_marked=outcome.already_marked,
        verification_type=outcome.record.verification_type.value,
        marked_at=outcome.record.marked_at.isoformat()
    )


@attendance_bp.route('/my-records', methods=['GET'])
@jwt_required()
@student_required
def my_records():
    """Daily attendance history for the calling student."""
    student = Student.get_by_user_id(get_current_user().id)
    if student is None:
        raise StudentNotFound()

    query = AttendanceLedgerEntry.query.filter_by(student_id=student.id)

    from_date = _parse_date(request.args.get('from_date'), 'from_date')
    to_date = _parse_date(request.args.get('to_date'), 'to_date')
    if from_date:
        query = query.filter(AttendanceLedgerEntry.date >= from_date)
    if to_date:
        query = query.filter(AttendanceLedgerEntry.date <= to_date)

    entries = query.order_by(AttendanceLedgerEntry.date.desc()).all()
    return success_response(data={
        'records': [entry.to_dict() for entry in entries],
        'total': len(entries),
        'present_days': sum(1 for entry in entries if entry.status == AttendanceStatus.PRESENT)
    })


@attendance_bp.route('/', methods=['GET'])
@jwt_required()
@admin_required
def list_attendance():
    """Ledger for one day (today by default), optionally for one class."""
    day = _parse_date(request.args.get('date'), 'date') or utcnow().date()
    class_name = request.args.get('class')

    query = AttendanceLedgerEntry.query.join(
        Student, AttendanceLedgerEntry.student_id == Student.id
    ).filter(AttendanceLedgerEntry.date == day)
    if class_name:
        query = query.filter(Student.class_name == class_name)

    entries = query.order_by(AttendanceLedgerEntry.time, AttendanceLedgerEntry.id).all()
    return success_response(data={
        'date': day.isoformat(),
        'records': [entry.to_dict(include_student=True) for entry in entries],
        'total': len(entries)
    })
