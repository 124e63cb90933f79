"""Attendance session lifecycle service."""
import logging
from datetime import datetime
from typing import List, Optional

from flask import current_app

from campus_attendance import db
from campus_attendance.models.attendance_session import AttendanceSession, SessionStatus
from campus_attendance.models.campus_settings import CampusSettings
from campus_attendance.utils.errors import SessionNotFound
from campus_attendance.utils.helpers import utcnow
from campus_attendance.utils.validators import Validator, ValidationError

logger = logging.getLogger(__name__)


class SessionService:
    """Open, close and lazily expire attendance sessions.

    There is no timer behind expiry. Every reader that finds an ``active``
    session past its ``expires_at`` closes it on the spot.
    """

    @staticmethod
    def start_session(
        course: str,
        subject: str,
        batch: str,
        started_by: int,
        duration_minutes: int = None,
        gps_required: Optional[bool] = None,
        wifi_required: Optional[bool] = None,
        now: datetime = None
    ) -> AttendanceSession:
        """Create a new active session.

        Requirement flags left as None are copied from the campus settings.
        Other active sessions are left untouched.
        """
        fields = {'course': course, 'subject': subject, 'batch': batch}
        Validator.ensure(Validator.validate_required_fields(fields, list(fields)))
        for name, value in fields.items():
            if not isinstance(value, str):
                raise ValidationError(f"{name} must be a string")

        if duration_minutes is None:
            duration_minutes = current_app.config['DEFAULT_SESSION_DURATION_MINUTES']
        duration_minutes = Validator.parse_int(
            duration_minutes, 'duration_minutes',
            minimum=1, maximum=current_app.config['MAX_SESSION_DURATION_MINUTES']
        )

        settings = CampusSettings.get_current()
        if gps_required is None:
            gps_required = settings.gps_verification_enabled if settings else True
        if wifi_required is None:
            wifi_required = settings.wifi_verification_enabled if settings else True

        started_at = now or utcnow()
        session = AttendanceSession(
            course=course.strip(),
            subject=subject.strip(),
            batch=batch.strip(),
            duration_minutes=duration_minutes,
            gps_required=gps_required,
            wifi_required=wifi_required,
            status=SessionStatus.ACTIVE,
            started_by=started_by,
            started_at=started_at,
            expires_at=AttendanceSession.compute_expiry(started_at, duration_minutes)
        )
        session.save()

        logger.info(
            "Session %s started by user %s (%s/%s/%s, %s min, gps=%s wifi=%s)",
            session.id, started_by, session.course, session.subject, session.batch,
            duration_minutes, gps_required, wifi_required
        )
        return session

    @staticmethod
    def get_session(session_id) -> AttendanceSession:
        """Fetch a session or raise SessionNotFound."""
        try:
            session_id = Validator.parse_int(session_id, 'session_id')
        except ValidationError:
            raise SessionNotFound()

        session = AttendanceSession.get_by_id(session_id) if session_id is not None else None
        if session is None:
            raise SessionNotFound()
        return session

    @staticmethod
    def close_session(session: AttendanceSession, now: datetime = None) -> AttendanceSession:
        """Move an active session to closed. Closed sessions are left as they are."""
        if not session.is_active:
            return session

        session.status = SessionStatus.CLOSED
        session.closed_at = now or utcnow()
        db.session.commit()

        logger.info("Session %s closed at %s", session.id, session.closed_at.isoformat())
        return session

    @staticmethod
    def expire_if_due(session: AttendanceSession, now: datetime = None) -> bool:
        """Close the session if it is still flagged active but past its window.

        Returns True when this call performed the transition.
        """
        now = now or utcnow()
        if session.is_active and session.is_expired(now):
            SessionService.close_session(session, now)
            return True
        return False

    @staticmethod
    def list_sessions(now: datetime = None) -> List[AttendanceSession]:
        """All sessions newest first, with overdue ones closed."""
        now = now or utcnow()
        sessions = AttendanceSession.query.order_by(
            AttendanceSession.started_at.desc(), AttendanceSession.id.desc()
        ).all()
        for session in sessions:
            SessionService.expire_if_due(session, now)
        return sessions

    @staticmethod
    def get_current_session(now: datetime = None) -> Optional[AttendanceSession]:
        """Most recently started session that still accepts claims."""
        now = now or utcnow()
        active = AttendanceSession.query.filter_by(status=SessionStatus.ACTIVE).order_by(
            AttendanceSession.started_at.desc(), AttendanceSession.id.desc()
        ).all()

        current = None
        for session in active:
            if SessionService.expire_if_due(session, now):
                continue
            if current is None:
                current = session
        return current

    @staticmethod
    def close_expired_sessions(now: datetime = None) -> int:
        """Close every overdue active session; returns how many were closed."""
        now = now or utcnow()
        overdue = AttendanceSession.query.filter(
            AttendanceSession.status == SessionStatus.ACTIVE,
            AttendanceSession.expires_at < now
        ).all()
        for session in overdue:
            SessionService.close_session(session, now)
        return len(overdue)
