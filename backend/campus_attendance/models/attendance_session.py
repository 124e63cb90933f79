"""Time-boxed attendance session opened by staff."""
import enum
from datetime import datetime, timedelta

from campus_attendance import db
from campus_attendance.models.base import BaseModel
from campus_attendance.utils.helpers import utcnow


class SessionStatus(enum.Enum):
    """Session status enumeration."""
    ACTIVE = 'active'
    CLOSED = 'closed'


class AttendanceSession(BaseModel):
    """Roll-call window students can submit smart attendance against."""

    __tablename__ = 'attendance_sessions'

    course = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    batch = db.Column(db.String(255), nullable=False)
    duration_minutes = db.Column(db.Integer, nullable=False, default=10)

    # Copied from campus settings at creation time
    gps_required = db.Column(db.Boolean, nullable=False, default=True)
    wifi_required = db.Column(db.Boolean, nullable=False, default=True)

    status = db.Column(db.Enum(SessionStatus), nullable=False, default=SessionStatus.ACTIVE)
    started_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    started_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)
    closed_at = db.Column(db.DateTime, nullable=True)

    # Relationships
    records = db.relationship('SmartAttendanceRecord', back_populates='session',
                              lazy='dynamic', cascade='all, delete')

    @staticmethod
    def compute_expiry(started_at: datetime, duration_minutes: int) -> datetime:
        return started_at + timedelta(minutes=duration_minutes)

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def is_expired(self, now: datetime = None) -> bool:
        """Check if the session window has passed."""
        return (now or utcnow()) > self.expires_at

    def accepts_claims(self, now: datetime = None) -> bool:
        """Active flag alone is not enough; the window must still be open."""
        return self.is_active and not self.is_expired(now)

    def seconds_remaining(self, now: datetime = None) -> int:
        if not self.accepts_claims(now):
            return 0
        return int((self.expires_at - (now or utcnow())).total_seconds())

    def to_dict(self, now: datetime = None):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'course': self.course,
            'subject': self.subject,
            'batch': self.batch,
            'duration_minutes': self.duration_minutes,
            'gps_required': self.gps_required,
            'wifi_required': self.wifi_required,
            'status': self.status.value,
            'started_by': self.started_by,
            'started_at': self.started_at.isoformat(),
            'expires_at': self.expires_at.isoformat(),
            'closed_at': self.closed_at.isoformat() if self.closed_at else None,
            'seconds_remaining': self.seconds_remaining(now),
        }
