"""Per-session attendance record written after GPS/WiFi verification."""
import enum

from campus_attendance import db
from campus_attendance.models.base import BaseModel
from campus_attendance.utils.helpers import utcnow


class VerificationType(enum.Enum):
    """Which presence checks succeeded."""
    GPS = 'gps'
    WIFI = 'wifi'
    BOTH = 'both'


class SmartAttendanceRecord(BaseModel):
    """One row per (session, student); the unique constraint is the idempotence guard."""

    __tablename__ = 'smart_attendance_records'
    __table_args__ = (
        db.UniqueConstraint('session_id', 'student_id', name='uq_smart_record_session_student'),
    )

    session_id = db.Column(db.Integer, db.ForeignKey('attendance_sessions.id'), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    marked_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    # Captured claim metadata
    ip_address = db.Column(db.String(64), nullable=True)
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    device_info = db.Column(db.Text, nullable=True)

    verification_type = db.Column(db.Enum(VerificationType), nullable=False)

    # Relationships
    session = db.relationship('AttendanceSession', back_populates='records')
    student = db.relationship('Student')

    def to_dict(self, include_student: bool = False):
        result = {
            'id': self.id,
            'session_id': self.session_id,
            'student_id': self.student_id,
            'marked_at': self.marked_at.isoformat(),
            'ip_address': self.ip_address,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'device_info': self.device_info,
            'verification_type': self.verification_type.value,
        }
        if include_student and self.student is not None:
            result['student'] = self.student.summary()
        return result

    def __repr__(self):
        return f'<SmartAttendanceRecord {self.session_id}-{self.student_id}>'
