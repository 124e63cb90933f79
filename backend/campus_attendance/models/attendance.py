"""Daily attendance ledger, one row per student per day."""
import enum

from campus_attendance import db
from campus_attendance.models.base import BaseModel


class AttendanceStatus(enum.Enum):
    """Attendance status enumeration."""
    PRESENT = 'Present'
    ABSENT = 'Absent'


class MarkedVia(enum.Enum):
    """Where a ledger row came from."""
    MANUAL = 'manual'
    SMART_ATTENDANCE = 'smart_attendance'
    CAMERA = 'camera'


class AttendanceLedgerEntry(BaseModel):
    """Coarse daily record shown on the student panel."""

    __tablename__ = 'attendance'
    __table_args__ = (
        db.UniqueConstraint('student_id', 'date', name='uq_attendance_student_date'),
    )

    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    status = db.Column(db.Enum(AttendanceStatus), nullable=False, default=AttendanceStatus.PRESENT)
    time = db.Column(db.Time, nullable=True)
    marked_via = db.Column(db.Enum(MarkedVia), nullable=False, default=MarkedVia.MANUAL)

    student = db.relationship('Student')

    def to_dict(self, include_student: bool = False):
        result = {
            'id': self.id,
            'student_id': self.student_id,
            'date': self.date.isoformat(),
            'status': self.status.value,
            'time': self.time.strftime('%H:%M:%S') if self.time else None,
            'marked_via': self.marked_via.value,
        }
        if include_student and self.student is not None:
            result['student'] = self.student.summary()
        return result

    def __repr__(self):
        return f'<AttendanceLedgerEntry {self.student_id}@{self.date}>'
