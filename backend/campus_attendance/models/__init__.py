"""Models package with all models."""
from .base import BaseModel
from .user import User, UserRole
from .student import Student
from .campus_settings import CampusSettings
from .attendance_session import AttendanceSession, SessionStatus
from .smart_attendance import SmartAttendanceRecord, VerificationType
from .attendance import AttendanceLedgerEntry, AttendanceStatus, MarkedVia
from .student_face import StudentFace

__all__ = [
    'BaseModel', 'User', 'UserRole', 'Student',
    'CampusSettings', 'AttendanceSession', 'SessionStatus',
    'SmartAttendanceRecord', 'VerificationType',
    'AttendanceLedgerEntry', 'AttendanceStatus', 'MarkedVia',
    'StudentFace'
]
