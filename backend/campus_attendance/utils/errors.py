"""Application error taxonomy.

Every expected rejection is raised as an ``AttendanceError`` subclass and
turned into a JSON body by the handler registered in the app factory. The
``code`` field is the stable, machine-checkable indicator; ``message`` is for
people.
"""
from typing import Any, Dict, Optional


class AttendanceError(Exception):
    """Base class for reportable (non-fatal) request failures."""

    status_code = 400
    code = 'BAD_REQUEST'

    def __init__(self, message: str, status_code: int = None, code: str = None,
                 extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.extra = extra or {}


class BadRequest(AttendanceError):
    status_code = 400
    code = 'BAD_REQUEST'


class Unauthorized(AttendanceError):
    status_code = 401
    code = 'UNAUTHORIZED'


class Forbidden(AttendanceError):
    status_code = 403
    code = 'FORBIDDEN'


class NotFound(AttendanceError):
    status_code = 404
    code = 'NOT_FOUND'


class SessionNotFound(NotFound):
    code = 'SESSION_NOT_FOUND'

    def __init__(self, message: str = 'Session not found'):
        super().__init__(message)


class StudentNotFound(NotFound):
    code = 'STUDENT_NOT_FOUND'

    def __init__(self, message: str = 'Student record not found'):
        super().__init__(message)


class SessionClosedOrExpired(AttendanceError):
    status_code = 400
    code = 'SESSION_EXPIRED'

    def __init__(self, message: str = 'Attendance session has expired or is closed'):
        super().__init__(message)


class VerificationFailed(AttendanceError):
    """Neither GPS nor network origin could be verified."""

    status_code = 403
    code = 'VERIFICATION_FAILED'

    def __init__(self, gps_verified: bool, wifi_verified: bool,
                 message: str = ('Verification failed. You must be inside campus area '
                                 'or connected to campus WiFi.')):
        super().__init__(message, extra={
            'gps_verified': gps_verified,
            'wifi_verified': wifi_verified,
        })
        self.gps_verified = gps_verified
        self.wifi_verified = wifi_verified


class ExternalServiceError(AttendanceError):
    status_code = 502
    code = 'EXTERNAL_SERVICE_ERROR'


class ServiceNotConfigured(AttendanceError):
    status_code = 503
    code = 'SERVICE_NOT_CONFIGURED'
