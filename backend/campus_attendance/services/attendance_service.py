"""Attendance recording service."""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from campus_attendance import db
from campus_attendance.models.attendance import AttendanceLedgerEntry, AttendanceStatus, MarkedVia
from campus_attendance.models.attendance_session import AttendanceSession
from campus_attendance.models.smart_attendance import SmartAttendanceRecord
from campus_attendance.models.student import Student
from campus_attendance.services.verification_service import VerificationResult
from campus_attendance.utils.helpers import utcnow

logger = logging.getLogger(__name__)


@dataclass
class RecordOutcome:
    """Result of a smart attendance write.

    ``created`` is False when the student was already marked for the
    session, whether found up front or by losing an insert race.
    """
    created: bool
    record: SmartAttendanceRecord
    ledger_entry: Optional[AttendanceLedgerEntry] = None

    @property
    def already_marked(self) -> bool:
        return not self.created


class AttendanceService:
    """Write attendance exactly once per key.

    Uniqueness lives in the database: (session_id, student_id) for smart
    records and (student_id, date) for the daily ledger. A constraint
    violation on insert is treated the same as finding the row beforehand.
    """

    @staticmethod
    def find_session_record(session_id: int, student_id: int) -> Optional[SmartAttendanceRecord]:
        return SmartAttendanceRecord.query.filter_by(
            session_id=session_id,
            student_id=student_id
        ).first()

    @staticmethod
    def find_ledger_entry(student_id: int, day: date) -> Optional[AttendanceLedgerEntry]:
        return AttendanceLedgerEntry.query.filter_by(
            student_id=student_id,
            date=day
        ).first()

    @staticmethod
    def record_smart_attendance(
        session: AttendanceSession,
        student: Student,
        user_id: int,
        verification: VerificationResult,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        device_info: Optional[str] = None,
        now: datetime = None
    ) -> RecordOutcome:
        """Insert the session record, then mirror it into the daily ledger.

        The ledger write is best effort. If it fails the smart record still
        stands and the failure is only logged.
        """
        now = now or utcnow()

        existing = AttendanceService.find_session_record(session.id, student.id)
        if existing:
            return RecordOutcome(created=False, record=existing)

        record = SmartAttendanceRecord(
            session_id=session.id,
            student_id=student.id,
            user_id=user_id,
            marked_at=now,
            ip_address=verification.client_ip,
            latitude=latitude,
            longitude=longitude,
            device_info=device_info,
            verification_type=verification.verification_type
        )
        db.session.add(record)

        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            existing = AttendanceService.find_session_record(session.id, student.id)
            if existing is None:
                raise
            logger.info(
                "Concurrent submission for session %s student %s resolved as already marked",
                session.id, student.id
            )
            return RecordOutcome(created=False, record=existing)

        logger.info(
            "Smart attendance recorded: session %s student %s via %s",
            session.id, student.id, verification.verification_type.value
        )

        ledger_entry = None
        try:
            ledger_entry, _ = AttendanceService.mark_ledger_present(
                student, MarkedVia.SMART_ATTENDANCE, now
            )
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(
                "Ledger mirror failed for student %s (session %s); smart record kept",
                student.id, session.id
            )

        return RecordOutcome(created=True, record=record, ledger_entry=ledger_entry)

    @staticmethod
    def mark_ledger_present(
        student: Student,
        marked_via: MarkedVia,
        now: datetime = None
    ) -> Tuple[AttendanceLedgerEntry, bool]:
        """Ensure a ledger row exists for the student today.

        Returns (entry, created). An existing row for today is returned
        unchanged, whatever its status or source.
        """
        now = now or utcnow()
        today = now.date()

        existing = AttendanceService.find_ledger_entry(student.id, today)
        if existing:
            return existing, False

        entry = AttendanceLedgerEntry(
            student_id=student.id,
            date=today,
            status=AttendanceStatus.PRESENT,
            time=now.time().replace(microsecond=0),
            marked_via=marked_via
        )
        db.session.add(entry)

        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            existing = AttendanceService.find_ledger_entry(student.id, today)
            if existing is None:
                raise
            return existing, False

        logger.info("Ledger entry %s for student %s via %s", today, student.id, marked_via.value)
        return entry, True
