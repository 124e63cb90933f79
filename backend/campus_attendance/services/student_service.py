"""Student account management service."""
import logging
import secrets
import string
from typing import Dict, List, Optional

from campus_attendance import db
from campus_attendance.models.attendance import AttendanceLedgerEntry
from campus_attendance.models.smart_attendance import SmartAttendanceRecord
from campus_attendance.models.student import Student
from campus_attendance.models.user import User, UserRole
from campus_attendance.utils.errors import StudentNotFound
from campus_attendance.utils.validators import Validator, ValidationError

logger = logging.getLogger(__name__)

TEMP_PASSWORD_PREFIX = 'Student@'
TEMP_PASSWORD_ALPHABET = string.ascii_letters + string.digits


class StudentService:
    """Service for managing student accounts."""

    @staticmethod
    def generate_temp_password(length: int = 8) -> str:
        suffix = ''.join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))
        return f"{TEMP_PASSWORD_PREFIX}{suffix}"

    @staticmethod
    def create_student(
        email: str,
        full_name: str,
        student_code: Optional[str] = None,
        roll_no: Optional[str] = None,
        class_name: Optional[str] = None
    ) -> Dict:
        """Create a login account plus the student profile.

        The generated password is only ever returned here.
        """
        Validator.ensure(Validator.validate_required_fields(
            {'email': email, 'full_name': full_name}, ['email', 'full_name']
        ))
        email = email.lower().strip()
        if not Validator.validate_email(email):
            raise ValidationError("Invalid email format")
        Validator.ensure(Validator.validate_name(full_name))

        student_code = (student_code or '').strip() or None
        if User.query.filter_by(email=email).first():
            raise ValidationError("Email already exists")
        if student_code and Student.query.filter_by(student_code=student_code).first():
            raise ValidationError("Student ID already exists")

        temp_password = StudentService.generate_temp_password()

        user = User(email=email, name=full_name.strip(), role=UserRole.STUDENT)
        user.set_password(temp_password)
        db.session.add(user)
        db.session.flush()  # Get user.id

        student = Student(
            user_id=user.id,
            name=full_name.strip(),
            student_code=student_code,
            roll_no=(roll_no or '').strip() or None,
            class_name=(class_name or '').strip() or None,
            email=email
        )
        db.session.add(student)
        db.session.commit()

        logger.info("Student account created: %s (student %s)", email, student.id)
        return {
            'student': student.to_dict(),
            'credentials': {
                'email': email,
                'temp_password': temp_password
            }
        }

    @staticmethod
    def list_students(class_name: Optional[str] = None) -> List[Student]:
        query = Student.query
        if class_name:
            query = query.filter(Student.class_name == class_name)
        return query.order_by(Student.name, Student.id).all()

    @staticmethod
    def delete_student(student_id: int) -> None:
        """Remove the student with its face, attendance rows and login account."""
        student = Student.get_by_id(student_id)
        if student is None:
            raise StudentNotFound('Student not found')

        user = student.user

        SmartAttendanceRecord.query.filter_by(student_id=student.id).delete(synchronize_session=False)
        AttendanceLedgerEntry.query.filter_by(student_id=student.id).delete(synchronize_session=False)
        # Profile and face go with the account
        db.session.delete(user if user is not None else student)
        db.session.commit()

        logger.info("Student %s deleted with its user account", student_id)
