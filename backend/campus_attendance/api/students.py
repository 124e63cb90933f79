"""Student Account Management API - Admin Only."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from campus_attendance.services.student_service import StudentService
from campus_attendance.utils.decorators import admin_required
from campus_attendance.utils.helpers import success_response
from campus_attendance.utils.validators import ValidationError

students_bp = Blueprint('students', __name__)


@students_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Students service is running')


@students_bp.route('/', methods=['GET'])
@jwt_required()
@admin_required
def get_students():
    """List students, optionally for one class."""
    students = StudentService.list_students(request.args.get('class'))
    return success_response(data={
        'students': [student.to_dict() for student in students],
        'total': len(students)
    })


@students_bp.route('/', methods=['POST'])
@jwt_required()
@admin_required
def create_student():
    """Create a student account with a temporary password."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be JSON")

    for field in ('email', 'full_name', 'student_id', 'roll_no', 'class'):
        value = data.get(field)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{field} must be a string")

    result = StudentService.create_student(
        email=data.get('email'),
        full_name=data.get('full_name'),
        student_code=data.get('student_id'),
        roll_no=data.get('roll_no'),
        class_name=data.get('class')
    )
    return success_response(data=result, message='Student account created'), 201


@students_bp.route('/<int:student_id>', methods=['DELETE'])
@jwt_required()
@admin_required
def delete_student(student_id):
    """Delete a student and everything recorded for them."""
    StudentService.delete_student(student_id)
    return success_response(message='Student deleted')
