"""Face template registration and camera attendance API - Admin Only."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from campus_attendance.services.face_match_service import FaceMatchService
from campus_attendance.utils.decorators import admin_required
from campus_attendance.utils.helpers import success_response
from campus_attendance.utils.validators import Validator, ValidationError

faces_bp = Blueprint('faces', __name__)


@faces_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Face service is running')


@faces_bp.route('/register', methods=['POST'])
@jwt_required()
@admin_required
def register_face():
    """Store or replace a student's reference image."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be JSON")

    student_id = Validator.parse_int(data.get('student_id'), 'student_id', minimum=1)
    if student_id is None:
        raise ValidationError("Student ID is required")
    Validator.ensure(Validator.validate_image_data_url(data.get('face_data'), 'face'))

    face, created = FaceMatchService.register_face(student_id, data['face_data'])
    return success_response(
        data=face.to_dict(),
        message='Face registered successfully' if created else 'Face updated successfully'
    ), 201 if created else 200


@faces_bp.route('/verify', methods=['POST'])
@jwt_required()
@admin_required
def verify_face():
    """Identify the captured face and mark that student present for today."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be JSON")

    captured = data.get('captured_face')
    Validator.ensure(Validator.validate_image_data_url(captured, 'image'))

    class_filter = data.get('class_filter')
    if class_filter is not None and not isinstance(class_filter, str):
        raise ValidationError("class_filter must be a string")

    service = FaceMatchService.from_app_config()
    result = service.identify(captured, (class_filter or '').strip() or None)
    return success_response(data=result, message=result['message'], recognized=result['recognized'])


@faces_bp.route('/', methods=['GET'])
@jwt_required()
@admin_required
def list_faces():
    """Students with a registered face (image payloads omitted)."""
    faces = FaceMatchService.candidates()
    return success_response(data={
        'faces': [dict(face.to_dict(), student=face.student.summary()) for face in faces],
        'total': len(faces)
    })


@faces_bp.route('/<int:student_id>', methods=['DELETE'])
@jwt_required()
@admin_required
def delete_face(student_id):
    FaceMatchService.remove_face(student_id)
    return success_response(message='Face template removed')
