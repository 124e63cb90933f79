"""Authentication API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from campus_attendance import limiter
from campus_attendance.services.auth_service import AuthService
from campus_attendance.utils.decorators import get_current_user
from campus_attendance.utils.helpers import success_response, error_response

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    return success_response(message="Auth service is running")


@auth_bp.route("/login", methods=["POST"])
@limiter.limit("5 per minute")
def login():
    """Email and password login for admins and students."""
    data = request.get_json(silent=True)

    if not data:
        return error_response("Request body must be JSON", 400, code='BAD_REQUEST')

    email = str(data.get("email") or "").strip()
    password = str(data.get("password") or "")

    if not email or not password:
        return error_response("Email and password are required", 400, code='VALIDATION_ERROR')

    result, error = AuthService.login(email, password)

    if error:
        return error_response(error, 401, code='UNAUTHORIZED')

    return success_response(
        data=result,
        message="Login successful"
    )


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def get_me():
    """Get current user profile."""
    user = get_current_user()

    if not user:
        return error_response("User not found", 401, code='UNAUTHORIZED')

    response_data = user.to_dict()

    if user.is_student() and user.student_profile is not None:
        response_data['student_profile'] = user.student_profile.to_dict()

    return success_response(data=response_data)


@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh_token():
    """Refresh access token."""
    result, error = AuthService.refresh_token(get_jwt_identity())

    if error:
        return error_response(error, 401, code='UNAUTHORIZED')

    return success_response(data=result, message="Token refreshed successfully")
