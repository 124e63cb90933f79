"""Authentication service for user management."""
import logging
from typing import Dict, Optional, Tuple

from flask_jwt_extended import create_access_token, create_refresh_token

from campus_attendance import db
from campus_attendance.models.user import User
from campus_attendance.utils.helpers import utcnow
from campus_attendance.utils.validators import Validator

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    def issue_tokens(user: User) -> Dict[str, str]:
        """Access and refresh tokens; the JWT subject is the user id as a string."""
        identity = str(user.id)
        return {
            "access_token": create_access_token(identity=identity),
            "refresh_token": create_refresh_token(identity=identity),
        }

    @staticmethod
    def login(email: str, password: str) -> Tuple[Optional[Dict], Optional[str]]:
        """Authenticate user and return tokens."""
        if not email or not password:
            return None, "Email and password are required"

        if not Validator.validate_email(email):
            return None, "Invalid email format"

        user = User.query.filter_by(email=email.lower().strip()).first()

        if not user or not user.check_password(password):
            logger.info("Failed login attempt for %s", email)
            return None, "Invalid email or password"

        if not user.is_active:
            return None, "Account is deactivated"

        user.last_login = utcnow()
        db.session.commit()

        result = AuthService.issue_tokens(user)
        result["user"] = user.to_dict()
        if user.is_student() and user.student_profile is not None:
            result["student"] = user.student_profile.to_dict()

        return result, None

    @staticmethod
    def refresh_token(identity) -> Tuple[Optional[Dict], Optional[str]]:
        """Generate new access token."""
        try:
            user = User.get_by_id(int(identity))
        except (TypeError, ValueError):
            user = None

        if not user or not user.is_active:
            return None, "User not found or inactive"

        return {
            "access_token": create_access_token(identity=str(user.id)),
            "user": user.to_dict()
        }, None
