"""Custom decorators for authorization and validation."""
from functools import wraps
from typing import Optional

from flask_jwt_extended import get_jwt_identity

from campus_attendance.models.user import User, UserRole
from campus_attendance.utils.errors import Forbidden, Unauthorized


def get_current_user() -> Optional[User]:
    """Resolve the JWT identity to a User row (or None)."""
    identity = get_jwt_identity()
    if identity is None:
        return None
    try:
        user_id = int(identity)
    except (TypeError, ValueError):
        return None
    return User.get_by_id(user_id)


def role_required(role: UserRole, message: str):
    """Require the authenticated user to hold ``role``. Use after ``jwt_required``."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = get_current_user()

            if not user:
                raise Unauthorized("User not found")

            if user.role != role:
                raise Forbidden(message)

            return f(*args, **kwargs)
        return decorated_function
    return decorator


admin_required = role_required(UserRole.ADMIN, "Admin access required")
student_required = role_required(UserRole.STUDENT, "Student access required")
