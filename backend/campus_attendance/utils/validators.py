"""Validation utilities for the application."""
import math
import re
from typing import Any, Dict, List, Optional

from campus_attendance.utils.errors import BadRequest


class ValidationError(BadRequest):
    """Request payload failed validation."""
    code = 'VALIDATION_ERROR'


class Validator:
    """Validation helper class."""

    @staticmethod
    def ensure(result: Dict[str, Any]) -> None:
        """Raise ValidationError for a failed validation result."""
        if not result["is_valid"]:
            raise ValidationError("; ".join(result["errors"]))

    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format."""
        if not email:
            return False
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return bool(re.match(pattern, email))

    @staticmethod
    def validate_name(name: str) -> Dict[str, Any]:
        """Validate user name."""
        errors = []

        if not name or not name.strip():
            errors.append("Name is required")
        elif len(name.strip()) < 2:
            errors.append("Name must be at least 2 characters long")
        elif len(name.strip()) > 100:
            errors.append("Name is too long")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def validate_required_fields(data: Dict, required_fields: List[str]) -> Dict[str, Any]:
        """Validate required fields in data."""
        errors = []

        for field in required_fields:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors.append(f"{field.replace('_', ' ').title()} is required")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def validate_coordinates(latitude: Any, longitude: Any) -> Dict[str, Any]:
        """Validate an optional coordinate pair.

        Both values may be absent. When present they must be finite numbers
        within the usual latitude/longitude ranges, so NaN never reaches the
        distance calculation.
        """
        errors = []

        for name, value, limit in (('Latitude', latitude, 90), ('Longitude', longitude, 180)):
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"{name} must be a number")
            elif not math.isfinite(value):
                errors.append(f"{name} must be a finite number")
            elif abs(value) > limit:
                errors.append(f"{name} must be between -{limit} and {limit}")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def validate_image_data_url(value: Any, field: str = "image") -> Dict[str, Any]:
        """Validate a base64 image data URL (``data:image/...``)."""
        errors = []

        if not value or not isinstance(value, str):
            errors.append(f"Invalid {field} data")
        elif not value.startswith('data:image/'):
            errors.append(f"Invalid {field} format. Must be base64 encoded image.")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def parse_int(value: Any, field: str, minimum: int = None,
                  maximum: int = None) -> Optional[int]:
        """Coerce an integer field, raising ValidationError on bad input."""
        if value is None:
            return None
        if isinstance(value, bool):
            raise ValidationError(f"{field} must be an integer")
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{field} must be an integer")
        if isinstance(value, float) and value != number:
            raise ValidationError(f"{field} must be an integer")
        if minimum is not None and number < minimum:
            raise ValidationError(f"{field} must be at least {minimum}")
        if maximum is not None and number > maximum:
            raise ValidationError(f"{field} must be at most {maximum}")
        return number

    @staticmethod
    def parse_bool(value: Any, field: str) -> Optional[bool]:
        """Accept real booleans only; None means "not provided"."""
        if value is None:
            return None
        if not isinstance(value, bool):
            raise ValidationError(f"{field} must be true or false")
        return value
