"""Campus geofence and network settings API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from campus_attendance import db
from campus_attendance.models.campus_settings import CampusSettings
from campus_attendance.utils.decorators import admin_required, get_current_user
from campus_attendance.utils.errors import NotFound
from campus_attendance.utils.helpers import success_response, utcnow
from campus_attendance.utils.validators import Validator, ValidationError

campus_bp = Blueprint('campus', __name__)


@campus_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Campus service is running')


@campus_bp.route('/settings', methods=['GET'])
@jwt_required()
def get_settings():
    """Current campus settings."""
    settings = CampusSettings.get_current()
    if settings is None:
        raise NotFound('Campus settings not configured')
    return success_response(data=settings.to_dict())


def _optional_ip(value, field):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip() or None


def _validated_changes(data, settings):
    """Validate the whole payload before anything is assigned."""
    latitude = data.get('latitude', settings.latitude)
    longitude = data.get('longitude', settings.longitude)
    if latitude is None or longitude is None:
        raise ValidationError("Latitude and longitude are required")
    Validator.ensure(Validator.validate_coordinates(latitude, longitude))

    radius = Validator.parse_int(
        data.get('allowed_radius_meters', settings.allowed_radius_meters),
        'allowed_radius_meters', minimum=1
    )
    if radius is None:
        raise ValidationError("allowed_radius_meters is required")

    changes = {
        'latitude': float(latitude),
        'longitude': float(longitude),
        'allowed_radius_meters': radius,
    }

    if 'campus_name' in data:
        name = data['campus_name']
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("campus_name must be a non-empty string")
        changes['campus_name'] = name.strip()

    for field in ('campus_ip', 'campus_ip_range'):
        if field in data:
            changes[field] = _optional_ip(data[field], field)

    for flag in ('gps_verification_enabled', 'wifi_verification_enabled'):
        value = Validator.parse_bool(data.get(flag), flag)
        if value is not None:
            changes[flag] = value

    return changes


@campus_bp.route('/settings', methods=['PUT'])
@jwt_required()
@admin_required
def update_settings():
    """Update the campus reference point, radius, network origin and flags."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be JSON")

    settings = CampusSettings.get_or_create()
    changes = _validated_changes(data, settings)

    for key, value in changes.items():
        setattr(settings, key, value)
    settings.updated_by = get_current_user().id
    settings.updated_at = utcnow()
    db.session.commit()

    return success_response(data=settings.to_dict(), message='Campus settings updated')
