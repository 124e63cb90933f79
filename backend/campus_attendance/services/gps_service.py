"""GPS verification service."""
import math
from typing import Dict


class GPSService:
    """Service for GPS and location verification."""

    EARTH_RADIUS_METERS = 6371000

    @staticmethod
    def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate distance between two GPS points in meters (haversine)."""
        R = GPSService.EARTH_RADIUS_METERS

        lat1_rad = math.radians(lat1)
        lat2_rad = math.radians(lat2)
        delta_lat = math.radians(lat2 - lat1)
        delta_lon = math.radians(lon2 - lon1)

        a = (math.sin(delta_lat/2) ** 2 +
             math.cos(lat1_rad) * math.cos(lat2_rad) *
             math.sin(delta_lon/2) ** 2)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))

        return R * c

    @staticmethod
    def verify_location(user_lat: float, user_lng: float, settings) -> Dict:
        """Verify if user is within the campus radius."""
        distance = GPSService.calculate_distance(
            user_lat, user_lng,
            settings.latitude, settings.longitude
        )

        return {
            'is_inside': distance <= settings.allowed_radius_meters,
            'distance': distance,
            'allowed_radius': settings.allowed_radius_meters,
            'campus_center': {
                'latitude': settings.latitude,
                'longitude': settings.longitude
            }
        }
