"""Presence verification for smart attendance claims."""
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict, Optional

from campus_attendance.models.attendance_session import AttendanceSession
from campus_attendance.models.campus_settings import CampusSettings
from campus_attendance.models.smart_attendance import VerificationType
from campus_attendance.services.gps_service import GPSService
from campus_attendance.services.network_service import NetworkService
from campus_attendance.utils.errors import SessionClosedOrExpired, VerificationFailed

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of a successful verification."""
    gps_verified: bool
    wifi_verified: bool
    verification_type: VerificationType
    client_ip: str
    distance_meters: Optional[float] = None

    def to_dict(self) -> Dict:
        result = asdict(self)
        result['verification_type'] = self.verification_type.value
        return result


class VerificationService:
    """Decide which presence checks a claim passes for a session.

    A check the session does not require counts as passed, and one passed
    check is enough to accept the claim. This means a session with either
    flag off accepts every claim.
    """

    @staticmethod
    def check_gps(
        session: AttendanceSession,
        latitude: Optional[float],
        longitude: Optional[float],
        settings: Optional[CampusSettings]
    ):
        """Return (passed, distance_meters)."""
        if not session.gps_required:
            return True, None
        if settings is None or latitude is None or longitude is None:
            return False, None

        location = GPSService.verify_location(latitude, longitude, settings)
        return location['is_inside'], location['distance']

    @staticmethod
    def check_wifi(
        session: AttendanceSession,
        client_ip: str,
        settings: Optional[CampusSettings]
    ) -> bool:
        if not session.wifi_required:
            return True
        return NetworkService.matches_campus(client_ip, settings)

    @staticmethod
    def evaluate(
        session: AttendanceSession,
        latitude: Optional[float],
        longitude: Optional[float],
        client_ip: str,
        settings: Optional[CampusSettings],
        now: datetime = None
    ) -> VerificationResult:
        """Verify a claim against a session and the campus settings.

        Raises:
            SessionClosedOrExpired: session is closed or past ``expires_at``.
            VerificationFailed: neither GPS nor WiFi passed.
        """
        if not session.accepts_claims(now):
            raise SessionClosedOrExpired()

        gps_verified, distance = VerificationService.check_gps(
            session, latitude, longitude, settings
        )
        wifi_verified = VerificationService.check_wifi(session, client_ip, settings)

        logger.debug(
            "Session %s claim from %s: gps=%s (distance=%s) wifi=%s",
            session.id, client_ip, gps_verified, distance, wifi_verified
        )

        if not gps_verified and not wifi_verified:
            raise VerificationFailed(gps_verified=gps_verified, wifi_verified=wifi_verified)

        if gps_verified and wifi_verified:
            verification_type = VerificationType.BOTH
        elif wifi_verified:
            verification_type = VerificationType.WIFI
        else:
            verification_type = VerificationType.GPS

        return VerificationResult(
            gps_verified=gps_verified,
            wifi_verified=wifi_verified,
            verification_type=verification_type,
            client_ip=client_ip,
            distance_meters=distance
        )
