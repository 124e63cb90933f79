"""Network origin (campus WiFi) verification service."""
from typing import Mapping

UNKNOWN_IP = 'unknown'


class NetworkService:
    """Service for client IP resolution and campus network matching."""

    @staticmethod
    def resolve_client_ip(headers: Mapping[str, str]) -> str:
        """Client IP as reported by the proxy chain.

        First hop of X-Forwarded-For, then CF-Connecting-IP. Anything else is
        "unknown", which never matches the campus network.
        """
        forwarded = headers.get('X-Forwarded-For') or ''
        first_hop = forwarded.split(',')[0].strip()
        if first_hop:
            return first_hop

        connecting = (headers.get('CF-Connecting-IP') or '').strip()
        return connecting or UNKNOWN_IP

    @staticmethod
    def matches_campus(client_ip: str, settings) -> bool:
        """Exact match on campus_ip, or plain string prefix on campus_ip_range."""
        if settings is None or not settings.campus_ip:
            return False
        if not client_ip or client_ip == UNKNOWN_IP:
            return False

        if client_ip == settings.campus_ip:
            return True

        prefix = settings.campus_ip_range
        return bool(prefix) and client_ip.startswith(prefix)
