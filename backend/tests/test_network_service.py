"""Test client IP resolution and campus network matching."""
from types import SimpleNamespace

from campus_attendance.services.network_service import NetworkService, UNKNOWN_IP


def settings(campus_ip='203.0.113.10', campus_ip_range='203.0.113.'):
    return SimpleNamespace(campus_ip=campus_ip, campus_ip_range=campus_ip_range)


def test_first_forwarded_hop_wins():
    headers = {'X-Forwarded-For': '203.0.113.5, 10.0.0.1', 'CF-Connecting-IP': '192.0.2.1'}
    assert NetworkService.resolve_client_ip(headers) == '203.0.113.5'


def test_cloudflare_header_is_fallback():
    assert NetworkService.resolve_client_ip({'CF-Connecting-IP': ' 192.0.2.1 '}) == '192.0.2.1'
    assert NetworkService.resolve_client_ip({'X-Forwarded-For': '', 'CF-Connecting-IP': '192.0.2.1'}) == '192.0.2.1'


def test_no_headers_is_unknown():
    assert NetworkService.resolve_client_ip({}) == UNKNOWN_IP


def test_exact_match():
    assert NetworkService.matches_campus('203.0.113.10', settings(campus_ip_range=None))


def test_prefix_match():
    assert NetworkService.matches_campus('203.0.113.77', settings())
    assert not NetworkService.matches_campus('203.0.114.77', settings())


def test_prefix_is_plain_string_prefix():
    # "10.0.0.1" also prefixes "10.0.0.15"
    assert NetworkService.matches_campus('10.0.0.15', settings('10.0.0.99', '10.0.0.1'))


def test_range_alone_does_not_match():
    assert not NetworkService.matches_campus('203.0.113.77', settings(campus_ip=None))


def test_unknown_and_missing_settings_never_match():
    assert not NetworkService.matches_campus(UNKNOWN_IP, settings(campus_ip_range='u'))
    assert not NetworkService.matches_campus('203.0.113.10', None)
