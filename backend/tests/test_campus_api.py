"""Test campus settings endpoints."""
import json

import pytest

from campus_attendance import db
from campus_attendance.models import CampusSettings


def put(client, headers, **body):
    return client.put('/api/campus/settings', json=body, headers=headers)


def test_settings_not_configured(client, student_headers):
    response = client.get('/api/campus/settings', headers=student_headers)
    assert response.status_code == 404


def test_any_user_can_read(client, student_headers, campus):
    response = client.get('/api/campus/settings', headers=student_headers)
    assert response.status_code == 200
    data = json.loads(response.data)['data']
    assert data['latitude'] == 12.9
    assert data['allowed_radius_meters'] == 200


def test_student_cannot_update(client, student_headers, campus):
    response = put(client, student_headers, latitude=1, longitude=1)
    assert response.status_code == 403


def test_admin_update_bootstraps_and_records_editor(client, admin_headers, admin_user):
    response = put(client, admin_headers, campus_name='North Campus', latitude=12.97,
                   longitude=77.59, allowed_radius_meters=350, campus_ip='203.0.113.10',
                   campus_ip_range='', wifi_verification_enabled=False)

    assert response.status_code == 200
    settings = CampusSettings.get_current()
    db.session.refresh(settings)
    assert settings.campus_name == 'North Campus'
    assert settings.allowed_radius_meters == 350
    assert settings.campus_ip == '203.0.113.10'
    assert settings.campus_ip_range is None
    assert settings.wifi_verification_enabled is False
    assert settings.updated_by == admin_user.id


def test_partial_update_keeps_other_fields(client, admin_headers, campus):
    response = put(client, admin_headers, allowed_radius_meters=500)
    assert response.status_code == 200
    db.session.refresh(campus)
    assert campus.allowed_radius_meters == 500
    assert campus.latitude == 12.9
    assert campus.campus_ip == '203.0.113.10'


def test_blank_ip_stored_as_null(client, admin_headers, campus):
    put(client, admin_headers, campus_ip='   ')
    db.session.refresh(campus)
    assert campus.campus_ip is None


@pytest.mark.parametrize('body', [
    {'latitude': 95},
    {'longitude': -190},
    {'latitude': 'north'},
    {'allowed_radius_meters': 0},
    {'allowed_radius_meters': 'wide'},
    {'campus_ip': 42},
    {'gps_verification_enabled': 'yes'},
])
def test_update_validation(client, admin_headers, campus, body):
    response = put(client, admin_headers, **body)
    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'VALIDATION_ERROR'
