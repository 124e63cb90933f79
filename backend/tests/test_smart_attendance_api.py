"""Test the smart attendance submission endpoint."""
import json
from datetime import timedelta

import pytest

from campus_attendance import db
from campus_attendance.models import (
    AttendanceLedgerEntry, MarkedVia, SessionStatus, SmartAttendanceRecord, UserRole
)
from campus_attendance.utils.helpers import utcnow

from conftest import CAMPUS_IP, OFF_CAMPUS_IP, auth_headers, make_user


def submit(client, headers, ip=OFF_CAMPUS_IP, **body):
    headers = dict(headers, **{'X-Forwarded-For': ip})
    return client.post('/api/attendance/smart', json=body, headers=headers)


@pytest.fixture
def active_session(campus, open_session):
    return open_session()


def test_on_campus_gps_claim_is_marked(client, student, student_headers, active_session):
    response = submit(client, student_headers, session_id=active_session.id,
                      latitude=12.9001, longitude=77.6001)

    assert response.status_code == 200
    data = json.loads(response.data)
    assert data['error'] == False
    assert data['success'] is True
    assert data['already_marked'] is False
    assert data['verification_type'] == 'gps'
    assert data['marked_at']

    record = SmartAttendanceRecord.query.one()
    assert record.student_id == student.id
    assert record.ip_address == OFF_CAMPUS_IP
    entry = AttendanceLedgerEntry.query.one()
    assert entry.marked_via == MarkedVia.SMART_ATTENDANCE


def test_campus_network_and_location_is_both(client, student_headers, active_session):
    response = submit(client, student_headers, ip=CAMPUS_IP, session_id=active_session.id,
                      latitude=12.9001, longitude=77.6001)
    assert json.loads(response.data)['verification_type'] == 'both'


def test_campus_network_without_location_is_wifi(client, student_headers, active_session):
    response = submit(client, student_headers, ip='203.0.113.99', session_id=active_session.id)
    assert response.status_code == 200
    assert json.loads(response.data)['verification_type'] == 'wifi'


def test_resubmission_is_already_marked(client, student_headers, active_session):
    submit(client, student_headers, session_id=active_session.id,
           latitude=12.9001, longitude=77.6001)
    # Second attempt from off campus still reports the stored result
    response = submit(client, student_headers, session_id=active_session.id,
                      latitude=40.0, longitude=-70.0)

    assert response.status_code == 200
    data = json.loads(response.data)
    assert data['success'] is True
    assert data['already_marked'] is True
    assert data['verification_type'] == 'gps'
    assert SmartAttendanceRecord.query.count() == 1


def test_off_campus_claim_is_rejected(client, student_headers, active_session):
    response = submit(client, student_headers, session_id=active_session.id,
                      latitude=12.95, longitude=77.6)

    assert response.status_code == 403
    data = json.loads(response.data)
    assert data['error'] == True
    assert data['code'] == 'VERIFICATION_FAILED'
    assert data['gps_verified'] is False
    assert data['wifi_verified'] is False
    assert SmartAttendanceRecord.query.count() == 0


def test_expired_session_is_rejected_and_closed(client, student_headers, campus, open_session):
    session = open_session(now=utcnow() - timedelta(minutes=11))

    response = submit(client, student_headers, session_id=session.id,
                      latitude=12.9001, longitude=77.6001)

    assert response.status_code == 400
    data = json.loads(response.data)
    assert data['code'] == 'SESSION_EXPIRED'
    assert data['message'] == 'Attendance session has expired or is closed'
    db.session.refresh(session)
    assert session.status == SessionStatus.CLOSED


def test_closed_session_is_rejected(client, student_headers, active_session, admin_headers):
    client.post(f'/api/sessions/{active_session.id}/close', headers=admin_headers)
    response = submit(client, student_headers, session_id=active_session.id,
                      latitude=12.9001, longitude=77.6001)
    assert json.loads(response.data)['code'] == 'SESSION_EXPIRED'


def test_missing_session_id(client, student_headers, campus):
    response = submit(client, student_headers, latitude=12.9001, longitude=77.6001)
    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'VALIDATION_ERROR'


def test_unknown_session(client, student_headers, campus):
    response = submit(client, student_headers, session_id=999)
    assert response.status_code == 404
    assert json.loads(response.data)['code'] == 'SESSION_NOT_FOUND'


@pytest.mark.parametrize('latitude,longitude', [('12.9', 77.6), (91, 77.6), (12.9, -181), (True, 77.6)])
def test_bad_coordinates(client, student_headers, active_session, latitude, longitude):
    response = submit(client, student_headers, session_id=active_session.id,
                      latitude=latitude, longitude=longitude)
    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'VALIDATION_ERROR'


def test_student_without_profile(client, active_session):
    orphan = make_user('orphan@campus.edu', UserRole.STUDENT)
    response = submit(client, auth_headers(orphan), session_id=active_session.id,
                      latitude=12.9001, longitude=77.6001)
    assert response.status_code == 404
    assert json.loads(response.data)['code'] == 'STUDENT_NOT_FOUND'


def test_admin_cannot_submit(client, admin_headers, active_session):
    response = submit(client, admin_headers, session_id=active_session.id)
    assert response.status_code == 403
    assert json.loads(response.data)['code'] == 'FORBIDDEN'


def test_token_required(client, active_session):
    response = client.post('/api/attendance/smart', json={'session_id': active_session.id})
    assert response.status_code == 401
    assert json.loads(response.data)['code'] == 'UNAUTHORIZED'


def test_device_info_defaults_to_user_agent(client, student_headers, active_session):
    headers = dict(student_headers, **{'User-Agent': 'CampusApp/2.1'})
    submit(client, headers, session_id=active_session.id, latitude=12.9001, longitude=77.6001)
    assert SmartAttendanceRecord.query.one().device_info == 'CampusApp/2.1'


def test_device_info_from_body(client, student_headers, active_session):
    submit(client, student_headers, session_id=active_session.id,
           latitude=12.9001, longitude=77.6001, device_info='Pixel 8')
    assert SmartAttendanceRecord.query.one().device_info == 'Pixel 8'


def test_my_records(client, student_headers, active_session):
    submit(client, student_headers, session_id=active_session.id,
           latitude=12.9001, longitude=77.6001)

    response = client.get('/api/attendance/my-records', headers=student_headers)

    assert response.status_code == 200
    data = json.loads(response.data)['data']
    assert data['total'] == 1
    assert data['present_days'] == 1
    assert data['records'][0]['marked_via'] == 'smart_attendance'


def test_my_records_bad_date(client, student_headers, student):
    response = client.get('/api/attendance/my-records?from_date=yesterday', headers=student_headers)
    assert response.status_code == 400


def test_admin_ledger_filtered_by_class(client, admin_headers, student_headers, active_session):
    submit(client, student_headers, session_id=active_session.id,
           latitude=12.9001, longitude=77.6001)

    response = client.get('/api/attendance/?class=CSE-A', headers=admin_headers)
    data = json.loads(response.data)['data']
    assert data['total'] == 1
    assert data['records'][0]['student']['name'] == 'Asha Rao'

    response = client.get('/api/attendance/?class=CSE-B', headers=admin_headers)
    assert json.loads(response.data)['data']['total'] == 0
