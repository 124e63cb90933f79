"""Test attendance session endpoints."""
import json
from datetime import timedelta

from campus_attendance import db
from campus_attendance.models import SessionStatus
from campus_attendance.utils.helpers import utcnow

from conftest import OFF_CAMPUS_IP


def start(client, headers, **body):
    body.setdefault('course', 'B.Tech')
    body.setdefault('subject', 'Operating Systems')
    body.setdefault('batch', '2024')
    return client.post('/api/sessions/', json=body, headers=headers)


def test_health_check(client):
    response = client.get('/api/sessions/health')
    assert json.loads(response.data)['message'] == 'Sessions service is running'


def test_admin_starts_session(client, admin_headers, campus):
    response = start(client, admin_headers, duration_minutes=15)

    assert response.status_code == 201
    data = json.loads(response.data)['data']
    assert data['status'] == 'active'
    assert data['duration_minutes'] == 15
    assert data['gps_required'] is True
    assert data['wifi_required'] is True
    assert 0 < data['seconds_remaining'] <= 15 * 60


def test_start_validation(client, admin_headers):
    response = start(client, admin_headers, subject='')
    assert response.status_code == 400
    assert json.loads(response.data)['code'] == 'VALIDATION_ERROR'

    response = start(client, admin_headers, duration_minutes=500)
    assert response.status_code == 400

    response = start(client, admin_headers, gps_required='no')
    assert response.status_code == 400


def test_student_cannot_start(client, student_headers):
    response = start(client, student_headers)
    assert response.status_code == 403
    assert json.loads(response.data)['message'] == 'Admin access required'


def test_list_closes_expired(client, admin_headers, open_session):
    expired = open_session(now=utcnow() - timedelta(minutes=30))
    active = open_session()

    response = client.get('/api/sessions/', headers=admin_headers)

    data = json.loads(response.data)['data']
    assert [s['id'] for s in data['sessions']] == [active.id, expired.id]
    assert data['sessions'][1]['status'] == 'closed'
    assert data['sessions'][1]['seconds_remaining'] == 0


def test_get_and_close_session(client, admin_headers, open_session):
    session = open_session()

    response = client.get(f'/api/sessions/{session.id}', headers=admin_headers)
    assert json.loads(response.data)['data']['status'] == 'active'

    response = client.post(f'/api/sessions/{session.id}/close', headers=admin_headers)
    data = json.loads(response.data)['data']
    assert data['status'] == 'closed'
    closed_at = data['closed_at']

    response = client.post(f'/api/sessions/{session.id}/close', headers=admin_headers)
    assert json.loads(response.data)['data']['closed_at'] == closed_at


def test_unknown_session(client, admin_headers):
    response = client.get('/api/sessions/4242', headers=admin_headers)
    assert response.status_code == 404
    assert json.loads(response.data)['code'] == 'SESSION_NOT_FOUND'

    response = client.post('/api/sessions/4242/close', headers=admin_headers)
    assert response.status_code == 404


def test_current_session_for_student(client, student_headers, campus, open_session):
    session = open_session()

    data = json.loads(client.get('/api/sessions/current', headers=student_headers).data)['data']
    assert data['session']['id'] == session.id
    assert data['already_marked'] is False

    client.post('/api/attendance/smart', json={
        'session_id': session.id, 'latitude': 12.9001, 'longitude': 77.6001
    }, headers=dict(student_headers, **{'X-Forwarded-For': OFF_CAMPUS_IP}))

    data = json.loads(client.get('/api/sessions/current', headers=student_headers).data)['data']
    assert data['already_marked'] is True


def test_no_current_session(client, student_headers, open_session):
    session = open_session(now=utcnow() - timedelta(hours=1))

    response = client.get('/api/sessions/current', headers=student_headers)

    assert response.status_code == 200
    assert json.loads(response.data)['data']['session'] is None
    db.session.refresh(session)
    assert session.status == SessionStatus.CLOSED


def test_session_records_monitor(client, admin_headers, student_headers, campus, open_session):
    session = open_session()
    client.post('/api/attendance/smart', json={
        'session_id': session.id, 'latitude': 12.9001, 'longitude': 77.6001
    }, headers=dict(student_headers, **{'X-Forwarded-For': OFF_CAMPUS_IP}))

    response = client.get(f'/api/sessions/{session.id}/records', headers=admin_headers)

    data = json.loads(response.data)['data']
    assert data['total'] == 1
    record = data['records'][0]
    assert record['verification_type'] == 'gps'
    assert record['student'] == {
        'id': record['student_id'],
        'name': 'Asha Rao',
        'student_id': 'CS-001',
        'roll_no': '1',
        'class': 'CSE-A',
    }
