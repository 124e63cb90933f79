"""Test student account management endpoints."""
import json

from campus_attendance.models import (
    AttendanceLedgerEntry, MarkedVia, SmartAttendanceRecord, Student, StudentFace, User
)
from campus_attendance.services.attendance_service import AttendanceService
from campus_attendance.services.face_match_service import FaceMatchService

from conftest import OFF_CAMPUS_IP


def create(client, headers, **body):
    return client.post('/api/admin/students/', json=body, headers=headers)


def test_create_student_account(client, admin_headers):
    response = create(client, admin_headers, email='Ravi@Campus.edu', full_name='Ravi Kumar',
                      student_id='CS-042', roll_no='42', **{'class': 'CSE-B'})

    assert response.status_code == 201
    data = json.loads(response.data)['data']
    password = data['credentials']['temp_password']
    assert password.startswith('Student@')
    assert len(password) == len('Student@') + 8
    assert data['student']['email'] == 'ravi@campus.edu'
    assert data['student']['class'] == 'CSE-B'
    assert data['student']['face_registered'] is False

    login = client.post('/api/auth/login', json={'email': 'ravi@campus.edu', 'password': password})
    assert login.status_code == 200
    assert json.loads(login.data)['data']['user']['role'] == 'student'


def test_create_validation(client, admin_headers, student):
    response = create(client, admin_headers, full_name='No Email')
    assert response.status_code == 400

    response = create(client, admin_headers, email='asha@campus.edu', full_name='Duplicate')
    assert response.status_code == 400
    assert json.loads(response.data)['message'] == 'Email already exists'

    response = create(client, admin_headers, email='new@campus.edu', full_name='Dup Code',
                      student_id='CS-001')
    assert json.loads(response.data)['message'] == 'Student ID already exists'


def test_student_cannot_manage_accounts(client, student_headers):
    assert create(client, student_headers, email='x@campus.edu', full_name='X Y').status_code == 403
    assert client.get('/api/admin/students/', headers=student_headers).status_code == 403


def test_list_by_class(client, admin_headers, student):
    create(client, admin_headers, email='b@campus.edu', full_name='Bala', **{'class': 'CSE-B'})

    data = json.loads(client.get('/api/admin/students/', headers=admin_headers).data)['data']
    assert data['total'] == 2

    data = json.loads(client.get('/api/admin/students/?class=CSE-A', headers=admin_headers).data)['data']
    assert [s['name'] for s in data['students']] == ['Asha Rao']


def test_delete_removes_everything(client, admin_headers, student, student_headers, campus, open_session):
    session = open_session()
    client.post('/api/attendance/smart', json={
        'session_id': session.id, 'latitude': 12.9001, 'longitude': 77.6001
    }, headers=dict(student_headers, **{'X-Forwarded-For': OFF_CAMPUS_IP}))
    FaceMatchService.register_face(student.id, 'data:image/png;base64,AAA')
    AttendanceService.mark_ledger_present(student, MarkedVia.CAMERA)
    student_id, user_id = student.id, student.user_id

    response = client.delete(f'/api/admin/students/{student_id}', headers=admin_headers)

    assert response.status_code == 200
    assert Student.get_by_id(student_id) is None
    assert User.get_by_id(user_id) is None
    assert StudentFace.query.count() == 0
    assert SmartAttendanceRecord.query.count() == 0
    assert AttendanceLedgerEntry.query.count() == 0


def test_delete_unknown(client, admin_headers):
    response = client.delete('/api/admin/students/999', headers=admin_headers)
    assert response.status_code == 404
