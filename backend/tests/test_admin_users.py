from tests.test_utils_seed import ensure_user, ensure_admin
from tests.test_lifecycle_helpers import jwt_headers, login_headers


def test_admin_lists_users(client, app_instance):
    with app_instance.app_context():
        admin = ensure_admin('adm_list@example.com')
        ensure_user('adm_list_student@example.com')
        headers = jwt_headers(admin.id)
    body = client.get('/admin/users?limit=200', headers=headers).get_json()
    rows = {r['email']: r for r in body['data']}
    assert rows['adm_list@example.com']['role'] == 'admin'
    assert rows['adm_list_student@example.com']['role'] == 'student'
    assert rows['adm_list_student@example.com']['is_active'] is True


def test_students_cannot_manage_users(client, app_instance):
    with app_instance.app_context():
        student = ensure_user('adm_forbidden@example.com')
        headers = jwt_headers(student.id)
    assert client.get('/admin/users', headers=headers).status_code == 403
    assert client.post(f'/admin/users/{student.id}/suspend', headers=headers).status_code == 403


def test_suspension_takes_effect_on_next_request(client, app_instance):
    with app_instance.app_context():
        admin = ensure_admin('adm_suspender@example.com')
        ensure_user('adm_suspendee@example.com')
        admin_h = jwt_headers(admin.id)
    student_h = login_headers(client, 'adm_suspendee@example.com')
    me = client.get('/auth/me', headers=student_h).get_json()
    assert client.get('/tickets', headers=student_h).status_code == 200

    resp = client.post(f"/admin/users/{me['id']}/suspend", headers=admin_h)
    assert resp.status_code == 200
    assert resp.get_json()['is_active'] is False

    # token issued before the suspension is refused at the boundary
    blocked = client.post('/tickets', json={'title': 'wifi'}, headers=student_h)
    assert blocked.status_code == 403
    assert 'suspended' in blocked.get_json()['error']['detail']
    assert client.post('/auth/login', json={'email': 'adm_suspendee@example.com', 'password': 'secret1'}).status_code == 403

    assert client.post(f"/admin/users/{me['id']}/activate", headers=admin_h).status_code == 200
    assert client.get('/tickets', headers=student_h).status_code == 200


def test_admin_cannot_suspend_self(client, app_instance):
    with app_instance.app_context():
        admin = ensure_admin('adm_self@example.com')
        headers = jwt_headers(admin.id)
    resp = client.post(f'/admin/users/{admin.id}/suspend', headers=headers)
    assert resp.status_code == 400
    assert client.post('/admin/users/987654/suspend', headers=headers).status_code == 404
