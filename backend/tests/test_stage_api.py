from tests.test_utils_seed import ensure_user, ensure_admin
from tests.test_lifecycle_helpers import jwt_headers, create_ticket_and_assert, assert_stage_change, exercise_ticket_pipeline


def _setup(app_instance, suffix):
    with app_instance.app_context():
        student = ensure_user(f'stage_student_{suffix}@example.com')
        admin = ensure_admin(f'stage_admin_{suffix}@example.com')
        return jwt_headers(student.id), jwt_headers(admin.id)


def test_admin_walks_pipeline(client, app_instance):
    student_h, admin_h = _setup(app_instance, 'walk')
    t = create_ticket_and_assert(client, student_h, 'lab door stuck')
    exercise_ticket_pipeline(client, t['id'], admin_h)
    body = client.get(f"/tickets/{t['id']}", headers=student_h).get_json()
    assert body['stage'] == 'resolved'
    assert body['progress'] == 1.0


def test_admin_override_and_idempotent(client, app_instance):
    student_h, admin_h = _setup(app_instance, 'override')
    t = create_ticket_and_assert(client, student_h, 'wifi')
    assert_stage_change(client, t['id'], admin_h, 'resolved', 200)
    assert_stage_change(client, t['id'], admin_h, 'resolved', 200)
    assert_stage_change(client, t['id'], admin_h, 'reviewing', 200)


def test_student_cannot_change_stage(client, app_instance):
    student_h, _ = _setup(app_instance, 'forbidden')
    t = create_ticket_and_assert(client, student_h, 'wifi')
    resp = assert_stage_change(client, t['id'], student_h, 'resolved', 403)
    assert resp.get_json()['error']['status'] == 403
    assert client.get(f"/tickets/{t['id']}", headers=student_h).get_json()['stage'] == 'committed'


def test_stage_errors(client, app_instance):
    student_h, admin_h = _setup(app_instance, 'errors')
    t = create_ticket_and_assert(client, student_h, 'wifi')
    assert_stage_change(client, t['id'], admin_h, 'merged', 400)
    assert_stage_change(client, 'no-such-ticket', admin_h, 'reviewing', 404)
    resp = client.put(f"/tickets/{t['id']}/stage", json={}, headers=admin_h)
    assert resp.status_code == 400
