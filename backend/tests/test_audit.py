from broresolve import get_db
from broresolve.services import users
from broresolve.services.audit import entity_history
from tests.test_utils_seed import ensure_user, ensure_admin, actor_for
from tests.test_lifecycle_helpers import jwt_headers, create_ticket_and_assert, assert_stage_change


def test_stage_change_audit_has_diff(client, app_instance):
    with app_instance.app_context():
        student = ensure_user('audit_student@example.com')
        admin = ensure_admin('audit_admin@example.com')
        student_h, admin_h = jwt_headers(student.id), jwt_headers(admin.id)
    t = create_ticket_and_assert(client, student_h, 'wifi')
    assert_stage_change(client, t['id'], admin_h, 'patching', 200)
    # same stage again writes nothing
    assert_stage_change(client, t['id'], admin_h, 'patching', 200)
    with app_instance.app_context():
        rows = entity_history(get_db(), 'Ticket', t['id'])
    assert [r.action for r in rows] == ['TICKET.CREATE', 'TICKET.STAGE']
    assert rows[0].changes == {}
    assert rows[1].changes == {'stage': {'before': 'committed', 'after': 'patching'}}
    assert rows[1].actor_user_id == admin.id


def test_promotion_and_suspension_audited(db):
    admin = ensure_admin('audit_promoter@example.com')
    target = ensure_user('audit_promoted@example.com')
    users.promote_to_admin(db, 'audit_promoted@example.com', actor_for(admin))
    users.set_active(db, target.id, False, actor_for(admin))
    users.set_active(db, target.id, True, actor_for(admin))
    rows = entity_history(db, 'User', target.id)
    assert [r.action for r in rows] == ['USER.PROMOTE', 'USER.SUSPEND', 'USER.ACTIVATE']


def test_audit_failure_does_not_fail_request(client, app_instance, monkeypatch):
    import broresolve.decorators.audit as audit_mod
    with app_instance.app_context():
        user = ensure_user('audit_broken@example.com')
        headers = jwt_headers(user.id)

    def boom(*a, **k):
        raise RuntimeError('audit store down')
    monkeypatch.setattr(audit_mod, 'add_audit', boom)
    resp = client.put('/profiles/me', json={'bio': 'still saved'}, headers=headers)
    assert resp.status_code == 200
    assert client.get('/profiles/me', headers=headers).get_json()['bio'] == 'still saved'
