from tests.test_utils_seed import ensure_user, ensure_admin, make_ticket
from tests.test_lifecycle_helpers import jwt_headers


def test_tickets_multi_sort(client, app_instance):
    with app_instance.app_context():
        user = ensure_user('sort_student@example.com')
        admin = ensure_admin('sort_admin@example.com')
        first = make_ticket(user, 'wifi in lecture hall flickers')
        second = make_ticket(user, 'printer jammed again')
        third = make_ticket(user, 'lecture recordings missing')
        headers = jwt_headers(user.id)
        admin_h = jwt_headers(admin.id)

    client.post(f'/tickets/{second.id}/upvote', headers=admin_h)
    client.post(f'/tickets/{second.id}/upvote', headers=admin_h)
    client.post(f'/tickets/{third.id}/upvote', headers=admin_h)

    resp = client.get('/tickets?sort=-upvote_count', headers=headers)
    assert resp.status_code == 200
    assert [t['display_id'] for t in resp.get_json()['data']] == [second.display_id, third.display_id, first.display_id]

    # most severe first; among equal priority the newest display id comes first
    resp = client.get('/tickets?sort=-priority,-display_id', headers=headers)
    ids = [t['display_id'] for t in resp.get_json()['data']]
    assert ids == [first.display_id, third.display_id, second.display_id]

    resp = client.get('/tickets?sort=display_id', headers=headers)
    assert [t['display_id'] for t in resp.get_json()['data']] == [first.display_id, second.display_id, third.display_id]


def test_default_sort_is_newest_first(client, app_instance):
    with app_instance.app_context():
        user = ensure_user('sort_default@example.com')
        older = make_ticket(user, 'notes please')
        newer = make_ticket(user, 'more notes please')
        headers = jwt_headers(user.id)
    ids = [t['id'] for t in client.get('/tickets', headers=headers).get_json()['data']]
    assert ids == [newer.id, older.id]


def test_unknown_sort_field_rejected(client, app_instance):
    with app_instance.app_context():
        user = ensure_user('sort_bad@example.com')
        headers = jwt_headers(user.id)
    resp = client.get('/tickets?sort=-creator_email', headers=headers)
    assert resp.status_code == 400
    assert 'creator_email' in resp.get_json()['error']['detail']


def test_priority_and_stage_sort_by_rank_not_alphabet(client, app_instance):
    with app_instance.app_context():
        user = ensure_user('sort_rank@example.com')
        admin = ensure_admin('sort_rank_admin@example.com')
        medium = make_ticket(user, 'printer out of toner')
        critical = make_ticket(user, 'printer on fire', mood='panicking')
        high = make_ticket(user, 'wifi gone')
        headers = jwt_headers(user.id)
        admin_h = jwt_headers(admin.id)

    resp = client.get('/tickets?sort=priority', headers=headers)
    assert [t['priority'] for t in resp.get_json()['data']] == ['medium', 'high', 'critical']

    client.put(f'/tickets/{medium.id}/stage', json={'stage': 'resolved'}, headers=admin_h)
    client.put(f'/tickets/{critical.id}/stage', json={'stage': 'reviewing'}, headers=admin_h)
    client.put(f'/tickets/{high.id}/stage', json={'stage': 'patching'}, headers=admin_h)
    resp = client.get('/tickets?sort=stage', headers=headers)
    assert [t['stage'] for t in resp.get_json()['data']] == ['reviewing', 'patching', 'resolved']
    resp = client.get('/tickets?sort=-stage', headers=headers)
    assert [t['id'] for t in resp.get_json()['data']] == [medium.id, high.id, critical.id]
