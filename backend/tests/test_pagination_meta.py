import pytest
from broresolve.config.settings import normalize_pagination, DEFAULT_LIMIT, MAX_LIMIT
from tests.test_utils_seed import ensure_user, ensure_admin, make_ticket
from tests.test_lifecycle_helpers import jwt_headers


def test_ticket_pagination(client, app_instance):
    with app_instance.app_context():
        user = ensure_user('pag_tickets@example.com')
        for i in range(5):
            make_ticket(user, f'lecture {i} notes missing')
        headers = jwt_headers(user.id)

    page = client.get('/tickets?limit=2&offset=0', headers=headers).get_json()
    assert page['pagination'] == {'total': 5, 'limit': 2, 'offset': 0, 'returned': 2}
    last = client.get('/tickets?limit=2&offset=4', headers=headers).get_json()
    assert last['pagination']['returned'] == 1
    ids = [r['id'] for r in page['data']] + [r['id'] for r in last['data']]
    assert len(set(ids)) == 3
    assert client.get('/tickets?limit=abc', headers=headers).status_code == 400


def test_admin_user_listing_pagination(client, app_instance):
    with app_instance.app_context():
        admin = ensure_admin('pag_admin@example.com')
        for i in range(3):
            ensure_user(f'pag_user_{i}@example.com')
        headers = jwt_headers(admin.id)
    resp = client.get('/admin/users?limit=2', headers=headers).get_json()
    assert resp['pagination']['limit'] == 2
    assert resp['pagination']['returned'] <= 2
    assert resp['pagination']['total'] >= 4


@pytest.mark.parametrize('raw,expected', [
    ((None, None), (DEFAULT_LIMIT, 0)),
    (('0', '-5'), (1, 0)),
    (('9999', '3'), (MAX_LIMIT, 3)),
])
def test_normalize_pagination_clamps(raw, expected):
    assert normalize_pagination(*raw) == expected
