from tests.test_utils_seed import ensure_user
from tests.test_lifecycle_helpers import jwt_headers, create_ticket_and_assert


def test_etag_conditional_tickets(client, app_instance):
    with app_instance.app_context():
        user = ensure_user('etag_tickets@example.com')
        headers = jwt_headers(user.id)
    create_ticket_and_assert(client, headers, 'wifi in library')
    first = client.get('/tickets?limit=5', headers=headers)
    assert first.status_code == 200
    etag = first.headers.get('ETag')
    assert etag
    assert first.headers.get('X-Last-Modified-ISO', '').endswith('Z')
    # Conditional request
    second = client.get('/tickets?limit=5', headers={**headers, 'If-None-Match': etag})
    assert second.status_code == 304
    assert second.headers.get('ETag') == etag
    # If-Modified-Since should also 304 when using Last-Modified from first response
    lm = first.headers.get('Last-Modified')
    assert lm
    third = client.get('/tickets?limit=5', headers={**headers, 'If-Modified-Since': lm})
    assert third.status_code == 304
    assert third.headers.get('ETag') == etag


def test_etag_changes_when_list_changes(client, app_instance):
    with app_instance.app_context():
        user = ensure_user('etag_change@example.com')
        headers = jwt_headers(user.id)
    create_ticket_and_assert(client, headers, 'notes for chem')
    first = client.get('/tickets', headers=headers).headers['ETag']
    create_ticket_and_assert(client, headers, 'notes for physics')
    resp = client.get('/tickets', headers={**headers, 'If-None-Match': first})
    assert resp.status_code == 200
    assert resp.headers['ETag'] != first
    assert resp.get_json()['pagination']['total'] == 2


def test_stale_etag_ignores_if_modified_since(client, app_instance):
    with app_instance.app_context():
        user = ensure_user('etag_precedence@example.com')
        headers = jwt_headers(user.id)
    create_ticket_and_assert(client, headers, 'lecture slides missing')
    first = client.get('/tickets', headers=headers)
    resp = client.get('/tickets', headers={**headers, 'If-None-Match': '"stale"',
                                           'If-Modified-Since': first.headers['Last-Modified']})
    assert resp.status_code == 200
    iso = client.get('/tickets', headers={**headers, 'If-Modified-Since': first.headers['X-Last-Modified-ISO']})
    assert iso.status_code == 304
