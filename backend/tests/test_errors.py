from tests.test_utils_seed import ensure_user
from tests.test_lifecycle_helpers import jwt_headers


def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert 'error' in body
    assert body['error']['status'] == 404
    assert 'detail' in body['error']


def test_domain_error_shape(client, app_instance):
    with app_instance.app_context():
        user = ensure_user('err_shape@example.com')
        headers = jwt_headers(user.id)
    resp = client.post('/tickets', json={'title': ''}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json() == {'error': {'status': 400, 'title': 'Bad Request', 'detail': 'title required'}}


def test_internal_error_shape(client, app_instance, monkeypatch):
    with app_instance.app_context():
        user = ensure_user('err_internal@example.com')
        headers = jwt_headers(user.id)
    import broresolve.routes.tickets as tickets_mod

    def boom(*a, **k):
        raise RuntimeError('explode')
    monkeypatch.setattr(tickets_mod.lifecycle, 'ticket_stats', boom)
    resp = client.get('/tickets/stats', headers=headers)
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error']['status'] == 500
    assert body['error']['title'] == 'Internal Server Error'
    assert body['error']['detail'] == 'Unexpected error'


def test_healthz(client):
    assert client.get('/healthz').get_json() == {'status': 'ok'}
