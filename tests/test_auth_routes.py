from urllib.parse import urlparse

from inkwell.config import TestConfig


def _path(response):
    return urlparse(response.headers['Location']).path


def test_api_register_then_login(client, app):
    r = client.post('/api/auth/register', json={'email': 'Writer@Example.com', 'password': 'secret99', 'name': 'W'})
    assert r.status_code == 201
    assert r.get_json()['role'] == 'USER'
    assert 'password_hash' not in r.get_json()

    r = client.post('/api/auth/login', json={'email': 'writer@example.com', 'password': 'secret99'})
    assert r.status_code == 200
    body = r.get_json()
    claims = app.extensions['token_issuer'].validate(body['access_token'])
    assert claims.user_id == body['user']['id']
    assert claims.role == 'USER'


def test_api_register_duplicate_email(client, user_id):
    r = client.post('/api/auth/register', json={'email': 'reader@example.com', 'password': 'secret99'})
    assert r.status_code == 409
    assert r.get_json() == {'error': 'User with this email already exists'}


def test_api_register_cannot_choose_role(client):
    r = client.post('/api/auth/register', json={'email': 'sneaky@example.com', 'password': 'secret99', 'role': 'ADMIN'})
    assert r.get_json()['role'] == 'USER'


def test_api_login_rejects_bad_credentials(client, user_id):
    r = client.post('/api/auth/login', json={'email': 'reader@example.com', 'password': 'nope'})
    assert r.status_code == 401
    assert r.get_json() == {'error': 'Invalid email or password'}

    r = client.post('/api/auth/login', json={'email': 'reader@example.com'})
    assert r.status_code == 400


def test_api_session(client, user_headers):
    assert client.get('/api/auth/session').get_json() == {'user': None}
    body = client.get('/api/auth/session', headers=user_headers).get_json()
    assert body['user']['email'] == 'reader@example.com'


def test_form_login_sets_cookie_and_follows_next(client, user_id):
    r = client.post('/login', data={'email': 'reader@example.com', 'password': 'password123',
                                    'next': '/dashboard/profile'})
    assert r.status_code == 302
    assert _path(r) == '/dashboard/profile'
    auth_cookie = next(c for c in r.headers.getlist('Set-Cookie') if c.startswith(TestConfig.AUTH_COOKIE_NAME + '='))
    assert 'HttpOnly' in auth_cookie

    # The cookie now authenticates page requests
    assert client.get('/dashboard').status_code == 200


def test_form_login_ignores_offsite_next(client, user_id):
    r = client.post('/login', data={'email': 'reader@example.com', 'password': 'password123',
                                    'next': '//evil.example.com/'})
    assert _path(r) == '/dashboard'


def test_form_login_failure_stays_on_page(client, user_id):
    r = client.post('/login', data={'email': 'reader@example.com', 'password': 'wrong'})
    assert r.status_code == 200
    assert 'Invalid email or password' in r.get_data(as_text=True)


def test_logout_clears_cookie(client, user_id):
    client.post('/login', data={'email': 'reader@example.com', 'password': 'password123'})
    r = client.get('/logout')
    assert r.status_code == 302
    assert client.get('/dashboard').status_code == 302


def test_form_register(client):
    r = client.post('/register', data={'email': 'form@example.com', 'password': 'secret99',
                                       'confirm_password': 'secret99', 'name': 'Form'})
    assert r.status_code == 302
    assert _path(r) == '/login'

    r = client.post('/register', data={'email': 'form@example.com', 'password': 'secret99',
                                       'confirm_password': 'secret99'})
    assert r.status_code == 200
    assert 'Email already registered' in r.get_data(as_text=True)


def test_form_register_password_mismatch(client):
    r = client.post('/register', data={'email': 'x@example.com', 'password': 'secret99',
                                       'confirm_password': 'other99'})
    assert 'Passwords do not match.' in r.get_data(as_text=True)
