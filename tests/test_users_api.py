import pytest

from sqlalchemy.exc import IntegrityError

from inkwell.errors import Conflict, LastAdminProtection
from inkwell.extensions import db
from inkwell.models import Profile, User, ROLE_ADMIN, ROLE_USER
from inkwell.services import users as user_service


def _admin_count(app):
    with app.app_context():
        return User.query.filter_by(role=ROLE_ADMIN).count()


def test_list_users_never_exposes_passwords(client, admin_headers, make_user):
    make_user('second-admin@example.com', role=ROLE_ADMIN)
    make_user('plain@example.com')

    r = client.get('/api/admin/users', headers=admin_headers)
    assert r.status_code == 200
    users = r.get_json()
    assert len(users) == 3
    for user in users:
        assert 'password' not in user
        assert 'password_hash' not in user
        assert 'post_count' in user
        assert 'profile' in user
    assert 'password' not in r.get_data(as_text=True)


def test_list_users_counts_posts(client, admin_headers, admin_id, make_post):
    make_post(admin_id, title='One', slug='one-0001')
    make_post(admin_id, title='Two', slug='two-0002')

    users = client.get('/api/admin/users', headers=admin_headers).get_json()
    admin = next(u for u in users if u['id'] == admin_id)
    assert admin['post_count'] == 2


def test_create_user_defaults_to_user_role(client, admin_headers, app):
    r = client.post('/api/admin/users', headers=admin_headers,
                    json={'email': 'New@Example.com', 'password': 'hunter22', 'name': 'New'})
    assert r.status_code == 201
    body = r.get_json()
    assert body['role'] == ROLE_USER
    assert body['email'] == 'new@example.com'
    assert 'password' not in body and 'password_hash' not in body

    with app.app_context():
        user = db.session.get(User, body['id'])
        assert user.profile is not None
        assert user.password_hash != 'hunter22'


def test_create_user_rejects_duplicates_and_missing_fields(client, admin_headers):
    r = client.post('/api/admin/users', headers=admin_headers,
                    json={'email': 'admin@example.com', 'password': 'whatever1'})
    assert r.status_code == 409
    assert 'error' in r.get_json()

    r = client.post('/api/admin/users', headers=admin_headers, json={'email': 'x@example.com'})
    assert r.status_code == 400

    r = client.post('/api/admin/users', headers=admin_headers,
                    json={'email': 'y@example.com', 'password': 'pw123456', 'role': 'ROOT'})
    assert r.status_code == 400


def test_get_user_includes_posts(client, admin_headers, admin_id, make_post):
    make_post(admin_id, title='Mine', slug='mine-0001')
    r = client.get(f'/api/admin/users/{admin_id}', headers=admin_headers)
    assert r.status_code == 200
    body = r.get_json()
    assert [p['slug'] for p in body['posts']] == ['mine-0001']
    assert 'password_hash' not in body

    assert client.get('/api/admin/users/999', headers=admin_headers).status_code == 404


def test_patch_bio_only_touches_profile(client, admin_headers, user_id):
    r = client.patch(f'/api/admin/users/{user_id}', headers=admin_headers, json={'bio': 'x'})
    assert r.status_code == 200
    body = r.get_json()
    assert body['email'] == 'reader@example.com'
    assert body['name'] == 'Reader'
    assert body['role'] == ROLE_USER
    assert body['profile']['bio'] == 'x'


def test_patch_bio_creates_missing_profile(client, admin_headers, make_user, app):
    bare_id = make_user('bare@example.com', with_profile=False)
    r = client.patch(f'/api/admin/users/{bare_id}', headers=admin_headers, json={'bio': 'hello'})
    assert r.status_code == 200
    with app.app_context():
        assert Profile.query.filter_by(user_id=bare_id).one().bio == 'hello'


def test_patch_empty_password_keeps_old_one(client, admin_headers, user_id):
    r = client.patch(f'/api/admin/users/{user_id}', headers=admin_headers, json={'password': ''})
    assert r.status_code == 200
    r = client.post('/api/auth/login', json={'email': 'reader@example.com', 'password': 'password123'})
    assert r.status_code == 200


def test_patch_password_rehashes(client, admin_headers, user_id):
    client.patch(f'/api/admin/users/{user_id}', headers=admin_headers, json={'password': 'brand-new-pw'})
    r = client.post('/api/auth/login', json={'email': 'reader@example.com', 'password': 'password123'})
    assert r.status_code == 401
    r = client.post('/api/auth/login', json={'email': 'reader@example.com', 'password': 'brand-new-pw'})
    assert r.status_code == 200


def test_patch_email_conflict(client, admin_headers, user_id):
    r = client.patch(f'/api/admin/users/{user_id}', headers=admin_headers,
                     json={'email': 'admin@example.com'})
    assert r.status_code == 409


def test_patch_unknown_user(client, admin_headers):
    assert client.patch('/api/admin/users/999', headers=admin_headers, json={'name': 'x'}).status_code == 404


def test_deleting_only_admin_is_refused(client, admin_headers, admin_id, app):
    r = client.delete(f'/api/admin/users/{admin_id}', headers=admin_headers)
    assert r.status_code == 400
    assert r.get_json()['error'] == 'Cannot delete the last admin user'
    assert _admin_count(app) == 1


def test_admin_count_never_reaches_zero(client, admin_headers, admin_id, make_user, app):
    other_id = make_user('other-admin@example.com', role=ROLE_ADMIN)

    assert client.delete(f'/api/admin/users/{other_id}', headers=admin_headers).status_code == 200
    assert client.delete(f'/api/admin/users/{admin_id}', headers=admin_headers).status_code == 400
    assert _admin_count(app) == 1


def test_guarded_delete_holds_even_with_a_stale_admin_count(app, admin_id, monkeypatch):
    # Simulate a concurrent request that read two admins before the other was removed
    monkeypatch.setattr(user_service, '_lock_admin_rows', lambda: [admin_id, admin_id + 100])
    with app.app_context():
        with pytest.raises(LastAdminProtection):
            user_service.delete_user(admin_id)
    assert _admin_count(app) == 1


def test_delete_user_removes_profile(client, admin_headers, user_id, app):
    assert client.delete(f'/api/admin/users/{user_id}', headers=admin_headers).status_code == 200
    with app.app_context():
        assert db.session.get(User, user_id) is None
        assert Profile.query.filter_by(user_id=user_id).count() == 0


def test_delete_author_with_posts_is_restricted(client, admin_headers, user_id, make_post):
    make_post(user_id, title='Kept', slug='kept-0001')
    r = client.delete(f'/api/admin/users/{user_id}', headers=admin_headers)
    assert r.status_code == 409


def test_post_created_during_delete_becomes_conflict(app, user_id, monkeypatch):
    # A post inserted for the user after the count check fails the FK on commit
    def commit_with_fk_failure():
        raise IntegrityError('DELETE FROM users', {}, Exception('FOREIGN KEY constraint failed'))

    with app.app_context():
        monkeypatch.setattr(db.session, 'commit', commit_with_fk_failure)
        with pytest.raises(Conflict):
            user_service.delete_user(user_id)
    monkeypatch.undo()
    with app.app_context():
        assert db.session.get(User, user_id) is not None


def test_delete_unknown_user(client, admin_headers):
    assert client.delete('/api/admin/users/999', headers=admin_headers).status_code == 404


def test_demoting_last_admin_is_refused(client, admin_headers, admin_id, app):
    r = client.patch(f'/api/admin/users/{admin_id}', headers=admin_headers, json={'role': ROLE_USER})
    assert r.status_code == 400
    assert _admin_count(app) == 1


def test_demoting_one_of_two_admins(client, admin_headers, make_user, app):
    other_id = make_user('other-admin@example.com', role=ROLE_ADMIN)
    r = client.patch(f'/api/admin/users/{other_id}', headers=admin_headers, json={'role': ROLE_USER})
    assert r.status_code == 200
    assert r.get_json()['role'] == ROLE_USER
    assert _admin_count(app) == 1
