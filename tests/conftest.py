import pytest

from inkwell import create_app
from inkwell.auth.security import hash_password
from inkwell.config import TestConfig
from inkwell.extensions import db
from inkwell.models import Post, Profile, User, ROLE_ADMIN, ROLE_USER

PASSWORD = 'password123'


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Insert a user directly and return its id."""
    def _make(email, role=ROLE_USER, password=PASSWORD, name=None, with_profile=True):
        with app.app_context():
            user = User(email=email, name=name, password_hash=hash_password(password), role=role)
            if with_profile:
                user.profile = Profile(bio='')
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


@pytest.fixture()
def make_post(app):
    def _make(author_id, title='Draft', slug=None, published=False, content='Body'):
        with app.app_context():
            post = Post(title=title, slug=slug or f'post-{title.lower()}', content=content,
                        published=published, author_id=author_id)
            db.session.add(post)
            db.session.commit()
            return post.id
    return _make


@pytest.fixture()
def headers_for(app):
    """Bearer headers carrying a freshly issued token for the given user id."""
    def _headers(user_id):
        with app.app_context():
            user = db.session.get(User, user_id)
            token = app.extensions['token_issuer'].encode(user)
        return {'Authorization': f'Bearer {token}'}
    return _headers


@pytest.fixture()
def admin_id(make_user):
    return make_user('admin@example.com', role=ROLE_ADMIN, name='Admin')


@pytest.fixture()
def user_id(make_user):
    return make_user('reader@example.com', name='Reader')


@pytest.fixture()
def admin_headers(admin_id, headers_for):
    return headers_for(admin_id)


@pytest.fixture()
def user_headers(user_id, headers_for):
    return headers_for(user_id)
