"""Shared test fixtures for the API and service tests."""
import pytest

from admindash import create_app
from admindash.extensions import db as _db
from admindash.models.user import User, ROLE_USER, ROLE_READONLY
from admindash.services.token_service import generate_token


@pytest.fixture(scope='session')
def app():
    """Create application for the test session."""
    app = create_app('testing')
    yield app


@pytest.fixture()
def db(app):
    """Per-test database: create tables, yield, then clean up."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.rollback()
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def client(app, db):
    """Flask test client (anonymous)."""
    return app.test_client()


def _make_user(db, username, role=ROLE_USER):
    user = User(username=username, email=f'{username}@test.com', role=role)
    user.set_password('testpass123')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture()
def user(db):
    return _make_user(db, 'alice')


@pytest.fixture()
def other_user(db):
    return _make_user(db, 'bob')


@pytest.fixture()
def readonly_user(db):
    return _make_user(db, 'reader', ROLE_READONLY)


@pytest.fixture()
def token_headers(app):
    """Build Authorization headers for any user."""
    def _headers(u):
        return {'Authorization': f'Bearer {generate_token(u.id, u.role)}'}
    return _headers


@pytest.fixture()
def auth_headers(user, token_headers):
    return token_headers(user)


@pytest.fixture()
def make_item(db):
    """Create a content item of any model for a user."""
    def _make(model, owner, **fields):
        obj = model(user_id=owner.id, **fields)
        db.session.add(obj)
        db.session.commit()
        return obj
    return _make
