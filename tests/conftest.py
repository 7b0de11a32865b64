import pytest

from config import TestConfig
from dietbuddy import create_app, db
from dietbuddy.auth import issue_token
from dietbuddy.models.user import User


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def file_app(tmp_path):
    """App over a file-backed SQLite db so several connections can talk to it."""

    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'dietbuddy.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False, "timeout": 30}}

    app = create_app(FileConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Insert a user directly; returns (user_id, auth headers)."""
    counter = {"n": 0}

    def _mk(name="Asha", role="user", is_member=False, password="secret123"):
        counter["n"] += 1
        with app.app_context():
            user = User(
                name=name,
                email=f"{name.lower()}{counter['n']}@example.com",
                role=role,
                is_member=is_member,
            )
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            token = issue_token(user)
            return user.id, {"Authorization": f"Bearer {token}"}

    return _mk


@pytest.fixture
def user(make_user):
    return make_user()
