import pytest

from habit_tracker import create_app
from habit_tracker.config import TestingConfig
from habit_tracker.storage import Storage


@pytest.fixture()
def app():
    return create_app(TestingConfig, storage=Storage())


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def storage(app):
    with app.app_context():
        yield app.extensions["storage"]


@pytest.fixture()
def user(app, storage):
    return storage.get_user_by_username(app.config["DEMO_USERNAME"])


@pytest.fixture()
def make_habit(storage, user):
    def _make(name="Read", category="Learning", **extra):
        return storage.create_habit({"name": name, "category": category, "user_id": user.id, **extra})
    return _make
