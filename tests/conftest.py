"""Shared fixtures."""
import pytest

from cosmic_paperclip.app import create_app
from cosmic_paperclip.models import db
from cosmic_paperclip.storage import MemoryStore, SavePersistence


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def persistence(store):
    return SavePersistence(store)
