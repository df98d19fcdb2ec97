"""Shared fixtures: an app on a private in-memory SQLite database."""

import pytest

from app import create_app
from models import db


@pytest.fixture
def app():
    """Create the service on an in-memory database."""
    app = create_app(database_url="sqlite://")
    app.config["TESTING"] = True
    yield app
    with app.app_context():
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def services(app):
    """The renderer/store bundle the handlers share."""
    return app.extensions["postboard"]


@pytest.fixture
def store(services):
    return services.store
