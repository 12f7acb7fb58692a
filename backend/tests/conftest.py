"""Fixture untuk test API dan controller."""
import pytest

from config import TestingConfig
from lembar_kerja import create_app, db


@pytest.fixture
def app():
    """Aplikasi dengan database SQLite in-memory yang bersih per test."""
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
