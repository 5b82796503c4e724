"""Shared fixtures: a fresh app on a temporary SQLite file per test."""

import pytest

from app import create_app
from models import db
from helpers import register, login


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
        'SECRET_KEY': 'test-secret',
        'SESSION_COOKIE_SECURE': False,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def alice(app):
    client = app.test_client()
    register(client, 'alice@example.com', name='Alice')
    login(client, 'alice@example.com')
    return client


@pytest.fixture
def bob(app):
    client = app.test_client()
    register(client, 'bob@example.com', name='Bob')
    login(client, 'bob@example.com')
    return client
