"""Shared test configuration and fixtures."""
import pytest
from dependency_injector import providers

from tests.fixtures.fakes import FakeExplainService, InlineExecutor

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret-key",
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "RATELIMIT_STORAGE_URI": "memory://",
    "RATELIMIT_ENABLED": False,
    "OPENAI_API_KEY": "sk-test",
    "GOOGLE_API_KEY": "google-test",
    "DEFAULT_LOCALE": "pt",
    "LOG_LEVEL": "WARNING",
}


@pytest.fixture
def executor():
    return InlineExecutor()


@pytest.fixture
def explain_service():
    return FakeExplainService()


@pytest.fixture
def app(executor, explain_service):
    """Application with an in-memory database and fake interpretation backend."""
    from webtarot.app import create_app
    from webtarot.extensions import db

    app = create_app(TEST_CONFIG)
    app.container.executor.override(providers.Object(executor))
    app.container.explain_service.override(providers.Object(explain_service))

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
